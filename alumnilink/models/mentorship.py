# alumnilink/models/mentorship.py
import enum

from sqlalchemy import (
    Column,
    Date,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    TIMESTAMP,
    func,
    text,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from alumnilink.database import Base


class MentorshipStatus(str, enum.Enum):
    REQUESTED = "requested"
    ACTIVE = "active"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class SessionStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class GoalStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


OPEN_MENTORSHIP_STATUSES = (MentorshipStatus.REQUESTED, MentorshipStatus.ACTIVE)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


def _status_column(enum_cls, default):
    return Column(
        Enum(enum_cls, native_enum=False, length=20, values_callable=_enum_values),
        default=default,
        nullable=False,
        index=True,
    )


_OPEN_PAIR_CLAUSE = text("status IN ('requested', 'active')")


class Mentorship(Base):
    __tablename__ = "mentorship"

    id = Column(Integer, primary_key=True, index=True)
    mentor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    mentee_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    area_of_guidance = Column(String(255), nullable=False)
    status = _status_column(MentorshipStatus, MentorshipStatus.REQUESTED)
    start_date = Column(TIMESTAMP(timezone=True), nullable=True)
    end_date = Column(TIMESTAMP(timezone=True), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), onupdate=func.now())

    # One open (requested/active) mentorship per ordered (mentor, mentee) pair
    __table_args__ = (
        CheckConstraint("mentor_id <> mentee_id", name="check_mentorship_distinct_parties"),
        Index(
            "uq_mentorship_open_pair",
            "mentor_id",
            "mentee_id",
            unique=True,
            sqlite_where=_OPEN_PAIR_CLAUSE,
            postgresql_where=_OPEN_PAIR_CLAUSE,
        ),
    )

    mentor = relationship("User", foreign_keys=[mentor_id], back_populates="mentorships_as_mentor")
    mentee = relationship("User", foreign_keys=[mentee_id], back_populates="mentorships_as_mentee")
    sessions = relationship(
        "MentorshipSession",
        back_populates="mentorship",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    goals = relationship(
        "MentorshipGoal",
        back_populates="mentorship",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def is_participant(self, user_id: int) -> bool:
        return user_id in (self.mentor_id, self.mentee_id)

    def counterpart_id(self, user_id: int) -> int:
        """Id of the other party, seen from user_id."""
        return self.mentee_id if self.mentor_id == user_id else self.mentor_id


class MentorshipSession(Base):
    __tablename__ = "mentorship_sessions"

    id = Column(Integer, primary_key=True, index=True)
    mentorship_id = Column(Integer, ForeignKey("mentorship.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, default="")
    scheduled_date = Column(TIMESTAMP(timezone=True), nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=60)
    meeting_link = Column(String(500), nullable=True)
    status = _status_column(SessionStatus, SessionStatus.SCHEDULED)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    completed_at = Column(TIMESTAMP(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="check_session_duration_positive"),
    )

    mentorship = relationship("Mentorship", back_populates="sessions")
    creator = relationship("User", foreign_keys=[created_by])


class MentorshipGoal(Base):
    __tablename__ = "mentorship_goals"

    id = Column(Integer, primary_key=True, index=True)
    mentorship_id = Column(Integer, ForeignKey("mentorship.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, default="")
    target_date = Column(Date, nullable=True)
    progress_percentage = Column(Integer, nullable=False, default=0)
    status = _status_column(GoalStatus, GoalStatus.NOT_STARTED)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "progress_percentage >= 0 AND progress_percentage <= 100",
            name="check_goal_progress_range",
        ),
    )

    mentorship = relationship("Mentorship", back_populates="goals")
    creator = relationship("User", foreign_keys=[created_by])
