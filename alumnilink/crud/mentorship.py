# alumnilink/crud/mentorship.py
"""
Mentorship CRUD Operations

Query helpers for mentorships and their nested sessions and goals. Nothing
here commits; the service layer owns transaction boundaries.
"""

from sqlalchemy.orm import Session, joinedload
from typing import Any, Dict, Iterable, List, Optional

from alumnilink import models
from alumnilink.models.mentorship import (
    MentorshipStatus,
    OPEN_MENTORSHIP_STATUSES,
)


# =====================================
# MENTORSHIP
# =====================================

def get_mentorship(db: Session, mentorship_id: int) -> Optional[models.Mentorship]:
    return db.query(models.Mentorship).filter(
        models.Mentorship.id == mentorship_id
    ).first()


def get_open_mentorship_for_pair(
    db: Session,
    mentor_id: int,
    mentee_id: int,
) -> Optional[models.Mentorship]:
    """Requested or active mentorship for the ordered (mentor, mentee) pair, if any."""
    return db.query(models.Mentorship).filter(
        models.Mentorship.mentor_id == mentor_id,
        models.Mentorship.mentee_id == mentee_id,
        models.Mentorship.status.in_(OPEN_MENTORSHIP_STATUSES),
    ).first()


def create_mentorship(
    db: Session,
    mentor_id: int,
    mentee_id: int,
    area_of_guidance: str,
) -> models.Mentorship:
    mentorship = models.Mentorship(
        mentor_id=mentor_id,
        mentee_id=mentee_id,
        area_of_guidance=area_of_guidance,
        status=MentorshipStatus.REQUESTED,
    )
    db.add(mentorship)
    db.flush()
    return mentorship


def update_if_status(
    db: Session,
    model,
    row_id: int,
    expected_status,
    values: Dict[Any, Any],
) -> int:
    """
    Conditional update: apply values only while the row still has
    expected_status. Returns the number of rows changed (0 or 1).

    Works for any model with `id` and `status` columns (mentorships and
    sessions).
    """
    return db.query(model).filter(
        model.id == row_id,
        model.status == expected_status,
    ).update(values, synchronize_session=False)


def _list_mentorships(
    db: Session,
    *,
    participant_column,
    counterpart_relationship,
    user_id: int,
    statuses: Optional[Iterable[MentorshipStatus]] = None,
) -> List[models.Mentorship]:
    query = db.query(models.Mentorship).options(
        joinedload(counterpart_relationship).joinedload(models.User.profile)
    ).filter(participant_column == user_id)
    if statuses:
        query = query.filter(models.Mentorship.status.in_(list(statuses)))
    return query.order_by(
        models.Mentorship.created_at.desc(),
        models.Mentorship.id.desc(),
    ).all()


def list_mentorships_as_mentor(
    db: Session,
    user_id: int,
    statuses: Optional[Iterable[MentorshipStatus]] = None,
) -> List[models.Mentorship]:
    return _list_mentorships(
        db,
        participant_column=models.Mentorship.mentor_id,
        counterpart_relationship=models.Mentorship.mentee,
        user_id=user_id,
        statuses=statuses,
    )


def list_mentorships_as_mentee(
    db: Session,
    user_id: int,
    statuses: Optional[Iterable[MentorshipStatus]] = None,
) -> List[models.Mentorship]:
    return _list_mentorships(
        db,
        participant_column=models.Mentorship.mentee_id,
        counterpart_relationship=models.Mentorship.mentor,
        user_id=user_id,
        statuses=statuses,
    )


# =====================================
# SESSIONS
# =====================================

def get_session(db: Session, session_id: int) -> Optional[models.MentorshipSession]:
    return db.query(models.MentorshipSession).options(
        joinedload(models.MentorshipSession.mentorship)
    ).filter(models.MentorshipSession.id == session_id).first()


def list_sessions(db: Session, mentorship_id: int) -> List[models.MentorshipSession]:
    return db.query(models.MentorshipSession).options(
        joinedload(models.MentorshipSession.creator)
    ).filter(
        models.MentorshipSession.mentorship_id == mentorship_id
    ).order_by(
        models.MentorshipSession.scheduled_date.desc(),
        models.MentorshipSession.id.desc(),
    ).all()


# =====================================
# GOALS
# =====================================

def get_goal(db: Session, goal_id: int) -> Optional[models.MentorshipGoal]:
    return db.query(models.MentorshipGoal).options(
        joinedload(models.MentorshipGoal.mentorship)
    ).filter(models.MentorshipGoal.id == goal_id).first()


def list_goals(db: Session, mentorship_id: int) -> List[models.MentorshipGoal]:
    return db.query(models.MentorshipGoal).options(
        joinedload(models.MentorshipGoal.creator)
    ).filter(
        models.MentorshipGoal.mentorship_id == mentorship_id
    ).order_by(
        models.MentorshipGoal.created_at.desc(),
        models.MentorshipGoal.id.desc(),
    ).all()
