# alumnilink/services/mentorship_service.py
"""
Mentorship Service Layer

Owns the mentorship state machine and the sessions and goals nested under a
mentorship:

    requested --accept (mentor)--> active
    requested --reject (mentor)--> cancelled
    active --complete (mentor or mentee)--> completed

Every mutation loads the record, checks actor and state to raise a precise
error, then applies a conditional update keyed on the expected prior status.
If a concurrent call got there first the update touches no rows and the call
fails with InvalidTransitionError instead of applying twice.
"""

import logging
from datetime import date, datetime, UTC
from typing import Iterable, List, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from alumnilink import models
from alumnilink.config import settings
from alumnilink.crud import mentorship as mentorship_crud
from alumnilink.crud import user as user_crud
from alumnilink.exceptions import (
    DuplicateRequestError,
    ForbiddenError,
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from alumnilink.models.mentorship import GoalStatus, MentorshipStatus, SessionStatus
from alumnilink.services.notification_service import DatabaseNotificationSink, NotificationSink

logger = logging.getLogger(__name__)

MIN_PROGRESS = 0
MAX_PROGRESS = 100


def derive_goal_status(progress_percentage: int) -> GoalStatus:
    if progress_percentage >= MAX_PROGRESS:
        return GoalStatus.COMPLETED
    if progress_percentage > MIN_PROGRESS:
        return GoalStatus.IN_PROGRESS
    return GoalStatus.NOT_STARTED


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps from clients are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _clean_text(value: Optional[str]) -> str:
    return value.strip() if value else ""


def _whole_number(value: Union[int, float, str]) -> int:
    # Fractions are truncated toward zero: "50.5" and 50.5 both give 50
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    if isinstance(value, str):
        value = float(value.strip())
    return int(value)


class MentorshipService:
    def __init__(self, db: Session, notifier: Optional[NotificationSink] = None):
        self.db = db
        self.notifier = notifier if notifier is not None else DatabaseNotificationSink(db)

    # ======================
    # MENTORSHIP LIFECYCLE
    # ======================

    def request_mentorship(
        self,
        requester_id: int,
        mentor_id: Union[int, str, None],
        area_of_guidance: Optional[str],
    ) -> models.Mentorship:
        """Create a mentorship request from requester (mentee) to mentor."""
        mentor_id = self._parse_mentor_id(mentor_id)

        area = _clean_text(area_of_guidance)
        if not area:
            raise ValidationError("Area of guidance is required")

        if mentor_id == requester_id:
            raise ValidationError("Cannot request mentorship from yourself")

        mentor = user_crud.get_active_user(self.db, mentor_id)
        if not mentor:
            raise NotFoundError("Mentor not found")

        existing = mentorship_crud.get_open_mentorship_for_pair(self.db, mentor_id, requester_id)
        if existing:
            if existing.status == MentorshipStatus.REQUESTED:
                raise DuplicateRequestError("You already have a pending mentorship request with this mentor")
            raise DuplicateRequestError("You already have an active mentorship with this mentor")

        try:
            mentorship = mentorship_crud.create_mentorship(
                self.db,
                mentor_id=mentor_id,
                mentee_id=requester_id,
                area_of_guidance=area,
            )
            self.db.commit()
        except IntegrityError:
            # Lost a race against an identical request
            self.db.rollback()
            raise DuplicateRequestError("Mentorship request already exists")

        self.db.refresh(mentorship)
        logger.info(
            "Mentorship %s requested (mentor_id=%s, mentee_id=%s)",
            mentorship.id, mentor_id, requester_id,
        )

        self._notify(
            recipient_id=mentor_id,
            actor_id=requester_id,
            mentorship_id=mentorship.id,
            event_type="mentorship_requested",
            title="New Mentorship Request",
            message=f"{self._display_name(requester_id)} requested mentorship in: {area}",
        )
        return mentorship

    def accept_mentorship(self, actor_id: int, mentorship_id: int) -> models.Mentorship:
        mentorship = self._get_mentorship_or_404(mentorship_id)
        if mentorship.mentor_id != actor_id:
            raise ForbiddenError("Only the requested mentor can accept this mentorship")
        self._require_status(mentorship, MentorshipStatus.REQUESTED, "accept")

        self._transition(
            mentorship,
            expected=MentorshipStatus.REQUESTED,
            target=MentorshipStatus.ACTIVE,
            verb="accept",
            extra={models.Mentorship.start_date: _utcnow()},
        )

        self._notify(
            recipient_id=mentorship.mentee_id,
            actor_id=actor_id,
            mentorship_id=mentorship.id,
            event_type="mentorship_accepted",
            title="Mentorship Request Accepted",
            message=f"{self._display_name(actor_id)} accepted your mentorship request!",
        )
        return mentorship

    def reject_mentorship(self, actor_id: int, mentorship_id: int) -> models.Mentorship:
        mentorship = self._get_mentorship_or_404(mentorship_id)
        if mentorship.mentor_id != actor_id:
            raise ForbiddenError("Only the requested mentor can reject this mentorship")
        self._require_status(mentorship, MentorshipStatus.REQUESTED, "reject")

        self._transition(
            mentorship,
            expected=MentorshipStatus.REQUESTED,
            target=MentorshipStatus.CANCELLED,
            verb="reject",
        )

        self._notify(
            recipient_id=mentorship.mentee_id,
            actor_id=actor_id,
            mentorship_id=mentorship.id,
            event_type="mentorship_rejected",
            title="Mentorship Request Declined",
            message=f"{self._display_name(actor_id)} declined your mentorship request",
        )
        return mentorship

    def complete_mentorship(self, actor_id: int, mentorship_id: int) -> models.Mentorship:
        """Either party closes an active mentorship. Sessions and goals are left as they are."""
        mentorship = self._get_participant_mentorship(actor_id, mentorship_id)
        self._require_status(mentorship, MentorshipStatus.ACTIVE, "complete")

        self._transition(
            mentorship,
            expected=MentorshipStatus.ACTIVE,
            target=MentorshipStatus.COMPLETED,
            verb="complete",
            extra={models.Mentorship.end_date: _utcnow()},
        )

        self._notify(
            recipient_id=mentorship.counterpart_id(actor_id),
            actor_id=actor_id,
            mentorship_id=mentorship.id,
            event_type="mentorship_completed",
            title="Mentorship Completed",
            message=f"{self._display_name(actor_id)} marked your mentorship as completed",
        )
        return mentorship

    def get_mentorship(self, actor_id: int, mentorship_id: int) -> models.Mentorship:
        return self._get_participant_mentorship(actor_id, mentorship_id)

    def list_as_mentor(
        self,
        user_id: int,
        status: Union[str, MentorshipStatus, None] = None,
    ) -> List[models.Mentorship]:
        return mentorship_crud.list_mentorships_as_mentor(
            self.db, user_id, statuses=self._status_filter(status)
        )

    def list_as_mentee(
        self,
        user_id: int,
        status: Union[str, MentorshipStatus, None] = None,
    ) -> List[models.Mentorship]:
        return mentorship_crud.list_mentorships_as_mentee(
            self.db, user_id, statuses=self._status_filter(status)
        )

    # ======================
    # SESSIONS
    # ======================

    def list_sessions(self, actor_id: int, mentorship_id: int) -> List[models.MentorshipSession]:
        self._get_participant_mentorship(actor_id, mentorship_id)
        return mentorship_crud.list_sessions(self.db, mentorship_id)

    def schedule_session(
        self,
        actor_id: int,
        mentorship_id: int,
        title: Optional[str],
        description: Optional[str] = None,
        scheduled_at: Union[datetime, str, None] = None,
        duration_minutes: Union[int, str, None] = None,
        meeting_link: Optional[str] = None,
    ) -> models.MentorshipSession:
        clean_title = _clean_text(title)
        if not clean_title:
            raise ValidationError("Session title is required")

        scheduled = self._parse_scheduled_at(scheduled_at)
        if scheduled <= _utcnow():
            raise ValidationError("Cannot schedule session in the past")

        duration = self._parse_duration(duration_minutes)

        mentorship = self._get_participant_mentorship(actor_id, mentorship_id)
        if mentorship.status != MentorshipStatus.ACTIVE:
            raise InvalidStateError("Mentorship must be active to schedule sessions")

        session = models.MentorshipSession(
            mentorship_id=mentorship.id,
            title=clean_title,
            description=_clean_text(description),
            scheduled_date=scheduled,
            duration_minutes=duration,
            meeting_link=_clean_text(meeting_link) or None,
            status=SessionStatus.SCHEDULED,
            created_by=actor_id,
        )
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        logger.info("Session %s scheduled on mentorship %s by user %s", session.id, mentorship.id, actor_id)

        self._notify(
            recipient_id=mentorship.counterpart_id(actor_id),
            actor_id=actor_id,
            mentorship_id=mentorship.id,
            event_type="session_scheduled",
            title="New Session Scheduled",
            message=f"{self._display_name(actor_id)} scheduled a session: {clean_title}",
        )
        return session

    def complete_session(self, actor_id: int, session_id: int) -> models.MentorshipSession:
        session = mentorship_crud.get_session(self.db, session_id)
        if not session:
            raise NotFoundError("Session not found")
        if not session.mentorship.is_participant(actor_id):
            raise ForbiddenError("You do not have access to this session")
        if session.status == SessionStatus.COMPLETED:
            raise InvalidStateError("Session is already marked as completed")
        if session.status == SessionStatus.CANCELLED:
            raise InvalidStateError("Cannot complete a cancelled session")

        updated = mentorship_crud.update_if_status(
            self.db,
            models.MentorshipSession,
            session.id,
            SessionStatus.SCHEDULED,
            {
                models.MentorshipSession.status: SessionStatus.COMPLETED,
                models.MentorshipSession.completed_at: _utcnow(),
            },
        )
        if updated != 1:
            self.db.rollback()
            raise InvalidStateError("Session is no longer scheduled")
        self.db.commit()
        self.db.refresh(session)
        logger.info("Session %s completed by user %s", session.id, actor_id)
        return session

    def delete_session(self, actor_id: int, session_id: int) -> None:
        session = mentorship_crud.get_session(self.db, session_id)
        if not session:
            raise NotFoundError("Session not found")
        if session.created_by != actor_id:
            raise ForbiddenError("You can only delete sessions you created")
        if session.status == SessionStatus.COMPLETED:
            raise InvalidStateError("Completed sessions cannot be deleted")

        self.db.delete(session)
        self.db.commit()
        logger.info("Session %s deleted by user %s", session_id, actor_id)

    # ======================
    # GOALS
    # ======================

    def list_goals(self, actor_id: int, mentorship_id: int) -> List[models.MentorshipGoal]:
        self._get_participant_mentorship(actor_id, mentorship_id)
        return mentorship_crud.list_goals(self.db, mentorship_id)

    def create_goal(
        self,
        actor_id: int,
        mentorship_id: int,
        title: Optional[str],
        description: Optional[str] = None,
        target_date: Union[date, str, None] = None,
    ) -> models.MentorshipGoal:
        clean_title = _clean_text(title)
        if not clean_title:
            raise ValidationError("Goal title is required")
        target = self._parse_target_date(target_date)

        mentorship = self._get_participant_mentorship(actor_id, mentorship_id)
        if mentorship.status != MentorshipStatus.ACTIVE:
            raise InvalidStateError("Mentorship must be active to create goals")

        goal = models.MentorshipGoal(
            mentorship_id=mentorship.id,
            title=clean_title,
            description=_clean_text(description),
            target_date=target,
            progress_percentage=MIN_PROGRESS,
            status=GoalStatus.NOT_STARTED,
            created_by=actor_id,
        )
        self.db.add(goal)
        self.db.commit()
        self.db.refresh(goal)
        logger.info("Goal %s created on mentorship %s by user %s", goal.id, mentorship.id, actor_id)

        self._notify(
            recipient_id=mentorship.counterpart_id(actor_id),
            actor_id=actor_id,
            mentorship_id=mentorship.id,
            event_type="goal_created",
            title="New Goal Created",
            message=f"{self._display_name(actor_id)} created a new goal: {clean_title}",
        )
        return goal

    def update_goal_progress(
        self,
        actor_id: int,
        goal_id: int,
        progress_percentage: Union[int, float, str, None],
    ) -> models.MentorshipGoal:
        progress = self._parse_progress(progress_percentage)

        goal = mentorship_crud.get_goal(self.db, goal_id)
        if not goal:
            raise NotFoundError("Goal not found")
        if not goal.mentorship.is_participant(actor_id):
            raise ForbiddenError("You do not have access to this goal")
        if goal.mentorship.status != MentorshipStatus.ACTIVE:
            raise InvalidStateError("Mentorship must be active to update goal progress")

        goal.progress_percentage = progress
        goal.status = derive_goal_status(progress)
        self.db.commit()
        self.db.refresh(goal)
        logger.info("Goal %s progress set to %s by user %s", goal.id, progress, actor_id)
        return goal

    def delete_goal(self, actor_id: int, goal_id: int) -> None:
        goal = mentorship_crud.get_goal(self.db, goal_id)
        if not goal:
            raise NotFoundError("Goal not found")
        if goal.created_by != actor_id:
            raise ForbiddenError("You can only delete goals you created")
        if goal.status == GoalStatus.COMPLETED:
            raise InvalidStateError("Completed goals cannot be deleted")

        self.db.delete(goal)
        self.db.commit()
        logger.info("Goal %s deleted by user %s", goal_id, actor_id)

    # ======================
    # HELPERS
    # ======================

    def _get_mentorship_or_404(self, mentorship_id: int) -> models.Mentorship:
        mentorship = mentorship_crud.get_mentorship(self.db, mentorship_id)
        if not mentorship:
            raise NotFoundError("Mentorship not found")
        return mentorship

    def _get_participant_mentorship(self, actor_id: int, mentorship_id: int) -> models.Mentorship:
        mentorship = self._get_mentorship_or_404(mentorship_id)
        if not mentorship.is_participant(actor_id):
            raise ForbiddenError("You do not have access to this mentorship")
        return mentorship

    @staticmethod
    def _require_status(mentorship: models.Mentorship, expected: MentorshipStatus, verb: str) -> None:
        if mentorship.status != expected:
            raise InvalidTransitionError(
                f"Cannot {verb} mentorship with status: {MentorshipStatus(mentorship.status).value}"
            )

    def _transition(
        self,
        mentorship: models.Mentorship,
        *,
        expected: MentorshipStatus,
        target: MentorshipStatus,
        verb: str,
        extra: Optional[dict] = None,
    ) -> None:
        values = {models.Mentorship.status: target}
        values.update(extra or {})

        updated = mentorship_crud.update_if_status(
            self.db, models.Mentorship, mentorship.id, expected, values
        )
        if updated != 1:
            self.db.rollback()
            self.db.refresh(mentorship)
            raise InvalidTransitionError(
                f"Cannot {verb} mentorship with status: {MentorshipStatus(mentorship.status).value}"
            )
        self.db.commit()
        self.db.refresh(mentorship)
        logger.info(
            "Mentorship %s transitioned %s -> %s",
            mentorship.id, expected.value, target.value,
        )

    def _notify(self, **notification) -> None:
        """Notification failures are logged and never fail the caller's operation."""
        try:
            self.notifier.notify(**notification)
        except Exception as exc:
            logger.warning(
                "Notification '%s' for mentorship %s failed: %s",
                notification.get("event_type"),
                notification.get("mentorship_id"),
                exc,
            )

    def _display_name(self, user_id: int) -> str:
        user = user_crud.get_user(self.db, user_id)
        if not user:
            return "Someone"
        return user.full_name or "Someone"

    @staticmethod
    def _status_filter(
        status: Union[str, MentorshipStatus, None],
    ) -> Optional[Iterable[MentorshipStatus]]:
        if status is None or status == "":
            return None
        try:
            return [MentorshipStatus(status)]
        except ValueError:
            raise ValidationError(f"Invalid mentorship status: {status}")

    @staticmethod
    def _parse_scheduled_at(value: Union[datetime, str, None]) -> datetime:
        if value is None or value == "":
            raise ValidationError("Scheduled date is required")
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                raise ValidationError("Invalid date format")
        return _as_utc(value)

    @staticmethod
    def _parse_mentor_id(value: Union[int, str, None]) -> int:
        if value is None or value == "":
            raise ValidationError("Mentor ID is required")
        try:
            return _whole_number(value)
        except (TypeError, ValueError, OverflowError):
            raise ValidationError("Invalid mentor ID")

    @staticmethod
    def _parse_duration(value: Union[int, str, None]) -> int:
        if value is None or value == "":
            return settings.DEFAULT_SESSION_DURATION_MINUTES
        try:
            duration = _whole_number(value)
        except (TypeError, ValueError, OverflowError):
            raise ValidationError("Session duration must be a positive number of minutes")
        if duration <= 0:
            raise ValidationError("Session duration must be a positive number of minutes")
        return duration

    @staticmethod
    def _parse_target_date(value: Union[date, str, None]) -> Optional[date]:
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str):
            try:
                return date.fromisoformat(value.strip()[:10])
            except ValueError:
                raise ValidationError("Invalid date format")
        return value

    @staticmethod
    def _parse_progress(value: Union[int, float, str, None]) -> int:
        if value is None or value == "":
            raise ValidationError("Progress percentage is required")
        try:
            progress = _whole_number(value)
        except (TypeError, ValueError, OverflowError):
            raise ValidationError("Progress must be between 0 and 100")
        if progress < MIN_PROGRESS or progress > MAX_PROGRESS:
            raise ValidationError("Progress must be between 0 and 100")
        return progress
