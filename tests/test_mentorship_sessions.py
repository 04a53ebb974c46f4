# tests/test_mentorship_sessions.py
"""
Session scheduling, completion and deletion inside a mentorship
"""

from datetime import datetime, timedelta, UTC

import pytest

from alumnilink import models
from alumnilink.exceptions import (
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from alumnilink.models.mentorship import SessionStatus


def test_schedule_session_defaults(service, sink, active_mentorship, mentor, mentee, future_time):
    session = service.schedule_session(
        mentee.id,
        active_mentorship.id,
        "  Resume review  ",
        description="Bring your CV",
        scheduled_at=future_time,
        meeting_link="  https://meet.example.com/abc  ",
    )

    assert session.id is not None
    assert session.title == "Resume review"
    assert session.description == "Bring your CV"
    assert session.duration_minutes == 60
    assert session.meeting_link == "https://meet.example.com/abc"
    assert session.status == SessionStatus.SCHEDULED
    assert session.created_by == mentee.id
    assert session.completed_at is None

    assert sink.sent[-1]["event_type"] == "session_scheduled"
    assert sink.sent[-1]["recipient_id"] == mentor.id
    assert "Resume review" in sink.sent[-1]["message"]


def test_schedule_session_accepts_iso_string(service, active_mentorship, mentor):
    when = (datetime.now(UTC) + timedelta(days=1)).strftime("%Y-%m-%dT%H:%M:%SZ")
    session = service.schedule_session(
        mentor.id, active_mentorship.id, "Mock interview", scheduled_at=when, duration_minutes=45
    )

    assert session.duration_minutes == 45
    assert session.meeting_link is None


def test_schedule_session_requires_title(service, active_mentorship, mentor, future_time):
    with pytest.raises(ValidationError, match="Session title is required"):
        service.schedule_session(mentor.id, active_mentorship.id, "   ", scheduled_at=future_time)


def test_schedule_session_requires_date(service, active_mentorship, mentor):
    with pytest.raises(ValidationError, match="Scheduled date is required"):
        service.schedule_session(mentor.id, active_mentorship.id, "Catch up")


def test_schedule_session_rejects_bad_date_string(service, active_mentorship, mentor):
    with pytest.raises(ValidationError, match="Invalid date format"):
        service.schedule_session(mentor.id, active_mentorship.id, "Catch up", scheduled_at="next tuesday")


def test_schedule_session_in_the_past(service, active_mentorship, mentor):
    yesterday = datetime.now(UTC) - timedelta(days=1)

    with pytest.raises(ValidationError, match="in the past"):
        service.schedule_session(mentor.id, active_mentorship.id, "Too late", scheduled_at=yesterday)


@pytest.mark.parametrize("duration", [0, -15])
def test_schedule_session_rejects_non_positive_duration(service, active_mentorship, mentor, future_time, duration):
    with pytest.raises(ValidationError, match="positive"):
        service.schedule_session(
            mentor.id, active_mentorship.id, "Catch up", scheduled_at=future_time, duration_minutes=duration
        )


def test_schedule_session_requires_active_mentorship(service, mentor, mentee, future_time):
    mentorship = service.request_mentorship(mentee.id, mentor.id, "Career guidance")

    with pytest.raises(InvalidStateError, match="must be active to schedule"):
        service.schedule_session(mentee.id, mentorship.id, "Too early", scheduled_at=future_time)


def test_schedule_session_after_completion_fails(service, active_mentorship, mentor, future_time):
    service.complete_mentorship(mentor.id, active_mentorship.id)

    with pytest.raises(InvalidStateError):
        service.schedule_session(mentor.id, active_mentorship.id, "Too late", scheduled_at=future_time)


def test_outsider_cannot_schedule(service, active_mentorship, outsider, future_time):
    with pytest.raises(ForbiddenError):
        service.schedule_session(outsider.id, active_mentorship.id, "Crash", scheduled_at=future_time)


def test_schedule_session_missing_mentorship(service, mentor, future_time):
    with pytest.raises(NotFoundError):
        service.schedule_session(mentor.id, 4242, "Nowhere", scheduled_at=future_time)


def test_complete_session(service, active_mentorship, mentor, mentee, future_time):
    session = service.schedule_session(mentor.id, active_mentorship.id, "Kickoff", scheduled_at=future_time)

    completed = service.complete_session(mentee.id, session.id)
    assert completed.status == SessionStatus.COMPLETED
    assert completed.completed_at is not None

    with pytest.raises(InvalidStateError, match="already marked as completed"):
        service.complete_session(mentor.id, session.id)


def test_cancelled_session_cannot_be_completed(db_session, service, active_mentorship, mentor, future_time):
    session = service.schedule_session(mentor.id, active_mentorship.id, "Kickoff", scheduled_at=future_time)
    session.status = SessionStatus.CANCELLED
    db_session.commit()

    with pytest.raises(InvalidStateError, match="cancelled session"):
        service.complete_session(mentor.id, session.id)


def test_complete_session_access_checks(service, active_mentorship, mentor, outsider, future_time):
    session = service.schedule_session(mentor.id, active_mentorship.id, "Kickoff", scheduled_at=future_time)

    with pytest.raises(ForbiddenError):
        service.complete_session(outsider.id, session.id)
    with pytest.raises(NotFoundError):
        service.complete_session(mentor.id, 999)


def test_delete_session_by_creator(db_session, service, active_mentorship, mentor, mentee, future_time):
    session = service.schedule_session(mentor.id, active_mentorship.id, "Kickoff", scheduled_at=future_time)

    with pytest.raises(ForbiddenError, match="sessions you created"):
        service.delete_session(mentee.id, session.id)

    service.delete_session(mentor.id, session.id)
    assert db_session.query(models.MentorshipSession).count() == 0

    with pytest.raises(NotFoundError):
        service.delete_session(mentor.id, session.id)


def test_completed_session_cannot_be_deleted(service, active_mentorship, mentor, future_time):
    session = service.schedule_session(mentor.id, active_mentorship.id, "Kickoff", scheduled_at=future_time)
    service.complete_session(mentor.id, session.id)

    with pytest.raises(InvalidStateError, match="Completed sessions cannot be deleted"):
        service.delete_session(mentor.id, session.id)


def test_list_sessions_latest_first(service, active_mentorship, mentor, mentee, outsider, future_time):
    early = service.schedule_session(mentor.id, active_mentorship.id, "Early", scheduled_at=future_time)
    late = service.schedule_session(
        mentee.id, active_mentorship.id, "Late", scheduled_at=future_time + timedelta(days=7)
    )

    sessions = service.list_sessions(mentee.id, active_mentorship.id)
    assert [s.id for s in sessions] == [late.id, early.id]

    with pytest.raises(ForbiddenError):
        service.list_sessions(outsider.id, active_mentorship.id)


def test_sessions_survive_mentorship_completion(service, active_mentorship, mentor, future_time):
    session = service.schedule_session(mentor.id, active_mentorship.id, "Kickoff", scheduled_at=future_time)
    service.complete_mentorship(mentor.id, active_mentorship.id)

    sessions = service.list_sessions(mentor.id, active_mentorship.id)
    assert [s.id for s in sessions] == [session.id]
    assert sessions[0].status == SessionStatus.SCHEDULED


def test_schedule_session_duration_from_string(service, active_mentorship, mentor, future_time):
    session = service.schedule_session(
        mentor.id, active_mentorship.id, "Catch up", scheduled_at=future_time, duration_minutes="90"
    )
    assert session.duration_minutes == 90

    with pytest.raises(ValidationError, match="positive number of minutes"):
        service.schedule_session(
            mentor.id, active_mentorship.id, "Catch up", scheduled_at=future_time, duration_minutes="an hour"
        )
