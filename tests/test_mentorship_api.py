# tests/test_mentorship_api.py
"""
Router-level tests: error mapping, response shapes and a full mentorship walk-through.
Route functions are called directly with their dependencies passed in.
"""

from datetime import date, timedelta

import pytest

# Skip suite when FastAPI dependency is not present in local environment.
pytest.importorskip("fastapi")

from fastapi import HTTPException

from alumnilink.api import mentorship as mentorship_api
from alumnilink.exceptions import (
    DuplicateRequestError,
    ForbiddenError,
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from alumnilink.models.mentorship import GoalStatus, MentorshipStatus, SessionStatus
from alumnilink.schemas.mentorship import (
    GoalCreate,
    GoalProgressUpdate,
    MentorshipRequestCreate,
    SessionCreate,
)


def _request(service, mentee, mentor_id, area="Career guidance"):
    return mentorship_api.request_mentorship(
        payload=MentorshipRequestCreate(mentor_id=mentor_id, area_of_guidance=area),
        current_user=mentee,
        service=service,
    )


@pytest.mark.parametrize(
    "error, status_code",
    [
        (ValidationError("bad"), 400),
        (ForbiddenError("no"), 403),
        (NotFoundError("gone"), 404),
        (DuplicateRequestError("again"), 409),
        (InvalidStateError("state"), 409),
        (InvalidTransitionError("transition"), 409),
    ],
)
def test_error_mapping(error, status_code):
    http_exc = mentorship_api._to_http_exception(error)
    assert http_exc.status_code == status_code
    assert http_exc.detail == error.message


def test_request_returns_mentor_profile(service, mentor, mentee):
    response = _request(service, mentee, mentor.id)

    assert response.message == "Mentorship request sent successfully"
    assert response.mentorship.status == MentorshipStatus.REQUESTED
    counterpart = response.mentorship.counterpart
    assert counterpart.user_id == mentor.id
    assert counterpart.first_name == "Grace"
    assert counterpart.position == "Principal Engineer"
    assert counterpart.company_name == "Navy Labs"
    assert counterpart.school_name == "Yale University"
    assert counterpart.end_year == 1934
    assert counterpart.profile_picture == "http://localhost:8000/uploads/avatars/grace.png"


def test_request_errors_become_http_errors(service, mentor, mentee):
    with pytest.raises(HTTPException) as exc_info:
        _request(service, mentee, None)
    assert exc_info.value.status_code == 400

    with pytest.raises(HTTPException) as exc_info:
        _request(service, mentee, 777)
    assert exc_info.value.status_code == 404

    _request(service, mentee, mentor.id)
    with pytest.raises(HTTPException) as exc_info:
        _request(service, mentee, mentor.id)
    assert exc_info.value.status_code == 409
    assert "pending" in exc_info.value.detail


def test_mentor_lists_show_mentee_profile(service, mentor, mentee):
    created = _request(service, mentee, mentor.id).mentorship

    as_mentor = mentorship_api.get_mentorships_as_mentor(
        status_filter=None, current_user=mentor, service=service
    )
    assert [m.id for m in as_mentor.mentorships] == [created.id]
    assert as_mentor.mentorships[0].counterpart.user_id == mentee.id
    assert as_mentor.mentorships[0].counterpart.profile_picture is None

    as_mentee = mentorship_api.get_mentorships_as_mentee(
        status_filter="active", current_user=mentee, service=service
    )
    assert as_mentee.mentorships == []

    with pytest.raises(HTTPException) as exc_info:
        mentorship_api.get_mentorships_as_mentee(status_filter="paused", current_user=mentee, service=service)
    assert exc_info.value.status_code == 400


def test_transition_conflicts(service, mentor, mentee, outsider):
    created = _request(service, mentee, mentor.id).mentorship

    with pytest.raises(HTTPException) as exc_info:
        mentorship_api.accept_mentorship(mentorship_id=created.id, current_user=mentee, service=service)
    assert exc_info.value.status_code == 403

    with pytest.raises(HTTPException) as exc_info:
        mentorship_api.get_mentorship(mentorship_id=created.id, current_user=outsider, service=service)
    assert exc_info.value.status_code == 403

    mentorship_api.reject_mentorship(mentorship_id=created.id, current_user=mentor, service=service)
    with pytest.raises(HTTPException) as exc_info:
        mentorship_api.accept_mentorship(mentorship_id=created.id, current_user=mentor, service=service)
    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "Cannot accept mentorship with status: cancelled"

    with pytest.raises(HTTPException) as exc_info:
        mentorship_api.complete_mentorship(mentorship_id=created.id + 100, current_user=mentor, service=service)
    assert exc_info.value.status_code == 404


def test_full_mentorship_walkthrough(service, sink, mentor, mentee, future_time):
    created = _request(service, mentee, mentor.id, "Breaking into data science").mentorship

    accepted = mentorship_api.accept_mentorship(
        mentorship_id=created.id, current_user=mentor, service=service
    ).mentorship
    assert accepted.status == MentorshipStatus.ACTIVE
    assert accepted.start_date is not None
    assert accepted.counterpart.user_id == mentee.id

    scheduled = mentorship_api.schedule_session(
        mentorship_id=created.id,
        payload=SessionCreate(title="Portfolio review", scheduled_date=future_time),
        current_user=mentee,
        service=service,
    )
    assert scheduled.session.duration_minutes == 60
    assert scheduled.session.created_by_name == "Ada Lovelace"

    goal = mentorship_api.create_goal(
        mentorship_id=created.id,
        payload=GoalCreate(title="Finish a Kaggle competition", target_date=date.today() + timedelta(days=60)),
        current_user=mentee,
        service=service,
    ).goal
    assert goal.status == GoalStatus.NOT_STARTED

    progressed = mentorship_api.update_goal_progress(
        goal_id=goal.id,
        payload=GoalProgressUpdate(progress_percentage=50),
        current_user=mentor,
        service=service,
    ).goal
    assert progressed.progress_percentage == 50
    assert progressed.status == GoalStatus.IN_PROGRESS

    done = mentorship_api.complete_session(
        session_id=scheduled.session.id, current_user=mentor, service=service
    ).session
    assert done.status == SessionStatus.COMPLETED

    completed = mentorship_api.complete_mentorship(
        mentorship_id=created.id, current_user=mentee, service=service
    ).mentorship
    assert completed.status == MentorshipStatus.COMPLETED
    assert completed.end_date is not None
    assert completed.area_of_guidance == "Breaking into data science"

    with pytest.raises(HTTPException) as exc_info:
        mentorship_api.update_goal_progress(
            goal_id=goal.id,
            payload=GoalProgressUpdate(progress_percentage=75),
            current_user=mentee,
            service=service,
        )
    assert exc_info.value.status_code == 409

    sessions = mentorship_api.get_mentorship_sessions(mentorship_id=created.id, current_user=mentor, service=service)
    goals = mentorship_api.get_mentorship_goals(mentorship_id=created.id, current_user=mentor, service=service)
    assert [s.title for s in sessions] == ["Portfolio review"]
    assert [g.progress_percentage for g in goals] == [50]

    assert sink.events() == [
        "mentorship_requested",
        "mentorship_accepted",
        "session_scheduled",
        "goal_created",
        "mentorship_completed",
    ]


def test_reading_back_keeps_every_field(service, active_mentorship, mentor, mentee):
    fetched = mentorship_api.get_mentorship(
        mentorship_id=active_mentorship.id, current_user=mentee, service=service
    )

    assert fetched.id == active_mentorship.id
    assert fetched.mentor_id == mentor.id
    assert fetched.mentee_id == mentee.id
    assert fetched.area_of_guidance == "Career guidance"
    assert fetched.status == MentorshipStatus.ACTIVE
    assert fetched.start_date is not None
    assert fetched.end_date is None
    assert fetched.created_at is not None


def test_delete_endpoints(service, active_mentorship, mentor, mentee, future_time):
    session = mentorship_api.schedule_session(
        mentorship_id=active_mentorship.id,
        payload=SessionCreate(title="Kickoff", scheduled_date=future_time, duration_minutes=30),
        current_user=mentor,
        service=service,
    ).session
    goal = mentorship_api.create_goal(
        mentorship_id=active_mentorship.id,
        payload=GoalCreate(title="Read two books"),
        current_user=mentor,
        service=service,
    ).goal

    with pytest.raises(HTTPException) as exc_info:
        mentorship_api.delete_session(session_id=session.id, current_user=mentee, service=service)
    assert exc_info.value.status_code == 403

    assert mentorship_api.delete_session(
        session_id=session.id, current_user=mentor, service=service
    ).message == "Session deleted successfully"
    assert mentorship_api.delete_goal(
        goal_id=goal.id, current_user=mentor, service=service
    ).message == "Goal deleted successfully"

    with pytest.raises(HTTPException) as exc_info:
        mentorship_api.delete_goal(goal_id=goal.id, current_user=mentor, service=service)
    assert exc_info.value.status_code == 404
