# alumnilink/api/mentorship.py
"""
Mentorship API Router

Endpoints:
- POST   /mentorship/request                 - Request a mentor
- GET    /mentorship/as-mentor               - Mentorships where I am the mentor
- GET    /mentorship/as-mentee               - Mentorships where I am the mentee
- GET    /mentorship/{id}                    - One mentorship I take part in
- PUT    /mentorship/{id}/accept             - Mentor accepts a request
- PUT    /mentorship/{id}/reject             - Mentor declines a request
- PUT    /mentorship/{id}/complete           - Either party completes an active mentorship
- GET    /mentorship/{id}/sessions           - List sessions
- POST   /mentorship/{id}/sessions           - Schedule a session
- POST   /mentorship/sessions/{id}/complete  - Mark a session completed
- DELETE /mentorship/sessions/{id}           - Delete a session I created
- GET    /mentorship/{id}/goals              - List goals
- POST   /mentorship/{id}/goals              - Create a goal
- PUT    /mentorship/goals/{id}/progress     - Update goal progress
- DELETE /mentorship/goals/{id}              - Delete a goal I created
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from alumnilink.database import get_db
from alumnilink.exceptions import (
    DuplicateRequestError,
    ForbiddenError,
    InvalidStateError,
    MentorshipError,
    NotFoundError,
    ValidationError,
)
from alumnilink.models.mentorship import Mentorship, MentorshipGoal, MentorshipSession
from alumnilink.models.user import User
from alumnilink.schemas.mentorship import (
    CounterpartProfile,
    GoalActionResponse,
    GoalCreate,
    GoalProgressUpdate,
    GoalResponse,
    MentorshipActionResponse,
    MentorshipListResponse,
    MentorshipRequestCreate,
    MentorshipResponse,
    MessageResponse,
    SessionActionResponse,
    SessionCreate,
    SessionResponse,
)
from alumnilink.services.mentorship_service import MentorshipService
from alumnilink.services.notification_service import DatabaseNotificationSink
from alumnilink.utils.avatar import get_avatar_url
from alumnilink.utils.security import get_current_user

router = APIRouter(prefix="/mentorship", tags=["mentorship"])


STATUS_CODE_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicateRequestError, status.HTTP_409_CONFLICT),
    (InvalidStateError, status.HTTP_409_CONFLICT),
)


# ======================
# HELPER FUNCTIONS
# ======================
def get_mentorship_service(db: Session = Depends(get_db)) -> MentorshipService:
    return MentorshipService(db, notifier=DatabaseNotificationSink(db))


def _to_http_exception(exc: MentorshipError) -> HTTPException:
    for error_type, status_code in STATUS_CODE_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)


def _counterpart_profile(user: Optional[User]) -> Optional[CounterpartProfile]:
    if user is None:
        return None
    profile = user.profile
    return CounterpartProfile(
        user_id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        profile_picture=get_avatar_url(profile.profile_picture) if profile else None,
        position=profile.position if profile else None,
        company_name=profile.company_name if profile else None,
        current_city=profile.current_city if profile else None,
        school_name=profile.school_name if profile else None,
        end_year=profile.end_year if profile else None,
        bio=profile.bio if profile else None,
    )


def _mentorship_response(mentorship: Mentorship, viewer_id: int) -> MentorshipResponse:
    """Serialize a mentorship with the other party's public profile attached."""
    counterpart = mentorship.mentee if mentorship.mentor_id == viewer_id else mentorship.mentor
    response = MentorshipResponse.model_validate(mentorship)
    response.counterpart = _counterpart_profile(counterpart)
    return response


def _session_response(session: MentorshipSession) -> SessionResponse:
    response = SessionResponse.model_validate(session)
    response.created_by_name = session.creator.full_name if session.creator else None
    return response


def _goal_response(goal: MentorshipGoal) -> GoalResponse:
    response = GoalResponse.model_validate(goal)
    response.created_by_name = goal.creator.full_name if goal.creator else None
    return response


# ======================
# MENTORSHIP REQUESTS
# ======================
@router.post("/request", response_model=MentorshipActionResponse, status_code=status.HTTP_201_CREATED)
def request_mentorship(
    payload: MentorshipRequestCreate,
    current_user: User = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service),
):
    """Request mentorship from another member. The caller becomes the mentee."""
    try:
        mentorship = service.request_mentorship(
            requester_id=current_user.id,
            mentor_id=payload.mentor_id,
            area_of_guidance=payload.area_of_guidance,
        )
    except MentorshipError as e:
        raise _to_http_exception(e)

    return MentorshipActionResponse(
        message="Mentorship request sent successfully",
        mentorship=_mentorship_response(mentorship, current_user.id),
    )


@router.get("/as-mentor", response_model=MentorshipListResponse)
def get_mentorships_as_mentor(
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service),
):
    try:
        mentorships = service.list_as_mentor(current_user.id, status=status_filter)
    except MentorshipError as e:
        raise _to_http_exception(e)
    return MentorshipListResponse(
        mentorships=[_mentorship_response(m, current_user.id) for m in mentorships]
    )


@router.get("/as-mentee", response_model=MentorshipListResponse)
def get_mentorships_as_mentee(
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service),
):
    try:
        mentorships = service.list_as_mentee(current_user.id, status=status_filter)
    except MentorshipError as e:
        raise _to_http_exception(e)
    return MentorshipListResponse(
        mentorships=[_mentorship_response(m, current_user.id) for m in mentorships]
    )


@router.get("/{mentorship_id}", response_model=MentorshipResponse)
def get_mentorship(
    mentorship_id: int,
    current_user: User = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service),
):
    try:
        mentorship = service.get_mentorship(current_user.id, mentorship_id)
    except MentorshipError as e:
        raise _to_http_exception(e)
    return _mentorship_response(mentorship, current_user.id)


# ======================
# STATE TRANSITIONS
# ======================
@router.put("/{mentorship_id}/accept", response_model=MentorshipActionResponse)
def accept_mentorship(
    mentorship_id: int,
    current_user: User = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service),
):
    try:
        mentorship = service.accept_mentorship(current_user.id, mentorship_id)
    except MentorshipError as e:
        raise _to_http_exception(e)
    return MentorshipActionResponse(
        message="Mentorship request accepted successfully",
        mentorship=_mentorship_response(mentorship, current_user.id),
    )


@router.put("/{mentorship_id}/reject", response_model=MentorshipActionResponse)
def reject_mentorship(
    mentorship_id: int,
    current_user: User = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service),
):
    try:
        mentorship = service.reject_mentorship(current_user.id, mentorship_id)
    except MentorshipError as e:
        raise _to_http_exception(e)
    return MentorshipActionResponse(
        message="Mentorship request declined",
        mentorship=_mentorship_response(mentorship, current_user.id),
    )


@router.put("/{mentorship_id}/complete", response_model=MentorshipActionResponse)
def complete_mentorship(
    mentorship_id: int,
    current_user: User = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service),
):
    try:
        mentorship = service.complete_mentorship(current_user.id, mentorship_id)
    except MentorshipError as e:
        raise _to_http_exception(e)
    return MentorshipActionResponse(
        message="Mentorship marked as completed",
        mentorship=_mentorship_response(mentorship, current_user.id),
    )


# ======================
# SESSIONS
# ======================
@router.get("/{mentorship_id}/sessions", response_model=List[SessionResponse])
def get_mentorship_sessions(
    mentorship_id: int,
    current_user: User = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service),
):
    try:
        sessions = service.list_sessions(current_user.id, mentorship_id)
    except MentorshipError as e:
        raise _to_http_exception(e)
    return [_session_response(s) for s in sessions]


@router.post(
    "/{mentorship_id}/sessions",
    response_model=SessionActionResponse,
    status_code=status.HTTP_201_CREATED,
)
def schedule_session(
    mentorship_id: int,
    payload: SessionCreate,
    current_user: User = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service),
):
    try:
        session = service.schedule_session(
            actor_id=current_user.id,
            mentorship_id=mentorship_id,
            title=payload.title,
            description=payload.description,
            scheduled_at=payload.scheduled_date,
            duration_minutes=payload.duration_minutes,
            meeting_link=payload.meeting_link,
        )
    except MentorshipError as e:
        raise _to_http_exception(e)
    return SessionActionResponse(
        message="Session scheduled successfully",
        session=_session_response(session),
    )


@router.post("/sessions/{session_id}/complete", response_model=SessionActionResponse)
def complete_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service),
):
    try:
        session = service.complete_session(current_user.id, session_id)
    except MentorshipError as e:
        raise _to_http_exception(e)
    return SessionActionResponse(
        message="Session marked as completed",
        session=_session_response(session),
    )


@router.delete("/sessions/{session_id}", response_model=MessageResponse)
def delete_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service),
):
    try:
        service.delete_session(current_user.id, session_id)
    except MentorshipError as e:
        raise _to_http_exception(e)
    return MessageResponse(message="Session deleted successfully")


# ======================
# GOALS
# ======================
@router.get("/{mentorship_id}/goals", response_model=List[GoalResponse])
def get_mentorship_goals(
    mentorship_id: int,
    current_user: User = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service),
):
    try:
        goals = service.list_goals(current_user.id, mentorship_id)
    except MentorshipError as e:
        raise _to_http_exception(e)
    return [_goal_response(g) for g in goals]


@router.post(
    "/{mentorship_id}/goals",
    response_model=GoalActionResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_goal(
    mentorship_id: int,
    payload: GoalCreate,
    current_user: User = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service),
):
    try:
        goal = service.create_goal(
            actor_id=current_user.id,
            mentorship_id=mentorship_id,
            title=payload.title,
            description=payload.description,
            target_date=payload.target_date,
        )
    except MentorshipError as e:
        raise _to_http_exception(e)
    return GoalActionResponse(message="Goal created successfully", goal=_goal_response(goal))


@router.put("/goals/{goal_id}/progress", response_model=GoalActionResponse)
def update_goal_progress(
    goal_id: int,
    payload: GoalProgressUpdate,
    current_user: User = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service),
):
    try:
        goal = service.update_goal_progress(current_user.id, goal_id, payload.progress_percentage)
    except MentorshipError as e:
        raise _to_http_exception(e)
    return GoalActionResponse(message="Goal progress updated", goal=_goal_response(goal))


@router.delete("/goals/{goal_id}", response_model=MessageResponse)
def delete_goal(
    goal_id: int,
    current_user: User = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service),
):
    try:
        service.delete_goal(current_user.id, goal_id)
    except MentorshipError as e:
        raise _to_http_exception(e)
    return MessageResponse(message="Goal deleted successfully")
