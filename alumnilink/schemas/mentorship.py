# alumnilink/schemas/mentorship.py
"""
Mentorship Pydantic Schemas
Request bodies are loosely typed; required-field and range checks
live in the service layer so every client gets the same error messages.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import List, Optional, Union
from datetime import date, datetime

from alumnilink.models.mentorship import GoalStatus, MentorshipStatus, SessionStatus


# ======================
# REQUEST MODELS
# ======================

class MentorshipRequestCreate(BaseModel):
    mentor_id: Optional[Union[int, str]] = Field(None, description="User ID of the requested mentor")
    area_of_guidance: Optional[str] = Field(None, max_length=255, description="What the mentee wants help with")


class SessionCreate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    scheduled_date: Optional[Union[datetime, str]] = Field(None, description="ISO 8601 start time, must be in the future")
    duration_minutes: Optional[Union[int, str]] = Field(None, description="Defaults to 60 minutes")
    meeting_link: Optional[str] = Field(None, max_length=500)


class GoalCreate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    target_date: Optional[Union[date, str]] = None


class GoalProgressUpdate(BaseModel):
    progress_percentage: Optional[Union[int, float, str]] = Field(None, description="0-100, usually in steps of 25")


# ======================
# RESPONSE MODELS
# ======================

class CounterpartProfile(BaseModel):
    """Public profile of the other party in a mentorship"""
    user_id: int
    first_name: str
    last_name: str
    email: Optional[EmailStr] = None
    profile_picture: Optional[str] = None
    position: Optional[str] = None
    company_name: Optional[str] = None
    current_city: Optional[str] = None
    school_name: Optional[str] = None
    end_year: Optional[int] = None
    bio: Optional[str] = None


class MentorshipResponse(BaseModel):
    id: int
    mentor_id: int
    mentee_id: int
    area_of_guidance: str
    status: MentorshipStatus
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    counterpart: Optional[CounterpartProfile] = None

    model_config = ConfigDict(from_attributes=True)


class MentorshipActionResponse(BaseModel):
    message: str
    mentorship: MentorshipResponse


class MentorshipListResponse(BaseModel):
    mentorships: List[MentorshipResponse]


class SessionResponse(BaseModel):
    id: int
    mentorship_id: int
    title: str
    description: Optional[str] = None
    scheduled_date: datetime
    duration_minutes: int
    meeting_link: Optional[str] = None
    status: SessionStatus
    created_by: Optional[int] = None
    created_by_name: Optional[str] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SessionActionResponse(BaseModel):
    message: str
    session: SessionResponse


class GoalResponse(BaseModel):
    id: int
    mentorship_id: int
    title: str
    description: Optional[str] = None
    target_date: Optional[date] = None
    progress_percentage: int
    status: GoalStatus
    created_by: Optional[int] = None
    created_by_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class GoalActionResponse(BaseModel):
    message: str
    goal: GoalResponse


class MessageResponse(BaseModel):
    message: str
