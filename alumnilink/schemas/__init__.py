# alumnilink/schemas/__init__.py

# Auth schemas
from .auth import TokenData

# Mentorship schemas
from .mentorship import (
    MentorshipRequestCreate,
    SessionCreate,
    GoalCreate,
    GoalProgressUpdate,
    CounterpartProfile,
    MentorshipResponse,
    MentorshipActionResponse,
    MentorshipListResponse,
    SessionResponse,
    SessionActionResponse,
    GoalResponse,
    GoalActionResponse,
    MessageResponse,
)

# Notification schemas
from .notification import NotificationResponse, UnreadCountResponse

__all__ = [
    "TokenData",
    "MentorshipRequestCreate",
    "SessionCreate",
    "GoalCreate",
    "GoalProgressUpdate",
    "CounterpartProfile",
    "MentorshipResponse",
    "MentorshipActionResponse",
    "MentorshipListResponse",
    "SessionResponse",
    "SessionActionResponse",
    "GoalResponse",
    "GoalActionResponse",
    "MessageResponse",
    "NotificationResponse",
    "UnreadCountResponse",
]
