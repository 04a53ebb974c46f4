# alumnilink/models/__init__.py
# Import models in dependency order
from .user import User, UserProfile
from .mentorship import (
    GoalStatus,
    Mentorship,
    MentorshipGoal,
    MentorshipSession,
    MentorshipStatus,
    SessionStatus,
)
from .notification import Notification

__all__ = [
    "User",
    "UserProfile",
    "Mentorship",
    "MentorshipStatus",
    "MentorshipSession",
    "SessionStatus",
    "MentorshipGoal",
    "GoalStatus",
    "Notification",
]
