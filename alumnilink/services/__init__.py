# alumnilink/services/__init__.py
from .mentorship_service import MentorshipService
from .notification_service import DatabaseNotificationSink, NotificationSink

__all__ = ["MentorshipService", "NotificationSink", "DatabaseNotificationSink"]
