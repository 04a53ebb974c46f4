from __future__ import annotations

import logging
import threading
from typing import List, Optional

from sqlalchemy.orm import Session

from alumnilink import models
from alumnilink.config import settings
from alumnilink.models.notification import Notification
from alumnilink.utils.email import is_email_enabled, send_email

logger = logging.getLogger(__name__)


EMAIL_SUBJECT_BY_EVENT = {
    "mentorship_requested": "New mentorship request",
    "mentorship_accepted": "Your mentorship request was accepted",
    "mentorship_rejected": "Mentorship request update",
    "mentorship_completed": "Mentorship completed",
    "session_scheduled": "New mentorship session scheduled",
    "goal_created": "New mentorship goal",
}


# ======================
# NOTIFICATION SINKS
# ======================
class NotificationSink:
    """Receives fire-and-forget notifications about mentorship changes."""

    def notify(
        self,
        *,
        recipient_id: int,
        actor_id: Optional[int],
        mentorship_id: Optional[int],
        event_type: str,
        title: str,
        message: str,
    ) -> None:
        raise NotImplementedError


class DatabaseNotificationSink(NotificationSink):
    """Stores an in-app notification and sends a best-effort email."""

    def __init__(self, db: Session):
        self.db = db

    def notify(
        self,
        *,
        recipient_id: int,
        actor_id: Optional[int],
        mentorship_id: Optional[int],
        event_type: str,
        title: str,
        message: str,
    ) -> None:
        try:
            notification = create_notification(
                self.db,
                recipient_id=recipient_id,
                actor_id=actor_id,
                mentorship_id=mentorship_id,
                event_type=event_type,
                title=title,
                message=message,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        dispatch_email_for_notification(self.db, notification)


# ======================
# IN-APP NOTIFICATIONS
# ======================
def list_user_notifications(
    db: Session,
    *,
    user_id: int,
    unread_only: bool = False,
    limit: int = 50,
) -> List[Notification]:
    query = db.query(Notification).filter(Notification.recipient_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()


def mark_notification_read(
    db: Session,
    *,
    user_id: int,
    notification_id: int,
) -> Optional[Notification]:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.recipient_id == user_id,
    ).first()
    if not notification:
        return None
    notification.is_read = True
    db.commit()
    return notification


def mark_all_notifications_read(db: Session, *, user_id: int) -> int:
    updated = db.query(Notification).filter(
        Notification.recipient_id == user_id,
        Notification.is_read.is_(False),
    ).update({"is_read": True}, synchronize_session=False)
    db.commit()
    return int(updated)


def get_unread_count(db: Session, *, user_id: int) -> int:
    return db.query(Notification).filter(
        Notification.recipient_id == user_id,
        Notification.is_read.is_(False),
    ).count()


def create_notification(
    db: Session,
    *,
    recipient_id: int,
    actor_id: Optional[int],
    mentorship_id: Optional[int],
    event_type: str,
    title: str,
    message: str,
) -> Notification:
    notification = Notification(
        recipient_id=recipient_id,
        actor_id=actor_id,
        mentorship_id=mentorship_id,
        event_type=event_type,
        title=title,
        message=message,
    )
    db.add(notification)
    db.flush()
    return notification


# ======================
# EMAIL DISPATCH
# ======================
def _send_notification_email(
    to_email: str,
    subject: str,
    body_text: str,
    *,
    notification_id: Optional[int],
    recipient_id: Optional[int],
) -> None:
    """Runs on a daemon thread so request latency does not include SMTP."""
    sent = send_email(
        to_email=to_email,
        subject=subject,
        body_text=body_text,
    )
    if not sent:
        logger.info(
            "Notification email not sent (recipient_id=%s, notification_id=%s)",
            recipient_id,
            notification_id,
        )


def _mentorship_link(mentorship_id: Optional[int]) -> str:
    base = settings.FRONTEND_URL.rstrip("/")
    if mentorship_id is None:
        return f"{base}/mentorship"
    return f"{base}/mentorship/{mentorship_id}"


def dispatch_email_for_notification(db: Session, notification: Notification) -> bool:
    """
    Best-effort email delivery for a committed notification.
    This function never raises and should not impact request success.
    """
    try:
        if not is_email_enabled():
            return False

        recipient = db.query(models.User).filter(
            models.User.id == notification.recipient_id
        ).first()
        if not recipient or not recipient.email:
            return False

        subject = EMAIL_SUBJECT_BY_EVENT.get(notification.event_type, notification.title)
        recipient_name = (recipient.first_name or "there").strip() or "there"
        body_text = (
            f"Hi {recipient_name},\n\n"
            f"{notification.message}\n\n"
            f"View it here: {_mentorship_link(notification.mentorship_id)}\n"
        )

        worker = threading.Thread(
            target=_send_notification_email,
            args=(
                recipient.email,
                subject,
                body_text,
            ),
            kwargs={
                "notification_id": getattr(notification, "id", None),
                "recipient_id": notification.recipient_id,
            },
            daemon=True,
        )
        worker.start()
        return True
    except Exception as exc:
        logger.warning(
            "Notification email dispatch failed (notification_id=%s): %s",
            getattr(notification, "id", None),
            exc,
        )
        return False
