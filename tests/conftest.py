"""Pytest bootstrap: environment defaults, project imports and shared fixtures."""

from pathlib import Path
import os
import sys

# Settings are read at import time; give tests a throwaway database and key.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("EMAIL_NOTIFICATIONS_ENABLED", "false")

# Ensure project root is on sys.path so `import alumnilink` works without install
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

from datetime import datetime, timedelta, UTC

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from alumnilink.database import Base
from alumnilink.models.user import User, UserProfile
from alumnilink.services.mentorship_service import MentorshipService
from alumnilink.services.notification_service import NotificationSink


class RecordingSink(NotificationSink):
    """Keeps every notification in memory."""

    def __init__(self):
        self.sent = []

    def notify(self, **notification):
        self.sent.append(notification)

    def events(self):
        return [n["event_type"] for n in self.sent]


class FailingSink(NotificationSink):
    def notify(self, **notification):
        raise RuntimeError("notification backend down")


@pytest.fixture
def db_session():
    """Fresh in-memory database per test"""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(first_name="Alum", last_name=None, *, is_active=True, with_profile=True, **profile_fields):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            first_name=first_name,
            last_name=last_name or f"Member{n}",
            email=f"alum{n}@alumni.edu",
            role="alumni",
            is_active=is_active,
        )
        db_session.add(user)
        db_session.flush()
        if with_profile:
            db_session.add(UserProfile(user_id=user.id, **profile_fields))
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def mentor(make_user):
    return make_user(
        "Grace",
        "Hopper",
        position="Principal Engineer",
        company_name="Navy Labs",
        school_name="Yale University",
        end_year=1934,
        profile_picture="avatars/grace.png",
    )


@pytest.fixture
def mentee(make_user):
    return make_user("Ada", "Lovelace", position="Student")


@pytest.fixture
def outsider(make_user):
    return make_user("Eve", "Outsider")


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def service(db_session, sink):
    return MentorshipService(db_session, notifier=sink)


@pytest.fixture
def active_mentorship(service, mentor, mentee):
    mentorship = service.request_mentorship(mentee.id, mentor.id, "Career guidance")
    return service.accept_mentorship(mentor.id, mentorship.id)


@pytest.fixture
def future_time():
    return datetime.now(UTC) + timedelta(days=3)


@pytest.fixture
def failing_service(db_session):
    return MentorshipService(db_session, notifier=FailingSink())
