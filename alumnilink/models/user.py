from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, TIMESTAMP, func
from sqlalchemy.orm import relationship
from alumnilink.database import Base
from datetime import datetime


# ---------------- USER (IDENTITY TABLE) ----------------
# Rows are owned by the identity provider; this service only reads them.
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(String(20), nullable=False, default="alumni")  # alumni | school_admin | super_admin
    is_active = Column(Boolean, default=True)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    profile = relationship("UserProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    mentorships_as_mentor = relationship("Mentorship", foreign_keys="Mentorship.mentor_id", back_populates="mentor")
    mentorships_as_mentee = relationship("Mentorship", foreign_keys="Mentorship.mentee_id", back_populates="mentee")

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


# ---------------- PUBLIC PROFILE ----------------
class UserProfile(Base):
    __tablename__ = "user_profiles"

    id: int = Column(Integer, primary_key=True)
    user_id: int = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    position: str = Column(String(150))
    company_name: str = Column(String(150))
    current_city: str = Column(String(100))
    school_name: str = Column(String(200))
    end_year: int = Column(Integer)  # graduation year
    bio: str = Column(String(500))
    profile_picture: str = Column(String(255))  # stored path, resolved to a URL on read
    created_at: datetime = Column(TIMESTAMP, server_default=func.now())
    updated_at: datetime = Column(
        TIMESTAMP,
        server_default=func.now(),
        onupdate=func.now()
    )

    user = relationship("User", back_populates="profile")
