"""
User model mirrored from the auth service for ownership and roles.
"""
from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from ..database import Base


class User(Base):
    __tablename__ = "users"

    # Roles allowed to approve event posts
    APPROVER_ROLES = ("LEAD", "ADMIN", "SUBHEAD")

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(100))
    role = Column(String(20), nullable=False, default="MEMBER")  # MEMBER, SUBHEAD, LEAD, ADMIN
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    created_posts = relationship("EventPost", back_populates="creator", foreign_keys="EventPost.created_by")
    applications = relationship("Applicant", back_populates="user", cascade="all, delete-orphan")
