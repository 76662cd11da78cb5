"""
EventPost model for the draft -> approval -> schedule -> publish workflow.
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from ..database import Base


class EventPost(Base):
    __tablename__ = "event_posts"

    STATUSES = ("DRAFT", "PENDING_APPROVAL", "APPROVED", "REJECTED", "SCHEDULED", "PUBLISHED", "FAILED")
    APPROVABLE_STATUSES = ("DRAFT", "PENDING_APPROVAL")

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    name = Column(String(200), nullable=False)
    platform = Column(String(50), nullable=False, default="LINKEDIN")
    caption = Column(Text)
    image_url = Column(String(500))
    external_ref = Column(String(500), default="")
    post_schedule_date = Column(DateTime, nullable=False)
    status = Column(String(20), default="DRAFT", index=True)
    rejection_reason = Column(Text)
    approved_at = Column(DateTime, nullable=True)
    linkedin_post_id = Column(String(200), nullable=True)
    organization_id = Column(String(100), nullable=True)
    schedule_id = Column(String(32), nullable=True)  # in-memory PostSchedule id
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    event = relationship("Event", back_populates="posts")
    creator = relationship("User", back_populates="created_posts", foreign_keys=[created_by])
    approver = relationship("User", foreign_keys=[approved_by])
