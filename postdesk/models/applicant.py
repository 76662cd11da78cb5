"""
Applicant model for event hiring applications.
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from ..database import Base


class Applicant(Base):
    __tablename__ = "applicants"
    __table_args__ = (UniqueConstraint("user_id", "event_id", name="uq_applicant_user_event"),)

    DECISIONS = ("Selected", "Maybe", "Rejected")
    STATUSES = ("PENDING",) + DECISIONS

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(100), nullable=False)
    team = Column(String(100), nullable=True)
    motivation = Column(Text, nullable=False)
    status = Column(String(20), default="PENDING", index=True)  # PENDING, Selected, Maybe, Rejected
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    user = relationship("User", back_populates="applications")
    event = relationship("Event", back_populates="applicants")
