"""
Notification Model - Messages addressed to a user, a patient, or both.
"""
from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, Text, false, func
from sqlalchemy.orm import relationship

from ..database import Base


class Notification(Base):
    """
    Notification Model

    Fields:
    - id: Primary key
    - user_id: Addressed user (optional)
    - patient_id: Addressed patient (optional)
    - message: Notification text
    - is_read: Whether the recipient has read it
    - created_at: When the notification was created

    At least one of user_id and patient_id must be set. Notifications are
    removed together with their recipient.
    """
    __tablename__ = "notifications"
    __table_args__ = (
        CheckConstraint("user_id IS NOT NULL OR patient_id IS NOT NULL", name="has_recipient"),
        Index("ix_notifications_user_unread", "user_id", "is_read"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=True, index=True)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="notifications")
    patient = relationship("Patient", back_populates="notifications")

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, patient_id={self.patient_id}, is_read={self.is_read})>"
