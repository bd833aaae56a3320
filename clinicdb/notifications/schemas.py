"""
Notification Schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class NotificationCreate(BaseModel):
    """
    Notification Creation Schema - needs a user, a patient, or both
    """
    message: str = Field(..., min_length=1)
    user_id: Optional[int] = None
    patient_id: Optional[int] = None

    @model_validator(mode="after")
    def check_recipient(self):
        if self.user_id is None and self.patient_id is None:
            raise ValueError("A notification needs a user_id or a patient_id")
        return self


class NotificationResponse(NotificationCreate):
    id: int
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True
