"""
Notification data models.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class NotificationKind(str, Enum):
    """What raised the notification."""
    USER_REGISTRATION = "user_registration"
    ORDER_REMINDER = "order_reminder"
    GENERAL = "general"


class Notification(BaseModel):
    """Represents an in-app notification."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    kind: NotificationKind = Field(default=NotificationKind.GENERAL)
    title: str = Field(..., min_length=1)
    message: str = ""
    subject_ref: Optional[str] = None  # e.g. the user awaiting approval
    created_at: datetime = Field(default_factory=datetime.now)
    read: bool = False
    data: Optional[Dict[str, Any]] = None

    def is_about(self, kind: NotificationKind, subject_ref: str) -> bool:
        """Check whether this notification was raised for a subject."""
        return self.kind == kind and self.subject_ref == subject_ref
