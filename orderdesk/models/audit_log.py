"""
Audit log data models.

Defines the record of domain actions kept in the audit_log collection.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ActionType(str, Enum):
    """Types of actions that can be logged."""
    # Catalog actions
    PRODUCT_CREATED = "product_created"
    PRODUCT_UPDATED = "product_updated"
    PRODUCT_DELETED = "product_deleted"
    PRODUCT_BULK_IMPORT = "product_bulk_import"

    # Order actions
    ORDER_SUBMITTED = "order_submitted"
    ORDER_STATUS_CHANGED = "order_status_changed"

    # User actions
    USER_CREATED = "user_created"
    USER_APPROVED = "user_approved"
    USER_REJECTED = "user_rejected"
    USER_DELETED = "user_deleted"
    USER_LOGIN = "user_login"
    USER_LOGOUT = "user_logout"

    # Reminder actions
    REMINDER_CREATED = "reminder_created"
    REMINDER_UPDATED = "reminder_updated"
    REMINDER_DELETED = "reminder_deleted"
    REMINDER_FIRED = "reminder_fired"

    # System actions
    SETTINGS_UPDATED = "settings_updated"
    SYSTEM_STARTUP = "system_startup"
    SYSTEM_SHUTDOWN = "system_shutdown"


class Actor(str, Enum):
    """Who performed the action."""
    USER = "user"
    ADMIN = "admin"
    SYSTEM = "system"


class Outcome(str, Enum):
    """Result of the action."""
    SUCCESS = "success"
    FAILURE = "failure"


class AuditLog(BaseModel):
    """Represents a single audit log entry."""

    log_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=datetime.now)
    action_type: ActionType
    actor: Actor
    details: Dict[str, Any] = Field(default_factory=dict)
    outcome: Outcome = Field(default=Outcome.SUCCESS)
    error_message: Optional[str] = None

    def to_readable_string(self) -> str:
        """Convert log entry to human-readable string."""
        timestamp_str = self.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        actor_str = self.actor.value.upper()
        action_str = self.action_type.value.replace("_", " ").title()
        outcome_str = self.outcome.value.upper()

        base = f"[{timestamp_str}] {actor_str}: {action_str} - {outcome_str}"

        if self.error_message:
            base += f" - Error: {self.error_message}"

        return base
