"""
Data models for OrderDesk.

This module exports all data models for easy import.
"""

from .audit_log import (
    ActionType,
    Actor,
    AuditLog,
    Outcome,
)
from .notification import (
    Notification,
    NotificationKind,
)
from .order import (
    Order,
    OrderItem,
    OrderStats,
    OrderStatus,
)
from .product import (
    DeliveryWindow,
    Product,
)
from .reminder import Reminder
from .results import (
    ErrorKind,
    OperationResult,
    RowError,
)
from .settings import AppSettings
from .user import (
    ApprovalStatus,
    Role,
    StoredUser,
    User,
)

__all__ = [
    # Catalog models
    "Product",
    "DeliveryWindow",
    # Order models
    "Order",
    "OrderItem",
    "OrderStats",
    "OrderStatus",
    # User models
    "User",
    "StoredUser",
    "Role",
    "ApprovalStatus",
    # Reminder and notification models
    "Reminder",
    "Notification",
    "NotificationKind",
    # Settings
    "AppSettings",
    # Results
    "OperationResult",
    "ErrorKind",
    "RowError",
    # Audit log models
    "AuditLog",
    "ActionType",
    "Actor",
    "Outcome",
]
