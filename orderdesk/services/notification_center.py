"""
Notification service.

Owns the notifications collection and its read/delete lifecycle.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from ..database.codec import decode_records, encode_record, encode_records
from ..database.store import NOTIFICATIONS, Store
from ..models import ErrorKind, Notification, NotificationKind, OperationResult
from ..utils import get_logger


class NotificationCenter:
    """Service for creating, reading and deleting notifications."""

    def __init__(self, store: Store) -> None:
        """
        Initialize notification center.

        Args:
            store: Store instance
        """
        self.store = store
        self.logger = get_logger("notification_center")

    def list(self) -> List[Notification]:
        """
        Get all notifications, newest first.

        Returns:
            List of Notifications
        """
        return decode_records(Notification, self.store.read(NOTIFICATIONS))

    def get(self, notification_id: str) -> Optional[Notification]:
        """Get a notification by ID, or None."""
        for notification in self.list():
            if notification.id == notification_id:
                return notification
        return None

    def create(
        self,
        kind: Union[NotificationKind, str],
        title: str,
        message: str = "",
        subject_ref: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> OperationResult:
        """
        Create a notification.

        Args:
            kind: What raised the notification (enum member or its value)
            title: Short title
            message: Body text
            subject_ref: ID of the entity the notification is about
            data: Opaque payload for the front end

        Returns:
            Result holding the stored Notification, or a validation failure
        """
        try:
            notification = Notification(
                kind=kind,
                title=title,
                message=message,
                subject_ref=subject_ref,
                data=data,
            )
        except ValidationError as e:
            return OperationResult.from_validation_error(e)

        with self.store.lock:
            records = self.store.read(NOTIFICATIONS)
            records.insert(0, encode_record(notification))
            self.store.write(NOTIFICATIONS, records)

        self.logger.info(
            f"Created {notification.kind.value} notification: {notification.title} ({notification.id})"
        )
        return OperationResult.ok(notification)

    def mark_read(self, notification_id: str) -> OperationResult:
        """
        Mark a notification as read.

        Returns:
            Result holding the updated Notification, or NOT_FOUND
        """
        with self.store.lock:
            notifications = self.list()
            for notification in notifications:
                if notification.id == notification_id:
                    notification.read = True
                    self.store.write(NOTIFICATIONS, encode_records(notifications))
                    return OperationResult.ok(notification)

        return OperationResult.fail(
            ErrorKind.NOT_FOUND, f"Notification {notification_id} not found"
        )

    def mark_all_read(self) -> int:
        """
        Mark every notification as read.

        Returns:
            Number of notifications that were unread
        """
        with self.store.lock:
            notifications = self.list()
            changed = 0
            for notification in notifications:
                if not notification.read:
                    notification.read = True
                    changed += 1

            if changed:
                self.store.write(NOTIFICATIONS, encode_records(notifications))
        return changed

    def delete(self, notification_id: str) -> bool:
        """
        Delete a notification. Deleting an absent ID is a no-op.

        Returns:
            True if a notification was removed
        """
        with self.store.lock:
            notifications = self.list()
            remaining = [n for n in notifications if n.id != notification_id]
            if len(remaining) == len(notifications):
                return False
            self.store.write(NOTIFICATIONS, encode_records(remaining))

        self.logger.info(f"Deleted notification {notification_id}")
        return True

    def delete_for_subject(self, kind: NotificationKind, subject_ref: str) -> int:
        """
        Delete every notification of a kind raised for a subject.

        Idempotent: nothing to delete is not an error.

        Args:
            kind: Notification kind to match
            subject_ref: Subject entity ID

        Returns:
            Number of notifications removed
        """
        kind = NotificationKind(kind)
        with self.store.lock:
            notifications = self.list()
            remaining = [n for n in notifications if not n.is_about(kind, subject_ref)]
            removed = len(notifications) - len(remaining)
            if removed:
                self.store.write(NOTIFICATIONS, encode_records(remaining))

        if removed:
            self.logger.info(f"Removed {removed} {kind.value} notification(s) for {subject_ref}")
        return removed

    def unread_count(self) -> int:
        """Count notifications not yet read."""
        return sum(1 for n in self.list() if not n.read)
