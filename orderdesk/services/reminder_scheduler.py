"""
Reminder scheduler service.

Owns order reminders, decides which are active for a moment in the target
timezone and polls on a fixed interval with APScheduler. Notifications are
edge-triggered: a reminder fires once when it becomes active, not on every
poll while it stays active.
"""

import threading
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Set, Tuple
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from pydantic import ValidationError

from ..database.codec import decode_records, encode_record, encode_records
from ..database.store import REMINDERS, Store
from ..models import (
    ActionType,
    Actor,
    ErrorKind,
    NotificationKind,
    OperationResult,
    Reminder,
)
from ..utils import AuditLogger, get_logger
from .notification_center import NotificationCenter

DEFAULT_TIMEZONE = "America/Argentina/Buenos_Aires"
DEFAULT_POLL_INTERVAL_SECONDS = 60
DEFAULT_REMINDER_MESSAGE = "Es hora de hacer tu pedido"
POLL_JOB_ID = "reminder_poll"

IMMUTABLE_FIELDS = {"id", "created_at"}

ReminderListener = Callable[[Reminder], None]


def local_weekday_and_time(now: datetime, timezone: str) -> Tuple[int, str]:
    """
    Convert an instant to the wall clock of a timezone.

    Naive datetimes are taken as system local time.

    Args:
        now: Instant to convert
        timezone: IANA timezone name

    Returns:
        (weekday with 0 = Sunday, "HH:MM")
    """
    local = now.astimezone(ZoneInfo(timezone))
    return local.isoweekday() % 7, local.strftime("%H:%M")


class ReminderScheduler:
    """Service for order reminders and their periodic check."""

    def __init__(
        self,
        store: Store,
        notification_center: NotificationCenter,
        timezone: str = DEFAULT_TIMEZONE,
        poll_interval_seconds: int = DEFAULT_POLL_INTERVAL_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize reminder scheduler.

        Args:
            store: Store instance
            notification_center: Receives one notification per newly active reminder
            timezone: Timezone whose wall clock the reminder windows use
            poll_interval_seconds: Seconds between scheduled checks
            clock: Source of "now" for scheduled checks
        """
        self.store = store
        self.notification_center = notification_center
        self.timezone = timezone
        self.poll_interval_seconds = poll_interval_seconds
        self.clock = clock or (lambda: datetime.now(ZoneInfo(self.timezone)))

        self.logger = get_logger("reminder_scheduler")
        self.audit_logger = AuditLogger(store)

        self.scheduler: Optional[BackgroundScheduler] = None
        self.running = False

        # Guards running and _previous_active against the poll thread
        self._state_lock = threading.RLock()
        self._previous_active: Set[str] = set()
        self._listeners: List[ReminderListener] = []

    # Reminder records

    def list(self) -> List[Reminder]:
        """Get all reminders in stored order."""
        return decode_records(Reminder, self.store.read(REMINDERS))

    def get(self, reminder_id: str) -> Optional[Reminder]:
        """Get a reminder by ID, or None."""
        for reminder in self.list():
            if reminder.id == reminder_id:
                return reminder
        return None

    def create(
        self,
        title: str,
        days_of_week: List[int],
        start_time: str,
        end_time: str,
        description: str = "",
        active: bool = True,
        created_by: str = "",
    ) -> OperationResult:
        """
        Create a reminder.

        Args:
            title: Reminder title
            days_of_week: Weekdays, 0 = Sunday
            start_time: Window start, zero-padded HH:MM
            end_time: Window end, zero-padded HH:MM
            description: Text shown when the reminder fires
            active: Whether the reminder is enabled
            created_by: ID of the creating admin

        Returns:
            Result holding the new Reminder, or a validation failure
        """
        try:
            reminder = Reminder(
                title=title,
                description=description,
                days_of_week=days_of_week,
                start_time=start_time,
                end_time=end_time,
                active=active,
                created_by=created_by,
            )
        except ValidationError as e:
            return OperationResult.from_validation_error(e)

        with self.store.lock:
            records = self.store.read(REMINDERS)
            records.append(encode_record(reminder))
            self.store.write(REMINDERS, records)

        self.audit_logger.log_action(
            ActionType.REMINDER_CREATED,
            actor=Actor.ADMIN,
            details={"reminder_id": reminder.id, "title": reminder.title},
        )
        self.logger.info(
            f"Created reminder {reminder.title} ({reminder.id}): "
            f"{reminder.start_time}-{reminder.end_time} on {reminder.days_of_week}"
        )
        return OperationResult.ok(reminder)

    def update(self, reminder_id: str, updates: Dict[str, Any]) -> OperationResult:
        """
        Apply partial changes to a reminder.

        Returns:
            Result holding the updated Reminder, NOT_FOUND or a validation failure
        """
        with self.store.lock:
            reminders = self.list()
            for index, reminder in enumerate(reminders):
                if reminder.id != reminder_id:
                    continue

                data = reminder.model_dump()
                data.update({k: v for k, v in updates.items() if k not in IMMUTABLE_FIELDS})
                try:
                    updated = Reminder.model_validate(data)
                except ValidationError as e:
                    return OperationResult.from_validation_error(e)

                reminders[index] = updated
                self.store.write(REMINDERS, encode_records(reminders))
                break
            else:
                return OperationResult.fail(
                    ErrorKind.NOT_FOUND, f"Reminder {reminder_id} not found"
                )

        self.audit_logger.log_action(
            ActionType.REMINDER_UPDATED,
            actor=Actor.ADMIN,
            details={"reminder_id": reminder_id, "fields": sorted(updates)},
        )
        return OperationResult.ok(updated)

    def delete(self, reminder_id: str) -> bool:
        """
        Delete a reminder. Unknown IDs are ignored.

        Returns:
            True if a reminder was removed
        """
        with self.store.lock:
            reminders = self.list()
            remaining = [r for r in reminders if r.id != reminder_id]
            if len(remaining) == len(reminders):
                return False
            self.store.write(REMINDERS, encode_records(remaining))

        with self._state_lock:
            self._previous_active.discard(reminder_id)
        self.audit_logger.log_action(
            ActionType.REMINDER_DELETED,
            actor=Actor.ADMIN,
            details={"reminder_id": reminder_id},
        )
        return True

    # Evaluation

    def active_reminders(self, now: datetime, timezone: Optional[str] = None) -> List[Reminder]:
        """
        Get the reminders whose window contains a moment.

        A reminder is active when it is enabled, scheduled for the local
        weekday and start_time <= HH:MM <= end_time on the local clock.

        Args:
            now: Moment to evaluate
            timezone: Target timezone (defaults to the scheduler's)

        Returns:
            Active reminders in stored order
        """
        weekday, hhmm = local_weekday_and_time(now, timezone or self.timezone)
        return [r for r in self.list() if r.matches(weekday, hhmm)]

    def check_reminders(self, now: Optional[datetime] = None) -> List[Reminder]:
        """
        Fire reminders that became active since the previous check.

        Each newly active reminder creates exactly one order_reminder
        notification and is passed to the registered listeners. Reminders
        still active from the previous check are not fired again.

        Args:
            now: Moment to evaluate (defaults to the clock)

        Returns:
            The newly active reminders
        """
        now = now or self.clock()
        with self._state_lock:
            active = self.active_reminders(now)
            active_ids = {r.id for r in active}
            fired = [r for r in active if r.id not in self._previous_active]
            self._previous_active = active_ids

            for reminder in fired:
                self.notification_center.create(
                    NotificationKind.ORDER_REMINDER,
                    title=f"⏰ {reminder.title}",
                    message=reminder.description or DEFAULT_REMINDER_MESSAGE,
                    subject_ref=reminder.id,
                    data={"type": "reminder", "reminder_id": reminder.id},
                )
                self.audit_logger.log_action(
                    ActionType.REMINDER_FIRED,
                    actor=Actor.SYSTEM,
                    details={"reminder_id": reminder.id},
                )
                for listener in list(self._listeners):
                    listener(reminder)

        if fired:
            self.logger.info(f"{len(fired)} reminder(s) became active")
        return fired

    def add_listener(self, listener: ReminderListener) -> None:
        """Register a callback run for each newly active reminder."""
        self._listeners.append(listener)

    def remove_listener(self, listener: ReminderListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # Scheduling

    def start(self) -> None:
        """
        Start polling. Starting an already running scheduler does nothing.

        The first check runs immediately, then every poll interval.
        """
        with self._state_lock:
            if self.running:
                self.logger.warning("Reminder scheduler already running")
                return

            try:
                self.scheduler = BackgroundScheduler(
                    timezone=self.timezone,
                    daemon=True,  # Daemon thread won't prevent app shutdown
                )
                self.scheduler.add_job(
                    func=self._run_scheduled_check,
                    trigger=IntervalTrigger(seconds=self.poll_interval_seconds),
                    id=POLL_JOB_ID,
                    name="Order Reminder Poll",
                    replace_existing=True,
                    next_run_time=datetime.now(ZoneInfo(self.timezone)),
                )
                self.scheduler.start()
                self.running = True

                self.logger.info(
                    f"Reminder scheduler started, checking every {self.poll_interval_seconds}s"
                )

            except Exception as e:
                self.logger.error(f"Failed to start reminder scheduler: {e}")
                raise

    def stop(self) -> None:
        """Stop polling and forget which reminders were active."""
        with self._state_lock:
            if not self.running:
                return

            try:
                self.scheduler.shutdown(wait=False)
                self.logger.info("Reminder scheduler stopped")
            except Exception as e:
                self.logger.error(f"Failed to stop reminder scheduler: {e}")
            finally:
                self.scheduler = None
                self.running = False
                self._previous_active = set()

    def _run_scheduled_check(self) -> None:
        """Scheduled job body; a failing tick is logged and the next one still runs."""
        try:
            with self._state_lock:
                # A tick that raced stop() must not repopulate _previous_active
                if not self.running:
                    return
                self.check_reminders()
        except Exception as e:
            self.logger.error(f"Reminder check failed: {e}")

    def get_next_run_time(self) -> Optional[datetime]:
        """
        Get the next scheduled check time.

        Returns:
            Next run time or None if not running
        """
        if not self.running or self.scheduler is None:
            return None

        job = self.scheduler.get_job(POLL_JOB_ID)
        if job:
            return job.next_run_time
        return None

    def job_count(self) -> int:
        """Number of scheduled poll jobs (0 or 1)."""
        if self.scheduler is None:
            return 0
        return len(self.scheduler.get_jobs())
