"""
Logging infrastructure for OrderDesk.

Provides rotating file and console logging plus an audit trail kept in the
store's audit_log collection.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config.config_manager import get_config_manager
from ..models.audit_log import ActionType, Actor, AuditLog, Outcome

ROOT_LOGGER_NAME = "orderdesk"
AUDIT_COLLECTION = "audit_log"
DEFAULT_AUDIT_MAX_ENTRIES = 1000


class OrderDeskLogger:
    """
    Application logger.

    Configures the root "orderdesk" logger with file and console handlers;
    components log through named children of it.
    """

    def __init__(
        self,
        name: str = ROOT_LOGGER_NAME,
        log_dir: str = "logs",
        log_file: str = "orderdesk.log"
    ) -> None:
        """
        Initialize logger.

        Args:
            name: Logger name
            log_dir: Directory for log files
            log_file: Log file name
        """
        self.name = name
        self.log_dir = Path(log_dir)
        self.log_file = self.log_dir / log_file

        self.log_dir.mkdir(parents=True, exist_ok=True)

        config = get_config_manager()
        self.log_level = config.get("logging.level", "INFO")
        self.max_file_size_mb = config.get("logging.max_file_size_mb", 10)
        self.backup_count = config.get("logging.backup_count", 5)

        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        # Remove existing handlers
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers.clear()

        self.file_formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        self.console_formatter = logging.Formatter(
            fmt='%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        self._setup_file_handler()
        self._setup_console_handler()

    def _setup_file_handler(self) -> None:
        """Set up rotating file handler."""
        max_bytes = self.max_file_size_mb * 1024 * 1024

        file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=max_bytes,
            backupCount=self.backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)  # File gets all logs
        file_handler.setFormatter(self.file_formatter)

        self.logger.addHandler(file_handler)

    def _setup_console_handler(self) -> None:
        """Set up console handler."""
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, self.log_level))
        console_handler.setFormatter(self.console_formatter)

        self.logger.addHandler(console_handler)

    def get_child(self, name: str) -> logging.Logger:
        """Get a component logger below the application logger."""
        if name == self.name:
            return self.logger
        return self.logger.getChild(name)

    def close(self) -> None:
        """Close and detach all handlers."""
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers.clear()


class AuditLogger:
    """
    Audit logger that appends to the audit_log collection.

    Every entry is also written to the application log. The collection
    keeps only the newest entries; older ones survive in the rotating log
    file.
    """

    def __init__(self, store=None, max_entries: Optional[int] = None) -> None:
        """
        Initialize audit logger.

        Args:
            store: Store instance (optional; file logging only without it)
            max_entries: Entries kept in the collection (defaults to
                logging.audit_max_entries)
        """
        self.store = store
        if max_entries is None:
            max_entries = get_config_manager().get(
                "logging.audit_max_entries", DEFAULT_AUDIT_MAX_ENTRIES
            )
        self.max_entries = max(1, int(max_entries))
        self.file_logger = get_logger("audit")

    def log_action(
        self,
        action_type: ActionType,
        actor: Actor = Actor.USER,
        details: Optional[Dict[str, Any]] = None,
        outcome: Outcome = Outcome.SUCCESS,
        error_message: Optional[str] = None
    ) -> AuditLog:
        """
        Log an action to the audit trail.

        Args:
            action_type: Type of action
            actor: Who performed the action
            details: Additional details
            outcome: Action outcome
            error_message: Error message if failed

        Returns:
            The recorded entry
        """
        entry = AuditLog(
            action_type=action_type,
            actor=actor,
            details=details or {},
            outcome=outcome,
            error_message=error_message,
        )

        self.file_logger.info(
            f"AUDIT: {entry.action_type.value} by {entry.actor.value} - {entry.outcome.value}"
        )

        if self.store is not None:
            with self.store.lock:
                records = self.store.read(AUDIT_COLLECTION)
                records.append(entry.model_dump(mode="json"))
                self.store.write(AUDIT_COLLECTION, records[-self.max_entries:])

        return entry

    def get_recent_logs(self, limit: int = 100) -> List[AuditLog]:
        """
        Get recent audit entries, newest first.

        Args:
            limit: Maximum number of entries to return
        """
        return self._load_entries()[:limit]

    def get_logs_by_action_type(self, action_type: ActionType, limit: int = 100) -> List[AuditLog]:
        """Get recent audit entries of one action type, newest first."""
        entries = [e for e in self._load_entries() if e.action_type == action_type]
        return entries[:limit]

    def _load_entries(self) -> List[AuditLog]:
        if self.store is None:
            return []
        entries = [AuditLog.model_validate(r) for r in self.store.read(AUDIT_COLLECTION)]
        entries.reverse()
        return entries


# Global logger instance
_logger: Optional[OrderDeskLogger] = None


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get application logger.

    Args:
        name: Optional component name (defaults to the application logger)

    Returns:
        Logger instance
    """
    global _logger
    if _logger is None:
        _logger = OrderDeskLogger(ROOT_LOGGER_NAME)
    return _logger.get_child(name or ROOT_LOGGER_NAME)


def reset_loggers() -> None:
    """Reset global logger instances (mainly for testing)."""
    global _logger
    if _logger is not None:
        _logger.close()
    _logger = None
