"""
Settings service for the AppSettings singleton.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..database.codec import decode_record, encode_record
from ..database.store import SETTINGS, Store
from ..models import ActionType, Actor, AppSettings, OperationResult
from ..utils import AuditLogger, get_logger


class SettingsService:
    """Reads and overwrites the application settings record."""

    def __init__(self, store: Store, defaults: Optional[AppSettings] = None) -> None:
        """
        Initialize settings service.

        Args:
            store: Store instance
            defaults: Settings returned while nothing has been saved
        """
        self.store = store
        self.defaults = defaults or AppSettings()
        self.logger = get_logger("settings_service")
        self.audit_logger = AuditLogger(store)

    def get(self) -> AppSettings:
        """Get the stored settings, or the defaults."""
        records = self.store.read(SETTINGS)
        if not records:
            return self.defaults.model_copy()
        return decode_record(AppSettings, records[0])

    def is_initialized(self) -> bool:
        return bool(self.store.read(SETTINGS))

    def save(self, settings: AppSettings) -> AppSettings:
        """Overwrite the settings record."""
        self.store.write(SETTINGS, [encode_record(settings)])
        self.audit_logger.log_action(
            ActionType.SETTINGS_UPDATED,
            actor=Actor.ADMIN,
            details=settings.model_dump(),
        )
        self.logger.info("Settings saved")
        return settings

    def update(self, updates: Dict[str, Any]) -> OperationResult:
        """
        Merge partial changes into the current settings.

        Args:
            updates: Field values to change

        Returns:
            Result holding the saved AppSettings, or a validation failure
        """
        with self.store.lock:
            data = self.get().model_dump()
            data.update(updates)
            try:
                settings = AppSettings.model_validate(data)
            except ValidationError as e:
                return OperationResult.from_validation_error(e)
            return OperationResult.ok(self.save(settings))
