#!/usr/bin/env python3
"""
Main entry point for OrderDesk.

Builds the store and services from configuration and owns the login
session, including the reminder poll that runs while a user is logged in.
"""

import argparse
import sys
from typing import List, Optional

from .config import ConfigManager, get_config_manager
from .database.seed import seed_defaults
from .database.store import Store, create_store
from .models import (
    ActionType,
    Actor,
    AppSettings,
    ErrorKind,
    OperationResult,
    Order,
    OrderStatus,
    Reminder,
    User,
)
from .services import (
    NotificationCenter,
    OrderWorkflow,
    ProductCatalog,
    ReminderScheduler,
    SettingsService,
    UserDirectory,
    build_mailto_link,
    format_order_text,
)
from .utils import AuditLogger, generate_encryption_key, get_logger


class OrderDeskApplication:
    """Main application controller."""

    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        store: Optional[Store] = None
    ) -> None:
        """
        Initialize the application.

        Args:
            config: Configuration (defaults to the global manager)
            store: Store to use instead of the configured one
        """
        self.config = config or get_config_manager()
        self.logger = get_logger("app")

        self.store = store or self._create_store()
        self.audit_logger = AuditLogger(
            self.store, max_entries=self.config.get("logging.audit_max_entries")
        )

        self.default_settings = AppSettings(
            default_supplier_email=self.config.get("defaults.supplier_email", ""),
            company_name=self.config.get("defaults.company_name", ""),
            currency=self.config.get("defaults.currency", "ARS"),
        )

        self.notifications = NotificationCenter(self.store)
        self.settings = SettingsService(self.store, self.default_settings)
        self.catalog = ProductCatalog(self.store)
        self.orders = OrderWorkflow(self.store, self.catalog, self.settings)
        self.users = UserDirectory(self.store, self.notifications)
        self.reminders = ReminderScheduler(
            self.store,
            self.notifications,
            timezone=self.config.get("reminders.timezone", "America/Argentina/Buenos_Aires"),
            poll_interval_seconds=self.config.get("reminders.poll_interval_seconds", 60),
        )

        self.current_user: Optional[User] = None

    def _create_store(self) -> Store:
        """Create the store configured under 'database'."""
        backend = self.config.get("database.backend", "sqlite")
        db_path = self.config.get("database.path", "data/orderdesk.db")

        encryption_key = None
        if self.config.get("database.encrypted", False):
            encryption_key = self.config.get_database_encryption_key()
            if encryption_key is None:
                encryption_key = generate_encryption_key().decode("utf-8")
                self.config.set_database_encryption_key(encryption_key)
                self.logger.info("Generated database encryption key")

        self.logger.info(f"Using {backend} store at {db_path}")
        return create_store(backend, db_path, encryption_key)

    def initialize(self) -> dict:
        """
        Seed first-run data.

        Returns:
            Number of records written per collection
        """
        written = seed_defaults(
            self.store,
            self.default_settings,
            demo_data=self.config.get("defaults.seed_demo_data", True),
        )
        self.audit_logger.log_action(
            ActionType.SYSTEM_STARTUP,
            actor=Actor.SYSTEM,
            details={"seeded": written},
        )
        return written

    # Session

    def login(self, email: str, password: str) -> OperationResult:
        """
        Authenticate and open a session.

        Starts the reminder poll; logging in again while a session is open
        keeps the single running poll.
        """
        result = self.users.authenticate(email, password)
        if not result.success:
            return result

        self.current_user = result.value
        self.reminders.start()
        self.logger.info(f"User {self.current_user.id} logged in")
        return result

    def logout(self) -> None:
        """Close the session and stop the reminder poll."""
        if self.current_user is not None:
            self.audit_logger.log_action(
                ActionType.USER_LOGOUT,
                actor=Actor.ADMIN if self.current_user.is_admin else Actor.USER,
                details={"user_id": self.current_user.id},
            )
            self.logger.info(f"User {self.current_user.id} logged out")
        self.current_user = None
        self.reminders.stop()

    @property
    def is_logged_in(self) -> bool:
        return self.current_user is not None

    def _require_admin(self) -> Optional[OperationResult]:
        if self.current_user is None or not self.current_user.is_admin:
            return OperationResult.fail(
                ErrorKind.PERMISSION_DENIED, "Solo un administrador puede hacer esto"
            )
        return None

    # Session-scoped operations

    def submit_order(self, items: dict, supplier_email: str = "", notes: str = "") -> OperationResult:
        """Submit an order as the logged-in user."""
        if self.current_user is None:
            return OperationResult.fail(ErrorKind.PERMISSION_DENIED, "Debe iniciar sesión")
        return self.orders.submit(
            self.current_user.id,
            self.current_user.name,
            items,
            supplier_email=supplier_email,
            notes=notes,
        )

    def update_order_status(self, order_id: str, status: OrderStatus) -> OperationResult:
        """Change an order's status; admins only."""
        denied = self._require_admin()
        if denied is not None:
            return denied
        return self.orders.set_status(order_id, status)

    def approve_user(self, user_id: str) -> OperationResult:
        """Approve a pending account; admins only."""
        denied = self._require_admin()
        if denied is not None:
            return denied
        return self.users.approve(user_id, self.current_user.id)

    def reject_user(self, user_id: str) -> OperationResult:
        """Reject a pending account; admins only."""
        denied = self._require_admin()
        if denied is not None:
            return denied
        return self.users.reject(user_id)

    def visible_orders(self) -> list:
        """Orders the logged-in user may see, newest first."""
        if self.current_user is None:
            return []
        return self.orders.list_for(self.current_user)

    def _visible_order(self, order_id: str) -> Optional[Order]:
        for order in self.visible_orders():
            if order.id == order_id:
                return order
        return None

    def order_text(self, order_id: str) -> OperationResult:
        """Shareable summary text of a visible order."""
        order = self._visible_order(order_id)
        if order is None:
            return OperationResult.fail(ErrorKind.NOT_FOUND, f"Order {order_id} not found")
        return OperationResult.ok(format_order_text(order, self.reminders.timezone))

    def order_mailto(self, order_id: str) -> OperationResult:
        """mailto link that hands a visible order to the user's mail client."""
        order = self._visible_order(order_id)
        if order is None:
            return OperationResult.fail(ErrorKind.NOT_FOUND, f"Order {order_id} not found")
        return OperationResult.ok(
            build_mailto_link(
                order,
                company_name=self.settings.get().company_name,
                timezone=self.reminders.timezone,
            )
        )

    def active_reminders(self) -> List[Reminder]:
        """Reminders active right now in the configured timezone."""
        return self.reminders.active_reminders(self.reminders.clock())

    def shutdown(self) -> None:
        """Stop background work and release the store."""
        self.logout()
        self.audit_logger.log_action(ActionType.SYSTEM_SHUTDOWN, actor=Actor.SYSTEM)
        self.store.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Initialize the configured database and seed default data."""
    parser = argparse.ArgumentParser(description="Initialize the OrderDesk database")
    parser.add_argument("--db-path", help="Database file (overrides configuration)")
    parser.add_argument("--no-demo", action="store_true", help="Seed only the admin and settings")
    args = parser.parse_args(argv)

    config = get_config_manager()
    if args.db_path:
        config.set("database.path", args.db_path, save=False)
    if args.no_demo:
        config.set("defaults.seed_demo_data", False, save=False)

    logger = get_logger("init_db")
    logger.info("=" * 60)
    logger.info("OrderDesk Database Initialization")
    logger.info("=" * 60)

    app = OrderDeskApplication(config)
    written = app.initialize()
    if written:
        for collection, count in written.items():
            logger.info(f"  {collection}: {count} record(s)")
    else:
        logger.info("Database already initialized, nothing seeded")

    app.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
