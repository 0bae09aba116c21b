"""
Order workflow service.

Handles order submission with price snapshotting, status changes, per-user
visibility and order counters.
"""

import math
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import ValidationError

from ..database.codec import decode_records, encode_record, encode_records
from ..database.store import ORDERS, Store
from ..models import (
    ActionType,
    Actor,
    ErrorKind,
    OperationResult,
    Order,
    OrderItem,
    OrderStats,
    OrderStatus,
    User,
)
from ..utils import AuditLogger, get_logger
from .product_catalog import ProductCatalog
from .settings_service import SettingsService


class OrderWorkflow:
    """Service for submitting and tracking supplier orders."""

    def __init__(
        self,
        store: Store,
        catalog: ProductCatalog,
        settings_service: Optional[SettingsService] = None
    ) -> None:
        """
        Initialize order workflow.

        Args:
            store: Store instance
            catalog: Catalog the order lines are priced from
            settings_service: Source of the default supplier email
        """
        self.store = store
        self.catalog = catalog
        self.settings_service = settings_service
        self.logger = get_logger("order_workflow")
        self.audit_logger = AuditLogger(store)

    def submit(
        self,
        user_id: str,
        user_name: str,
        items: Dict[str, float],
        supplier_email: str = "",
        notes: Optional[str] = None,
    ) -> OperationResult:
        """
        Submit a new order.

        Lines copy the product's current name, unit and price, so later
        catalog edits never change a stored order.

        Args:
            user_id: ID of the ordering user
            user_name: Display name stored with the order
            items: Requested quantity per product ID; zero quantities are dropped
            supplier_email: Destination email (settings default when empty)
            notes: Free-text remarks for the supplier

        Returns:
            Result holding the stored Order, or EMPTY_ORDER, NOT_FOUND or a
            validation failure
        """
        invalid = [
            pid for pid, qty in items.items()
            if isinstance(qty, bool) or not isinstance(qty, (int, float)) or not math.isfinite(qty)
        ]
        if invalid:
            return OperationResult.fail(
                ErrorKind.VALIDATION,
                "Las cantidades deben ser números válidos",
            )

        requested = {pid: qty for pid, qty in items.items() if qty != 0}

        negative = [pid for pid, qty in requested.items() if qty < 0]
        if negative:
            return OperationResult.fail(
                ErrorKind.VALIDATION,
                "Las cantidades no pueden ser negativas",
            )

        if not requested:
            self.logger.info(f"Rejected empty order from {user_name}")
            return OperationResult.fail(ErrorKind.EMPTY_ORDER, "El pedido no tiene productos")

        products = {p.id: p for p in self.catalog.list()}
        missing = [pid for pid in requested if pid not in products]
        if missing:
            return OperationResult.fail(ErrorKind.NOT_FOUND, f"Product {missing[0]} not found")

        if not supplier_email and self.settings_service is not None:
            supplier_email = self.settings_service.get().default_supplier_email

        try:
            order_items = [
                OrderItem(
                    name=products[product_id].name,
                    quantity=quantity,
                    unit=products[product_id].unit,
                    price=products[product_id].price,
                )
                for product_id, quantity in requested.items()
            ]
            order = Order(
                user_id=user_id,
                user_name=user_name,
                items=order_items,
                supplier_email=supplier_email,
                notes=notes or None,
            )
        except ValidationError as e:
            return OperationResult.from_validation_error(e)
        order.total = order.calculate_total()

        # Newest first
        with self.store.lock:
            records = self.store.read(ORDERS)
            records.insert(0, encode_record(order))
            self.store.write(ORDERS, records)

        self.audit_logger.log_action(
            ActionType.ORDER_SUBMITTED,
            actor=Actor.USER,
            details={
                "order_id": order.id,
                "user_id": user_id,
                "total": order.total,
                "item_count": len(order.items),
            },
        )
        self.logger.info(f"Order {order.id} submitted by {user_name}: total {order.total}")
        return OperationResult.ok(order)

    def get(self, order_id: str) -> Optional[Order]:
        """Get an order by ID, or None."""
        for order in self.list_all():
            if order.id == order_id:
                return order
        return None

    def list_all(self) -> List[Order]:
        """Get every order, newest first."""
        return decode_records(Order, self.store.read(ORDERS))

    def list_for(self, user: User) -> List[Order]:
        """
        Get the orders visible to a user, newest first.

        Admins see every order; other users only their own.
        """
        orders = self.list_all()
        if user.is_admin:
            return orders
        return [o for o in orders if o.user_id == user.id]

    def set_status(self, order_id: str, status: OrderStatus) -> OperationResult:
        """
        Move an order to any status.

        Transitions are unrestricted; the admin-only rule is enforced by
        the caller.

        Returns:
            Result holding the updated Order, NOT_FOUND or a validation failure
        """
        try:
            new_status = OrderStatus(status)
        except ValueError:
            return OperationResult.fail(ErrorKind.VALIDATION, f"Unknown order status: {status}")

        with self.store.lock:
            orders = self.list_all()
            for order in orders:
                if order.id != order_id:
                    continue

                previous = order.status
                order.status = new_status
                self.store.write(ORDERS, encode_records(orders))

                self.audit_logger.log_action(
                    ActionType.ORDER_STATUS_CHANGED,
                    actor=Actor.ADMIN,
                    details={
                        "order_id": order_id,
                        "from": previous.value,
                        "to": order.status.value,
                    },
                )
                self.logger.info(f"Order {order_id} status {previous.value} -> {order.status.value}")
                return OperationResult.ok(order)

            return OperationResult.fail(ErrorKind.NOT_FOUND, f"Order {order_id} not found")

    def stats_for(self, user: User, now: Optional[datetime] = None) -> OrderStats:
        """
        Count the orders visible to a user.

        Args:
            user: Viewing user
            now: Reference time for the current month (defaults to now)

        Returns:
            Total count and count created in the current calendar month
        """
        now = now or datetime.now()
        orders = self.list_for(user)
        this_month = [
            o for o in orders
            if o.created_at.year == now.year and o.created_at.month == now.month
        ]
        return OrderStats(total_orders=len(orders), this_month_orders=len(this_month))
