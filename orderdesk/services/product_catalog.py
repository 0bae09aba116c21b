"""
Product catalog service.

Handles product CRUD, bulk import and the day-of-week suggested quantity
rule.
"""

import math
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..database.codec import decode_records, encode_record, encode_records
from ..database.store import PRODUCTS, Store
from ..models import (
    ActionType,
    Actor,
    DeliveryWindow,
    ErrorKind,
    OperationResult,
    Product,
    RowError,
)
from ..models.results import validation_messages
from ..utils import AuditLogger, get_logger

DEFAULT_CATEGORIES = ["Verduras", "Frutas", "Panadería", "Lácteos", "Carnes", "Pescados", "Otros"]

WINDOW_LABELS = {
    DeliveryWindow.WINDOW_A: "Dom-Mié",
    DeliveryWindow.WINDOW_B: "Jueves",
    DeliveryWindow.WINDOW_C: "Viernes",
}

QUANTITY_FIELDS = {
    "qty_window_a": "Dom-Mié",
    "qty_window_b": "Jueves",
    "qty_window_c": "Viernes",
}

# Fields a partial update may not overwrite
IMMUTABLE_FIELDS = {"id", "created_at"}


def delivery_window_for(on: date) -> DeliveryWindow:
    """
    Map a calendar day to its supplier delivery window.

    Sunday to Wednesday use window A, Thursday window B, Friday window C
    and Saturday falls back to window A.

    Args:
        on: Date (or datetime) to classify

    Returns:
        DeliveryWindow for that weekday
    """
    day = on.isoweekday() % 7  # 0 = Sunday

    if 0 <= day <= 3:
        return DeliveryWindow.WINDOW_A
    if day == 4:
        return DeliveryWindow.WINDOW_B
    if day == 5:
        return DeliveryWindow.WINDOW_C
    return DeliveryWindow.WINDOW_A


def _to_number(value: Any) -> Optional[float]:
    """Parse a numeric cell; None when it is not a finite number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def validate_product_row(row: Dict[str, Any]) -> List[str]:
    """
    Validate one bulk-import row.

    Args:
        row: Row with canonical keys (name, unit, category, price,
            qty_window_a, qty_window_b, qty_window_c)

    Returns:
        Human-readable messages; empty when the row is valid
    """
    errors = []

    if _is_blank(row.get("name")):
        errors.append("El nombre del producto es requerido")

    if _is_blank(row.get("unit")):
        errors.append("La unidad es requerida")

    if _is_blank(row.get("category")):
        errors.append("La categoría es requerida")

    # Price is optional in bulk uploads; when present it must be positive.
    if not _is_blank(row.get("price")):
        price = _to_number(row.get("price"))
        if price is None or price <= 0:
            errors.append("El precio debe ser un número mayor a 0")

    for field, label in QUANTITY_FIELDS.items():
        if _is_blank(row.get(field)):
            continue
        quantity = _to_number(row.get(field))
        if quantity is None or quantity < 0:
            errors.append(f"La cantidad {label} debe ser un número mayor o igual a 0")

    return errors


class ProductCatalog:
    """Service for managing catalog products."""

    def __init__(self, store: Store) -> None:
        """
        Initialize product catalog.

        Args:
            store: Store instance
        """
        self.store = store
        self.logger = get_logger("product_catalog")
        self.audit_logger = AuditLogger(store)

    def list(self) -> List[Product]:
        """
        Get all products in stored order.

        Returns:
            List of Products
        """
        return decode_records(Product, self.store.read(PRODUCTS))

    def get(self, product_id: str) -> Optional[Product]:
        """Get a product by ID, or None."""
        for product in self.list():
            if product.id == product_id:
                return product
        return None

    def create(
        self,
        name: str,
        unit: str,
        category: str,
        price: float = 0.0,
        qty_window_a: float = 0.0,
        qty_window_b: float = 0.0,
        qty_window_c: float = 0.0,
        created_by: Optional[str] = None,
    ) -> OperationResult:
        """
        Create a product.

        Returns:
            Result holding the new Product, or a validation failure
        """
        try:
            product = Product(
                name=name,
                unit=unit,
                category=category,
                price=price,
                qty_window_a=qty_window_a,
                qty_window_b=qty_window_b,
                qty_window_c=qty_window_c,
                created_by=created_by,
            )
        except ValidationError as e:
            return OperationResult.from_validation_error(e)

        with self.store.lock:
            records = self.store.read(PRODUCTS)
            records.append(encode_record(product))
            self.store.write(PRODUCTS, records)

        self.audit_logger.log_action(
            ActionType.PRODUCT_CREATED,
            actor=Actor.ADMIN,
            details={"product_id": product.id, "name": product.name},
        )
        self.logger.info(f"Created product: {product.name} ({product.id})")
        return OperationResult.ok(product)

    def update(self, product_id: str, updates: Dict[str, Any]) -> OperationResult:
        """
        Apply partial changes to a product.

        Args:
            product_id: Product ID
            updates: Field values to change

        Returns:
            Result holding the updated Product, NOT_FOUND or a validation failure
        """
        with self.store.lock:
            products = self.list()
            for index, product in enumerate(products):
                if product.id != product_id:
                    continue

                data = product.model_dump()
                data.update({k: v for k, v in updates.items() if k not in IMMUTABLE_FIELDS})
                try:
                    updated = Product.model_validate(data)
                except ValidationError as e:
                    return OperationResult.from_validation_error(e)

                products[index] = updated
                self.store.write(PRODUCTS, encode_records(products))

                self.audit_logger.log_action(
                    ActionType.PRODUCT_UPDATED,
                    actor=Actor.ADMIN,
                    details={"product_id": product_id, "fields": sorted(updates)},
                )
                self.logger.info(f"Updated product: {updated.name} ({product_id})")
                return OperationResult.ok(updated)

            return OperationResult.fail(ErrorKind.NOT_FOUND, f"Product {product_id} not found")

    def delete(self, product_id: str) -> bool:
        """
        Delete a product. Unknown IDs are ignored.

        Returns:
            True if a product was removed
        """
        with self.store.lock:
            products = self.list()
            remaining = [p for p in products if p.id != product_id]
            if len(remaining) == len(products):
                return False
            self.store.write(PRODUCTS, encode_records(remaining))

        self.audit_logger.log_action(
            ActionType.PRODUCT_DELETED,
            actor=Actor.ADMIN,
            details={"product_id": product_id},
        )
        self.logger.info(f"Deleted product {product_id}")
        return True

    def bulk_create(
        self,
        rows: List[Dict[str, Any]],
        created_by: Optional[str] = None
    ) -> OperationResult:
        """
        Create many products at once, all or nothing.

        Every row is validated independently first; if any row fails, the
        collected row errors are returned and nothing is stored.

        Args:
            rows: Rows with canonical keys (see validate_product_row)
            created_by: ID of the importing user

        Returns:
            Result holding the new Products, or a validation failure with
            per-row errors
        """
        row_errors = []
        new_products = []
        for index, row in enumerate(rows):
            messages = validate_product_row(row)
            if not messages:
                try:
                    new_products.append(self._product_from_row(row, created_by))
                except ValidationError as e:
                    messages = validation_messages(e)
            if messages:
                row_errors.append(RowError(row_index=index, messages=messages))

        if row_errors:
            readable = [error.to_readable_string() for error in row_errors]
            self.logger.warning(f"Bulk import rejected: {len(row_errors)} invalid row(s)")
            return OperationResult.fail(
                ErrorKind.VALIDATION,
                f"{len(row_errors)} fila(s) con errores",
                messages=readable,
                row_errors=row_errors,
            )

        with self.store.lock:
            records = self.store.read(PRODUCTS)
            records.extend(encode_records(new_products))
            self.store.write(PRODUCTS, records)

        self.audit_logger.log_action(
            ActionType.PRODUCT_BULK_IMPORT,
            actor=Actor.ADMIN,
            details={"count": len(new_products)},
        )
        self.logger.info(f"Bulk imported {len(new_products)} product(s)")
        return OperationResult.ok(new_products)

    @staticmethod
    def _product_from_row(row: Dict[str, Any], created_by: Optional[str]) -> Product:
        return Product(
            name=str(row["name"]),
            unit=str(row["unit"]),
            category=str(row["category"]),
            price=_to_number(row.get("price")) or 0.0,
            qty_window_a=_to_number(row.get("qty_window_a")) or 0.0,
            qty_window_b=_to_number(row.get("qty_window_b")) or 0.0,
            qty_window_c=_to_number(row.get("qty_window_c")) or 0.0,
            created_by=created_by,
        )

    def get_suggested_quantity(self, product: Product, on: date) -> float:
        """
        Get the suggested order quantity of a product for a day.

        Args:
            product: Catalog product
            on: Date (or datetime) of the order

        Returns:
            The product's quantity for that day's delivery window
        """
        return product.quantity_for(delivery_window_for(on))

    def suggested_window_label(self, on: date) -> str:
        """Get the display label of a day's delivery window."""
        return WINDOW_LABELS[delivery_window_for(on)]

    def categories(self) -> List[str]:
        """Default categories followed by any others in use."""
        seen = list(DEFAULT_CATEGORIES)
        for product in self.list():
            if product.category not in seen:
                seen.append(product.category)
        return seen

    def search(self, term: str = "", category: str = "all") -> List[Product]:
        """
        Filter products by name substring and category.

        Args:
            term: Case-insensitive substring of the name
            category: Category name, or "all"
        """
        term = term.lower()
        return [
            p for p in self.list()
            if term in p.name.lower() and (category == "all" or p.category == category)
        ]
