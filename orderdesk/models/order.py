"""
Order data models.

Defines supplier orders and their line items.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OrderStatus(str, Enum):
    """Order status enumeration."""
    PENDING = "pending"
    SENT = "sent"
    DELIVERED = "delivered"


class OrderItem(BaseModel):
    """A single order line, priced at submission time."""

    name: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0.0)
    unit: str
    price: float = Field(..., ge=0.0)  # unit price captured when the order was made

    def line_total(self) -> float:
        """Calculate total price for this line."""
        return self.quantity * self.price


class Order(BaseModel):
    """Represents an order sent to a supplier."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "2",
                "user_name": "Usuario Demo",
                "items": [
                    {"name": "Tomates", "quantity": 3, "unit": "kg", "price": 2500}
                ],
                "total": 7500,
                "status": "pending",
                "supplier_email": "proveedor@ejemplo.com",
            }
        }
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    user_name: str
    created_at: datetime = Field(default_factory=datetime.now)
    items: List[OrderItem]
    total: float = Field(default=0.0, ge=0.0)
    status: OrderStatus = Field(default=OrderStatus.PENDING)
    supplier_email: str = ""
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("items")
    @classmethod
    def validate_items_not_empty(cls, v: List[OrderItem]) -> List[OrderItem]:
        """Ensure order has at least one item."""
        if len(v) == 0:
            raise ValueError("Order must have at least one item")
        return v

    def calculate_total(self) -> float:
        """Calculate total cost of all items."""
        return sum(item.line_total() for item in self.items)

    def get_total_quantity(self) -> float:
        """Get total quantity across all items."""
        return sum(item.quantity for item in self.items)


class OrderStats(BaseModel):
    """Order counters for the dashboard."""

    total_orders: int = 0
    this_month_orders: int = 0
