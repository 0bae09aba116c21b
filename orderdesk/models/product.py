"""
Product catalog data models.

Each product carries a suggested quantity per supplier delivery window.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DeliveryWindow(str, Enum):
    """Supplier delivery cadences."""
    WINDOW_A = "window_a"  # Sunday to Wednesday, and Saturday
    WINDOW_B = "window_b"  # Thursday
    WINDOW_C = "window_c"  # Friday


class Product(BaseModel):
    """Represents a catalog product."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Tomates",
                "unit": "kg",
                "category": "Verduras",
                "price": 2500,
                "qty_window_a": 5,
                "qty_window_b": 8,
                "qty_window_c": 10,
            }
        }
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = Field(..., min_length=1, max_length=200)
    unit: str = Field(..., min_length=1, max_length=50)
    category: str = Field(..., min_length=1, max_length=100)
    price: float = Field(default=0.0, ge=0.0)
    qty_window_a: float = Field(default=0.0, ge=0.0)
    qty_window_b: float = Field(default=0.0, ge=0.0)
    qty_window_c: float = Field(default=0.0, ge=0.0)
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("name", "unit", "category")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject whitespace-only labels."""
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    def quantity_for(self, window: DeliveryWindow) -> float:
        """Get the suggested quantity for a delivery window."""
        if window == DeliveryWindow.WINDOW_B:
            return self.qty_window_b
        if window == DeliveryWindow.WINDOW_C:
            return self.qty_window_c
        return self.qty_window_a
