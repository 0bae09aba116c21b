"""
Order reminder data models.

Reminders open a weekly time window during which users are prompted to
place their order.
"""

import re
import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

# 0 = Sunday
WEEKDAY_NAMES = ["Domingo", "Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado"]


class Reminder(BaseModel):
    """Represents a recurring order reminder."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Pedido de verduras",
                "description": "Es hora de hacer tu pedido",
                "days_of_week": [1, 3],
                "start_time": "09:00",
                "end_time": "10:00",
                "active": True,
            }
        }
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=1000)
    days_of_week: List[int] = Field(default_factory=list)
    start_time: str = "09:00"
    end_time: str = "10:00"
    active: bool = True
    created_by: str = ""
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("days_of_week")
    @classmethod
    def validate_days(cls, v: List[int]) -> List[int]:
        """Days are 0 (Sunday) to 6 (Saturday); duplicates collapse."""
        for day in v:
            if day < 0 or day > 6:
                raise ValueError(f"weekday {day} is out of range 0-6")
        return sorted(set(v))

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Times must be zero-padded 24h HH:MM so they compare as strings."""
        if not TIME_PATTERN.match(v):
            raise ValueError("must be a zero-padded HH:MM time")
        return v

    @model_validator(mode="after")
    def validate_active_has_days(self) -> "Reminder":
        """An active reminder needs at least one weekday."""
        if self.active and not self.days_of_week:
            raise ValueError("an active reminder needs at least one weekday")
        return self

    def matches(self, weekday: int, hhmm: str) -> bool:
        """
        Check whether the reminder window contains a local weekday and time.

        Args:
            weekday: Local weekday, 0 = Sunday
            hhmm: Local wall-clock time as HH:MM

        Returns:
            True if active, scheduled for the weekday and within
            [start_time, end_time] inclusive
        """
        if not self.active:
            return False
        if weekday not in self.days_of_week:
            return False
        # A window with end_time < start_time never matches.
        return self.start_time <= hhmm <= self.end_time

    def day_names(self) -> List[str]:
        """Get the Spanish names of the scheduled weekdays."""
        return [WEEKDAY_NAMES[day] for day in self.days_of_week]
