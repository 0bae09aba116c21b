"""
Operation result models.

Domain operations never raise for expected failures; they return an
OperationResult that the caller can render.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError


class ErrorKind(str, Enum):
    """Failure reasons surfaced by domain operations."""
    VALIDATION = "validation_error"
    DUPLICATE_EMAIL = "duplicate_email"
    EMPTY_ORDER = "empty_order"
    NOT_FOUND = "not_found"
    PARSE_FAILURE = "parse_failure"
    INVALID_CREDENTIALS = "invalid_credentials"
    PERMISSION_DENIED = "permission_denied"


class RowError(BaseModel):
    """Validation messages for a single bulk-import row."""

    row_index: int = Field(..., ge=0)  # 0-based, header excluded
    messages: List[str] = Field(default_factory=list)

    def to_readable_string(self) -> str:
        """Format as 'Fila <n>: msg, msg' where the header is row 1."""
        return f"Fila {self.row_index + 2}: {', '.join(self.messages)}"


class OperationResult(BaseModel):
    """
    Result of a domain operation.

    Contains either the produced value or the reason the mutation was
    rejected.
    """

    success: bool
    value: Optional[Any] = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None
    messages: List[str] = Field(default_factory=list)
    row_errors: List[RowError] = Field(default_factory=list)

    @classmethod
    def ok(cls, value: Any = None) -> "OperationResult":
        """Build a successful result."""
        return cls(success=True, value=value)

    @classmethod
    def fail(
        cls,
        error: ErrorKind,
        message: str,
        messages: Optional[List[str]] = None,
        row_errors: Optional[List[RowError]] = None,
    ) -> "OperationResult":
        """Build a failed result."""
        return cls(
            success=False,
            error=error,
            message=message,
            messages=messages or [message],
            row_errors=row_errors or [],
        )

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "OperationResult":
        """Convert a pydantic ValidationError into a failed result."""
        messages = validation_messages(exc)
        return cls.fail(ErrorKind.VALIDATION, "; ".join(messages), messages=messages)


def validation_messages(exc: ValidationError) -> List[str]:
    """
    Flatten a pydantic ValidationError into readable messages.

    Args:
        exc: Validation error raised by a model

    Returns:
        One message per failing field
    """
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "__root__")
        text = err.get("msg", "invalid value")
        messages.append(f"{location}: {text}" if location else text)
    return messages
