"""
User account data models.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Role(str, Enum):
    """Account role."""
    ADMIN = "admin"
    USER = "user"


class ApprovalStatus(str, Enum):
    """Account approval state."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class User(BaseModel):
    """Public view of an account. Never carries credentials."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    email: str = Field(..., min_length=3, max_length=254)
    name: str = Field(..., min_length=1, max_length=200)
    role: Role = Field(default=Role.USER)
    status: ApprovalStatus = Field(default=ApprovalStatus.PENDING)
    created_at: datetime = Field(default_factory=datetime.now)
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Basic shape check; uniqueness is enforced by the directory."""
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("must be an email address")
        return v

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def can_authenticate(self) -> bool:
        """Admins may always log in; everyone else only once approved."""
        return self.is_admin or self.status == ApprovalStatus.APPROVED


class StoredUser(User):
    """Account as persisted, including the password hash and salt (hex)."""

    password_hash: str
    password_salt: str

    def to_public(self) -> User:
        """Strip credentials."""
        return User.model_validate(self.model_dump(exclude={"password_hash", "password_salt"}))
