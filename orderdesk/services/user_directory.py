"""
User directory service.

Owns user accounts, the approval state machine and authentication.
Passwords are stored only as PBKDF2 hashes.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError

from ..database.codec import decode_records, encode_records
from ..database.store import USERS, Store
from ..models import (
    ActionType,
    Actor,
    ApprovalStatus,
    ErrorKind,
    NotificationKind,
    OperationResult,
    Outcome,
    Role,
    StoredUser,
    User,
)
from ..utils import AuditLogger, get_logger, hash_password_hex, verify_password_hex
from .notification_center import NotificationCenter

INVALID_CREDENTIALS_MESSAGE = "Email o contraseña incorrectos"


class UserDirectory:
    """Service for managing user accounts."""

    def __init__(self, store: Store, notification_center: NotificationCenter) -> None:
        """
        Initialize user directory.

        Args:
            store: Store instance
            notification_center: Receives the cleanup of registration
                notifications on approve/reject
        """
        self.store = store
        self.notification_center = notification_center
        self.logger = get_logger("user_directory")
        self.audit_logger = AuditLogger(store)

    def _load(self) -> List[StoredUser]:
        return decode_records(StoredUser, self.store.read(USERS))

    def _save(self, users: List[StoredUser]) -> None:
        self.store.write(USERS, encode_records(users))

    def list(self) -> List[User]:
        """Get every account without credentials."""
        return [user.to_public() for user in self._load()]

    def get(self, user_id: str) -> Optional[User]:
        """Get an account by ID, or None."""
        for user in self._load():
            if user.id == user_id:
                return user.to_public()
        return None

    def find_by_email(self, email: str) -> Optional[User]:
        """Get an account by exact email, or None."""
        for user in self._load():
            if user.email == email:
                return user.to_public()
        return None

    def pending_users(self) -> List[User]:
        """Get accounts awaiting approval."""
        return [u for u in self.list() if u.status == ApprovalStatus.PENDING]

    def create(
        self,
        email: str,
        password: str,
        name: str,
        role: Role = Role.USER,
        status: ApprovalStatus = ApprovalStatus.APPROVED,
    ) -> OperationResult:
        """
        Create an account.

        Accounts created here are issued directly by an admin and start
        approved.

        Args:
            email: Login email (exact-match unique)
            password: Plain password, hashed before storage
            name: Display name
            role: Account role
            status: Initial approval status

        Returns:
            Result holding the public User, or DUPLICATE_EMAIL or a
            validation failure
        """
        if not password:
            return OperationResult.fail(ErrorKind.VALIDATION, "La contraseña es requerida")

        password_hash, password_salt = hash_password_hex(password)
        try:
            user = StoredUser(
                email=email,
                name=name,
                role=role,
                status=status,
                password_hash=password_hash,
                password_salt=password_salt,
            )
        except ValidationError as e:
            return OperationResult.from_validation_error(e)

        with self.store.lock:
            users = self._load()
            if any(u.email == email for u in users):
                return OperationResult.fail(
                    ErrorKind.DUPLICATE_EMAIL, "El email ya está registrado"
                )
            users.append(user)
            self._save(users)

        self.audit_logger.log_action(
            ActionType.USER_CREATED,
            actor=Actor.ADMIN,
            details={"user_id": user.id, "role": user.role.value},
        )
        self.logger.info(f"Created {user.role.value} account {user.id}")
        return OperationResult.ok(user.to_public())

    def authenticate(self, email: str, password: str) -> OperationResult:
        """
        Check credentials.

        Succeeds only for matching credentials on an admin or an approved
        account. Every other case fails with the same message.

        Returns:
            Result holding the public User, or INVALID_CREDENTIALS
        """
        for user in self._load():
            if user.email != email:
                continue
            if verify_password_hex(password, user.password_hash, user.password_salt) \
                    and user.can_authenticate():
                self.audit_logger.log_action(
                    ActionType.USER_LOGIN,
                    actor=Actor.ADMIN if user.is_admin else Actor.USER,
                    details={"user_id": user.id},
                )
                return OperationResult.ok(user.to_public())
            break

        self.audit_logger.log_action(
            ActionType.USER_LOGIN,
            actor=Actor.USER,
            outcome=Outcome.FAILURE,
            error_message="invalid credentials",
        )
        return OperationResult.fail(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

    def approve(self, user_id: str, approver_id: str) -> OperationResult:
        """
        Approve a pending account.

        Records the approver and time and removes the account's
        registration notification.

        Returns:
            Result holding the public User, or NOT_FOUND
        """
        return self._decide(user_id, ApprovalStatus.APPROVED, approver_id)

    def reject(self, user_id: str) -> OperationResult:
        """
        Reject a pending account and remove its registration notification.

        Returns:
            Result holding the public User, or NOT_FOUND
        """
        return self._decide(user_id, ApprovalStatus.REJECTED)

    def _decide(
        self,
        user_id: str,
        status: ApprovalStatus,
        approver_id: Optional[str] = None
    ) -> OperationResult:
        with self.store.lock:
            users = self._load()
            for user in users:
                if user.id != user_id:
                    continue

                user.status = status
                if status == ApprovalStatus.APPROVED:
                    user.approved_by = approver_id
                    user.approved_at = datetime.now()
                self._save(users)

                self.notification_center.delete_for_subject(
                    NotificationKind.USER_REGISTRATION, user_id
                )

                action = ActionType.USER_APPROVED if status == ApprovalStatus.APPROVED \
                    else ActionType.USER_REJECTED
                self.audit_logger.log_action(
                    action,
                    actor=Actor.ADMIN,
                    details={"user_id": user_id, "approver_id": approver_id},
                )
                self.logger.info(f"User {user_id} {status.value}")
                return OperationResult.ok(user.to_public())

            return OperationResult.fail(ErrorKind.NOT_FOUND, f"User {user_id} not found")

    def delete(self, user_id: str) -> bool:
        """
        Delete an account. Orders placed by it are kept.

        Returns:
            True if an account was removed
        """
        with self.store.lock:
            users = self._load()
            remaining = [u for u in users if u.id != user_id]
            if len(remaining) == len(users):
                return False
            self._save(remaining)

        self.audit_logger.log_action(
            ActionType.USER_DELETED,
            actor=Actor.ADMIN,
            details={"user_id": user_id},
        )
        self.logger.info(f"Deleted user {user_id}")
        return True
