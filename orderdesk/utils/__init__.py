"""
Utility functions for OrderDesk.
"""

from .encryption import (
    decrypt_data,
    encrypt_data,
    generate_encryption_key,
    hash_password,
    hash_password_hex,
    verify_password,
    verify_password_hex,
)
from .logger import (
    AuditLogger,
    OrderDeskLogger,
    get_logger,
    reset_loggers,
)

__all__ = [
    # Encryption
    "generate_encryption_key",
    "encrypt_data",
    "decrypt_data",
    "hash_password",
    "hash_password_hex",
    "verify_password",
    "verify_password_hex",
    # Logging
    "OrderDeskLogger",
    "AuditLogger",
    "get_logger",
    "reset_loggers",
]
