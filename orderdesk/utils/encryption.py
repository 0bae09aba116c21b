"""
Encryption utilities for OrderDesk.

Payload encryption for the store and password hashing for user accounts.
"""

import hashlib
import secrets
from typing import Optional, Tuple

from cryptography.fernet import Fernet

PBKDF2_ITERATIONS = 100000


def generate_encryption_key() -> bytes:
    """
    Generate a new Fernet encryption key.

    Returns:
        Encryption key bytes
    """
    return Fernet.generate_key()


def encrypt_data(data: bytes, key: bytes) -> bytes:
    """
    Encrypt data using Fernet symmetric encryption.

    Args:
        data: Data to encrypt
        key: Encryption key

    Returns:
        Encrypted data
    """
    cipher = Fernet(key)
    return cipher.encrypt(data)


def decrypt_data(encrypted_data: bytes, key: bytes) -> bytes:
    """
    Decrypt data using Fernet symmetric encryption.

    Raises:
        cryptography.fernet.InvalidToken: If the key does not match
    """
    cipher = Fernet(key)
    return cipher.decrypt(encrypted_data)


def hash_password(password: str, salt: Optional[bytes] = None) -> Tuple[bytes, bytes]:
    """
    Hash a password using PBKDF2-HMAC-SHA256.

    Args:
        password: Password to hash
        salt: Optional salt (generated if not provided)

    Returns:
        Tuple of (hashed_password, salt)
    """
    if salt is None:
        salt = secrets.token_bytes(32)

    password_hash = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode('utf-8'),
        salt,
        iterations=PBKDF2_ITERATIONS
    )

    return password_hash, salt


def verify_password(password: str, password_hash: bytes, salt: bytes) -> bool:
    """
    Verify a password against a hash.

    Returns:
        True if password matches
    """
    computed_hash, _ = hash_password(password, salt)
    return secrets.compare_digest(computed_hash, password_hash)


def hash_password_hex(password: str) -> Tuple[str, str]:
    """Hash a password and return (hash, salt) as hex strings for storage."""
    password_hash, salt = hash_password(password)
    return password_hash.hex(), salt.hex()


def verify_password_hex(password: str, password_hash: str, salt: str) -> bool:
    """Verify a password against a hex-encoded hash and salt."""
    try:
        return verify_password(password, bytes.fromhex(password_hash), bytes.fromhex(salt))
    except ValueError:
        return False
