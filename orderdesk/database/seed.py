"""
First-run default data.

Seeds the default admin, a demo user, a few products and the settings
record. Collections that already hold data are left alone.
"""

from typing import Dict

from ..models import AppSettings, ApprovalStatus, Product, Role, StoredUser
from ..utils import get_logger, hash_password_hex
from .codec import encode_record, encode_records
from .store import PRODUCTS, SETTINGS, USERS, Store

DEFAULT_ADMIN_EMAIL = "admin@empresa.com"
DEFAULT_ADMIN_PASSWORD = "admin123"
DEMO_USER_EMAIL = "usuario@empresa.com"
DEMO_USER_PASSWORD = "user123"

ADMIN_ID = "1"


def _stored_user(user_id: str, email: str, password: str, name: str, role: Role) -> StoredUser:
    password_hash, password_salt = hash_password_hex(password)
    return StoredUser(
        id=user_id,
        email=email,
        name=name,
        role=role,
        status=ApprovalStatus.APPROVED,
        password_hash=password_hash,
        password_salt=password_salt,
    )


def seed_defaults(store: Store, settings: AppSettings, demo_data: bool = True) -> Dict[str, int]:
    """
    Seed empty collections with default data.

    Args:
        store: Store to populate
        settings: Settings record written when none exists
        demo_data: Also seed the demo user and sample products

    Returns:
        Number of records written per collection
    """
    logger = get_logger("seed")
    written = {}

    if not store.read(USERS):
        users = [
            _stored_user(ADMIN_ID, DEFAULT_ADMIN_EMAIL, DEFAULT_ADMIN_PASSWORD,
                         "Administrador", Role.ADMIN),
        ]
        if demo_data:
            users.append(
                _stored_user("2", DEMO_USER_EMAIL, DEMO_USER_PASSWORD, "Usuario Demo", Role.USER)
            )
        store.write(USERS, encode_records(users))
        written[USERS] = len(users)

    if demo_data and not store.read(PRODUCTS):
        products = [
            Product(id="1", name="Tomates", unit="kg", category="Verduras", price=2500,
                    qty_window_a=5, qty_window_b=8, qty_window_c=10, created_by=ADMIN_ID),
            Product(id="2", name="Lechuga", unit="unidades", category="Verduras", price=1200,
                    qty_window_a=3, qty_window_b=5, qty_window_c=7, created_by=ADMIN_ID),
            Product(id="3", name="Pan", unit="barras", category="Panadería", price=800,
                    qty_window_a=10, qty_window_b=15, qty_window_c=20, created_by=ADMIN_ID),
        ]
        store.write(PRODUCTS, encode_records(products))
        written[PRODUCTS] = len(products)

    if not store.read(SETTINGS):
        store.write(SETTINGS, [encode_record(settings)])
        written[SETTINGS] = 1

    if written:
        logger.info(f"Seeded defaults: {written}")
    return written
