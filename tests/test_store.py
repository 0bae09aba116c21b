"""
Tests for the collection stores and record codec.
"""

import sqlite3
from datetime import datetime, timezone

import pytest
from cryptography.fernet import InvalidToken

from orderdesk.database import (
    MemoryStore,
    SQLiteStore,
    create_store,
    decode_records,
    encode_records,
)
from orderdesk.models import Order, OrderItem, Product
from orderdesk.utils import generate_encryption_key


def _records():
    return [{"id": "1", "name": "Tomates"}, {"id": "2", "name": "Pan"}]


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return SQLiteStore(str(tmp_path / "data" / "test.db"))


def test_missing_collection_reads_empty(any_store):
    assert any_store.read("products") == []


def test_write_then_read_preserves_order(any_store):
    any_store.write("products", _records())
    assert any_store.read("products") == _records()


def test_write_replaces_whole_collection(any_store):
    any_store.write("products", _records())
    any_store.write("products", [{"id": "3"}])
    assert any_store.read("products") == [{"id": "3"}]
    assert any_store.collections() == ["products"]


def test_read_returns_a_copy(any_store):
    any_store.write("products", _records())
    records = any_store.read("products")
    records.append({"id": "99"})
    assert len(any_store.read("products")) == 2


def test_clear(any_store):
    any_store.write("orders", _records())
    any_store.clear("orders")
    assert any_store.read("orders") == []


def test_memory_store_rejects_non_json_values():
    store = MemoryStore()
    with pytest.raises(TypeError):
        store.write("products", [{"created_at": datetime.now()}])


def test_timestamps_round_trip_losslessly(any_store):
    created = datetime(2025, 10, 16, 14, 5, 33, 123456, tzinfo=timezone.utc)
    order = Order(
        user_id="2",
        user_name="Usuario Demo",
        created_at=created,
        items=[OrderItem(name="Tomates", quantity=3, unit="kg", price=2500)],
        total=7500,
    )

    any_store.write("orders", encode_records([order]))
    loaded = decode_records(Order, any_store.read("orders"))

    assert loaded == [order]
    assert loaded[0].created_at == created
    assert isinstance(loaded[0].created_at, datetime)


def test_naive_timestamps_round_trip(any_store):
    product = Product(name="Pan", unit="barras", category="Panadería",
                      created_at=datetime(2025, 1, 2, 3, 4, 5, 6))
    any_store.write("products", encode_records([product]))
    assert decode_records(Product, any_store.read("products"))[0].created_at == product.created_at


def test_sqlite_store_persists_across_instances(tmp_path):
    path = str(tmp_path / "orderdesk.db")
    SQLiteStore(path).write("settings", [{"currency": "ARS"}])
    assert SQLiteStore(path).read("settings") == [{"currency": "ARS"}]


def test_encrypted_sqlite_store(tmp_path):
    path = tmp_path / "secure.db"
    key = generate_encryption_key().decode()
    store = SQLiteStore(str(path), encryption_key=key)
    store.write("users", [{"email": "admin@empresa.com"}])

    assert store.is_encrypted
    assert store.read("users") == [{"email": "admin@empresa.com"}]

    conn = sqlite3.connect(str(path))
    raw = conn.execute("SELECT payload FROM collections WHERE name = 'users'").fetchone()[0]
    conn.close()
    assert b"admin@empresa.com" not in bytes(raw)


def test_encrypted_store_with_wrong_key_fails(tmp_path):
    path = str(tmp_path / "secure.db")
    SQLiteStore(path, encryption_key=generate_encryption_key().decode()).write("users", [{"a": 1}])

    other = SQLiteStore(path, encryption_key=generate_encryption_key().decode())
    with pytest.raises(InvalidToken):
        other.read("users")


def test_sqlite_backup(tmp_path):
    store = SQLiteStore(str(tmp_path / "orderdesk.db"))
    store.write("products", _records())
    backup_path = tmp_path / "backup.db"

    store.backup(str(backup_path))

    assert SQLiteStore(str(backup_path)).read("products") == _records()


def test_create_store_factory(tmp_path):
    assert isinstance(create_store("memory"), MemoryStore)
    assert isinstance(create_store("sqlite", str(tmp_path / "x.db")), SQLiteStore)
    with pytest.raises(ValueError):
        create_store("redis")
