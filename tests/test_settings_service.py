"""
Tests for the settings record and the credential helpers.
"""

from orderdesk.models import ErrorKind
from orderdesk.utils import hash_password_hex, verify_password_hex


def test_defaults_until_saved(settings_service):
    assert not settings_service.is_initialized()
    assert settings_service.get().company_name == "Mi Empresa"


def test_update_merges_and_persists(settings_service, store):
    result = settings_service.update({"company_name": "Verdulería Norte"})

    assert result.success
    assert settings_service.is_initialized()
    settings = settings_service.get()
    assert settings.company_name == "Verdulería Norte"
    assert settings.default_supplier_email == "proveedor@ejemplo.com"
    assert len(store.read("settings")) == 1


def test_update_rejects_invalid_currency(settings_service):
    result = settings_service.update({"currency": "PESOS"})

    assert result.error == ErrorKind.VALIDATION
    assert not settings_service.is_initialized()


def test_default_supplier_email_feeds_orders(settings_service, workflow, tomatoes):
    settings_service.update({"default_supplier_email": "compras@proveedor.com"})

    order = workflow.submit("2", "Usuario Demo", {tomatoes.id: 1}).value

    assert order.supplier_email == "compras@proveedor.com"


def test_password_hashing():
    password_hash, salt = hash_password_hex("admin123")

    assert verify_password_hex("admin123", password_hash, salt)
    assert not verify_password_hex("admin124", password_hash, salt)
    assert not verify_password_hex("admin123", "zz-not-hex", salt)
    assert hash_password_hex("admin123")[0] != password_hash
