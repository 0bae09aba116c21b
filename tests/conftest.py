"""
Shared fixtures for OrderDesk tests.

Every test runs in its own temporary working directory so configuration
and log files never leak between tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from orderdesk.config import reset_config_manager
from orderdesk.database import MemoryStore
from orderdesk.services import (
    NotificationCenter,
    OrderWorkflow,
    ProductCatalog,
    ReminderScheduler,
    SettingsService,
    UserDirectory,
)
from orderdesk.models import AppSettings
from orderdesk.utils import reset_loggers


@pytest.fixture(autouse=True)
def isolated_workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    reset_loggers()
    reset_config_manager()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def notification_center(store):
    return NotificationCenter(store)


@pytest.fixture
def settings_service(store):
    return SettingsService(
        store,
        AppSettings(
            default_supplier_email="proveedor@ejemplo.com",
            company_name="Mi Empresa",
            currency="ARS",
        ),
    )


@pytest.fixture
def catalog(store):
    return ProductCatalog(store)


@pytest.fixture
def workflow(store, catalog, settings_service):
    return OrderWorkflow(store, catalog, settings_service)


@pytest.fixture
def directory(store, notification_center):
    return UserDirectory(store, notification_center)


@pytest.fixture
def scheduler(store, notification_center):
    reminder_scheduler = ReminderScheduler(store, notification_center)
    yield reminder_scheduler
    reminder_scheduler.stop()


@pytest.fixture
def tomatoes(catalog):
    return catalog.create(
        name="Tomates",
        unit="kg",
        category="Verduras",
        price=2500,
        qty_window_a=5,
        qty_window_b=8,
        qty_window_c=10,
        created_by="1",
    ).value
