"""
Tests for order submission, status changes and visibility.
"""

from datetime import datetime

import pytest

from orderdesk.models import ErrorKind, OrderStatus, Role, User


@pytest.fixture
def admin():
    return User(id="1", email="admin@empresa.com", name="Administrador",
                role=Role.ADMIN, status="approved")


@pytest.fixture
def demo_user():
    return User(id="2", email="usuario@empresa.com", name="Usuario Demo", status="approved")


def test_submit_snapshots_price_and_totals(workflow, tomatoes):
    result = workflow.submit("2", "Usuario Demo", {tomatoes.id: 3})

    assert result.success
    order = result.value
    assert order.total == 7500
    assert order.status == OrderStatus.PENDING
    assert len(order.items) == 1
    item = order.items[0]
    assert (item.name, item.quantity, item.unit, item.price) == ("Tomates", 3, "kg", 2500)
    assert workflow.get(order.id) == order


def test_submit_uses_default_supplier_email(workflow, tomatoes):
    order = workflow.submit("2", "Usuario Demo", {tomatoes.id: 1}).value
    assert order.supplier_email == "proveedor@ejemplo.com"

    order = workflow.submit("2", "Usuario Demo", {tomatoes.id: 1},
                            supplier_email="otro@ejemplo.com").value
    assert order.supplier_email == "otro@ejemplo.com"


def test_empty_order_is_rejected(workflow, tomatoes):
    result = workflow.submit("2", "Usuario Demo", {})

    assert not result.success
    assert result.error == ErrorKind.EMPTY_ORDER
    assert workflow.list_all() == []


def test_all_zero_quantities_are_rejected(workflow, tomatoes):
    result = workflow.submit("2", "Usuario Demo", {tomatoes.id: 0})

    assert result.error == ErrorKind.EMPTY_ORDER
    assert workflow.list_all() == []


def test_zero_lines_are_dropped(workflow, catalog, tomatoes):
    bread = catalog.create(name="Pan", unit="barras", category="Panadería", price=800).value

    order = workflow.submit("2", "Usuario Demo", {tomatoes.id: 2, bread.id: 0}).value

    assert [item.name for item in order.items] == ["Tomates"]
    assert order.total == 5000


def test_negative_quantity_is_rejected(workflow, tomatoes):
    result = workflow.submit("2", "Usuario Demo", {tomatoes.id: -1})

    assert result.error == ErrorKind.VALIDATION
    assert workflow.list_all() == []


@pytest.mark.parametrize("quantity", [float("nan"), float("inf"), float("-inf"), "3", True])
def test_non_numeric_quantity_is_rejected(workflow, tomatoes, quantity):
    result = workflow.submit("2", "Usuario Demo", {tomatoes.id: quantity})

    assert result.error == ErrorKind.VALIDATION
    assert workflow.list_all() == []


def test_unknown_product_is_rejected(workflow, tomatoes):
    result = workflow.submit("2", "Usuario Demo", {"missing": 1})

    assert result.error == ErrorKind.NOT_FOUND
    assert workflow.list_all() == []


def test_catalog_changes_do_not_touch_stored_orders(workflow, catalog, tomatoes):
    order = workflow.submit("2", "Usuario Demo", {tomatoes.id: 3}).value

    catalog.update(tomatoes.id, {"price": 4000, "name": "Tomate perita"})
    catalog.delete(tomatoes.id)

    stored = workflow.get(order.id)
    assert stored.items[0].price == 2500
    assert stored.items[0].name == "Tomates"
    assert stored.total == 7500


def test_orders_are_listed_newest_first(workflow, tomatoes):
    first = workflow.submit("2", "Usuario Demo", {tomatoes.id: 1}).value
    second = workflow.submit("2", "Usuario Demo", {tomatoes.id: 2}).value

    assert [o.id for o in workflow.list_all()] == [second.id, first.id]


def test_visibility(workflow, tomatoes, admin, demo_user):
    mine = workflow.submit("2", "Usuario Demo", {tomatoes.id: 1}).value
    theirs = workflow.submit("3", "Otro", {tomatoes.id: 1}).value

    assert [o.id for o in workflow.list_for(demo_user)] == [mine.id]
    assert [o.id for o in workflow.list_for(admin)] == [theirs.id, mine.id]


def test_any_status_transition_is_allowed(workflow, tomatoes):
    order = workflow.submit("2", "Usuario Demo", {tomatoes.id: 1}).value

    assert workflow.set_status(order.id, OrderStatus.DELIVERED).success
    result = workflow.set_status(order.id, "pending")

    assert result.success
    assert workflow.get(order.id).status == OrderStatus.PENDING


def test_set_status_errors(workflow, tomatoes):
    order = workflow.submit("2", "Usuario Demo", {tomatoes.id: 1}).value

    assert workflow.set_status("missing", OrderStatus.SENT).error == ErrorKind.NOT_FOUND
    assert workflow.set_status(order.id, "lost").error == ErrorKind.VALIDATION


def test_stats(workflow, tomatoes, admin, demo_user):
    workflow.submit("2", "Usuario Demo", {tomatoes.id: 1})
    workflow.submit("3", "Otro", {tomatoes.id: 1})
    now = datetime.now()

    stats = workflow.stats_for(admin, now)
    assert (stats.total_orders, stats.this_month_orders) == (2, 2)

    stats = workflow.stats_for(demo_user, now)
    assert (stats.total_orders, stats.this_month_orders) == (1, 1)

    next_year = datetime(now.year + 1, now.month, 1)
    stats = workflow.stats_for(admin, next_year)
    assert (stats.total_orders, stats.this_month_orders) == (2, 0)
