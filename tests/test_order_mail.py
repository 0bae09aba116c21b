"""
Tests for the shareable order text and supplier mailto link.
"""

from datetime import datetime, timezone
from urllib.parse import parse_qs, urlsplit
from zoneinfo import ZoneInfo

import pytest

from orderdesk.models import Order, OrderItem
from orderdesk.services.order_mail import (
    build_mailto_link,
    format_email_body,
    format_long_date,
    format_order_text,
    format_price,
    format_quantity,
)

BUENOS_AIRES = ZoneInfo("America/Argentina/Buenos_Aires")


@pytest.fixture
def order():
    return Order(
        id="abc123",
        user_id="2",
        user_name="Usuario Demo",
        created_at=datetime(2025, 10, 16, 14, 5, tzinfo=BUENOS_AIRES),
        items=[
            OrderItem(name="Tomates", quantity=3, unit="kg", price=2500),
            OrderItem(name="Pan", quantity=1.5, unit="barras", price=800),
        ],
        total=8700,
        supplier_email="proveedor@ejemplo.com",
    )


@pytest.mark.parametrize("amount, expected", [
    (7500, "7.500"),
    (1234.5, "1.234,5"),
    (800, "800"),
    (1234567.89, "1.234.567,89"),
    (0, "0"),
])
def test_format_price(amount, expected):
    assert format_price(amount) == expected


def test_format_quantity():
    assert format_quantity(3.0) == "3"
    assert format_quantity(1.5) == "1.5"


def test_format_long_date():
    assert format_long_date(datetime(2025, 10, 16)) == "jueves, 16 de octubre de 2025"
    assert format_long_date(datetime(2025, 10, 12)) == "domingo, 12 de octubre de 2025"


def test_order_text(order):
    text = format_order_text(order)
    lines = text.split("\n")

    assert lines[0] == "🛒 PEDIDO #abc123"
    assert "📅 Fecha: jueves, 16 de octubre de 2025" in lines
    assert "🕐 Hora: 14:05" in lines
    assert "👤 Solicitado por: Usuario Demo" in lines
    assert "• Tomates: 3 kg - $7.500" in lines
    assert "• Pan: 1.5 barras - $1.200" in lines
    assert "💰 TOTAL: $8.700" in lines
    assert "📧 Proveedor: proveedor@ejemplo.com" in lines
    assert "Aclaraciones" not in text
    assert text.endswith("\n¡Gracias!")


def test_order_text_uses_target_timezone(order):
    order.created_at = datetime(2025, 10, 17, 1, 30, tzinfo=timezone.utc)

    text = format_order_text(order)

    assert "📅 Fecha: jueves, 16 de octubre de 2025" in text
    assert "🕐 Hora: 22:30" in text


def test_order_text_with_notes_and_no_supplier(order):
    order.notes = "Entregar por la tarde"
    order.supplier_email = ""

    text = format_order_text(order)

    assert "📧 Proveedor" not in text
    assert "📝 Aclaraciones:\nEntregar por la tarde" in text


def test_email_body(order):
    body = format_email_body(order)

    assert body.startswith("Hola,\n\nPedido de: Usuario Demo\nFecha: 16/10/2025\n")
    assert "- Tomates: 3 kg\n- Pan: 1.5 barras" in body
    assert body.endswith("Gracias.")


def test_mailto_link(order):
    link = build_mailto_link(order, company_name="Mi Empresa")
    parts = urlsplit(link)
    query = parse_qs(parts.query)

    assert parts.scheme == "mailto"
    assert parts.path == "proveedor@ejemplo.com"
    assert query["subject"] == ["Pedido abc123 - Mi Empresa"]
    assert query["body"] == [format_email_body(order)]
    assert "%20" in link
    assert " " not in link


def test_mailto_link_recipient_override(order):
    link = build_mailto_link(order, supplier_email="otro@ejemplo.com")
    assert link.startswith("mailto:otro@ejemplo.com?subject=")
