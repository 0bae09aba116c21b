"""
Supplier email payloads.

Builds the shareable order text and the mailto link used to hand an order
to the user's mail client. Nothing is sent from here.
"""

from datetime import datetime
from typing import Optional
from urllib.parse import quote
from zoneinfo import ZoneInfo

from ..models import Order
from .reminder_scheduler import DEFAULT_TIMEZONE

DAY_NAMES = ["lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"]
MONTH_NAMES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]

# encodeURIComponent leaves these unescaped
URI_COMPONENT_SAFE = "!~*'()"


def format_price(price: float) -> str:
    """
    Format an amount the es-AR way: '.' for thousands, ',' for decimals,
    at most two decimals and none when whole.

    >>> format_price(7500)
    '7.500'
    >>> format_price(1234.5)
    '1.234,5'
    """
    cents = round(abs(price) * 100)
    whole, fraction = divmod(cents, 100)
    text = f"{whole:,}".replace(",", ".")
    if fraction:
        text += "," + f"{fraction:02d}".rstrip("0")
    return f"-{text}" if price < 0 and cents else text


def format_quantity(quantity: float) -> str:
    """Render a quantity without a trailing '.0' for whole numbers."""
    if float(quantity).is_integer():
        return str(int(quantity))
    return f"{quantity:g}"


def format_long_date(moment: datetime) -> str:
    """Spanish long date, e.g. 'jueves, 16 de octubre de 2025'."""
    return (
        f"{DAY_NAMES[moment.weekday()]}, {moment.day} de "
        f"{MONTH_NAMES[moment.month - 1]} de {moment.year}"
    )


def _local(moment: datetime, timezone: str) -> datetime:
    return moment.astimezone(ZoneInfo(timezone))


def format_order_text(order: Order, timezone: str = DEFAULT_TIMEZONE) -> str:
    """
    Build the order summary text users copy or forward to the supplier.

    Args:
        order: Stored order
        timezone: Timezone for the displayed date and time

    Returns:
        Multi-line order summary
    """
    local = _local(order.created_at, timezone)

    lines = [
        f"🛒 PEDIDO #{order.id}",
        "",
        f"📅 Fecha: {format_long_date(local)}",
        f"🕐 Hora: {local.strftime('%H:%M')}",
    ]
    if order.user_name:
        lines.append(f"👤 Solicitado por: {order.user_name}")

    lines.extend(["", "📦 PRODUCTOS:"])
    for item in order.items:
        lines.append(
            f"• {item.name}: {format_quantity(item.quantity)} {item.unit} - "
            f"${format_price(item.line_total())}"
        )

    lines.extend(["", f"💰 TOTAL: ${format_price(order.total)}", ""])
    lines.append(f"📧 Proveedor: {order.supplier_email}" if order.supplier_email else "")
    lines.append(f"\n📝 Aclaraciones:\n{order.notes}" if order.notes else "")
    lines.extend(["", "¡Gracias!"])

    return "\n".join(lines)


def format_email_body(order: Order, timezone: str = DEFAULT_TIMEZONE) -> str:
    """Plain email body listing the requested products."""
    local = _local(order.created_at, timezone)
    products = "\n".join(
        f"- {item.name}: {format_quantity(item.quantity)} {item.unit}" for item in order.items
    )
    notes = f"\nAclaraciones:\n{order.notes}" if order.notes else ""

    return (
        "Hola,\n\n"
        f"Pedido de: {order.user_name}\n"
        f"Fecha: {local.day}/{local.month}/{local.year}\n\n"
        "Productos solicitados:\n\n"
        f"{products}\n\n"
        f"{notes}\n\n"
        "Gracias."
    )


def build_mailto_link(
    order: Order,
    company_name: str = "",
    timezone: str = DEFAULT_TIMEZONE,
    supplier_email: Optional[str] = None,
) -> str:
    """
    Build the mailto link that opens a prefilled email to the supplier.

    Args:
        order: Stored order
        company_name: Sender company shown in the subject
        timezone: Timezone for the body date
        supplier_email: Override for the order's supplier address

    Returns:
        mailto: URL with URL-encoded subject and body
    """
    recipient = supplier_email or order.supplier_email
    subject = f"Pedido {order.id} - {company_name}"
    body = format_email_body(order, timezone)
    return (
        f"mailto:{recipient}"
        f"?subject={quote(subject, safe=URI_COMPONENT_SAFE)}"
        f"&body={quote(body, safe=URI_COMPONENT_SAFE)}"
    )
