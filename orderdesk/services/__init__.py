"""
Business logic services for OrderDesk.
"""

from .csv_import import parse_product_csv
from .notification_center import NotificationCenter
from .order_mail import build_mailto_link, format_order_text, format_price
from .order_workflow import OrderWorkflow
from .product_catalog import ProductCatalog, delivery_window_for
from .reminder_scheduler import ReminderScheduler
from .settings_service import SettingsService
from .user_directory import UserDirectory

__all__ = [
    "NotificationCenter",
    "OrderWorkflow",
    "ProductCatalog",
    "ReminderScheduler",
    "SettingsService",
    "UserDirectory",
    "build_mailto_link",
    "delivery_window_for",
    "format_order_text",
    "format_price",
    "parse_product_csv",
]
