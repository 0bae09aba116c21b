"""
Application settings model.
"""

from pydantic import BaseModel, Field


class AppSettings(BaseModel):
    """Singleton application settings, overwritten in place."""

    default_supplier_email: str = ""
    company_name: str = ""
    currency: str = Field(default="ARS", min_length=3, max_length=3)
