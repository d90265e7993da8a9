"""Core app configuration and database."""

from mybank.core.config import get_settings, settings
from mybank.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
