"""Core app configuration and database."""

from waternet.core.config import get_settings, settings
from waternet.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
