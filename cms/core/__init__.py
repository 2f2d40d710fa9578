"""Core configuration, database handle, security and error taxonomy."""

from cms.core.config import Settings, get_settings
from cms.core.database import Database, get_db

__all__ = ["Database", "Settings", "get_db", "get_settings"]
