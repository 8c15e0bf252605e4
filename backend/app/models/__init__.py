"""Models subpackage."""

from app.models.database import create_engine_from_settings, create_session_factory, get_db
from app.models.iris import iris_table

__all__ = [
    "create_engine_from_settings",
    "create_session_factory",
    "get_db",
    "iris_table",
]
