"""
Database infrastructure components.
"""

from zentia.infrastructure.database.connection import (
    Base,
    DatabaseManager,
    get_db_manager,
)

__all__ = [
    "Base",
    "DatabaseManager",
    "get_db_manager",
]
