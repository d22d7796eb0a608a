"""
Repository layer for data access.
"""

from zentia.infrastructure.database.repositories.therapy_repository import (
    DEFAULT_NOTES_LIMIT,
    SqlAlchemyTherapyRepository,
    TherapyRepository,
)

__all__ = [
    "DEFAULT_NOTES_LIMIT",
    "SqlAlchemyTherapyRepository",
    "TherapyRepository",
]
