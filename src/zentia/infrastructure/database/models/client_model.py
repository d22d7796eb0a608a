"""
Client Database Model

Read-only mapping of the Supabase `clients` table.
"""

from typing import Any, Optional

from sqlalchemy import Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from zentia.infrastructure.database.connection import Base


class ClientModel(Base):
    """
    Client profile as maintained by the therapist.

    Table: clients
    """

    __tablename__ = "clients"

    id: Mapped[str] = mapped_column(PGUUID(as_uuid=False), primary_key=True)
    first_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    triggers: Mapped[Optional[list[Any]]] = mapped_column(
        JSONB,
        nullable=True,
        doc="Known triggers (strings)",
    )
    coping_strategies: Mapped[Optional[list[Any]]] = mapped_column(
        JSONB,
        nullable=True,
        doc="Coping strategies (strings or objects with a title)",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def __repr__(self) -> str:
        return f"<ClientModel(id={self.id})>"
