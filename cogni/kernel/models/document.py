"""
Stored document - one JSON document per collection key.
"""

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from cogni.kernel.models.base import Base, TimestampMixin


class StoredDocument(Base, TimestampMixin):
    """
    Complete serialization of one entity collection (users, attempts, ...).

    Rows are replaced whole; there is no per-field update and no schema version.
    """

    __tablename__ = "documents"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)

    def __repr__(self) -> str:
        return f"<StoredDocument {self.key}>"
