"""
Key-value document store.

Each key holds the complete JSON serialization of one entity collection.
Writes replace the whole document.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cogni.kernel.models.document import StoredDocument

# Persisted layout
SESSION_USER_KEY = "cogni_user"
ATTEMPTS_KEY = "cogni_attempts"
CONTENTS_KEY = "cogni_contents"
EXAMS_KEY = "cogni_exams"
ALERTS_KEY = "cogni_alerts"
USERS_DB_KEY = "cogni_users_db"

ALL_KEYS = (
    SESSION_USER_KEY,
    ATTEMPTS_KEY,
    CONTENTS_KEY,
    EXAMS_KEY,
    ALERTS_KEY,
    USERS_DB_KEY,
)


class DocumentStore(ABC):
    """Abstract key -> JSON document store."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the document for key, or None."""

    @abstractmethod
    async def put_many(self, documents: Mapping[str, Any]) -> None:
        """Replace several documents in one write."""

    async def put(self, key: str, value: Any) -> None:
        await self.put_many({key: value})


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed store for tests and single-process use."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._documents: Dict[str, Any] = copy.deepcopy(dict(initial or {}))

    async def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._documents.get(key))

    async def put_many(self, documents: Mapping[str, Any]) -> None:
        for key, value in documents.items():
            self._documents[key] = copy.deepcopy(value)


class SqlDocumentStore(DocumentStore):
    """Store backed by the `documents` table."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def get(self, key: str) -> Optional[Any]:
        async with self.session_maker() as session:
            result = await session.execute(select(StoredDocument).where(StoredDocument.key == key))
            row = result.scalar_one_or_none()
            return row.value if row else None

    async def put_many(self, documents: Mapping[str, Any]) -> None:
        # One transaction so a multi-collection update lands together
        async with self.session_maker() as session:
            async with session.begin():
                for key, value in documents.items():
                    row = await session.get(StoredDocument, key)
                    if row is None:
                        session.add(StoredDocument(key=key, value=value))
                    else:
                        row.value = value
