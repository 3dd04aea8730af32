"""Key-value document persistence."""

from cogni.kernel.store.document_store import (
    ALERTS_KEY,
    ALL_KEYS,
    ATTEMPTS_KEY,
    CONTENTS_KEY,
    EXAMS_KEY,
    SESSION_USER_KEY,
    USERS_DB_KEY,
    DocumentStore,
    InMemoryDocumentStore,
    SqlDocumentStore,
)

__all__ = [
    "ALERTS_KEY",
    "ALL_KEYS",
    "ATTEMPTS_KEY",
    "CONTENTS_KEY",
    "EXAMS_KEY",
    "SESSION_USER_KEY",
    "USERS_DB_KEY",
    "DocumentStore",
    "InMemoryDocumentStore",
    "SqlDocumentStore",
]
