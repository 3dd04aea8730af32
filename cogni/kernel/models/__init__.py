"""
Kernel persistence models.

The platform keeps each entity collection as one JSON document; these are the
SQLAlchemy rows that hold them.
"""

from cogni.kernel.models.base import Base, TimestampMixin
from cogni.kernel.models.document import StoredDocument

__all__ = [
    "Base",
    "TimestampMixin",
    "StoredDocument",
]
