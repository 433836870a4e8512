"""
Notebook API - Document SQLAlchemy Models
=========================================

What:  ORM models for the two document collections, `notes` and `folders`.
How:   Both tables share `DocumentMixin`: a store-assigned UUID, the owner's
       subject id, and a JSON object holding the caller's fields verbatim.
Who:   Used by DocumentStore for every primitive and by Alembic for migrations.

Table layout (identical for both collections):
    id          UUID primary key, generated on insert
    owner_id    subject id of the creator, unbounded text, indexed (every query filters on it)
    data        JSON object of user-supplied top-level fields, opaque to the API
    created_at  insertion time, used only to order list results
    updated_at  last update time, never exposed

The external representation of a row is built by `to_document()`:
`data` plus `id` and `owner`. Bookkeeping columns stay internal.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Type

from sqlalchemy import JSON, DateTime, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DocumentMixin:
    """Columns and serialization shared by every document collection."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Store-assigned identifier, exposed as its canonical string",
    )

    owner_id: Mapped[str] = mapped_column(
        Text(),
        nullable=False,
        index=True,
        comment="Subject id of the verified creator; immutable",
    )

    # JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
    data: Mapped[Dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
        comment="User-supplied top-level fields",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
        onupdate=_utc_now,
    )

    def to_document(self) -> Dict[str, Any]:
        """Flat external representation: user fields plus `id` and `owner`."""
        document = dict(self.data or {})
        document["id"] = str(self.id)
        document["owner"] = self.owner_id
        return document

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id}, owner_id='{self.owner_id}')>"


class Note(DocumentMixin, Base):
    __tablename__ = "notes"


class Folder(DocumentMixin, Base):
    __tablename__ = "folders"


# Collection name → model. The only collections the store will touch.
COLLECTIONS: Dict[str, Type[DocumentMixin]] = {
    "notes": Note,
    "folders": Folder,
}
