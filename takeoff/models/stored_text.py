"""Key-value persistence for the last extracted document text."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    """Return the current UTC timestamp."""

    return datetime.now(UTC)


class StoredValue(SQLModel, table=True):
    """A single JSON-encoded value addressed by a string key."""

    __tablename__ = "stored_values"

    key: str = Field(primary_key=True, description="Store key, e.g. 'pdf-extracted-text'.")
    value: str = Field(
        sa_column=Column(Text, nullable=False),
        description="JSON document holding the stored payload.",
    )
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)


__all__ = ["StoredValue"]
