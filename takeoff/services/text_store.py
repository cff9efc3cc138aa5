"""Key-value store for the most recently extracted document text."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime

from pydantic import ValidationError
from sqlmodel import Session

from ..api.documents import StoredDocumentText
from ..models import StoredValue

LOGGER = logging.getLogger(__name__)

PDF_TEXT_STORAGE_KEY = "pdf-extracted-text"


class DocumentTextStore:
    """Save, load and clear the single stored :class:`StoredDocumentText`.

    Records are checked on the way in and on the way out; a stored value
    that no longer validates is deleted and reported as absent.
    """

    def __init__(self, session: Session, *, key: str = PDF_TEXT_STORAGE_KEY) -> None:
        self._session = session
        self._key = key

    def save(self, text: str, file_name: str, file_size: int) -> StoredDocumentText | None:
        """Persist a new record, replacing any previous one.

        Returns ``None`` without writing when the record would be invalid.
        """

        try:
            record = StoredDocumentText(
                text=text,
                file_name=file_name,
                extracted_at=datetime.now(UTC).isoformat(),
                file_size=file_size,
            )
        except ValidationError:
            LOGGER.warning("Refusing to store invalid extracted text for %r", file_name)
            return None

        value = record.model_dump_json(by_alias=True)
        row = self._session.get(StoredValue, self._key)
        if row is None:
            row = StoredValue(key=self._key, value=value)
        else:
            row.value = value
            row.updated_at = datetime.now(UTC)
        self._session.add(row)
        self._session.commit()
        LOGGER.info("Stored extracted text for %s (%d chars)", file_name, len(text))
        return record

    def load(self) -> StoredDocumentText | None:
        """Return the stored record, or ``None`` when absent or corrupted."""

        row = self._session.get(StoredValue, self._key)
        if row is None:
            return None
        try:
            return StoredDocumentText.model_validate(json.loads(row.value))
        except (json.JSONDecodeError, ValidationError):
            LOGGER.warning("Removing corrupted stored value under key %s", self._key)
            self._session.delete(row)
            self._session.commit()
            return None

    def clear(self) -> bool:
        """Delete the stored record; return whether one existed."""

        row = self._session.get(StoredValue, self._key)
        if row is None:
            return False
        self._session.delete(row)
        self._session.commit()
        return True


__all__ = ["DocumentTextStore", "PDF_TEXT_STORAGE_KEY"]
