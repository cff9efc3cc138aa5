"""Pydantic schemas for PDF upload and stored-text endpoints."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoredDocumentText(_CamelModel):
    """Last extracted document text kept for later analysis."""

    text: StrictStr
    file_name: StrictStr
    extracted_at: StrictStr = Field(description="ISO-8601 timestamp of the extraction.")
    file_size: StrictInt = Field(description="Size of the source PDF in bytes.")

    @field_validator("text", "file_name")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value


class PDFTextResponse(_CamelModel):
    """Response of ``POST /api/extract-pdf``."""

    text: str
    pages: int
    info: Dict[str, Any] = Field(default_factory=dict)
    file_name: str
    file_size: int


class UploadResponse(_CamelModel):
    """Response of ``POST /api/upload-pdf``."""

    message: str
    filename: str
    original_name: str
    size: int


__all__ = ["PDFTextResponse", "StoredDocumentText", "UploadResponse"]
