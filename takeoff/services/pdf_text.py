"""PDF upload validation and text extraction."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

import fitz  # PyMuPDF

from ..errors import PDFExtractionError, UploadValidationError

LOGGER = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
PDF_MAGIC = b"%PDF"


@dataclass(slots=True)
class PDFText:
    """Text and metadata read from a PDF."""

    text: str
    pages: int
    info: Dict[str, Any] = field(default_factory=dict)


def validate_pdf_upload(
    filename: str | None,
    content_type: str | None,
    data: bytes,
    *,
    max_size: int,
) -> None:
    """Raise :class:`UploadValidationError` unless ``data`` is an acceptable PDF."""

    if not data:
        raise UploadValidationError("No file uploaded")
    mime = (content_type or "").split(";")[0].strip().lower()
    looks_like_pdf = (filename or "").lower().endswith(".pdf") and data.startswith(PDF_MAGIC)
    if mime != PDF_MIME_TYPE and not looks_like_pdf:
        raise UploadValidationError("Only PDF files are allowed")
    if len(data) > max_size:
        limit_mb = max_size / (1024 * 1024)
        raise UploadValidationError(f"File size must be less than {limit_mb:g}MB")


def extract_pdf_text(data: bytes, *, filename: str | None = None) -> PDFText:
    """Return the concatenated page text of the PDF in ``data``."""

    LOGGER.info("Parsing PDF %s (%d bytes)", filename or "<upload>", len(data))
    try:
        with fitz.open(stream=data, filetype="pdf") as document:
            text_parts = [page.get_text("text") for page in document]
            pages = document.page_count
            info = {key: value for key, value in (document.metadata or {}).items() if value}
    except Exception as exc:
        LOGGER.exception("PDF extraction failed for %s", filename or "<upload>")
        raise PDFExtractionError(f"Failed to extract text from PDF: {exc}") from exc

    text = "\n".join(text_parts)
    LOGGER.info("PDF parsed successfully, pages=%d text_length=%d", pages, len(text))
    return PDFText(text=text, pages=pages, info=info)


__all__ = ["PDFText", "PDF_MIME_TYPE", "extract_pdf_text", "validate_pdf_upload"]
