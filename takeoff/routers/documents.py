"""PDF upload, text extraction and stored-text endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from sqlmodel import Session

from ..api.documents import PDFTextResponse, StoredDocumentText, UploadResponse
from ..config import Settings, get_settings
from ..database import get_session
from ..errors import PDFExtractionError, UploadValidationError
from ..services.pdf_text import extract_pdf_text, validate_pdf_upload
from ..services.text_store import DocumentTextStore
from ..services.uploads import save_upload

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["documents"])


async def _read_upload(pdf: UploadFile | None, settings: Settings) -> bytes:
    if pdf is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    data = await pdf.read()
    try:
        validate_pdf_upload(
            pdf.filename, pdf.content_type, data, max_size=settings.max_upload_size
        )
    except UploadValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return data


@router.post("/extract-pdf", response_model=PDFTextResponse)
async def extract_pdf(
    pdf: UploadFile | None = File(default=None),
    *,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> PDFTextResponse:
    """Extract text from the uploaded PDF and keep it for later analysis."""

    data = await _read_upload(pdf, settings)
    file_name = pdf.filename or "document.pdf"
    try:
        extracted = extract_pdf_text(data, filename=file_name)
    except PDFExtractionError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        ) from exc

    DocumentTextStore(session).save(extracted.text, file_name, len(data))
    return PDFTextResponse(
        text=extracted.text,
        pages=extracted.pages,
        info=extracted.info,
        file_name=file_name,
        file_size=len(data),
    )


@router.post("/upload-pdf", response_model=UploadResponse)
async def upload_pdf(
    pdf: UploadFile | None = File(default=None),
    *,
    settings: Settings = Depends(get_settings),
) -> UploadResponse:
    """Store the uploaded PDF under the configured upload directory."""

    data = await _read_upload(pdf, settings)
    try:
        stored = save_upload(settings.upload_dir, pdf.filename or "upload.pdf", data)
    except OSError as exc:
        LOGGER.exception("Upload failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Upload failed. Please try again.",
        ) from exc
    return UploadResponse(
        message="PDF uploaded successfully",
        filename=stored.filename,
        original_name=stored.original_name,
        size=stored.size,
    )


@router.get("/stored-text", response_model=StoredDocumentText)
async def get_stored_text(
    *,
    session: Session = Depends(get_session),
) -> StoredDocumentText:
    """Return the last extracted document text."""

    record = DocumentTextStore(session).load()
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No stored text")
    return record


@router.delete(
    "/stored-text", status_code=status.HTTP_204_NO_CONTENT, response_class=Response
)
async def clear_stored_text(
    *,
    session: Session = Depends(get_session),
) -> Response:
    """Forget the last extracted document text."""

    DocumentTextStore(session).clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
