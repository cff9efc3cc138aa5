"""Construction-data extraction API router."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlmodel import Session

from ..api.extraction import AskRequest, AskResponse, ExtractRequest, ExtractResponse
from ..config import Settings, get_settings
from ..database import get_session
from ..errors import (
    ConstructionExtractionError,
    ExtractionInputError,
    ExtractionValidationError,
    ProviderConfigurationError,
    ProviderTransportError,
)
from ..llm_client import AIProvider, LLMClient, build_request, create_default_client
from ..services.construction_extraction import run_construction_extraction
from ..services.text_store import DocumentTextStore

router = APIRouter(prefix="/api", tags=["extraction"])


def get_llm_client(settings: Settings = Depends(get_settings)) -> LLMClient:
    """FastAPI dependency returning the provider client."""

    return create_default_client(settings)


def _error_detail(exc: ConstructionExtractionError, provider: AIProvider) -> dict[str, Any]:
    detail: dict[str, Any] = {"message": str(exc), "provider": provider.value}
    if isinstance(exc, ProviderTransportError) and exc.status_code is not None:
        detail["status"] = exc.status_code
    return detail


def _status_for(exc: ConstructionExtractionError) -> int:
    if isinstance(exc, ExtractionInputError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, ExtractionValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, ProviderTransportError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@router.post("/extract", response_model=ExtractResponse)
async def extract_construction_data(
    request: ExtractRequest | None = Body(default=None),
    *,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
    llm: LLMClient = Depends(get_llm_client),
) -> ExtractResponse:
    """Run construction-item extraction over the given or stored text."""

    run_request = request or ExtractRequest()
    provider = run_request.provider or AIProvider(settings.default_provider)
    text = run_request.text
    if text is None:
        stored = DocumentTextStore(session).load()
        text = stored.text if stored is not None else None

    try:
        run = await run_construction_extraction(
            text, provider=provider, llm=llm, settings=settings
        )
    except ConstructionExtractionError as exc:
        raise HTTPException(
            status_code=_status_for(exc), detail=_error_detail(exc, provider)
        ) from exc

    return ExtractResponse(
        result=run.result,
        message=run.message,
        strategy=run.recovery.strategy,
        fallback_used=run.recovery.fallback_used,
    )


@router.post("/ask/{provider}", response_model=AskResponse)
async def ask_provider(
    provider: AIProvider,
    request: AskRequest,
    *,
    settings: Settings = Depends(get_settings),
    llm: LLMClient = Depends(get_llm_client),
) -> AskResponse:
    """Send a free-form question to ``provider`` and return its raw answer."""

    question = request.question
    if not question or not question.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Question is required and must be a non-empty string.",
        )
    try:
        answer = await llm.complete(build_request(provider, question, settings))
    except (ProviderConfigurationError, ProviderTransportError) as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=_error_detail(exc, provider),
        ) from exc
    return AskResponse(answer=answer)


__all__ = ["get_llm_client", "router"]
