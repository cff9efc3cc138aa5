"""LLM-backed construction-item extraction workflow."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..api.extraction import ExtractionResult
from ..config import Settings
from ..errors import ExtractionInputError, ProviderTransportError
from ..llm_client import AIProvider, LLMClient, build_request
from .prompts import build_extraction_prompt
from .response_recovery import RecoveryOutcome, recover_payload
from .result_validation import validate_extraction
from .text_cleaning import prepare_source_text

LOGGER = logging.getLogger(__name__)

EMPTY_TEXT_MESSAGE = "No text available for analysis. Please extract text from a PDF first."


@dataclass(slots=True)
class ExtractionRun:
    """Validated result plus the diagnostics of how it was recovered."""

    result: ExtractionResult
    recovery: RecoveryOutcome
    message: str


async def run_construction_extraction(
    text: str | None,
    *,
    provider: AIProvider,
    llm: LLMClient,
    settings: Settings,
) -> ExtractionRun:
    """Extract construction items from ``text`` with ``provider``.

    Raises :class:`ExtractionInputError` before any network call when there is
    no text, :class:`ProviderTransportError` when the provider call fails and
    :class:`ExtractionValidationError` when the recovered payload does not
    have the result shape.
    """

    if not text or not text.strip():
        raise ExtractionInputError(EMPTY_TEXT_MESSAGE)

    provider_name = provider.display_name
    source = prepare_source_text(text, settings.max_source_chars)
    prompt = build_extraction_prompt(provider, source)
    LOGGER.info(
        "Requesting construction extraction from %s (source_chars=%d prompt_chars=%d)",
        provider_name,
        len(source),
        len(prompt),
    )

    answer = await llm.complete(build_request(provider, prompt, settings))
    if not answer or not answer.strip():
        raise ProviderTransportError(provider.value, "No answer received from API")

    recovery = recover_payload(answer, provider_name)
    result = validate_extraction(recovery.payload, provider_name)
    result.ai_provider = provider

    message = (
        f"Successfully extracted {result.total_items_found} construction items "
        f"using {provider_name}!"
    )
    LOGGER.info("%s (strategy=%s)", message, recovery.strategy)
    return ExtractionRun(result=result, recovery=recovery, message=message)


__all__ = ["EMPTY_TEXT_MESSAGE", "ExtractionRun", "run_construction_extraction"]
