"""Shape validation for recovered extraction payloads."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..api.extraction import ExtractionResult
from ..errors import ExtractionValidationError

LOGGER = logging.getLogger(__name__)

# Provider identity is stamped by the workflow, never taken from the model.
_PROVIDER_KEYS = ("aiProvider", "ai_provider")


def _without_provider(payload: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if key not in _PROVIDER_KEYS}


def is_valid_extraction(payload: Any) -> bool:
    """Return ``True`` when ``payload`` has the extraction-result shape."""

    if not isinstance(payload, dict):
        return False
    try:
        ExtractionResult.model_validate(_without_provider(payload))
    except ValidationError:
        return False
    return True


def validate_extraction(payload: Any, provider_name: str) -> ExtractionResult:
    """Validate ``payload`` and return the accepted :class:`ExtractionResult`.

    Raises :class:`ExtractionValidationError` naming ``provider_name`` when any
    field is missing or has the wrong type.
    """

    if not isinstance(payload, dict):
        raise ExtractionValidationError(provider_name)
    try:
        result = ExtractionResult.model_validate(_without_provider(payload))
    except ValidationError as exc:
        LOGGER.warning(
            "%s payload failed validation with %d error(s): %s",
            provider_name,
            exc.error_count(),
            "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()[:5]
            ),
        )
        raise ExtractionValidationError(provider_name) from exc

    reported = payload.get("totalItemsFound")
    if reported != result.total_items_found:
        LOGGER.info(
            "%s reported totalItemsFound=%s for %d items; using the item count",
            provider_name,
            reported,
            result.total_items_found,
        )
    return result


__all__ = ["is_valid_extraction", "validate_extraction"]
