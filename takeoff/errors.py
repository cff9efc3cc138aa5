"""Exception hierarchy shared by the extraction workflow and its routers."""

from __future__ import annotations


class ConstructionExtractionError(RuntimeError):
    """Base class for failures reported to the caller of an extraction."""


class ExtractionInputError(ConstructionExtractionError):
    """Raised when there is no source text to analyse."""


class ProviderConfigurationError(ConstructionExtractionError):
    """Raised when the selected provider has no API key configured."""

    def __init__(self, provider: str, message: str = "API key not configured.") -> None:
        super().__init__(message)
        self.provider = provider


class ProviderTransportError(ConstructionExtractionError):
    """Raised when the outbound provider call fails or answers with an error."""

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.detail = detail


class ExtractionValidationError(ConstructionExtractionError):
    """Raised when a recovered payload does not match the result shape."""

    def __init__(self, provider: str, message: str | None = None) -> None:
        super().__init__(
            message
            or f"Generated construction data from {provider} failed validation. Please try again."
        )
        self.provider = provider


class PDFExtractionError(RuntimeError):
    """Raised when text cannot be read from an uploaded PDF."""


class UploadValidationError(ValueError):
    """Raised when an uploaded file is not an acceptable PDF."""


__all__ = [
    "ConstructionExtractionError",
    "ExtractionInputError",
    "ExtractionValidationError",
    "PDFExtractionError",
    "ProviderConfigurationError",
    "ProviderTransportError",
    "UploadValidationError",
]
