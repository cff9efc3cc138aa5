"""Async LLM client for the two supported construction-extraction providers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, Optional

import httpx

from .config import Settings
from .errors import ProviderConfigurationError, ProviderTransportError

LOGGER = logging.getLogger(__name__)

CLAUDE_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


class AIProvider(str, Enum):
    """Closed set of LLM providers a document can be analysed with."""

    CLAUDE = "claude"
    GEMINI = "gemini"

    @property
    def display_name(self) -> str:
        return "Claude" if self is AIProvider.CLAUDE else "Gemini"

    @property
    def api_key_setting(self) -> str:
        return "CLAUDE_API_KEY" if self is AIProvider.CLAUDE else "GEMINI_API_KEY"


@dataclass
class LLMRequest:
    """Parameters for a single-prompt completion call."""

    provider: AIProvider
    model: str
    prompt: str
    max_tokens: int
    temperature: float
    timeout: float


Transport = Callable[[LLMRequest], Awaitable[str]]


def build_request(provider: AIProvider, prompt: str, settings: Settings) -> LLMRequest:
    """Return an :class:`LLMRequest` populated from ``settings`` for ``provider``."""

    model = settings.claude_model if provider is AIProvider.CLAUDE else settings.gemini_model
    return LLMRequest(
        provider=provider,
        model=model,
        prompt=prompt,
        max_tokens=settings.claude_max_tokens,
        temperature=settings.llm_temperature,
        timeout=settings.llm_timeout_s,
    )


def describe_provider_error(
    provider: AIProvider, status_code: int | None, body: str, model: str
) -> str:
    """Map a failed provider call to a message a user can act on."""

    name = provider.display_name
    raw = f"{name} API error: {status_code} - {body}" if status_code else body
    lowered = raw.lower()
    if (
        status_code == 401
        or "authentication" in lowered
        or "invalid_api_key" in lowered
        or "api_key_invalid" in lowered
        or "api key not valid" in lowered
    ):
        return f"Invalid API Key. Please check your {provider.api_key_setting} setting."
    if (
        status_code == 404
        or "model_not_found" in lowered
        or "invalid_model" in lowered
        or "model not found" in lowered
    ):
        return (
            f'The {name} model ("{model}") was not found or is not accessible. '
            f"Details: {raw}"
        )
    if (
        status_code == 429
        or "rate_limit" in lowered
        or "rate limit" in lowered
        or "quota" in lowered
        or "resource_exhausted" in lowered
    ):
        return (
            "API rate limit exceeded or quota exhausted. Please try again later. "
            f"Details: {raw}"
        )
    if status_code in {503, 529} or "overloaded" in lowered:
        return (
            f"{name} API is temporarily overloaded. Please try again in a moment. "
            f"Details: {raw}"
        )
    return f"An error occurred: {raw}"


class _HTTPTransport:
    """Shared plumbing for the vendor transports."""

    provider: AIProvider

    def __init__(self, api_key: str, *, http_client: httpx.AsyncClient | None = None) -> None:
        self._api_key = api_key
        self._http_client = http_client

    async def __call__(self, request: LLMRequest) -> str:
        if not self._api_key:
            LOGGER.error(
                "API key not found; set %s to use %s",
                self.provider.api_key_setting,
                self.provider.display_name,
            )
            raise ProviderConfigurationError(self.provider.value)

        url, headers, body = self._build(request)
        LOGGER.debug(
            "Sending %s request model=%s prompt_chars=%d",
            self.provider.display_name,
            request.model,
            len(request.prompt),
        )
        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    url, headers=headers, json=body, timeout=request.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=httpx.Timeout(request.timeout)) as client:
                    response = await client.post(url, headers=headers, json=body)
        except httpx.HTTPError as exc:
            LOGGER.error("%s request failed: %s", self.provider.display_name, exc)
            raise ProviderTransportError(
                self.provider.value,
                describe_provider_error(self.provider, None, str(exc), request.model),
                detail=str(exc),
            ) from exc

        if response.is_error:
            LOGGER.error(
                "%s answered with status %s", self.provider.display_name, response.status_code
            )
            raise ProviderTransportError(
                self.provider.value,
                describe_provider_error(
                    self.provider, response.status_code, response.text, request.model
                ),
                status_code=response.status_code,
                detail=response.text,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderTransportError(
                self.provider.value,
                f"{self.provider.display_name} returned a non-JSON response",
                status_code=response.status_code,
                detail=response.text,
            ) from exc
        return self._answer(payload)

    def _build(self, request: LLMRequest) -> tuple[str, dict[str, str], dict[str, Any]]:
        raise NotImplementedError

    def _answer(self, payload: Mapping[str, Any]) -> str:
        raise NotImplementedError


class ClaudeTransport(_HTTPTransport):
    """Anthropic Messages API transport."""

    provider = AIProvider.CLAUDE

    def __init__(
        self,
        api_key: str,
        *,
        url: str = CLAUDE_URL,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, http_client=http_client)
        self._url = url

    def _build(self, request: LLMRequest) -> tuple[str, dict[str, str], dict[str, Any]]:
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }
        body = {
            "model": request.model,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        return self._url, headers, body

    def _answer(self, payload: Mapping[str, Any]) -> str:
        blocks = payload.get("content") or []
        for block in blocks:
            if isinstance(block, Mapping) and block.get("type", "text") == "text":
                return str(block.get("text") or "")
        return ""


class GeminiTransport(_HTTPTransport):
    """Google Generative Language ``generateContent`` transport."""

    provider = AIProvider.GEMINI

    def __init__(
        self,
        api_key: str,
        *,
        url_template: str = GEMINI_URL,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, http_client=http_client)
        self._url_template = url_template

    def _build(self, request: LLMRequest) -> tuple[str, dict[str, str], dict[str, Any]]:
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self._api_key,
        }
        body = {
            "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
            "generationConfig": {
                "temperature": request.temperature,
                "maxOutputTokens": request.max_tokens,
            },
        }
        return self._url_template.format(model=request.model), headers, body

    def _answer(self, payload: Mapping[str, Any]) -> str:
        candidates = payload.get("candidates") or []
        if not candidates:
            return ""
        content = candidates[0].get("content") or {}
        parts = content.get("parts") or []
        return "".join(str(part.get("text") or "") for part in parts if isinstance(part, Mapping))


class LLMClient:
    """Awaitable client that routes each request to its provider's transport."""

    def __init__(self, transports: Optional[Mapping[AIProvider, Transport]] = None) -> None:
        self._transports: dict[AIProvider, Transport] = dict(transports or {})

    async def complete(self, request: LLMRequest) -> str:
        """Execute the request using the transport registered for its provider."""

        transport = self._transports.get(request.provider)
        if transport is None:
            raise RuntimeError(
                f"No transport configured for provider {request.provider.value!r}"
            )
        return await transport(request)


def create_default_client(
    settings: Settings, *, http_client: httpx.AsyncClient | None = None
) -> LLMClient:
    """Factory returning an ``LLMClient`` wired to the real vendor APIs."""

    return LLMClient(
        {
            AIProvider.CLAUDE: ClaudeTransport(settings.claude_api_key, http_client=http_client),
            AIProvider.GEMINI: GeminiTransport(settings.gemini_api_key, http_client=http_client),
        }
    )


__all__ = [
    "AIProvider",
    "ClaudeTransport",
    "GeminiTransport",
    "LLMClient",
    "LLMRequest",
    "Transport",
    "build_request",
    "create_default_client",
    "describe_provider_error",
]
