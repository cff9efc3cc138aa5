"""Pydantic schemas for the construction-data extraction API."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from ..llm_client import AIProvider

NOT_FOUND = "N/A"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ExtractedItem(_CamelModel):
    """Single construction item, fixture or piece of equipment."""

    item_type: StrictStr = Field(description="Category such as 'HVAC Equipment'.")
    quantity: StrictStr = Field(description="Amount with units, e.g. '2 EA' or '100 LF'.")
    model_number: StrictStr
    spec_reference: StrictStr
    page_reference: StrictStr
    dimensions: StrictStr = Field(description="Size, capacity or ratings with units.")
    mounting_type: StrictStr
    additional_notes: StrictStr

    @field_validator("*", mode="after")
    @classmethod
    def _blank_means_not_found(cls, value: str) -> str:
        return value if value.strip() else NOT_FOUND


class ExtractionResult(_CamelModel):
    """Structured output of a single extraction request."""

    summary: StrictStr
    # Any JSON number is accepted; the value is replaced by the item count.
    total_items_found: Union[StrictInt, StrictFloat]
    document_type: StrictStr
    extracted_items: List[ExtractedItem]
    recommendations: List[StrictStr]
    ai_provider: Optional[AIProvider] = Field(
        default=None, description="Provider that produced the result."
    )

    @model_validator(mode="after")
    def _reconcile_item_count(self) -> "ExtractionResult":
        self.total_items_found = len(self.extracted_items)
        return self


class ExtractRequest(BaseModel):
    """Body of ``POST /api/extract``."""

    text: Optional[str] = Field(
        default=None,
        description="Document text to analyse. Defaults to the stored extracted text.",
    )
    provider: Optional[AIProvider] = Field(
        default=None, description="LLM provider; the configured default when omitted."
    )


class ExtractResponse(BaseModel):
    """Envelope returned after a successful extraction."""

    result: ExtractionResult
    message: str
    strategy: str = Field(description="Name of the parse strategy that produced the payload.")
    fallback_used: bool


class AskRequest(BaseModel):
    """Body of the raw ``/api/ask/{provider}`` passthrough."""

    question: Optional[str] = None


class AskResponse(BaseModel):
    answer: str


__all__ = [
    "AskRequest",
    "AskResponse",
    "ExtractRequest",
    "ExtractResponse",
    "ExtractedItem",
    "ExtractionResult",
    "NOT_FOUND",
]
