"""Validator unit tests."""
from __future__ import annotations

import json

import pytest

from takeoff.errors import ExtractionValidationError
from takeoff.llm_client import AIProvider
from takeoff.services.response_recovery import sentinel_payload
from takeoff.services.result_validation import is_valid_extraction, validate_extraction


def test_accepts_well_formed_payload(valid_payload) -> None:
    assert is_valid_extraction(valid_payload)

    result = validate_extraction(valid_payload, "Claude")

    assert result.total_items_found == 1
    assert result.extracted_items[0].model_number == "RTU-5"
    assert result.recommendations == valid_payload["recommendations"]


def test_missing_document_type_is_rejected(valid_payload) -> None:
    del valid_payload["documentType"]

    assert not is_valid_extraction(valid_payload)
    with pytest.raises(ExtractionValidationError) as exc:
        validate_extraction(valid_payload, "Gemini")
    assert exc.value.provider == "Gemini"
    assert str(exc.value) == (
        "Generated construction data from Gemini failed validation. Please try again."
    )


@pytest.mark.parametrize(
    "field, value",
    [
        ("summary", None),
        ("totalItemsFound", "3"),
        ("totalItemsFound", True),
        ("extractedItems", {"itemType": "Pump"}),
        ("recommendations", "Check submittals"),
        ("recommendations", ["ok", 5]),
    ],
)
def test_wrong_types_are_rejected(valid_payload, field: str, value) -> None:
    valid_payload[field] = value

    assert not is_valid_extraction(valid_payload)


@pytest.mark.parametrize("field", ["quantity", "mountingType"])
def test_item_fields_must_be_strings(valid_payload, field: str) -> None:
    valid_payload["extractedItems"][0][field] = 2

    assert not is_valid_extraction(valid_payload)


def test_item_fields_must_be_present(valid_payload) -> None:
    del valid_payload["extractedItems"][0]["specReference"]

    assert not is_valid_extraction(valid_payload)


def test_non_mapping_is_rejected() -> None:
    assert not is_valid_extraction([])
    with pytest.raises(ExtractionValidationError):
        validate_extraction("text", "Claude")


def test_item_count_is_reconciled(payload_factory, item_factory) -> None:
    payload = payload_factory([item_factory(), item_factory(), item_factory()])
    payload["totalItemsFound"] = 7

    result = validate_extraction(payload, "Claude")

    assert result.total_items_found == 3


def test_duplicate_items_are_kept_in_order(payload_factory, item_factory) -> None:
    items = [item_factory(modelNumber="A"), item_factory(modelNumber="A"), item_factory(modelNumber="B")]

    result = validate_extraction(payload_factory(items), "Claude")

    assert [item.model_number for item in result.extracted_items] == ["A", "A", "B"]


def test_blank_item_fields_become_not_found(payload_factory, item_factory) -> None:
    result = validate_extraction(payload_factory([item_factory(dimensions="  ")]), "Claude")

    assert result.extracted_items[0].dimensions == "N/A"


def test_serialises_with_camel_case_keys(valid_payload) -> None:
    dumped = validate_extraction(valid_payload, "Claude").model_dump(by_alias=True, exclude_none=True)

    assert dumped == valid_payload


def test_sentinel_passes_validation() -> None:
    result = validate_extraction(sentinel_payload("Gemini"), "Gemini")

    assert result.total_items_found == 0
    assert result.document_type == "Unknown"
    assert len(result.recommendations) == 3


@pytest.mark.parametrize("reported", [1.0, -1, 0, 12.5])
def test_any_numeric_item_count_is_reconciled(valid_payload, reported) -> None:
    valid_payload["totalItemsFound"] = reported
    payload = json.loads(json.dumps(valid_payload))

    assert is_valid_extraction(payload)
    result = validate_extraction(payload, "Claude")
    assert result.total_items_found == 1
    assert isinstance(result.total_items_found, int)


@pytest.mark.parametrize("value", ["anthropic", None, 7, {"name": "claude"}])
def test_model_supplied_provider_is_ignored(valid_payload, value) -> None:
    valid_payload["aiProvider"] = value

    assert is_valid_extraction(valid_payload)
    assert validate_extraction(valid_payload, "Claude").ai_provider is None


def test_stamped_provider_survives_serialisation(valid_payload) -> None:
    result = validate_extraction(valid_payload, "Gemini")
    result.ai_provider = AIProvider.GEMINI

    assert result.model_dump(by_alias=True)["aiProvider"] is AIProvider.GEMINI
