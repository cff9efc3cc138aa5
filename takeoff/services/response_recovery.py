"""Recovery of structured extraction payloads from free-text LLM answers.

Providers are asked to answer with a bare JSON object but regularly wrap it
in prose or markdown fences, escape quotes inconsistently or stop mid-way
through a long item list. :func:`recover_payload` runs an ordered chain of
parse strategies over the cleaned answer and returns the first JSON object
any of them produces. When every strategy fails the chain ends in a fixed
sentinel payload, so callers always receive a mapping.

Whether the recovered mapping actually has the extraction-result shape is
decided afterwards by :mod:`takeoff.services.result_validation`.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

LOGGER = logging.getLogger(__name__)

# A language tag is only consumed on an opening fence, i.e. when a newline follows.
_FENCE_RE = re.compile(r"```(?:[A-Za-z0-9_+-]*[ \t]*\r?\n)?")
_BLANK_LINE_RE = re.compile(r"^\s*[\r\n]", re.MULTILINE)
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_VALID_ESCAPES = frozenset('"\\/bfnrtu')
_CLOSERS = {"{": "}", "[": "]"}


class ParseAttemptError(ValueError):
    """Raised by a strategy that cannot produce a JSON object."""


@dataclass(slots=True)
class RecoveryOutcome:
    """Result of running the recovery chain over one answer."""

    payload: Dict[str, Any]
    strategy: str
    failures: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def fallback_used(self) -> bool:
        return bool(self.failures)

    @property
    def parsed(self) -> bool:
        """``False`` when the sentinel payload had to be used."""

        return self.strategy != SENTINEL_STRATEGY


def clean_json_response(response: str) -> str:
    """Strip markdown fences, blank lines and surrounding whitespace."""

    text = (response or "").strip()
    text = _FENCE_RE.sub("", text)
    text = _BLANK_LINE_RE.sub("", text)
    return text.strip()


def _loads_object(text: str) -> Dict[str, Any]:
    try:
        value = json.loads(text)
    except ValueError as exc:
        raise ParseAttemptError(f"invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise ParseAttemptError("JSON nested too deeply") from exc
    if not isinstance(value, dict):
        raise ParseAttemptError(f"expected a JSON object, got {type(value).__name__}")
    return value


def parse_direct(text: str) -> Dict[str, Any]:
    """Parse ``text`` as-is."""

    return _loads_object(text)


def parse_object_span(text: str) -> Dict[str, Any]:
    """Parse the span from the first ``{`` to the last ``}`` inclusive."""

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise ParseAttemptError("no JSON object found")
    return _loads_object(text[start : end + 1])


def repair_escaping(text: str) -> str:
    """Return ``text`` with control characters dropped and escaping made consistent.

    Backslashes that do not start a valid JSON escape are doubled. Inside a
    string literal a double quote only terminates the string when the next
    non-blank character is structural (``,``, ``:``, ``}``, ``]`` or end of
    input); any other quote is treated as embedded and escaped.
    """

    text = _CONTROL_RE.sub("", text)
    out: list[str] = []
    in_string = False
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if not in_string:
            out.append(char)
            if char == '"':
                in_string = True
            index += 1
            continue
        if char == "\\":
            following = text[index + 1] if index + 1 < length else ""
            if following and following in _VALID_ESCAPES:
                out.append(char + following)
                index += 2
            else:
                out.append("\\\\")
                index += 1
            continue
        if char == '"':
            lookahead = index + 1
            while lookahead < length and text[lookahead] in " \t\r\n":
                lookahead += 1
            if lookahead >= length or text[lookahead] in ",:}]":
                in_string = False
                out.append(char)
            else:
                out.append('\\"')
            index += 1
            continue
        out.append(char)
        index += 1
    return "".join(out)


def parse_repaired_escaping(text: str) -> Dict[str, Any]:
    """Parse ``text`` after :func:`repair_escaping`."""

    return _loads_object(repair_escaping(text))


def repair_truncation(text: str) -> str:
    """Close a dangling string literal and any containers left open.

    This is best effort: a response cut inside its last item comes back as a
    well-formed object whose final field holds whatever text arrived.
    """

    stack: list[str] = []
    in_string = False
    escaped = False
    for char in text:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in "}]" and stack and stack[-1] == char:
            stack.pop()

    repaired = text
    if in_string:
        if escaped:
            repaired = repaired[:-1]
        repaired += '"'
    return repaired + "".join(reversed(stack))


def parse_repaired_truncation(text: str) -> Dict[str, Any]:
    """Parse ``text`` after :func:`repair_truncation`."""

    return _loads_object(repair_truncation(text))


def sentinel_payload(provider_name: str) -> Dict[str, Any]:
    """Return the fixed payload used when no strategy could parse the answer."""

    return {
        "summary": (
            f"Failed to parse complete {provider_name} response. "
            "Please try again with a different document."
        ),
        "totalItemsFound": 0,
        "documentType": "Unknown",
        "extractedItems": [],
        "recommendations": [
            f"Unable to parse {provider_name} response - please try again",
            "Consider using a different PDF with clearer text",
            "Check if document contains structured construction data",
        ],
    }


SENTINEL_STRATEGY = "sentinel"

Strategy = Callable[[str], Dict[str, Any]]

STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("direct", parse_direct),
    ("object_span", parse_object_span),
    ("escaping_repair", parse_repaired_escaping),
    ("truncation_repair", parse_repaired_truncation),
)


def recover_payload(response: str, provider_name: str) -> RecoveryOutcome:
    """Run the strategy chain over ``response``; never raises."""

    text = clean_json_response(response)
    failures: list[tuple[str, str]] = []
    for position, (name, strategy) in enumerate(STRATEGIES, start=1):
        try:
            payload = strategy(text)
        except ParseAttemptError as exc:
            LOGGER.debug("%s parse attempt %d (%s) failed: %s", provider_name, position, name, exc)
            failures.append((name, str(exc)))
            continue
        if failures:
            LOGGER.warning(
                "%s JSON parsed using fallback strategy %d (%s)", provider_name, position, name
            )
        return RecoveryOutcome(payload=payload, strategy=name, failures=failures)

    LOGGER.warning(
        "%s response could not be parsed; returning sentinel result", provider_name
    )
    return RecoveryOutcome(
        payload=sentinel_payload(provider_name),
        strategy=SENTINEL_STRATEGY,
        failures=failures,
    )


__all__ = [
    "ParseAttemptError",
    "RecoveryOutcome",
    "SENTINEL_STRATEGY",
    "STRATEGIES",
    "clean_json_response",
    "parse_direct",
    "parse_object_span",
    "parse_repaired_escaping",
    "parse_repaired_truncation",
    "recover_payload",
    "repair_escaping",
    "repair_truncation",
    "sentinel_payload",
]
