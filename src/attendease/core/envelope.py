"""Unwrap agent response envelopes into plain payload mappings.

Upstream agents serialize their output inconsistently. Observed shapes:

* ``{"response": "<json text>"}`` where the decoded object carries ``result``
  as JSON text (double encoded) or as an object.
* ``{"response": {"result": {...}}}`` with no string encoding at all.
* ``{"response": {...}}`` where the payload sits directly under ``response``
  with no ``result`` wrapper.

`classify_envelope` runs the fallback chain once and tags which shape matched,
so callers and tests can tell the shapes apart. `extract_payload` only cares
about the payload and returns ``None`` for every shape that has none.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, TypeVar

log = logging.getLogger(__name__)

EnvelopeKind = Literal["missing", "undecodable", "nested_result", "bare_payload", "unusable"]
ENVELOPE_KINDS: tuple[EnvelopeKind, ...] = (
    "missing",
    "undecodable",
    "nested_result",
    "bare_payload",
    "unusable",
)

_UNDECODED = object()


@dataclass(frozen=True, slots=True)
class EnvelopeShape:
    """Tagged outcome of unwrapping one envelope."""

    kind: EnvelopeKind
    payload: dict[str, Any] | None = None

    @property
    def has_payload(self) -> bool:
        return self.payload is not None


RecordT = TypeVar("RecordT")


def _decode_json(text: str) -> Any:
    try:
        return json.loads(text)
    except (ValueError, TypeError, RecursionError) as exc:
        # JSONDecodeError is a ValueError; deep nesting surfaces as RecursionError.
        log.debug("envelope text is not valid JSON: %s", exc)
        return _UNDECODED


def _as_payload(value: Any) -> dict[str, Any] | None:
    if isinstance(value, dict):
        return value
    if isinstance(value, Mapping):
        return dict(value)
    return None


def _unwrap_response(response: Any) -> Any:
    if not isinstance(response, str):
        return response
    decoded = _decode_json(response)
    if isinstance(decoded, str):
        # Whole response encoded twice.
        again = _decode_json(decoded)
        if again is not _UNDECODED:
            return again
    return decoded


def _unwrap_result(response_obj: Any) -> Any:
    if not isinstance(response_obj, Mapping):
        return None
    result = response_obj.get("result")
    if isinstance(result, str):
        decoded = _decode_json(result)
        if decoded is not _UNDECODED:
            return decoded
    return result


def classify_envelope(envelope: Any) -> EnvelopeShape:
    """Tag the envelope with the first shape in the fallback chain that applies."""
    if not isinstance(envelope, Mapping):
        return EnvelopeShape("missing")

    response = envelope.get("response")
    if response is None or response == "":
        return EnvelopeShape("missing")

    response_obj = _unwrap_response(response)
    if response_obj is _UNDECODED:
        return EnvelopeShape("undecodable")

    result_payload = _as_payload(_unwrap_result(response_obj))
    if result_payload is not None:
        return EnvelopeShape("nested_result", result_payload)

    response_payload = _as_payload(response_obj)
    if response_payload is not None:
        return EnvelopeShape("bare_payload", response_payload)

    return EnvelopeShape("unusable")


def extract_payload(envelope: Any) -> dict[str, Any] | None:
    """Return the structured payload carried by an agent envelope, or None."""
    shape = classify_envelope(envelope)
    if not shape.has_payload:
        log.debug("envelope yielded no payload (shape=%s)", shape.kind)
    return shape.payload


def extract_record(envelope: Any, record_type: type[RecordT]) -> RecordT | None:
    """Extract the payload and build `record_type` from it via `from_payload`."""
    payload = extract_payload(envelope)
    if payload is None:
        return None
    return record_type.from_payload(payload)  # type: ignore[attr-defined]
