# src/delegation_hub/core/classifier.py

"""
Classification of a settled remote agent response.

The agent platform returns weakly-typed envelopes of varying shape:

    {"success": bool,
     "response": {"status": str, "message": str, "result": dict | str},
     "raw_response": str,
     "error": str}

Any of these fields may be missing or of the wrong type. classify_response()
is total: it never raises and always yields exactly one variant.

Priority:
1. The recursion/aborting signature anywhere in the raw text, the nested
   message or a string result -> IntegrationAuthError (even if status is success).
2. success + status == "success" -> StructuredSuccess / TextSuccess / GenericComplete.
3. Anything else -> RemoteFailure (re-checked against the auth signature).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from .errors import (
    DEFAULT_COMPLETE_MESSAGE,
    DEFAULT_FAILURE_MESSAGE,
    INTEGRATION_AUTH_MESSAGE,
    matches_auth_signature,
)
from .models import DelegationItem, RunStats, normalize_items


@dataclass(frozen=True, slots=True)
class IntegrationAuthError:
    message: str = INTEGRATION_AUTH_MESSAGE


@dataclass(frozen=True, slots=True)
class StructuredSuccess:
    stats: RunStats | None
    items: tuple[DelegationItem, ...]
    summary: str


@dataclass(frozen=True, slots=True)
class TextSuccess:
    summary: str


@dataclass(frozen=True, slots=True)
class GenericComplete:
    summary: str


@dataclass(frozen=True, slots=True)
class RemoteFailure:
    message: str


Classification = Union[IntegrationAuthError, StructuredSuccess, TextSuccess, GenericComplete, RemoteFailure]


def _str_or_empty(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _first_non_empty(*values: Any) -> str:
    for v in values:
        if isinstance(v, str) and v:
            return v
    return ""


def _as_envelope(raw: Any) -> Mapping[str, Any]:
    if isinstance(raw, Mapping):
        return raw
    if isinstance(raw, str):
        return {"raw_response": raw}
    return {}


def classify_response(raw: Any) -> Classification:
    envelope = _as_envelope(raw)

    response = envelope.get("response")
    if not isinstance(response, Mapping):
        response = {}

    raw_text = _str_or_empty(envelope.get("raw_response"))
    message = _str_or_empty(response.get("message"))
    result = response.get("result")

    if (
        matches_auth_signature(raw_text)
        or matches_auth_signature(message)
        or (isinstance(result, str) and matches_auth_signature(result))
    ):
        return IntegrationAuthError()

    succeeded = envelope.get("success") is True and response.get("status") == "success"

    if succeeded:
        if isinstance(result, Mapping):
            return StructuredSuccess(
                stats=RunStats.from_payload(result.get("data")),
                items=tuple(normalize_items(result.get("items"))),
                summary=_first_non_empty(result.get("summary"), result.get("text"), message),
            )
        if isinstance(result, str):
            return TextSuccess(summary=result)
        return GenericComplete(summary=message or DEFAULT_COMPLETE_MESSAGE)

    failure = _first_non_empty(message, envelope.get("error")) or DEFAULT_FAILURE_MESSAGE
    if matches_auth_signature(failure):
        return IntegrationAuthError()
    return RemoteFailure(message=failure)
