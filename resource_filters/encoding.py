"""Encode and decode the active filter values carried in a query string.

The payload is base64 over a JSON list of ``{"key": ..., "value": ...}``
entries, so values keep their structure (boolean filters send a dict).
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Mapping

from django.core.serializers.json import DjangoJSONEncoder

from resource_filters.exceptions import FilterDecodeError

_TO_STANDARD = str.maketrans("-_", "+/")


def encode_filters(values: Mapping[str, Any]) -> str:
    payload = [{"key": key, "value": value} for key, value in (values or {}).items()]
    raw = json.dumps(payload, cls=DjangoJSONEncoder, separators=(",", ":"))
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def decode_filters(raw: str | None) -> dict[str, Any]:
    if raw is None:
        return {}
    text = raw.strip().replace(" ", "+").translate(_TO_STANDARD)
    if not text:
        return {}
    text += "=" * (-len(text) % 4)
    try:
        document = base64.b64decode(text, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise FilterDecodeError("Filter payload is not valid base64.") from exc
    try:
        entries = json.loads(document)
    except json.JSONDecodeError as exc:
        raise FilterDecodeError("Filter payload is not valid JSON.") from exc
    if not isinstance(entries, list):
        raise FilterDecodeError("Filter payload must be a list of entries.")

    values: dict[str, Any] = {}
    for entry in entries:
        if not isinstance(entry, dict) or not isinstance(entry.get("key"), str):
            raise FilterDecodeError("Every filter entry needs a string 'key'.")
        values[entry["key"]] = entry.get("value")
    return values
