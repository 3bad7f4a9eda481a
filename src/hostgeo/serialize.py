"""Serialization helpers for deterministic JSON outputs."""

from __future__ import annotations

import json
from typing import Any, Mapping, Union

try:  # pragma: no cover - optional speed-up
    import orjson
except Exception:  # pragma: no cover - fallback to stdlib
    orjson = None  # type: ignore[assignment]

from .errors import GeoIPError
from .models import LookupRecord


def dumps(data: Any) -> str:
    if orjson is not None:
        return orjson.dumps(
            data,
            option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS,
        ).decode()
    return json.dumps(data, indent=2, sort_keys=True)


def results_to_dict(
    results: Mapping[str, Union[LookupRecord, GeoIPError]],
) -> dict[str, dict[str, Any]]:
    """Map each address to its record fields, or to ``{"error": ...}`` on failure."""
    payload: dict[str, dict[str, Any]] = {}
    for ip, result in results.items():
        if isinstance(result, LookupRecord):
            payload[ip] = result.to_dict()
        else:
            payload[ip] = {"error": result.message, "error_type": type(result).__name__}
    return payload
