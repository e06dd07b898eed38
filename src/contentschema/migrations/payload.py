"""
Helpers for the version key embedded in stored payloads.

A stored payload records the schema version it conforms to under a
reserved key (``_schema`` unless configured otherwise)::

    {"_schema": "article@v1.2.0", "title": "Hello"}
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, Optional

from contentschema.config import get_config


def _resolve_key(key: Optional[str]) -> str:
    return key if key else get_config().payload_version_key


def payload_version(payload: Optional[Mapping[str, Any]], key: Optional[str] = None) -> str:
    """Embedded version string, or ``""`` when absent or not a string."""
    if not payload:
        return ""
    value = payload.get(_resolve_key(key))
    return value.strip() if isinstance(value, str) else ""


def strip_payload_version(
    payload: Mapping[str, Any], key: Optional[str] = None
) -> dict[str, Any]:
    """Copy of ``payload`` without the version key."""
    resolved = _resolve_key(key)
    return {k: copy.deepcopy(v) for k, v in payload.items() if k != resolved}


def stamp_payload_version(
    payload: Mapping[str, Any], version: str, key: Optional[str] = None
) -> dict[str, Any]:
    """Copy of ``payload`` with ``version`` recorded under the version key."""
    out = copy.deepcopy(dict(payload))
    out[_resolve_key(key)] = version
    return out
