"""
JSON helpers backed by orjson.

Canonical encoding (sorted keys, compact) is what bundle hashing and the
serialized transaction payloads rely on, so every producer goes through here.

Usage:
    from src.core.json_utils import dumps, canonical_bytes

    log.info(dumps({"event": "settings_resolved", "mwm": 14}))
"""

from __future__ import annotations

from typing import Any

import orjson


def dumps(obj: Any) -> str:
    """JSON encode to string."""
    return orjson.dumps(obj).decode("utf-8")


def canonical_bytes(obj: Any) -> bytes:
    """Deterministic encoding: keys sorted, no whitespace."""
    return orjson.dumps(obj, option=orjson.OPT_SORT_KEYS)


def canonical_dumps(obj: Any) -> str:
    return canonical_bytes(obj).decode("utf-8")
