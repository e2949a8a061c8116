"""Application cache – CacheKey builder."""
from __future__ import annotations

import base64
import decimal
import enum
import json
import uuid
from collections.abc import Mapping
from typing import Any

__all__ = ["CacheKey"]


def _encode(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, decimal.Decimal):
        # 100, 100.0 and 100.00 must produce the same key
        normalized = value.normalize()
        return format(normalized, "f")
    if isinstance(value, uuid.UUID):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not cache-key serialisable")


class CacheKey:
    """Factory for deterministic cache key strings."""

    @staticmethod
    def for_search(namespace: str, params: Mapping[str, Any]) -> str:
        """Encode *params* in the order given as ``<namespace>:<base64 JSON>``.

        The caller fixes the key order; ``None`` values are kept as JSON
        ``null`` so that absent fields still occupy their slot.  The
        encoding is reversible, so distinct inputs never collide.
        """
        canonical = json.dumps(dict(params), default=_encode, separators=(",", ":"), ensure_ascii=False)
        encoded = base64.b64encode(canonical.encode("utf-8")).decode("ascii")
        return f"{namespace}:{encoded}"

    @staticmethod
    def decode_search(key: str) -> dict[str, Any]:
        """Inverse of :meth:`for_search` (namespace is discarded)."""
        _, _, encoded = key.partition(":")
        return json.loads(base64.b64decode(encoded).decode("utf-8"))
