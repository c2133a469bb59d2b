from __future__ import annotations

import json
from typing import Any

from core.errors import SerializationError


def canonical_json(value: Any) -> str:
    # Key order is part of the signed bytes: never sort.
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def canonical_json_bytes(value: Any) -> bytes:
    try:
        return canonical_json(value).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"client data could not be serialized: {exc}") from exc
