"""Serialization of user data to bytes."""

from __future__ import annotations

import json
from typing import Any


class SerializationError(ValueError):
    """Raised when data cannot be serialized or deserialized."""


def serialize(data: Any) -> bytes:
    """Encode plain data (dicts, lists, numbers, strings, booleans) as bytes."""
    try:
        return json.dumps(data, sort_keys=True, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as error:
        raise SerializationError(f"failed to serialize data: {error}") from error


def deserialize(data: bytes) -> Any:
    """Decode bytes produced by :func:`serialize`."""
    try:
        return json.loads(bytes(data).decode("utf-8"))
    except (TypeError, ValueError) as error:
        raise SerializationError(f"failed to deserialize data: {error}") from error