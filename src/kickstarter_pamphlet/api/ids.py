"""Relay-style GraphQL ids.

GraphQL ids are base64 of ``"<Type>-<number>"``, e.g. ``UmV3YXJkLTgxOTAzMjA=``
is ``Reward-8190320``.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Optional


def decompose_id(token: Any) -> Optional[int]:
    """Return the numeric part of a GraphQL id, or None if it can't be decoded."""
    if not isinstance(token, str) or not token:
        return None
    padded = token + "=" * (-len(token) % 4)
    try:
        decoded = base64.b64decode(padded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None

    _, sep, number = decoded.rpartition("-")
    if not sep or not (number.isascii() and number.isdigit()):
        return None
    return int(number)


def encode_id(type_name: str, value: int) -> str:
    """Inverse of ``decompose_id``."""
    return base64.b64encode(f"{type_name}-{value}".encode("utf-8")).decode("ascii")
