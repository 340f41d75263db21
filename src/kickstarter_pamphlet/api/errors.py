"""Errors raised by the API layer."""

from __future__ import annotations

from typing import Any, Optional


class KickstarterAPIError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class CouldNotParseJSON(KickstarterAPIError):
    """A response could not be converted into domain records."""

    def __init__(self, message: str = "Could not parse response"):
        super().__init__(0, message)


class GraphQLError(KickstarterAPIError):
    """The GraphQL endpoint answered with an ``errors`` array."""

    def __init__(self, errors: list[dict[str, Any]], status_code: int = 200):
        self.errors = errors
        first: Optional[str] = errors[0].get("message") if errors else None
        super().__init__(status_code, first or "GraphQL error")
