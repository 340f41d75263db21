"""Offline ``ApiService`` with canned results."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from kickstarter_pamphlet.api.errors import CouldNotParseJSON, KickstarterAPIError
from kickstarter_pamphlet.models.message import Message, MessageSubject
from kickstarter_pamphlet.models.navigation import Param, ProjectAndBacking, ProjectPamphletData
from kickstarter_pamphlet.models.user import User

Result = Union[Any, KickstarterAPIError]


@dataclass
class MockService:
    """Deterministic substitute for ``KickstarterClient``.

    Each ``*_result`` is returned as-is, or raised when it is an exception.
    An unset result raises ``CouldNotParseJSON``. Every call sleeps ``delay``
    seconds first so callers can observe in-flight state.
    """

    fetch_project_result: Optional[Result] = None
    fetch_backing_result: Optional[Result] = None
    fetch_project_friends_result: Optional[Result] = field(default_factory=list)
    fetch_user_result: Optional[Result] = None
    send_message_result: Optional[Result] = None
    delay: float = 0.0
    calls: list[tuple[str, Any]] = field(default_factory=list)

    async def _respond(self, name: str, arg: Any, result: Optional[Result]):
        self.calls.append((name, arg))
        await asyncio.sleep(self.delay)
        if isinstance(result, BaseException):
            raise result
        if result is None:
            raise CouldNotParseJSON(f"No canned result for {name}")
        return result

    def call_count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    async def fetch_project(self, param: Param) -> ProjectPamphletData:
        return await self._respond("fetch_project", param, self.fetch_project_result)

    async def fetch_backing(self, backing_id: int) -> ProjectAndBacking:
        return await self._respond("fetch_backing", backing_id, self.fetch_backing_result)

    async def fetch_project_friends(self, param: Param) -> list[User]:
        return await self._respond(
            "fetch_project_friends", param, self.fetch_project_friends_result
        )

    async def fetch_user(self, user_id: int) -> User:
        return await self._respond("fetch_user", user_id, self.fetch_user_result)

    async def send_message(self, body: str, subject: MessageSubject) -> Message:
        return await self._respond("send_message", (body, subject), self.send_message_result)
