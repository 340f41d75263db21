"""The API operations the view models depend on."""

from __future__ import annotations

from typing import Protocol

from kickstarter_pamphlet.models.message import Message, MessageSubject
from kickstarter_pamphlet.models.navigation import Param, ProjectAndBacking, ProjectPamphletData
from kickstarter_pamphlet.models.user import User


class ApiService(Protocol):
    """Async API surface. Implementations raise ``KickstarterAPIError`` subclasses."""

    async def fetch_project(self, param: Param) -> ProjectPamphletData: ...

    async def fetch_backing(self, backing_id: int) -> ProjectAndBacking: ...

    async def fetch_project_friends(self, param: Param) -> list[User]: ...

    async def fetch_user(self, user_id: int) -> User: ...

    async def send_message(self, body: str, subject: MessageSubject) -> Message: ...
