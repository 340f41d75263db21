"""GraphQL client for Kickstarter.

Uses curl_cffi with a Chrome TLS fingerprint. The ``/graph`` endpoint needs
the session cookies and CSRF token of a regular page visit, so the first call
opens a session on the landing page and scrapes the token from its meta tag.

Rate-limited; retries 403 (with a fresh session) and 5xx with backoff.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import time
from typing import Any, Optional

from curl_cffi import requests as curl_requests

from kickstarter_pamphlet.api import queries
from kickstarter_pamphlet.api.errors import CouldNotParseJSON, GraphQLError, KickstarterAPIError
from kickstarter_pamphlet.api.ids import encode_id
from kickstarter_pamphlet.api.query_data import (
    friends_from_query,
    message_from_mutation,
    project_and_backing_from_query,
    project_from_query,
    project_pamphlet_data_from_query,
    user_from_query,
)
from kickstarter_pamphlet.models.message import Message, MessageSubject
from kickstarter_pamphlet.models.navigation import Param, ProjectAndBacking, ProjectPamphletData
from kickstarter_pamphlet.models.project import Project
from kickstarter_pamphlet.models.user import User

logger = logging.getLogger(__name__)

BASE_URL = "https://www.kickstarter.com"

_CSRF_RE = re.compile(r'<meta\s+name="csrf-token"\s+content="([^"]+)"')


class RateLimiter:
    """Minimum interval between requests."""

    def __init__(self, rps: float = 1.0):
        self._interval = 1.0 / rps
        self._last = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self):
        async with self._lock:
            wait = self._last + self._interval - time.monotonic()
            if wait > 0:
                await asyncio.sleep(wait)
            self._last = time.monotonic()


class KickstarterClient:
    """``ApiService`` backed by the Kickstarter GraphQL endpoint."""

    def __init__(
        self,
        base_url: str = BASE_URL,
        rate_limit_rps: float = 1.0,
        timeout: float = 30.0,
        max_retries: int = 3,
    ):
        self._base_url = base_url.rstrip("/")
        self._rate_limiter = RateLimiter(rps=rate_limit_rps)
        self._timeout = timeout
        self._max_retries = max_retries
        self._session: Optional[curl_requests.Session] = None
        self._csrf = ""

    @classmethod
    def from_config(cls, config: dict) -> "KickstarterClient":
        api_cfg = config.get("api", {})
        return cls(
            base_url=api_cfg.get("base_url", BASE_URL),
            rate_limit_rps=api_cfg.get("rate_limit_rps", 1.0),
            timeout=api_cfg.get("timeout", 30.0),
            max_retries=api_cfg.get("max_retries", 3),
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def close(self):
        if self._session is not None:
            self._session.close()
            self._session = None
            self._csrf = ""

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _open_session(self) -> None:
        """Visit the landing page for cookies and the CSRF token."""
        session = curl_requests.Session()
        resp = session.get(self._base_url, impersonate="chrome", timeout=self._timeout)
        match = _CSRF_RE.search(resp.text)
        if not match:
            session.close()
            raise KickstarterAPIError(resp.status_code, "No CSRF token on landing page")
        self._session = session
        self._csrf = match.group(1)
        logger.debug("Opened GraphQL session")

    def _post_graph(self, payload: dict) -> tuple[int, str]:
        if self._session is None:
            self._open_session()
        resp = self._session.post(
            f"{self._base_url}/graph",
            json=payload,
            headers={"X-CSRF-Token": self._csrf, "Content-Type": "application/json"},
            impersonate="chrome",
            timeout=self._timeout,
        )
        return resp.status_code, resp.text

    async def _post_graph_async(self, payload: dict) -> tuple[int, str]:
        """Run the blocking curl_cffi call in a thread."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._post_graph, payload)

    async def graphql(self, query: str, variables: Optional[dict[str, Any]] = None) -> dict:
        """Run a GraphQL document and return its ``data`` object."""
        payload = {"query": query, "variables": variables or {}}
        await self._rate_limiter.acquire()

        for attempt in range(self._max_retries):
            try:
                status, body = await self._post_graph_async(payload)
            except KickstarterAPIError:
                raise
            except Exception as e:
                if attempt == self._max_retries - 1:
                    raise KickstarterAPIError(0, str(e)) from e
                logger.warning(f"GraphQL request failed ({type(e).__name__}), retry {attempt + 1}")
                await asyncio.sleep(2 ** attempt)
                continue

            if status == 403:
                wait = 15 * (attempt + 1)
                logger.warning(f"403 blocked, new session in {wait}s (attempt {attempt + 1})")
                await self.close()
                await asyncio.sleep(wait)
                continue
            if status >= 500:
                logger.warning(f"Server error {status}, retry {attempt + 1}")
                await asyncio.sleep(2 ** attempt)
                continue
            if status != 200:
                raise KickstarterAPIError(status, body[:200])

            try:
                document = json.loads(body)
            except json.JSONDecodeError as e:
                raise CouldNotParseJSON("Non-JSON response from /graph") from e

            if not isinstance(document, dict):
                raise CouldNotParseJSON("Response from /graph is not an object")
            if document.get("errors"):
                raise GraphQLError(document["errors"], status_code=status)
            return document.get("data") or {}

        raise KickstarterAPIError(403, "Max retries exceeded")

    # ------------------------------------------------------------------
    # ApiService
    # ------------------------------------------------------------------

    async def fetch_project(self, param: Param) -> ProjectPamphletData:
        """Fetch a project with its rewards, add-ons and the viewer's backing id."""
        logger.debug(f"Fetch project: {param}")
        if param.id is not None:
            data = await self.graphql(queries.FETCH_PROJECT_BY_ID, {"projectId": param.id})
        else:
            data = await self.graphql(queries.FETCH_PROJECT_BY_SLUG, {"slug": param.slug})
        return project_pamphlet_data_from_query(data)

    async def fetch_add_ons(self, slug: str, location_id: Optional[int] = None) -> Project:
        """Fetch a project's add-ons with shipping rules expanded for a location."""
        variables: dict[str, Any] = {"projectSlug": slug}
        if location_id is not None:
            variables["locationId"] = encode_id("Location", location_id)
        data = await self.graphql(queries.FETCH_ADD_ONS, variables)
        project, _ = project_from_query(data)
        if project is None:
            raise CouldNotParseJSON()
        return project

    async def fetch_backing(self, backing_id: int) -> ProjectAndBacking:
        logger.debug(f"Fetch backing: {backing_id}")
        data = await self.graphql(queries.FETCH_BACKING, {"id": encode_id("Backing", backing_id)})
        return project_and_backing_from_query(data)

    async def fetch_project_friends(self, param: Param) -> list[User]:
        if param.id is not None:
            data = await self.graphql(queries.FETCH_PROJECT_FRIENDS_BY_ID, {"projectId": param.id})
        else:
            data = await self.graphql(queries.FETCH_PROJECT_FRIENDS_BY_SLUG, {"slug": param.slug})
        return friends_from_query(data)

    async def fetch_user(self, user_id: int) -> User:
        data = await self.graphql(queries.FETCH_USER, {"id": encode_id("User", user_id)})
        return user_from_query(data)

    async def send_message(self, body: str, subject: MessageSubject) -> Message:
        recipient_id = subject.recipient_id
        if recipient_id is None:
            raise KickstarterAPIError(0, "Message has no recipient")
        message_input: dict[str, Any] = {
            "body": body,
            "recipientId": encode_id("User", recipient_id),
        }
        if subject.project_id is not None:
            message_input["projectId"] = encode_id("Project", subject.project_id)
        data = await self.graphql(queries.SEND_MESSAGE, {"input": message_input})
        return message_from_mutation(data)
