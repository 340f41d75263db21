"""Collaborators injected into the view models."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol
from urllib.parse import urlparse

from kickstarter_pamphlet.api.mock_service import MockService
from kickstarter_pamphlet.api.service import ApiService
from kickstarter_pamphlet.models.message import MessageDialogContext
from kickstarter_pamphlet.models.navigation import RefTag
from kickstarter_pamphlet.models.project import Project

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cookie:
    name: str
    value: str
    domain: str
    path: str = "/"
    expires: Optional[float] = None


class CookieStorage:
    """In-memory cookie jar keyed by cookie name."""

    def __init__(self):
        self._cookies: dict[str, Cookie] = {}

    def set_cookie(self, cookie: Cookie) -> None:
        self._cookies[cookie.name] = cookie

    def get(self, name: str) -> Optional[Cookie]:
        return self._cookies.get(name)

    @property
    def cookies(self) -> list[Cookie]:
        return list(self._cookies.values())


def ref_cookie_name(project: Project) -> str:
    return f"ref_{project.id}"


def cookie_ref_tag_for(storage: CookieStorage, project: Project) -> Optional[RefTag]:
    """The ref tag stored for this project by an earlier visit, if any."""
    cookie = storage.get(ref_cookie_name(project))
    return RefTag(code=cookie.value) if cookie else None


def cookie_from(ref_tag: RefTag, project: Project, now: float) -> Optional[Cookie]:
    """A ref-tag cookie that expires with the campaign. None once the deadline passed."""
    if project.dates.deadline <= now:
        return None
    domain = urlparse(project.urls.web.project).hostname or "www.kickstarter.com"
    return Cookie(
        name=ref_cookie_name(project),
        value=ref_tag.code,
        domain=domain,
        path="/",
        expires=project.dates.deadline,
    )


class Tracker(Protocol):
    def track_project_viewed(self, project: Project, ref_tag: Optional[RefTag]) -> None: ...

    def track_message_sent(self, context: MessageDialogContext) -> None: ...


class LoggingTracker:
    """Tracker that only writes analytics events to the log."""

    def track_project_viewed(self, project: Project, ref_tag: Optional[RefTag]) -> None:
        logger.info(f"Project viewed: {project.slug} (ref_tag={ref_tag})")

    def track_message_sent(self, context: MessageDialogContext) -> None:
        logger.info(f"Message sent (context={context.value})")


@dataclass
class Environment:
    api_service: ApiService = field(default_factory=MockService)
    cookie_storage: CookieStorage = field(default_factory=CookieStorage)
    tracker: Tracker = field(default_factory=LoggingTracker)
    clock: Callable[[], float] = time.time
