"""View model for the project pamphlet (project detail) screen.

State machine::

    idle --trigger--> loading --ok--> loaded
                         |  \\--error--> errored
                         \\<--trigger-- (loaded | errored)

Fetch triggers are view-did-load, returning from the thank-you page,
finishing pledge management and tapping retry. Each trigger replaces the
in-flight fetch. Failures are reported through ``configure_pledge_cta_view``
and are never retried automatically.

Fetches run as tasks on the running asyncio loop, so inputs must be called
from inside that loop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from kickstarter_pamphlet.api.errors import KickstarterAPIError
from kickstarter_pamphlet.models.navigation import (
    ManagePledgeParams,
    Param,
    PledgeStateCTAType,
    ProjectOrParam,
    RefTag,
    param_for,
)
from kickstarter_pamphlet.models.project import Project
from kickstarter_pamphlet.models.user import User
from kickstarter_pamphlet.viewmodels.environment import (
    Environment,
    cookie_from,
    cookie_ref_tag_for,
)
from kickstarter_pamphlet.viewmodels.signal import Signal

logger = logging.getLogger(__name__)

PROJECT_PAMPHLET_CONTEXT = "project_pamphlet"


class PamphletState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERRORED = "errored"


class SizeClass(str, Enum):
    COMPACT = "compact"
    REGULAR = "regular"


@dataclass(frozen=True)
class TraitCollection:
    horizontal: SizeClass = SizeClass.COMPACT
    vertical: SizeClass = SizeClass.REGULAR

    @property
    def is_regular_regular(self) -> bool:
        return self.horizontal is SizeClass.REGULAR and self.vertical is SizeClass.REGULAR

    @property
    def is_vertically_compact(self) -> bool:
        return self.vertical is SizeClass.COMPACT


@dataclass(frozen=True)
class PledgeCTAContainerViewData:
    """Either a project or an error, plus the loading flag."""

    project: Optional[Project]
    ref_tag: Optional[RefTag]
    error: Optional[KickstarterAPIError]
    is_loading: bool
    context: str = PROJECT_PAMPHLET_CONTEXT


def layout_constraint_constant(initial_top_constraint: float, traits: TraitCollection) -> float:
    if traits.is_regular_regular or traits.is_vertically_compact:
        return 0.0
    return initial_top_constraint


class ProjectPamphletViewModel:
    """Inputs are the public methods; outputs are the ``Signal`` attributes."""

    def __init__(self, environment: Optional[Environment] = None):
        self.env = environment or Environment()

        # Outputs
        self.configure_child_view_controllers_with_project: Signal[
            tuple[Project, Optional[RefTag]]
        ] = Signal("configure_child_view_controllers_with_project")
        self.configure_pledge_cta_view: Signal[PledgeCTAContainerViewData] = Signal(
            "configure_pledge_cta_view"
        )
        self.dismiss_manage_pledge_and_show_message_banner_with_message: Signal[str] = Signal(
            "dismiss_manage_pledge_and_show_message_banner_with_message"
        )
        self.go_to_manage_pledge: Signal[ManagePledgeParams] = Signal("go_to_manage_pledge")
        self.go_to_rewards: Signal[tuple[Project, Optional[RefTag]]] = Signal("go_to_rewards")
        self.pop_to_root_view_controller: Signal[None] = Signal("pop_to_root_view_controller")
        self.set_navigation_bar_hidden_animated: Signal[tuple[bool, bool]] = Signal(
            "set_navigation_bar_hidden_animated"
        )
        self.set_needs_status_bar_appearance_update: Signal[None] = Signal(
            "set_needs_status_bar_appearance_update"
        )
        self.top_layout_constraint_constant: Signal[float] = Signal(
            "top_layout_constraint_constant"
        )

        self.state = PamphletState.IDLE

        self._config: Optional[tuple[ProjectOrParam, Optional[RefTag]]] = None
        self._fetch_task: Optional[asyncio.Task] = None
        self._friends_task: Optional[asyncio.Task] = None
        self._friends: list[User] = []
        self._is_loading = False

        self._fresh: Optional[tuple[Project, Optional[RefTag]]] = None
        self._fetched_project: Optional[tuple[Project, Optional[RefTag]]] = None
        self._backed_project: Optional[Project] = None
        self._cta_project: Optional[Project] = None
        self._cta_error: Optional[KickstarterAPIError] = None

        self._initial_top_constraint: Optional[float] = None
        self._view_will_appear_count = 0
        self._view_did_appear = False

        self._cookie_ref_tag_resolved = False
        self._project_view_tracked = False

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def configure_with(self, project_or_param: ProjectOrParam, ref_tag: Optional[RefTag] = None):
        """Set the project (or its id/slug) and the ref tag the screen was opened with."""
        self._config = (project_or_param, ref_tag)
        self._fetch_friends(param_for(project_or_param))

    def view_did_load(self):
        self._start_fetch(should_prefix=True)
        self.set_navigation_bar_hidden_animated.send((True, False))

    def initial(self, top_constraint: float):
        self._initial_top_constraint = top_constraint

    def did_back_project(self):
        """The thank-you page was dismissed after backing the project."""
        self.pop_to_root_view_controller.send(None)
        self._start_fetch(should_prefix=False)

    def manage_pledge_view_controller_finished(self, message: Optional[str] = None):
        self._start_fetch(should_prefix=False)
        if message is not None:
            self.dismiss_manage_pledge_and_show_message_banner_with_message.send(message)

    def pledge_cta_button_tapped(self, state: PledgeStateCTAType):
        if state.goes_to_rewards and self._fresh is not None:
            self.go_to_rewards.send(self._fresh)
        elif state.goes_to_manage_pledge and self._backed_project is not None:
            project = self._backed_project
            backing = project.personalization.backing
            self.go_to_manage_pledge.send(
                ManagePledgeParams(
                    project_param=Param.of_slug(project.slug),
                    backing_param=Param.of_id(backing.id),
                )
            )

    def pledge_retry_button_tapped(self):
        self._start_fetch(should_prefix=False)

    def view_did_appear(self, animated: bool):
        self._view_did_appear = True
        self._track_project_viewed()

    def view_will_appear(self, animated: bool):
        self._view_will_appear_count += 1
        self.set_needs_status_bar_appearance_update.send(None)
        if self._view_will_appear_count > 1:
            self.set_navigation_bar_hidden_animated.send((True, animated))

    def will_transition(self, traits: TraitCollection):
        self.set_needs_status_bar_appearance_update.send(None)
        if self._initial_top_constraint is not None:
            self.top_layout_constraint_constant.send(
                layout_constraint_constant(self._initial_top_constraint, traits)
            )

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    async def wait_until_idle(self):
        """Await the in-flight fetches, if any. Used by tests and scripts."""
        tasks = [t for t in (self._fetch_task, self._friends_task) if t is not None]
        while tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            current = [t for t in (self._fetch_task, self._friends_task) if t is not None]
            tasks = [t for t in current if not t.done()]

    def _fetch_friends(self, param: Param):
        if self._friends_task is not None and not self._friends_task.done():
            self._friends_task.cancel()
        self._friends_task = asyncio.get_running_loop().create_task(self._load_friends(param))

    async def _load_friends(self, param: Param):
        try:
            self._friends = await self.env.api_service.fetch_project_friends(param)
        except Exception as e:
            logger.warning(f"Ignoring project friends error ({type(e).__name__}): {e}")

    def _start_fetch(self, should_prefix: bool):
        if self._config is None:
            return
        project_or_param, ref_tag = self._config
        ref_tag = ref_tag.clean_up() if ref_tag is not None else None

        if self._fetch_task is not None and not self._fetch_task.done():
            self._fetch_task.cancel()

        self.state = PamphletState.LOADING
        self._set_loading(True)

        if should_prefix and isinstance(project_or_param, Project):
            self._emit_fresh(project_or_param, ref_tag)

        self._fetch_task = asyncio.get_running_loop().create_task(
            self._fetch(param_for(project_or_param), ref_tag)
        )

    async def _fetch_project(self, param: Param) -> Project:
        """The project, with the viewer's backing attached when there is one."""
        api = self.env.api_service
        pamphlet_data = await api.fetch_project(param)
        if pamphlet_data.backing_id is None:
            return pamphlet_data.project

        envelope = await api.fetch_backing(pamphlet_data.backing_id)
        return pamphlet_data.project.with_backing(envelope.backing)

    async def _fetch(self, param: Param, ref_tag: Optional[RefTag]):
        try:
            project = await self._fetch_project(param)
        except KickstarterAPIError as e:
            logger.warning(f"Project fetch failed for {param}: {e}")
            self.state = PamphletState.ERRORED
            self._set_loading(False)
            self._cta_project, self._cta_error = None, e
            self._emit_cta(ref_tag)
            return

        self.state = PamphletState.LOADED
        self._emit_fresh(project, ref_tag)
        self._fetched_project = self._fresh
        self._track_project_viewed()
        self._set_loading(False)

    # ------------------------------------------------------------------
    # Derived outputs
    # ------------------------------------------------------------------

    def _emit_fresh(self, project: Project, ref_tag: Optional[RefTag]):
        project = project.with_friends(self._friends)
        self._fresh = (project, ref_tag)

        personalization = project.personalization
        if personalization.is_backing and personalization.backing is not None:
            self._backed_project = project

        self._cta_project, self._cta_error = project, None
        self._emit_cta(ref_tag)
        self.configure_child_view_controllers_with_project.send((project, ref_tag))
        self._store_ref_tag_cookie(project, ref_tag)

    def _set_loading(self, value: bool):
        if self._is_loading == value:
            return
        self._is_loading = value
        ref_tag = self._fresh[1] if self._fresh else None
        self._emit_cta(ref_tag)

    def _emit_cta(self, ref_tag: Optional[RefTag]):
        if self._cta_project is None and self._cta_error is None:
            return
        self.configure_pledge_cta_view.send(
            PledgeCTAContainerViewData(
                project=self._cta_project,
                ref_tag=ref_tag,
                error=self._cta_error,
                is_loading=self._is_loading,
            )
        )

    def _store_ref_tag_cookie(self, project: Project, ref_tag: Optional[RefTag]):
        """Only the first fresh project decides the cookie; it is written at most once."""
        if self._cookie_ref_tag_resolved:
            return
        self._cookie_ref_tag_resolved = True

        storage = self.env.cookie_storage
        cookie_ref_tag = cookie_ref_tag_for(storage, project) or ref_tag
        if cookie_ref_tag is None:
            return
        cookie = cookie_from(cookie_ref_tag, project, now=self.env.clock())
        if cookie is not None:
            storage.set_cookie(cookie)

    def _track_project_viewed(self):
        """Once per screen, after the view appeared and a fetch completed."""
        if self._project_view_tracked or not self._view_did_appear:
            return
        if self._fetched_project is None:
            return
        self._project_view_tracked = True
        project, ref_tag = self._fetched_project
        self.env.tracker.track_project_viewed(project, ref_tag)
