"""Convert whole GraphQL query documents (the ``data`` object) into envelopes.

Fragment-level parsers in ``parser`` and ``reward_parser`` return None on
failure; the functions here that back an API call raise ``CouldNotParseJSON``
instead so the caller sees a single error type, whether a field was missing
or present with the wrong shape.
"""

from __future__ import annotations

import logging
from typing import Optional

from kickstarter_pamphlet.api.errors import CouldNotParseJSON
from kickstarter_pamphlet.api.ids import decompose_id
from kickstarter_pamphlet.api.parser import (
    MALFORMED,
    float_or_none,
    parse_backing,
    parse_project,
    parse_timestamp,
    parse_user,
)
from kickstarter_pamphlet.api.reward_parser import parse_reward, parse_reward_nodes
from kickstarter_pamphlet.models.message import Message
from kickstarter_pamphlet.models.navigation import ProjectAndBacking, ProjectPamphletData
from kickstarter_pamphlet.models.project import Project
from kickstarter_pamphlet.models.reward import Reward
from kickstarter_pamphlet.models.user import User

logger = logging.getLogger(__name__)


def no_reward_placeholder(project_data: Optional[dict]) -> Reward:
    """The "no reward" tier, priced from the project's minimum pledge.

    GraphQL does not return this tier, so it is synthesized locally and always
    placed first in the reward list. ``minPledge`` defaults to 1 and ``fxRate``
    to 1.0 when absent or not numeric.
    """
    project_data = project_data if isinstance(project_data, dict) else {}
    minimum = float_or_none(project_data.get("minPledge"))
    fx_rate = float_or_none(project_data.get("fxRate"))
    minimum = minimum if minimum is not None else 1.0
    fx_rate = fx_rate if fx_rate is not None else 1.0

    return Reward.no_reward().model_copy(
        update={"minimum": minimum, "converted_minimum": fx_rate * minimum}
    )


def _project_from_query(data: Optional[dict]) -> tuple[Optional[Project], Optional[int]]:
    data = data or {}
    project_data = data.get("project")
    if not project_data:
        return None, None

    add_ons = parse_reward_nodes(project_data.get("addOns"))
    rewards = parse_reward_nodes(project_data.get("rewards")) or []
    all_rewards = [no_reward_placeholder(project_data)] + rewards

    backing_id = decompose_id((project_data.get("backing") or {}).get("id"))

    project = parse_project(
        project_data,
        rewards=all_rewards,
        add_ons=add_ons,
        backing=None,
        current_currency=(data.get("me") or {}).get("chosenCurrency"),
    )
    if project is None:
        return None, None

    return project, backing_id


def project_from_query(data: Optional[dict]) -> tuple[Optional[Project], Optional[int]]:
    """Build a project and the viewer's backing id from a project query.

    Works for the fetch-by-id, fetch-by-slug and add-ons queries, which share
    the project fragment and differ only in the connections they select.

    Returns:
        ``(project, backing_id)``; ``(None, None)`` when the project fragment
        can't be parsed.
    """
    try:
        return _project_from_query(data)
    except MALFORMED as e:
        logger.debug(f"Malformed project query ({type(e).__name__}: {e})")
        return None, None


def project_pamphlet_data_from_query(data: Optional[dict]) -> ProjectPamphletData:
    project, backing_id = project_from_query(data)
    if project is None:
        logger.warning("Could not parse project from query response")
        raise CouldNotParseJSON()
    return ProjectPamphletData(project=project, backing_id=backing_id)


def project_and_backing_from_query(data: Optional[dict]) -> ProjectAndBacking:
    """Parse a backing query: ``backing { ...backing, reward, project }``."""
    try:
        backing_data = (data or {}).get("backing")
        if not backing_data:
            raise CouldNotParseJSON()

        reward = parse_reward(backing_data.get("reward"))
        backing = parse_backing(backing_data, reward=reward)
        project_data = backing_data.get("project")
        project = parse_project(
            project_data,
            rewards=[no_reward_placeholder(project_data)],
            backing=backing,
        )
        if backing is None or project is None:
            raise CouldNotParseJSON()
        return ProjectAndBacking(project=project, backing=backing)
    except MALFORMED as e:
        raise CouldNotParseJSON() from e


def friends_from_query(data: Optional[dict]) -> list[User]:
    """Friends of the viewer who backed the project. Unparseable users are skipped."""
    try:
        project_data = (data or {}).get("project")
        if project_data is None:
            raise CouldNotParseJSON()

        friends = []
        for node in (project_data.get("friends") or {}).get("nodes") or []:
            user = parse_user(node)
            if user is not None:
                friends.append(user)
        return friends
    except MALFORMED as e:
        raise CouldNotParseJSON() from e


def user_from_query(data: Optional[dict]) -> User:
    try:
        user = parse_user((data or {}).get("user"))
    except MALFORMED as e:
        raise CouldNotParseJSON() from e
    if user is None:
        raise CouldNotParseJSON()
    return user


def message_from_mutation(data: Optional[dict]) -> Message:
    """Parse the payload of the ``sendMessage`` mutation."""
    try:
        message_data = ((data or {}).get("sendMessage") or {}).get("message") or {}
        message_id = decompose_id(message_data.get("id"))
        body = message_data.get("body")
        if message_id is None or body is None:
            raise CouldNotParseJSON()
        return Message(
            id=message_id,
            body=body,
            created_at=parse_timestamp(message_data.get("createdAt")),
            sender=parse_user(message_data.get("sender")),
            recipient=parse_user(message_data.get("recipient")),
        )
    except MALFORMED as e:
        raise CouldNotParseJSON() from e
