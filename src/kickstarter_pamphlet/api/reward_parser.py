"""Parse reward fragments into ``Reward`` models."""

from __future__ import annotations

import logging
from typing import Optional

from kickstarter_pamphlet.api.ids import decompose_id
from kickstarter_pamphlet.api.parser import (
    all_or_nothing,
    money_amount,
    money_amount_or_zero,
    parse_location,
    parse_timestamp,
)
from kickstarter_pamphlet.models.reward import (
    Item,
    Reward,
    RewardsItem,
    Shipping,
    ShippingPreference,
    ShippingRule,
)

logger = logging.getLogger(__name__)


@all_or_nothing
def parse_shipping_rule(data: Optional[dict]) -> Optional[ShippingRule]:
    """Parse a shipping rule fragment. A rule needs a cost and a location."""
    if not data:
        return None
    cost = money_amount(data.get("cost"))
    location = parse_location(data.get("location"))
    if cost is None or location is None:
        return None
    return ShippingRule(cost=cost, id=decompose_id(data.get("id")), location=location)


def parse_shipping_rules(nodes: Optional[list]) -> list[ShippingRule]:
    rules = []
    for node in nodes or []:
        rule = parse_shipping_rule(node)
        if rule is None:
            logger.debug(f"Skipping malformed shipping rule: {node!r}")
            continue
        rules.append(rule)
    return rules


def parse_rewards_items(data: dict, reward_id: int, project_id: int) -> list[RewardsItem]:
    """Items bundled in a reward.

    GraphQL returns neither the rewards-item id, its quantity nor the item
    description, so those stay at their placeholder values.
    """
    items = []
    for node in (data.get("items") or {}).get("nodes") or []:
        if not isinstance(node, dict):
            continue
        item_id = decompose_id(node.get("id"))
        name = node.get("name")
        if item_id is None or not isinstance(name, str):
            continue
        items.append(
            RewardsItem(
                id=0,
                item=Item(id=item_id, name=name, project_id=project_id, description=None),
                quantity=0,
                reward_id=reward_id,
            )
        )
    return items


def parse_shipping(data: dict) -> Shipping:
    preference = ShippingPreference.from_raw(data.get("shippingPreference"))
    return Shipping(
        enabled=preference in (ShippingPreference.RESTRICTED, ShippingPreference.UNRESTRICTED),
        location=None,
        preference=preference,
        summary=None,
        type=None,
    )


@all_or_nothing
def parse_reward(
    data: Optional[dict],
    expanded_shipping_rules: Optional[list[ShippingRule]] = None,
) -> Optional[Reward]:
    """Parse a single reward fragment.

    Args:
        data: Raw reward fragment dict.
        expanded_shipping_rules: Rules expanded for the viewer's location.
            When None, ``shippingRulesExpanded.nodes`` on the fragment is used
            if the query selected it.

    Returns:
        A Reward, or None when the reward or project id can't be decoded or
        a field is malformed.
    """
    if not data:
        return None
    reward_id = decompose_id(data.get("id"))
    project_id = decompose_id((data.get("project") or {}).get("id"))
    if reward_id is None or project_id is None:
        logger.debug(f"Skipping reward with undecodable ids: {data.get('id')!r}")
        return None

    if expanded_shipping_rules is None and data.get("shippingRulesExpanded") is not None:
        expanded_shipping_rules = parse_shipping_rules(
            (data.get("shippingRulesExpanded") or {}).get("nodes")
        )

    allowed_add_ons = (data.get("allowedAddons") or {}).get("nodes")
    shipping_rules = data.get("shippingRules")

    return Reward(
        id=reward_id,
        graph_id=data["id"],
        title=data.get("name"),
        description=data.get("description") or "",
        minimum=money_amount_or_zero(data.get("amount")),
        converted_minimum=money_amount_or_zero(data.get("convertedAmount")),
        backers_count=data.get("backersCount"),
        limit=data.get("limit"),
        limit_per_backer=data.get("limitPerBacker"),
        remaining=data.get("remainingQuantity"),
        starts_at=parse_timestamp(data.get("startsAt")),
        ends_at=parse_timestamp(data.get("endsAt")),
        estimated_delivery_on=parse_timestamp(data.get("estimatedDeliveryOn")),
        has_add_ons=bool(allowed_add_ons),
        rewards_items=parse_rewards_items(data, reward_id, project_id),
        shipping=parse_shipping(data),
        shipping_rules=parse_shipping_rules(shipping_rules) if shipping_rules is not None else None,
        shipping_rules_expanded=expanded_shipping_rules,
    )


def parse_reward_nodes(connection: Optional[dict]) -> Optional[list[Reward]]:
    """Parse a ``{nodes: [...]}`` reward connection, dropping unparseable nodes.

    Returns None when the connection itself is absent.
    """
    if not isinstance(connection, dict) or connection.get("nodes") is None:
        return None
    rewards = []
    for node in connection["nodes"]:
        reward = parse_reward(node)
        if reward is not None:
            rewards.append(reward)
    return rewards
