"""Tests for the reward fragment parser."""

from conftest import AUSTRALIA_SHIPPING, make_reward

from kickstarter_pamphlet.api.reward_parser import (
    parse_reward,
    parse_reward_nodes,
    parse_shipping_rule,
)
from kickstarter_pamphlet.models.reward import ShippingPreference


def test_parse_reward_fields():
    reward = parse_reward(make_reward(8_190_320, "Paper Sticker Sheet"))
    assert reward.id == 8_190_320
    assert reward.graph_id == "UmV3YXJkLTgxOTAzMjA="
    assert reward.title == "Paper Sticker Sheet"
    assert reward.description == "Translucent Sticker Sheet"
    assert reward.minimum == 4.0
    assert reward.converted_minimum == 4.0
    assert reward.backers_count == 9
    assert reward.limit_per_backer == 10
    assert reward.estimated_delivery_on == 1_622_505_600.0
    assert reward.starts_at is None
    assert reward.has_add_ons is False
    assert reward.is_no_reward is False


def test_parse_reward_items_use_placeholders():
    reward = parse_reward(make_reward(8_190_320, "Bundle", items=2))
    assert len(reward.rewards_items) == 2
    first = reward.rewards_items[0]
    assert first.id == 0
    assert first.quantity == 0
    assert first.reward_id == 8_190_320
    assert first.item.project_id == 1_606_532_881
    assert first.item.description is None
    assert first.item.name == "Sticker Sheet 0"


def test_parse_reward_shipping():
    reward = parse_reward(make_reward(1, "Restricted", shipping_preference="restricted"))
    assert reward.shipping.enabled is True
    assert reward.shipping.preference == ShippingPreference.RESTRICTED
    assert len(reward.shipping_rules) == 2
    assert reward.shipping_rules[0].cost == 2.0
    assert reward.shipping_rules[0].location.name == "Australia"
    assert reward.shipping_rules_expanded is None


def test_parse_reward_unknown_shipping_preference_is_none():
    reward = parse_reward(make_reward(1, "Digital", shipping_preference="TELEPORT"))
    assert reward.shipping.enabled is False
    assert reward.shipping.preference == ShippingPreference.NONE


def test_parse_reward_uppercase_preference():
    reward = parse_reward(make_reward(1, "Anywhere", shipping_preference="UNRESTRICTED"))
    assert reward.shipping.preference == ShippingPreference.UNRESTRICTED
    assert reward.shipping.enabled is True


def test_parse_reward_expanded_shipping_rules():
    reward = parse_reward(make_reward(1, "Add-on", expanded_rules=[AUSTRALIA_SHIPPING, None]))
    assert len(reward.shipping_rules_expanded) == 1
    assert reward.shipping_rules_expanded[0].cost == 2.0


def test_parse_reward_has_add_ons():
    data = make_reward(1, "Base")
    data["allowedAddons"] = {"nodes": [{"id": "UmV3YXJkLTI="}]}
    assert parse_reward(data).has_add_ons is True


def test_parse_reward_money_fallbacks():
    data = make_reward(1, "Free")
    data["amount"] = None
    data["convertedAmount"] = {"amount": None}
    reward = parse_reward(data)
    assert reward.minimum == 0.0
    assert reward.converted_minimum == 0.0


def test_parse_reward_requires_ids():
    data = make_reward(1, "Orphan")
    data["project"] = None
    assert parse_reward(data) is None

    data = make_reward(1, "Broken")
    data["id"] = "%%%"
    assert parse_reward(data) is None


def test_parse_shipping_rule_requires_location():
    rule = dict(AUSTRALIA_SHIPPING, location=None)
    assert parse_shipping_rule(rule) is None


def test_parse_reward_nodes():
    assert parse_reward_nodes(None) is None
    assert parse_reward_nodes({"nodes": None}) is None
    rewards = parse_reward_nodes({"nodes": [make_reward(1, "A"), None, {"id": "bad"}]})
    assert [r.id for r in rewards] == [1]


def test_parse_reward_malformed_fields():
    data = make_reward(1, "Counted")
    data["backersCount"] = "nine"
    assert parse_reward(data) is None

    data = make_reward(1, "Priced")
    data["amount"] = {"amount": "four dollars"}
    assert parse_reward(data) is None

    assert parse_reward("Notebook") is None


def test_parse_reward_skips_malformed_items_and_rules():
    data = make_reward(1, "Bundle", items=2)
    data["items"]["nodes"].append("Sticker Sheet")
    data["items"]["nodes"].append({"id": data["items"]["nodes"][0]["id"], "name": 7})
    data["shippingRules"].append(dict(AUSTRALIA_SHIPPING, cost={"amount": "free"}))
    reward = parse_reward(data)
    assert len(reward.rewards_items) == 2
    assert len(reward.shipping_rules) == 2
