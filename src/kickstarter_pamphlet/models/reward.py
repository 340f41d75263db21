"""Pydantic models for reward tiers, add-ons and their shipping data.

A project's reward list always starts with the synthetic "no reward" tier
(``id == 0``), which lets a backer pledge without picking a reward.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from kickstarter_pamphlet.models.base import DomainModel
from kickstarter_pamphlet.models.location import Location

NO_REWARD_ID = 0


class ShippingPreference(str, Enum):
    NONE = "none"
    RESTRICTED = "restricted"
    UNRESTRICTED = "unrestricted"

    @classmethod
    def from_raw(cls, value: Optional[str]) -> "ShippingPreference":
        """Map an upstream value onto the enum, ``NONE`` for anything unknown."""
        if not value:
            return cls.NONE
        try:
            return cls(value.lower())
        except ValueError:
            return cls.NONE


class Shipping(DomainModel):
    """Shipping settings of a reward.

    Only ``enabled`` and ``preference`` are available from GraphQL; the other
    fields stay empty.
    """

    enabled: bool = False
    location: Optional[Location] = None
    preference: Optional[ShippingPreference] = None
    summary: Optional[str] = None
    type: Optional[str] = None


class ShippingRule(DomainModel):
    """Shipping cost to a single location."""

    cost: float
    id: Optional[int] = None
    location: Location


class Item(DomainModel):
    id: int
    name: str
    project_id: int
    description: Optional[str] = None


class RewardsItem(DomainModel):
    """An item bundled in a reward.

    ``id`` and ``quantity`` are not returned by GraphQL and are always 0.
    """

    id: int = 0
    item: Item
    quantity: int = 0
    reward_id: int


class Reward(DomainModel):
    """A reward tier or add-on."""

    id: int
    graph_id: Optional[str] = Field(default=None, description="Relay id as sent by the API")
    title: Optional[str] = None
    description: str = ""
    minimum: float = 0.0
    converted_minimum: float = 0.0
    backers_count: Optional[int] = None
    limit: Optional[int] = None
    limit_per_backer: Optional[int] = None
    remaining: Optional[int] = None
    starts_at: Optional[float] = None
    ends_at: Optional[float] = None
    estimated_delivery_on: Optional[float] = None
    has_add_ons: bool = False
    rewards_items: list[RewardsItem] = Field(default_factory=list)
    shipping: Shipping = Field(default_factory=Shipping)
    shipping_rules: Optional[list[ShippingRule]] = None
    shipping_rules_expanded: Optional[list[ShippingRule]] = None

    @classmethod
    def no_reward(cls) -> "Reward":
        """The placeholder tier for pledging without a reward."""
        return cls(
            id=NO_REWARD_ID,
            description="",
            minimum=1.0,
            converted_minimum=1.0,
            shipping=Shipping(enabled=False, preference=ShippingPreference.NONE),
        )

    @property
    def is_no_reward(self) -> bool:
        return self.id == NO_REWARD_ID

    @property
    def is_limited(self) -> bool:
        return self.limit is not None
