"""Pydantic models for Kickstarter project data.

A ``Project`` is built once per fetch from the GraphQL project fragment and
replaced wholesale on refresh. Nested records are frozen; use
``model_copy(update=...)`` or the ``with_*`` helpers to derive a changed copy.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from kickstarter_pamphlet.models.backing import Backing
from kickstarter_pamphlet.models.base import DomainModel
from kickstarter_pamphlet.models.location import Country, Location
from kickstarter_pamphlet.models.reward import Reward
from kickstarter_pamphlet.models.user import User


class ProjectState(str, Enum):
    CANCELED = "canceled"
    FAILED = "failed"
    LIVE = "live"
    PURGED = "purged"
    STARTED = "started"
    SUBMITTED = "submitted"
    SUCCESSFUL = "successful"
    SUSPENDED = "suspended"
    UNKNOWN = "unknown"

    @classmethod
    def from_raw(cls, value: Optional[str]) -> "ProjectState":
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.lower())
        except ValueError:
            return cls.UNKNOWN


class CommitmentCategory(str, Enum):
    LONG_LASTING_DESIGN = "long_lasting_design"
    SUSTAINABLE_MATERIALS = "sustainable_materials"
    ENVIRONMENTALLY_FRIENDLY_FACTORIES = "environmentally_friendly_factories"
    SUSTAINABLE_DISTRIBUTION = "sustainable_distribution"
    REUSABILITY_AND_RECYCLABILITY = "reusability_and_recyclability"
    SOMETHING_ELSE = "something_else"

    @classmethod
    def from_raw(cls, value: Optional[str]) -> "CommitmentCategory":
        """Map an upstream category, ``SOMETHING_ELSE`` for unknown values."""
        if not value:
            return cls.SOMETHING_ELSE
        try:
            return cls(value.lower())
        except ValueError:
            return cls.SOMETHING_ELSE


class Category(DomainModel):
    id: int
    name: str
    analytics_name: Optional[str] = None
    parent_id: Optional[int] = None
    parent_name: Optional[str] = None

    @property
    def root_name(self) -> str:
        return self.parent_name or self.name


class Photo(DomainModel):
    """Project image. GraphQL returns one url, reused for every size."""

    full: str
    med: str
    size_1024x768: Optional[str] = None
    small: str


class Video(DomainModel):
    id: int
    high: str
    hls: Optional[str] = None


class Stats(DomainModel):
    """Funding statistics.

    ``pledged`` and ``goal`` are whole units of the project currency.
    ``converted_pledged_amount`` is in the user's chosen currency.
    """

    backers_count: int = 0
    comments_count: Optional[int] = None
    converted_pledged_amount: Optional[float] = None
    currency: str
    current_currency: Optional[str] = None
    current_currency_rate: Optional[float] = None
    goal: int = 0
    pledged: int = 0
    static_usd_rate: float = 0.0
    updates_count: Optional[int] = None
    usd_exchange_rate: Optional[float] = None

    @property
    def funding_progress(self) -> float:
        return self.pledged / self.goal if self.goal > 0 else 0.0

    @property
    def percent_funded(self) -> int:
        return int(self.funding_progress * 100)


class Dates(DomainModel):
    """Project timestamps in epoch seconds."""

    deadline: float
    featured_at: Optional[float] = None
    final_collection_date: Optional[float] = None
    launched_at: float
    state_changed_at: float


class MemberPermission(str, Enum):
    COMMENT = "comment"


class MemberData(DomainModel):
    permissions: list[MemberPermission] = Field(default_factory=list)


class Personalization(DomainModel):
    backing: Optional[Backing] = None
    friends: list[User] = Field(default_factory=list)
    is_backing: Optional[bool] = None
    is_starred: Optional[bool] = None


class RewardData(DomainModel):
    """All reward tiers (no-reward placeholder first) plus optional add-ons."""

    add_ons: Optional[list[Reward]] = None
    rewards: list[Reward] = Field(default_factory=list)


class WebUrls(DomainModel):
    project: str
    updates: Optional[str] = None


class UrlsEnvelope(DomainModel):
    web: WebUrls


class ProjectFAQ(DomainModel):
    id: int
    question: str
    answer: str
    created_at: Optional[float] = None


class EnvironmentalCommitment(DomainModel):
    id: int
    description: str
    category: CommitmentCategory = CommitmentCategory.SOMETHING_ELSE


class ExtendedProjectProperties(DomainModel):
    """Campaign narrative shown on the pamphlet's story and FAQ tabs."""

    environmental_commitments: list[EnvironmentalCommitment] = Field(default_factory=list)
    faqs: list[ProjectFAQ] = Field(default_factory=list)
    risks: str = ""
    story: str = ""
    minimum_pledge_amount: int = 1


class Project(DomainModel):
    """Full Kickstarter project record."""

    # === Identifiers ===
    id: int = Field(description="Kickstarter project id (pid)")
    slug: str = Field(description="Last path component of the project slug")
    urls: UrlsEnvelope

    # === Descriptive ===
    name: str
    blurb: str = ""
    tags: list[str] = Field(default_factory=list)
    category: Category
    country: Country
    creator: User
    location: Location
    photo: Photo
    video: Optional[Video] = None
    extended_project_properties: Optional[ExtendedProjectProperties] = None

    # === Funding and lifecycle ===
    stats: Stats
    dates: Dates
    state: ProjectState = ProjectState.UNKNOWN
    available_card_types: list[str] = Field(default_factory=list)

    # === Flags ===
    display_prelaunch: Optional[bool] = None
    prelaunch_activated: Optional[bool] = None
    staff_pick: bool = False

    # === Viewer-specific ===
    member_data: MemberData = Field(default_factory=MemberData)
    personalization: Personalization = Field(default_factory=Personalization)

    # === Rewards ===
    reward_data: RewardData = Field(default_factory=RewardData)

    @property
    def rewards(self) -> list[Reward]:
        return self.reward_data.rewards

    @property
    def add_ons(self) -> Optional[list[Reward]]:
        return self.reward_data.add_ons

    @property
    def has_add_ons(self) -> bool:
        return bool(self.reward_data.add_ons)

    def with_personalization(self, **changes) -> "Project":
        """Return a copy with the given personalization fields replaced."""
        return self.model_copy(
            update={"personalization": self.personalization.model_copy(update=changes)}
        )

    def with_backing(self, backing: Optional[Backing]) -> "Project":
        return self.with_personalization(backing=backing, is_backing=backing is not None)

    def with_friends(self, friends: list[User]) -> "Project":
        return self.with_personalization(friends=list(friends))

    def to_flat_dict(self) -> dict:
        """Flatten nested fields for tabular display."""
        d = {
            "id": self.id,
            "slug": self.slug,
            "name": self.name,
            "blurb": self.blurb,
            "state": self.state.value,
            "url": self.urls.web.project,
            "category_name": self.category.name,
            "category_parent": self.category.parent_name,
            "country": self.country.country_code,
            "location_name": self.location.displayable_name,
            "creator_id": self.creator.id,
            "creator_name": self.creator.name,
            "currency": self.stats.currency,
            "goal": self.stats.goal,
            "pledged": self.stats.pledged,
            "percent_funded": self.stats.percent_funded,
            "backers_count": self.stats.backers_count,
            "launched_at": self.dates.launched_at,
            "deadline": self.dates.deadline,
            "staff_pick": self.staff_pick,
            "is_backing": bool(self.personalization.is_backing),
            "has_video": self.video is not None,
            "tags": "; ".join(self.tags) or None,
        }

        # Summarize rewards, skipping the no-reward placeholder
        tiers = [r for r in self.rewards if not r.is_no_reward]
        d["reward_count"] = len(tiers)
        d["reward_min_pledge"] = min((r.minimum for r in tiers), default=None)
        d["reward_max_pledge"] = max((r.minimum for r in tiers), default=None)
        d["add_on_count"] = len(self.add_ons or [])

        return d
