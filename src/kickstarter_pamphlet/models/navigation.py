"""Navigation parameters and envelopes passed between the API layer and screens."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import model_validator

from kickstarter_pamphlet.models.backing import Backing
from kickstarter_pamphlet.models.base import DomainModel
from kickstarter_pamphlet.models.project import Project


class Param(DomainModel):
    """Identifies a record either by numeric id or by slug."""

    id: Optional[int] = None
    slug: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "Param":
        if (self.id is None) == (self.slug is None):
            raise ValueError("Param needs exactly one of id or slug")
        return self

    @classmethod
    def of_id(cls, value: int) -> "Param":
        return cls(id=value)

    @classmethod
    def of_slug(cls, value: str) -> "Param":
        return cls(slug=value)

    @classmethod
    def parse(cls, value: str) -> "Param":
        """Numeric strings become id params, anything else a slug."""
        value = value.strip()
        return cls.of_id(int(value)) if value.isascii() and value.isdigit() else cls.of_slug(value)

    def __str__(self) -> str:
        return str(self.id) if self.id is not None else str(self.slug)


ProjectOrParam = Union[Project, Param]


def param_for(project_or_param: ProjectOrParam) -> Param:
    """A fetch parameter for either a known project or a lookup key."""
    if isinstance(project_or_param, Project):
        return Param.of_id(project_or_param.id)
    return project_or_param


class RefTag(DomainModel):
    """Attribution token for how a user arrived at a screen."""

    code: str

    def clean_up(self) -> "RefTag":
        """Drop anything after a ``?``, which some links append to the tag."""
        return RefTag(code=self.code.split("?", 1)[0])

    def __str__(self) -> str:
        return self.code


class PledgeStateCTAType(str, Enum):
    FIX = "fix"
    MANAGE = "manage"
    PLEDGE = "pledge"
    VIEW_BACKING = "view_backing"
    VIEW_REWARDS = "view_rewards"
    VIEW_YOUR_REWARDS = "view_your_rewards"

    @property
    def goes_to_rewards(self) -> bool:
        return self in (
            PledgeStateCTAType.PLEDGE,
            PledgeStateCTAType.VIEW_REWARDS,
            PledgeStateCTAType.VIEW_YOUR_REWARDS,
        )

    @property
    def goes_to_manage_pledge(self) -> bool:
        return self in (
            PledgeStateCTAType.VIEW_BACKING,
            PledgeStateCTAType.MANAGE,
            PledgeStateCTAType.FIX,
        )


class ManagePledgeParams(DomainModel):
    project_param: Param
    backing_param: Param


class ProjectPamphletData(DomainModel):
    """A fetched project plus the viewer's backing id, if any."""

    project: Project
    backing_id: Optional[int] = None


class ProjectAndBacking(DomainModel):
    project: Project
    backing: Backing
