"""Pledge records."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from kickstarter_pamphlet.models.base import DomainModel
from kickstarter_pamphlet.models.reward import Reward
from kickstarter_pamphlet.models.user import User


class BackingStatus(str, Enum):
    CANCELED = "canceled"
    COLLECTED = "collected"
    DROPPED = "dropped"
    ERRORED = "errored"
    PLEDGED = "pledged"
    PREAUTH = "preauth"
    UNKNOWN = "unknown"

    @classmethod
    def from_raw(cls, value: Optional[str]) -> "BackingStatus":
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.lower())
        except ValueError:
            return cls.UNKNOWN


class Backing(DomainModel):
    """A user's pledge against a project."""

    id: int
    status: BackingStatus = BackingStatus.UNKNOWN
    amount: float = 0.0
    backer: Optional[User] = None
    backer_id: Optional[int] = None
    reward: Optional[Reward] = None
    project_id: Optional[int] = None
    sequence: Optional[int] = None
    pledged_at: Optional[float] = None
    location_id: Optional[int] = None
    shipping_amount: Optional[float] = None

    @property
    def is_errored(self) -> bool:
        return self.status is BackingStatus.ERRORED
