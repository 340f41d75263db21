"""Kickstarter user (creator, backer, message participant)."""

from __future__ import annotations

from typing import Optional

from kickstarter_pamphlet.models.base import DomainModel
from kickstarter_pamphlet.models.location import Location


class User(DomainModel):
    """A Kickstarter user."""

    id: int
    name: str
    avatar_url: Optional[str] = None
    is_creator: Optional[bool] = None
    chosen_currency: Optional[str] = None
    location: Optional[Location] = None
