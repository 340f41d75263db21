"""Location and country value objects shared by projects, users and shipping rules."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from kickstarter_pamphlet.models.base import DomainModel


class Location(DomainModel):
    """A geographic location as returned by the location fragment."""

    id: int
    name: str
    displayable_name: str
    country: str
    localized_name: Optional[str] = None
    country_name: Optional[str] = None


class Country(DomainModel):
    """Project country with its currency settings."""

    country_code: str = Field(description="ISO 3166 alpha-2 code")
    name: Optional[str] = None
    currency_code: Optional[str] = None
    currency_symbol: Optional[str] = None
    max_pledge: Optional[int] = None
    min_pledge: Optional[int] = None
    trailing_code: bool = False
