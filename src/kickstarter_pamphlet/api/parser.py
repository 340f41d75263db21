"""Parse GraphQL response fragments into the pydantic domain models.

Every ``parse_*`` function takes the raw ``dict`` of one fragment and returns
either a fully populated model or ``None``. A required field that is missing
or malformed never yields a half-built record.
"""

from __future__ import annotations

import functools
import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, Optional, TypeVar

from pydantic import ValidationError

from kickstarter_pamphlet.api.ids import decompose_id
from kickstarter_pamphlet.models.backing import Backing, BackingStatus
from kickstarter_pamphlet.models.location import Country, Location
from kickstarter_pamphlet.models.project import (
    Category,
    CommitmentCategory,
    Dates,
    EnvironmentalCommitment,
    ExtendedProjectProperties,
    MemberData,
    MemberPermission,
    Personalization,
    Photo,
    Project,
    ProjectFAQ,
    ProjectState,
    RewardData,
    Stats,
    UrlsEnvelope,
    Video,
    WebUrls,
)
from kickstarter_pamphlet.models.reward import Reward
from kickstarter_pamphlet.models.user import User

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

# Raised by the scalar helpers and by pydantic on values of the wrong shape.
MALFORMED = (AttributeError, TypeError, ValueError, ValidationError)


def all_or_nothing(parse: Callable[..., Optional[T]]) -> Callable[..., Optional[T]]:
    """Turn a malformed-fragment exception from ``parse`` into a None result."""

    @functools.wraps(parse)
    def wrapper(data, *args, **kwargs):
        try:
            return parse(data, *args, **kwargs)
        except MALFORMED as e:
            logger.debug(f"{parse.__name__}: malformed fragment ({type(e).__name__}: {e})")
            return None

    return wrapper


def int_or_none(value: Any) -> Optional[int]:
    """An integer or a string of ASCII digits; anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return None


def parse_timestamp(value: Any) -> Optional[float]:
    """Convert an epoch-seconds value or an ISO-8601 string to epoch seconds.

    Date-only strings (``2021-06-01``) are read as UTC midnight. Absent or
    unparseable values return None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        number = float(text)
    except ValueError:
        pass
    else:
        return number if math.isfinite(number) else None

    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def float_or_none(value: Any) -> Optional[float]:
    """A finite float, or None for absent and non-numeric values."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def money_amount(fragment: Optional[dict]) -> Optional[float]:
    """Read ``amount`` from a money fragment.

    Returns None when the fragment or its amount is absent. A present amount
    that is not a finite number raises ``ValueError``.
    """
    if not fragment:
        return None
    if not isinstance(fragment, dict):
        raise ValueError(f"Money fragment is not an object: {fragment!r}")
    amount = fragment.get("amount")
    if amount is None:
        return None
    value = float_or_none(amount)
    if value is None:
        raise ValueError(f"Malformed money amount: {amount!r}")
    return value


def money_amount_or_zero(fragment: Optional[dict]) -> float:
    amount = money_amount(fragment)
    return amount if amount is not None else 0.0


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@all_or_nothing
def parse_country(data: Optional[dict]) -> Optional[Country]:
    """Parse a country fragment (``code``, ``name``)."""
    if not data or not data.get("code"):
        return None
    return Country(
        country_code=data["code"],
        name=data.get("name"),
        currency_code=data.get("currencyCode"),
        currency_symbol=data.get("currencySymbol"),
        max_pledge=data.get("maxPledge"),
        min_pledge=data.get("minPledge"),
        trailing_code=bool(data.get("trailingCode", False)),
    )


@all_or_nothing
def parse_category(data: Optional[dict]) -> Optional[Category]:
    """Parse a category fragment, including the optional parent category."""
    if not data:
        return None
    category_id = decompose_id(data.get("id"))
    name = data.get("name")
    if category_id is None or not name:
        return None

    parent = data.get("parentCategory") or {}
    return Category(
        id=category_id,
        name=name,
        analytics_name=data.get("analyticsName"),
        parent_id=decompose_id(parent.get("id")),
        parent_name=parent.get("name"),
    )


@all_or_nothing
def parse_location(data: Optional[dict]) -> Optional[Location]:
    """Parse a location fragment."""
    if not data:
        return None
    location_id = decompose_id(data.get("id"))
    name = data.get("name")
    if location_id is None or not name:
        return None
    return Location(
        id=location_id,
        name=name,
        displayable_name=data.get("displayableName") or name,
        country=data.get("country") or "",
        country_name=data.get("countryName"),
        localized_name=data.get("localizedName"),
    )


@all_or_nothing
def parse_user(data: Optional[dict]) -> Optional[User]:
    """Parse a user fragment. The id may be a relay id or a plain ``uid``."""
    if not data:
        return None
    user_id = decompose_id(data.get("id"))
    if user_id is None:
        user_id = int_or_none(data.get("uid"))
    name = data.get("name")
    if user_id is None or name is None:
        return None
    return User(
        id=user_id,
        name=name,
        avatar_url=data.get("imageUrl"),
        is_creator=data.get("isCreator"),
        chosen_currency=data.get("chosenCurrency"),
        location=parse_location(data.get("location")),
    )


@all_or_nothing
def parse_backing(data: Optional[dict], reward: Optional[Reward] = None) -> Optional[Backing]:
    """Parse a backing fragment. Unknown statuses map to ``BackingStatus.UNKNOWN``."""
    if not data:
        return None
    backing_id = decompose_id(data.get("id"))
    if backing_id is None:
        return None

    backer = parse_user(data.get("backer"))
    project = data.get("project") or {}
    location = data.get("location") or {}
    return Backing(
        id=backing_id,
        status=BackingStatus.from_raw(data.get("status")),
        amount=money_amount_or_zero(data.get("amount")),
        backer=backer,
        backer_id=backer.id if backer else decompose_id((data.get("backer") or {}).get("id")),
        reward=reward,
        project_id=int_or_none(project.get("pid")) or decompose_id(project.get("id")),
        sequence=data.get("sequence"),
        pledged_at=parse_timestamp(data.get("pledgedOn")),
        location_id=decompose_id(location.get("id")),
        shipping_amount=money_amount(data.get("shippingAmount")),
    )


# ---------------------------------------------------------------------------
# Project fragment
# ---------------------------------------------------------------------------


def _start_of_today() -> float:
    now = datetime.now(timezone.utc)
    return now.replace(hour=0, minute=0, second=0, microsecond=0).timestamp()


def parse_project_dates(data: dict) -> Optional[Dates]:
    """Deadline, launch and state-change dates are all required."""
    deadline = parse_timestamp(data.get("deadlineAt"))
    launched_at = parse_timestamp(data.get("launchedAt"))
    state_changed_at = parse_timestamp(data.get("stateChangedAt"))
    if deadline is None or launched_at is None or state_changed_at is None:
        return None

    featured_at = None
    if data.get("isProjectOfTheDay"):
        featured_at = _start_of_today()

    return Dates(
        deadline=deadline,
        featured_at=featured_at,
        final_collection_date=parse_timestamp(data.get("finalCollectionDate")),
        launched_at=launched_at,
        state_changed_at=state_changed_at,
    )


def parse_project_photo(data: dict) -> Optional[Photo]:
    url = (data.get("image") or {}).get("url")
    if not url:
        return None
    return Photo(full=url, med=url, size_1024x768=url, small=url)


def parse_project_video(data: dict) -> Optional[Video]:
    video = data.get("video")
    if not video:
        return None
    video_id = decompose_id(video.get("id"))
    sources = video.get("videoSources") or {}
    high = (sources.get("high") or {}).get("src")
    if video_id is None or not high:
        return None
    return Video(id=video_id, high=high, hls=(sources.get("hls") or {}).get("src"))


def parse_project_stats(data: dict, current_currency: Optional[str] = None) -> Stats:
    """Funding stats. Missing money fragments count as 0."""
    pledged_raw = money_amount(data.get("pledged"))
    fx_rate = float_or_none(data.get("fxRate"))
    usd_exchange_rate = float_or_none(data.get("usdExchangeRate"))

    converted = None
    if pledged_raw is not None:
        converted = pledged_raw * (fx_rate if fx_rate is not None else 1.0)

    goal = money_amount(data.get("goal"))
    posts = data.get("posts") or {}

    return Stats(
        backers_count=data.get("backersCount") or 0,
        comments_count=data.get("commentsCount"),
        converted_pledged_amount=converted,
        currency=data.get("currency") or "USD",
        current_currency=current_currency,
        current_currency_rate=fx_rate,
        goal=int(goal) if goal is not None else 0,
        pledged=int(pledged_raw) if pledged_raw is not None else 0,
        static_usd_rate=usd_exchange_rate or 0.0,
        updates_count=posts.get("totalCount"),
        usd_exchange_rate=usd_exchange_rate,
    )


def parse_faq(node: Any) -> Optional[ProjectFAQ]:
    if not isinstance(node, dict):
        return None
    faq_id = decompose_id(node.get("id"))
    question, answer = node.get("question"), node.get("answer")
    if faq_id is None or not isinstance(question, str) or not isinstance(answer, str):
        return None
    return ProjectFAQ(
        id=faq_id,
        question=question,
        answer=answer,
        created_at=parse_timestamp(node.get("createdAt")),
    )


def parse_faqs(data: dict) -> list[ProjectFAQ]:
    faqs = []
    for node in (data.get("faqs") or {}).get("nodes") or []:
        faq = parse_faq(node)
        if faq is None:
            logger.debug(f"Skipping malformed FAQ node: {node!r:.80}")
            continue
        faqs.append(faq)
    return faqs


def parse_environmental_commitment(node: Any) -> Optional[EnvironmentalCommitment]:
    if not isinstance(node, dict):
        return None
    commitment_id = decompose_id(node.get("id"))
    description = node.get("description")
    if commitment_id is None or not isinstance(description, str):
        return None
    return EnvironmentalCommitment(
        id=commitment_id,
        description=description,
        category=CommitmentCategory.from_raw(node.get("commitmentCategory")),
    )


def parse_environmental_commitments(data: dict) -> list[EnvironmentalCommitment]:
    commitments = []
    for node in data.get("environmentalCommitments") or []:
        commitment = parse_environmental_commitment(node)
        if commitment is None:
            logger.debug(f"Skipping malformed environmental commitment: {node!r:.80}")
            continue
        commitments.append(commitment)
    return commitments


def parse_extended_properties(data: dict) -> ExtendedProjectProperties:
    return ExtendedProjectProperties(
        environmental_commitments=parse_environmental_commitments(data),
        faqs=parse_faqs(data),
        risks=data.get("risks") or "",
        story=data.get("story") or "",
        minimum_pledge_amount=data.get("minPledge") or 1,
    )


def generated_slug(slug: str) -> str:
    """``creator/project-name`` becomes ``project-name``."""
    parts = [part for part in slug.split("/") if part]
    return parts[-1] if parts else slug


@all_or_nothing
def parse_project(
    data: Optional[dict],
    rewards: Optional[list[Reward]] = None,
    add_ons: Optional[list[Reward]] = None,
    backing: Optional[Backing] = None,
    current_currency: Optional[str] = None,
) -> Optional[Project]:
    """Parse a project fragment into a ``Project``.

    Args:
        data: The project fragment dict.
        rewards: Reward list, already including the no-reward placeholder.
        add_ons: Add-on rewards, or None when the query did not ask for them.
        backing: The viewer's backing, if already known.
        current_currency: The viewer's chosen currency (``me.chosenCurrency``).

    Returns:
        A Project, or None if any required part is missing.
    """
    if not data:
        return None

    country = parse_country(data.get("country"))
    category = parse_category(data.get("category"))
    dates = parse_project_dates(data)
    location = parse_location(data.get("location"))
    photo = parse_project_photo(data)
    creator = parse_user(data.get("creator"))
    pid = int_or_none(data.get("pid"))
    slug = data.get("slug")
    url = data.get("url")

    required = {
        "country": country,
        "category": category,
        "dates": dates,
        "location": location,
        "photo": photo,
        "creator": creator,
        "pid": pid,
        "slug": slug,
        "url": url,
    }
    missing = [key for key, value in required.items() if value is None]
    if missing:
        logger.debug(f"Project fragment {pid!r} missing or malformed: {', '.join(missing)}")
        return None

    tags = [tag["name"] for tag in data.get("tags") or [] if tag and tag.get("name")]
    is_launched = data.get("isLaunched")

    return Project(
        id=pid,
        slug=generated_slug(slug),
        urls=UrlsEnvelope(web=WebUrls(project=url, updates=f"{url}/posts")),
        name=data.get("name") or "",
        blurb=data.get("description") or "",
        tags=tags,
        category=category,
        country=country,
        creator=creator,
        location=location,
        photo=photo,
        video=parse_project_video(data),
        extended_project_properties=parse_extended_properties(data),
        stats=parse_project_stats(data, current_currency),
        dates=dates,
        state=ProjectState.from_raw(data.get("state")),
        available_card_types=[t for t in data.get("availableCardTypes") or [] if t],
        display_prelaunch=(not is_launched) if is_launched is not None else None,
        prelaunch_activated=data.get("prelaunchActivated"),
        staff_pick=bool(data.get("isProjectWeLove")),
        member_data=MemberData(
            permissions=[MemberPermission.COMMENT] if data.get("canComment") else []
        ),
        personalization=Personalization(
            backing=backing,
            friends=[],
            is_backing=backing is not None,
            is_starred=data.get("isWatched"),
        ),
        reward_data=RewardData(add_ons=add_ons, rewards=list(rewards or [])),
    )
