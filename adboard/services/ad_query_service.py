"""
adboard/services/ad_query_service.py

Purpose: Location-aware ad search with pagination

- Matches ads to the requester's location (city, else country, else all)
- Optional exact category filter
- Fixed windows of PAGE_SIZE ads, newest first
- One city -> country broadening when the city has nothing
- Owner locations are resolved per scan batch with a single lookup
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from adboard.core.config import settings
from adboard.core.exceptions import LocationRequiredError
from adboard.core.logging import get_logger
from adboard.models.ad import Ad, Category
from adboard.models.user import Location, User
from adboard.services.ad_service import iter_ads_newest_first
from adboard.services.user_service import get_users_by_ids

logger = get_logger(__name__)

PAGE_SIZE = 5


class MatchScope(str, Enum):
    CITY = "city"
    COUNTRY = "country"
    ALL = "all"


@dataclass
class ListedAd:
    ad: Ad
    location: Optional[Location]


@dataclass
class AdPage:
    items: List[ListedAd] = field(default_factory=list)
    offset: int = 0
    scope: MatchScope = MatchScope.CITY
    has_more: bool = False
    broadened: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.items


def resolve_scope(requester: Location) -> MatchScope:
    """
    Narrowest scope the requester's location supports.
    """
    if requester.has_city:
        return MatchScope.CITY
    if requester.has_country:
        return MatchScope.COUNTRY
    return MatchScope.ALL


def location_matches(candidate: Optional[Location], requester: Location, scope: MatchScope) -> bool:
    """
    Case-insensitive substring match of the candidate against the requester.

    Args:
        candidate: Location of the ad (owner's, or the ad's snapshot)
        requester: Location of the user browsing
        scope: Which field to compare

    Returns:
        True if the ad belongs in the result set
    """
    if scope == MatchScope.ALL:
        return True

    if candidate is None:
        return False

    if scope == MatchScope.CITY:
        wanted = requester.city.strip().lower()
        return bool(wanted) and wanted in candidate.city.lower()

    wanted = requester.country.strip().lower()
    return bool(wanted) and wanted in candidate.country.lower()


async def collect_matches(
    requester: Location,
    scope: MatchScope,
    category: Optional[Category],
    needed: int,
    scan_limit: Optional[int] = None
) -> List[ListedAd]:
    """
    Scans ads newest first until `needed` matches are found.

    Args:
        requester: Location of the user browsing
        scope: Match scope
        category: Optional exact category filter
        needed: Stop once this many matches are collected
        scan_limit: Upper bound on scanned ads

    Returns:
        Matches in newest-first order
    """
    matches: List[ListedAd] = []
    scan_limit = scan_limit if scan_limit is not None else settings.LISTING_SCAN_LIMIT

    async for batch in iter_ads_newest_first(category=category, limit=scan_limit):
        owners = await get_users_by_ids(ad.user_id for ad in batch)

        for ad in batch:
            owner = owners.get(ad.user_id)
            location = owner.location if owner else ad.location

            if category is not None and ad.category != category:
                continue
            if not location_matches(location, requester, scope):
                continue

            matches.append(ListedAd(ad=ad, location=location))
            if len(matches) >= needed:
                return matches

    return matches


async def find_ads_page(
    requester: User,
    offset: int = 0,
    category: Optional[Category] = None,
    scope: Optional[MatchScope] = None
) -> AdPage:
    """
    Returns one window of ads relevant to the requester.

    Args:
        requester: User browsing
        offset: Start of the window
        category: Optional exact category filter
        scope: Keep a previous page's scope (for "show more"); resolved
               from the requester's location when omitted

    Returns:
        AdPage

    Raises:
        LocationRequiredError: If the requester has no city set
    """
    location = requester.location
    if not location.is_set:
        raise LocationRequiredError(details={"user_id": requester.user_id})

    offset = max(offset, 0)
    scope = scope or resolve_scope(location)
    needed = offset + PAGE_SIZE + 1

    matches = await collect_matches(location, scope, category, needed)
    window = matches[offset:offset + PAGE_SIZE]
    broadened = False

    if not window and offset == 0 and scope == MatchScope.CITY and location.has_country:
        logger.info(f"No ads in city '{location.city}', broadening to country '{location.country}'")
        scope = MatchScope.COUNTRY
        broadened = True
        matches = await collect_matches(location, scope, category, needed)
        window = matches[:PAGE_SIZE]

    return AdPage(
        items=window,
        offset=offset,
        scope=scope,
        has_more=len(matches) > offset + PAGE_SIZE,
        broadened=broadened,
    )
