"""
adboard/services/ad_service.py

Purpose: Ad storage

- Appends new ads
- Newest-first scans, optionally by category
- Per-owner listing ("My ads")
"""

from typing import AsyncIterator, List, Optional

from pymongo import DESCENDING

from adboard.db.mongo import get_ads_collection
from adboard.models.ad import Ad, Category
from adboard.core.logging import get_logger, LogContext

logger = get_logger(__name__)

NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


async def create_ad(ad: Ad) -> Ad:
    """
    Persists a new ad.

    Args:
        ad: Ad to store (id is ignored)

    Returns:
        The stored ad with its id
    """
    with LogContext(user_id=ad.user_id):
        ads = get_ads_collection()

        result = await ads.insert_one(ad.to_document())

        logger.info(f"Ad stored: {result.inserted_id} ({ad.category.value})")

        return ad.model_copy(update={"id": str(result.inserted_id)})


async def iter_ads_newest_first(
    category: Optional[Category] = None,
    limit: Optional[int] = None,
    batch_size: int = 100
) -> AsyncIterator[List[Ad]]:
    """
    Yields ads newest first in batches.

    Args:
        category: Only ads of this category
        limit: Stop after this many ads
        batch_size: Number of ads per yielded batch

    Yields:
        Lists of at most batch_size ads
    """
    ads = get_ads_collection()

    query = {}
    if category is not None:
        query["category"] = category.value

    kwargs = {"sort": NEWEST_FIRST}
    if limit:
        kwargs["limit"] = limit

    batch = []
    async for doc in ads.find(query, **kwargs):
        batch.append(Ad.from_document(doc))
        if len(batch) >= batch_size:
            yield batch
            batch = []

    if batch:
        yield batch


async def list_user_ads(user_id: int, limit: int = 20) -> List[Ad]:
    """
    Returns a user's own ads, newest first.

    Args:
        user_id: Owner chat id
        limit: Maximum number of ads

    Returns:
        List of ads
    """
    ads = get_ads_collection()

    docs = await ads.find(
        {"user_id": user_id},
        sort=NEWEST_FIRST,
        limit=limit
    ).to_list(length=limit)

    return [Ad.from_document(doc) for doc in docs]
