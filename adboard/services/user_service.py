"""
adboard/services/user_service.py

Purpose: User data management (location store)

- Lazily creates user records
- Persists declared locations
- Maintains the per-user ad counter
- Batched owner lookups for listings
"""

from typing import Dict, Iterable, Optional

from adboard.db.mongo import get_users_collection
from adboard.models.user import User, Location
from adboard.core.logging import get_logger, LogContext
from utils.time_utils import utc_now

logger = get_logger(__name__)


def _defaults_on_insert(exclude=()) -> dict:
    defaults = {
        "ad_count": 0,
        "has_subscription": False,
        "location": Location().model_dump(),
        "created_at": utc_now(),
    }
    return {key: value for key, value in defaults.items() if key not in exclude}


async def get_user(user_id: int) -> Optional[User]:
    """
    Retrieves a user by Telegram chat id.

    Args:
        user_id: Telegram chat id

    Returns:
        User or None if the user has never interacted
    """
    users = get_users_collection()
    doc = await users.find_one({"user_id": user_id})
    return User.from_document(doc)


async def get_or_create_user(user_id: int) -> User:
    """
    Retrieves an existing user or creates one with sentinel defaults.

    The upsert makes concurrent first contacts from the same chat safe.

    Args:
        user_id: Telegram chat id

    Returns:
        User
    """
    with LogContext(user_id=user_id):
        users = get_users_collection()

        result = await users.update_one(
            {"user_id": user_id},
            {
                "$setOnInsert": _defaults_on_insert(),
                "$set": {"updated_at": utc_now()},
            },
            upsert=True
        )

        if result.upserted_id is not None:
            logger.info("New user created")

        doc = await users.find_one({"user_id": user_id})
        return User.from_document(doc)


async def update_user_location(user_id: int, location: Location) -> User:
    """
    Stores the user's declared location, creating the user if needed.

    Args:
        user_id: Telegram chat id
        location: Parsed location

    Returns:
        Updated user
    """
    with LogContext(user_id=user_id):
        users = get_users_collection()

        await users.update_one(
            {"user_id": user_id},
            {
                "$set": {
                    "location": location.model_dump(),
                    "updated_at": utc_now(),
                },
                "$setOnInsert": _defaults_on_insert(exclude=("location",)),
            },
            upsert=True
        )

        logger.info(f"Location updated: {location.display()}")

        doc = await users.find_one({"user_id": user_id})
        return User.from_document(doc)


async def increment_ad_count(user_id: int) -> None:
    """
    Adds one to the user's ad counter.

    Not transactional with the ad insert that precedes it.

    Args:
        user_id: Telegram chat id
    """
    users = get_users_collection()

    await users.update_one(
        {"user_id": user_id},
        {
            "$inc": {"ad_count": 1},
            "$set": {"updated_at": utc_now()},
            "$setOnInsert": _defaults_on_insert(exclude=("ad_count",)),
        },
        upsert=True
    )


async def get_users_by_ids(user_ids: Iterable[int]) -> Dict[int, User]:
    """
    Fetches many users in one query.

    Args:
        user_ids: Telegram chat ids (duplicates are fine)

    Returns:
        Mapping of user_id to User for the users that exist
    """
    ids = list(dict.fromkeys(user_ids))
    if not ids:
        return {}

    users = get_users_collection()
    found = {}

    async for doc in users.find({"user_id": {"$in": ids}}):
        user = User.from_document(doc)
        found[user.user_id] = user

    return found
