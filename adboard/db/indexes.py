"""
adboard/db/indexes.py

Purpose: Database index management

- Creates unique and performance indexes
- Supports newest-first ad scans and the category push-down
- TTL index for idle session eviction
"""

from pymongo import ASCENDING, DESCENDING

from adboard.core.config import settings
from adboard.db.mongo import (
    get_users_collection,
    get_ads_collection,
    get_sessions_collection
)
from adboard.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        users = get_users_collection()
        ads = get_ads_collection()
        sessions = get_sessions_collection()

        logger.info("Creating database indexes...")

        # ==============================================
        # USERS COLLECTION INDEXES
        # ==============================================

        await users.create_index("user_id", unique=True, name="user_id_unique")
        logger.debug("Created unique index on users.user_id")

        # ==============================================
        # ADS COLLECTION INDEXES
        # ==============================================

        # Newest-first scans
        await ads.create_index(
            [("created_at", DESCENDING), ("_id", DESCENDING)],
            name="ads_newest_idx"
        )
        logger.debug("Created index on ads.created_at")

        # Category filter with newest-first order
        await ads.create_index(
            [("category", ASCENDING), ("created_at", DESCENDING)],
            name="ads_category_idx"
        )
        logger.debug("Created compound index on ads.category + created_at")

        # "My ads"
        await ads.create_index(
            [("user_id", ASCENDING), ("created_at", DESCENDING)],
            name="ads_owner_idx"
        )
        logger.debug("Created compound index on ads.user_id + created_at")

        # ==============================================
        # SESSIONS COLLECTION INDEXES
        # ==============================================

        await sessions.create_index("chat_id", unique=True, name="session_chat_unique")
        logger.debug("Created unique index on sessions.chat_id")

        # Delete when expires_at is reached
        await sessions.create_index(
            "expires_at",
            expireAfterSeconds=0,
            name="session_expiry_ttl_idx"
        )
        logger.debug(
            f"Created TTL index on sessions.expires_at ({settings.SESSION_TTL_HOURS}h idle)"
        )

        logger.info("✅ All database indexes created successfully")

        user_indexes = await users.index_information()
        ad_indexes = await ads.index_information()
        session_indexes = await sessions.index_information()

        logger.info(
            f"Index summary: Users={len(user_indexes)}, "
            f"Ads={len(ad_indexes)}, "
            f"Sessions={len(session_indexes)}"
        )

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    import asyncio
    from adboard.db.mongo import connect_to_mongo, close_mongo_connection

    async def main():
        await connect_to_mongo()
        await create_indexes()
        await close_mongo_connection()

    asyncio.run(main())
