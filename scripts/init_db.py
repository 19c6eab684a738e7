"""
Database initialization script

Run once to create collections and indexes:
    python scripts/init_db.py
"""

import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

import logging

from adboard.db.mongo import connect_to_mongo, close_mongo_connection, get_database
from adboard.db.indexes import create_indexes

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)

COLLECTIONS = ("users", "ads", "sessions")


async def init_db():
    """Create collections and indexes, then print what exists."""
    await connect_to_mongo()

    try:
        db = get_database()
        existing = await db.list_collection_names()

        for name in COLLECTIONS:
            if name not in existing:
                await db.create_collection(name)
                logger.info(f"📋 Created collection '{name}'")

        await create_indexes()

        logger.info("\n📊 Indexes:")
        for name in COLLECTIONS:
            info = await db[name].index_information()
            logger.info(f"  {name}: {', '.join(sorted(info))}")

        logger.info("\n🎉 Database initialized")

    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(init_db())
