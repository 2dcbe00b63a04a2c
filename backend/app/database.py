import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from app.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

client: AsyncIOMotorClient | None = None
db: AsyncIOMotorDatabase | None = None


async def connect_to_mongo() -> None:
    global client, db
    client = AsyncIOMotorClient(settings.mongodb_url)
    db = client[settings.mongodb_db_name]
    logger.info(f"Connected to MongoDB database '{settings.mongodb_db_name}'")


async def ensure_indexes(database: AsyncIOMotorDatabase) -> None:
    """Create the indexes the API queries rely on."""
    await database["users"].create_index("email", unique=True)
    await database["searches"].create_index([("user_id", 1), ("created_at", -1)])
    await database["conversations"].create_index("search_id")


async def close_mongo_connection() -> None:
    global client
    if client:
        client.close()
        logger.info("MongoDB connection closed")


def get_database() -> AsyncIOMotorDatabase:
    if db is None:
        raise RuntimeError("Database not initialized. Call connect_to_mongo first.")
    return db
