from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.interfaces import IUserRepository
from app.users.model import normalize_email


class UserRepository(IUserRepository):
    """MongoDB user repository implementation (Single Responsibility)."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db["users"]

    async def create(self, user_data: dict[str, Any]) -> dict[str, Any]:
        result = await self._collection.insert_one(user_data)
        user_data["_id"] = result.inserted_id
        return user_data

    async def get_by_email(self, email: str) -> dict[str, Any] | None:
        return await self._collection.find_one({"email": normalize_email(email)})

    async def get_by_id(self, user_id: str) -> dict[str, Any] | None:
        try:
            return await self._collection.find_one({"_id": ObjectId(user_id)})
        except (InvalidId, TypeError):
            return None

    async def increment_search_count(self, user_id: str) -> None:
        try:
            object_id = ObjectId(user_id)
        except (InvalidId, TypeError):
            return
        await self._collection.update_one(
            {"_id": object_id},
            {
                "$inc": {"search_count": 1},
                "$set": {"updated_at": datetime.now(timezone.utc)},
            },
        )
