"""Search and conversation repositories for MongoDB operations."""

import logging
from datetime import datetime, timezone
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

from app.searches.interfaces import IConversationRepository, ISearchRepository
from app.searches.schemas import (
    ACTIVE_SEARCH_STATUSES,
    PlatformName,
    PlatformStatus,
    SearchStatus,
)

logger = logging.getLogger(__name__)


class SearchRepository(ISearchRepository):
    """MongoDB repository for searches and their embedded platform entries."""

    COLLECTION = "searches"

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db[self.COLLECTION]

    async def create(self, document: dict[str, Any]) -> dict[str, Any]:
        await self._collection.insert_one(document)
        logger.info(f"Created search {document['_id']} for user {document['user_id']}")
        return document

    async def get_by_id(self, search_id: str) -> dict[str, Any] | None:
        return await self._collection.find_one({"_id": search_id})

    async def get_for_user(self, search_id: str, user_id: str) -> dict[str, Any] | None:
        return await self._collection.find_one({"_id": search_id, "user_id": user_id})

    async def list_for_user(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> list[dict[str, Any]]:
        cursor = (
            self._collection.find({"user_id": user_id})
            .sort("created_at", DESCENDING)
            .skip(offset)
            .limit(limit)
        )
        return await cursor.to_list(length=limit)

    async def delete(self, search_id: str) -> bool:
        result = await self._collection.delete_one({"_id": search_id})
        return result.deleted_count > 0

    async def set_website_info_once(self, search_id: str, website_info: Any) -> bool:
        # The null filter makes this a single compare-and-set: first writer wins.
        result = await self._collection.update_one(
            {"_id": search_id, "website_info": None},
            {
                "$set": {
                    "website_info": website_info,
                    "status": SearchStatus.ANALYZING.value,
                    "updated_at": datetime.now(timezone.utc),
                }
            },
        )
        return result.modified_count > 0

    async def set_keywords_once(self, search_id: str, keywords: list[str]) -> bool:
        result = await self._collection.update_one(
            {"_id": search_id, "keywords": None},
            {
                "$set": {
                    "keywords": keywords,
                    "status": SearchStatus.SEARCHING.value,
                    "updated_at": datetime.now(timezone.utc),
                }
            },
        )
        return result.modified_count > 0

    async def update_platform(
        self,
        search_id: str,
        platform: PlatformName,
        status: PlatformStatus | None = None,
        error_message: str | None = None,
        results_increment: int = 0,
        search_status: SearchStatus | None = None,
    ) -> bool:
        prefix = f"platforms.{platform.value}"
        update_set: dict[str, Any] = {"updated_at": datetime.now(timezone.utc)}
        update_inc: dict[str, Any] = {"version": 1}

        if status is not None:
            update_set[f"{prefix}.status"] = status.value
        if error_message is not None:
            update_set[f"{prefix}.error_message"] = error_message
        if search_status is not None:
            update_set["status"] = search_status.value
        if results_increment:
            update_inc[f"{prefix}.results_count"] = results_increment
            update_inc["results_count"] = results_increment

        result = await self._collection.update_one(
            {"_id": search_id},
            {"$set": update_set, "$inc": update_inc},
        )
        return result.matched_count > 0

    async def mark_failed(self, search_id: str, error_message: str) -> bool:
        result = await self._collection.update_one(
            {"_id": search_id},
            {
                "$set": {
                    "status": SearchStatus.FAILED.value,
                    "error_message": error_message,
                    "updated_at": datetime.now(timezone.utc),
                }
            },
        )
        return result.matched_count > 0

    async def set_status_if_version(
        self, search_id: str, expected_version: int, status: SearchStatus
    ) -> bool:
        result = await self._collection.update_one(
            {"_id": search_id, "version": expected_version},
            {
                "$set": {
                    "status": status.value,
                    "updated_at": datetime.now(timezone.utc),
                }
            },
        )
        return result.matched_count > 0

    async def get_stats(self, user_id: str, month_start: datetime) -> dict[str, Any]:
        total_searches = await self._collection.count_documents({"user_id": user_id})
        active_searches = await self._collection.count_documents(
            {
                "user_id": user_id,
                "status": {"$in": [s.value for s in ACTIVE_SEARCH_STATUSES]},
            }
        )
        searches_this_month = await self._collection.count_documents(
            {"user_id": user_id, "created_at": {"$gte": month_start}}
        )

        total_leads = 0
        pipeline = [
            {"$match": {"user_id": user_id}},
            {"$group": {"_id": None, "total": {"$sum": "$results_count"}}},
        ]
        async for row in self._collection.aggregate(pipeline):
            total_leads = row.get("total", 0) or 0

        recent = await self.list_for_user(user_id, limit=5)

        return {
            "total_searches": total_searches,
            "active_searches": active_searches,
            "total_leads": total_leads,
            "searches_this_month": searches_this_month,
            "recent": [
                {
                    "id": search["_id"],
                    "product_url": search["product_url"],
                    "created_at": search["created_at"],
                    "results_count": search.get("results_count", 0),
                }
                for search in recent
            ],
        }


class ConversationRepository(IConversationRepository):
    """MongoDB repository for ingested conversations."""

    COLLECTION = "conversations"

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db[self.COLLECTION]

    async def insert_many(self, documents: list[dict[str, Any]]) -> int:
        if not documents:
            return 0
        result = await self._collection.insert_many(documents)
        return len(result.inserted_ids)

    async def list_for_search(self, search_id: str) -> list[dict[str, Any]]:
        cursor = self._collection.find({"search_id": search_id}).sort(
            [("relevance_score", DESCENDING), ("found_at", DESCENDING)]
        )
        return await cursor.to_list(length=None)

    async def delete_for_search(self, search_id: str) -> int:
        result = await self._collection.delete_many({"search_id": search_id})
        return result.deleted_count
