"""Search and conversation document factories for MongoDB storage."""

import uuid
from datetime import datetime, timezone
from typing import Any

from app.searches.schemas import (
    PlatformName,
    PlatformStatus,
    SearchStatus,
)


def create_platform_entry(name: PlatformName, selected: bool) -> dict[str, Any]:
    """One platform row embedded in a search document."""
    return {
        "name": name.value,
        "selected": selected,
        "status": PlatformStatus.PENDING.value,
        "results_count": 0,
        "error_message": None,
    }


def create_search_document(
    user_id: str,
    product_url: str,
    selected_platforms: list[PlatformName],
) -> dict[str, Any]:
    """Create a search document with one entry per known platform.

    Platforms are keyed by name so each search holds exactly one entry per
    platform, selected or not.
    """
    now = datetime.now(timezone.utc)
    return {
        "_id": str(uuid.uuid4()),
        "user_id": user_id,
        "product_url": product_url,
        "status": SearchStatus.PENDING.value,
        "keywords": None,
        "website_info": None,
        "results_count": 0,
        "error_message": None,
        "platforms": {
            platform.value: create_platform_entry(platform, platform in selected_platforms)
            for platform in PlatformName
        },
        "version": 0,
        "created_at": now,
        "updated_at": now,
    }


def create_conversation_document(
    search_id: str,
    platform: PlatformName,
    title: str,
    url: str,
    posted_at: datetime,
    excerpt: str = "",
    author: str = "",
    author_profile_url: str | None = None,
    subreddit: str | None = None,
    keyword: str | None = None,
    assessment: str | None = None,
    upvotes: int = 0,
    comments: int = 0,
    relevance_score: float | None = None,
) -> dict[str, Any]:
    """Create a conversation document for MongoDB insertion."""
    return {
        "_id": str(uuid.uuid4()),
        "search_id": search_id,
        "platform": platform.value,
        "title": title,
        "url": url,
        "excerpt": excerpt,
        "author": author,
        "author_profile_url": author_profile_url,
        "subreddit": subreddit,
        "keyword": keyword,
        "assessment": assessment,
        "upvotes": upvotes,
        "comments": comments,
        "relevance_score": relevance_score,
        "posted_at": posted_at,
        "found_at": datetime.now(timezone.utc),
    }


def search_to_response_dict(search: dict[str, Any]) -> dict[str, Any]:
    """Flatten a stored search into the API shape (platform list, keywords list)."""
    platforms = search.get("platforms") or {}
    return {
        "id": search["_id"],
        "user_id": search["user_id"],
        "product_url": search["product_url"],
        "status": search["status"],
        "keywords": search.get("keywords") or [],
        "website_info": search.get("website_info"),
        "results_count": search.get("results_count", 0),
        "error_message": search.get("error_message"),
        "platforms": [
            platforms[platform.value]
            for platform in PlatformName
            if platform.value in platforms
        ],
        "created_at": search["created_at"],
        "updated_at": search["updated_at"],
    }
