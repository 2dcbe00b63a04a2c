"""Search module Pydantic schemas (Single Responsibility)."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SearchStatus(str, Enum):
    """Overall status of a search."""

    PENDING = "pending"
    ANALYZING = "analyzing"
    SEARCHING = "searching"
    COMPLETE = "complete"
    FAILED = "failed"


class PlatformName(str, Enum):
    """Social platforms a search can cover."""

    REDDIT = "REDDIT"
    LINKEDIN = "LINKEDIN"
    TWITTER = "TWITTER"


class PlatformStatus(str, Enum):
    """Status of one platform within a search."""

    PENDING = "pending"
    ANALYZING = "analyzing"
    SEARCHING = "searching"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PlatformStatus.COMPLETED, PlatformStatus.FAILED)


ACTIVE_SEARCH_STATUSES = (
    SearchStatus.PENDING,
    SearchStatus.ANALYZING,
    SearchStatus.SEARCHING,
)


class CreateSearchRequest(BaseModel):
    """Request to start a new search."""

    product_url: str | None = Field(default=None, alias="productUrl")
    platforms: list[str] | None = None

    class Config:
        populate_by_name = True


class CreateSearchResponse(BaseModel):
    success: bool = True
    search_id: str
    message: str


class PlatformResponse(BaseModel):
    name: PlatformName
    selected: bool
    status: PlatformStatus
    results_count: int = 0
    error_message: str | None = None


class SearchResponse(BaseModel):
    id: str
    user_id: str
    product_url: str
    status: SearchStatus
    keywords: list[str] = []
    website_info: Any = None
    results_count: int = 0
    error_message: str | None = None
    platforms: list[PlatformResponse] = []
    created_at: datetime
    updated_at: datetime


class ConversationResponse(BaseModel):
    id: str
    search_id: str
    platform: PlatformName
    title: str
    url: str
    excerpt: str = ""
    author: str = ""
    author_profile_url: str | None = None
    subreddit: str | None = None
    keyword: str | None = None
    assessment: str | None = None
    upvotes: int = 0
    comments: int = 0
    relevance_score: float | None = None
    posted_at: datetime
    found_at: datetime


class RecentSearch(BaseModel):
    id: str
    product_url: str
    created_at: datetime
    results_count: int = 0


class SearchStatsResponse(BaseModel):
    total_searches: int
    active_searches: int
    total_leads: int
    searches_this_month: int
    recent: list[RecentSearch] = []


class DeleteSearchResponse(BaseModel):
    success: bool = True
    message: str
