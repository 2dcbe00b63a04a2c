"""Webhook Pydantic schemas.

Field names follow the camelCase keys the n8n workflows send.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class WebhookStage(str, Enum):
    """Workflow callback stages."""

    WEBSITE_ANALYSIS = "website_analysis"
    KEYWORDS_GENERATED = "keywords_generated"
    CONVERSATIONS_PARTIAL = "conversations_partial"
    CONVERSATIONS_FINAL = "conversations_final"
    LINKEDIN_FINAL = "linkedin_final"

    @classmethod
    def resolve(cls, value: str | None) -> "WebhookStage | None":
        """Map a raw stage name; any ``conversations_partial*`` is a partial batch."""
        if not value:
            return None
        if value.startswith(cls.CONVERSATIONS_PARTIAL.value):
            return cls.CONVERSATIONS_PARTIAL
        try:
            return cls(value)
        except ValueError:
            return None


class N8nWebhookPayload(BaseModel):
    """Callback body sent by the workflow engine."""

    search_id: str | None = Field(default=None, alias="searchId")
    stage: str | None = None
    error: Any = None
    website_data: Any = Field(default=None, alias="websiteData")
    keywords: Any = None
    keyword: str | None = None
    passed_posts: Any = Field(default=None, alias="passedPosts")
    platform: str | None = None
    linkedin_final: Any = Field(default=None, alias="linkedinFinal")

    class Config:
        populate_by_name = True


class WebhookResponse(BaseModel):
    success: bool = True
    message: str
    conversations_count: int | None = Field(default=None, serialization_alias="conversationsCount")
    stage: str | None = None
