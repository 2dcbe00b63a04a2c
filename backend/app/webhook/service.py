"""Webhook service - applies n8n stage callbacks to searches."""

import logging
from typing import Any

from app.searches.interfaces import IConversationRepository, ISearchRepository
from app.searches.models import create_conversation_document
from app.searches.schemas import PlatformName, PlatformStatus, SearchStatus
from app.webhook.exceptions import (
    InvalidWebhookPayloadError,
    UnknownPlatformError,
    UnknownStageError,
    WebhookSearchNotFoundError,
)
from app.webhook.parsers import (
    ParsedPost,
    parse_flexible_date,
    parse_linkedin_markdown,
    parse_passed_posts,
)
from app.webhook.schemas import N8nWebhookPayload, WebhookResponse, WebhookStage
from app.webhook.status import StatusAggregator

logger = logging.getLogger(__name__)


def resolve_platform(value: str | None) -> PlatformName:
    """Platform named by the callback; Reddit when absent."""
    if not value:
        return PlatformName.REDDIT
    try:
        return PlatformName(value.strip().upper())
    except ValueError:
        raise UnknownPlatformError(value)


def keywords_to_list(keywords: Any) -> list[str]:
    """Keyword map values (or a plain list) as an ordered list of strings."""
    if isinstance(keywords, dict):
        values = list(keywords.values())
    elif isinstance(keywords, list):
        values = keywords
    else:
        return []
    return [str(v).strip() for v in values if v is not None and str(v).strip()]


class WebhookService:
    """Webhook business logic (Dependency Inversion)."""

    def __init__(
        self,
        search_repository: ISearchRepository,
        conversation_repository: IConversationRepository,
        aggregator: StatusAggregator,
    ) -> None:
        self._searches = search_repository
        self._conversations = conversation_repository
        self._aggregator = aggregator

    async def handle(self, payload: N8nWebhookPayload) -> WebhookResponse:
        """Apply one callback. Validation happens before any write."""
        if not payload.search_id:
            raise InvalidWebhookPayloadError("Missing searchId")

        search_id = payload.search_id
        search = await self._searches.get_by_id(search_id)
        if not search:
            raise WebhookSearchNotFoundError(search_id)

        if payload.error:
            await self._searches.mark_failed(search_id, str(payload.error))
            logger.warning(f"Workflow reported an error for search {search_id}: {payload.error}")
            return WebhookResponse(message="Error recorded")

        stage = WebhookStage.resolve(payload.stage)
        if stage is None:
            raise UnknownStageError(payload.stage)

        if stage is WebhookStage.LINKEDIN_FINAL:
            return await self._handle_linkedin_final(search_id, payload)

        platform = resolve_platform(payload.platform)
        logger.info(f"Webhook '{payload.stage}' for search {search_id} ({platform.value})")

        if stage is WebhookStage.WEBSITE_ANALYSIS:
            return await self._handle_website_analysis(search_id, platform, payload)
        if stage is WebhookStage.KEYWORDS_GENERATED:
            return await self._handle_keywords(search_id, platform, payload)
        return await self._handle_conversations(search_id, platform, stage, payload)

    async def _handle_website_analysis(
        self, search_id: str, platform: PlatformName, payload: N8nWebhookPayload
    ) -> WebhookResponse:
        website_data = payload.website_data
        if isinstance(website_data, list) and website_data:
            stored = await self._searches.set_website_info_once(search_id, website_data[0])
            if not stored:
                logger.info(f"Website info already set for search {search_id}, discarding {platform.value} data")

        await self._searches.update_platform(
            search_id, platform, status=PlatformStatus.ANALYZING
        )
        return WebhookResponse(message="Website analysis received")

    async def _handle_keywords(
        self, search_id: str, platform: PlatformName, payload: N8nWebhookPayload
    ) -> WebhookResponse:
        keywords = keywords_to_list(payload.keywords)
        if keywords:
            stored = await self._searches.set_keywords_once(search_id, keywords)
            if not stored:
                logger.info(f"Keywords already set for search {search_id}, discarding {platform.value} keywords")

        await self._searches.update_platform(
            search_id, platform, status=PlatformStatus.SEARCHING
        )
        return WebhookResponse(message="Keywords received")

    async def _handle_conversations(
        self,
        search_id: str,
        platform: PlatformName,
        stage: WebhookStage,
        payload: N8nWebhookPayload,
    ) -> WebhookResponse:
        posts = parse_passed_posts(payload.passed_posts)
        count = await self._ingest(search_id, platform, posts, keyword=payload.keyword)

        if stage is WebhookStage.CONVERSATIONS_FINAL:
            await self._searches.update_platform(
                search_id,
                platform,
                status=PlatformStatus.COMPLETED,
                results_increment=count,
            )
            await self._aggregator.reconcile(search_id)
            message = "Final results processed"
        else:
            if count:
                await self._searches.update_platform(
                    search_id,
                    platform,
                    status=PlatformStatus.SEARCHING,
                    results_increment=count,
                    search_status=SearchStatus.SEARCHING,
                )
            message = "Conversations received"

        return WebhookResponse(
            message=message,
            conversations_count=count,
            stage=payload.stage,
        )

    async def _handle_linkedin_final(
        self, search_id: str, payload: N8nWebhookPayload
    ) -> WebhookResponse:
        posts: list[ParsedPost] = []
        if isinstance(payload.linkedin_final, str):
            posts = parse_linkedin_markdown(payload.linkedin_final)

        count = await self._ingest(search_id, PlatformName.LINKEDIN, posts)
        await self._searches.update_platform(
            search_id,
            PlatformName.LINKEDIN,
            status=PlatformStatus.COMPLETED,
            results_increment=count,
        )
        await self._aggregator.reconcile(search_id)

        return WebhookResponse(
            message="LinkedIn results processed",
            conversations_count=count,
        )

    async def _ingest(
        self,
        search_id: str,
        platform: PlatformName,
        posts: list[ParsedPost],
        keyword: str | None = None,
    ) -> int:
        """Store posts as conversations and return how many were written."""
        documents = [
            create_conversation_document(
                search_id=search_id,
                platform=platform,
                title=post.title,
                url=post.post_url,
                excerpt=post.body.strip(),
                author=post.author or "",
                author_profile_url=post.author_profile_url,
                subreddit=post.subreddit,
                keyword=keyword or post.keyword,
                assessment=post.assessment,
                upvotes=post.upvotes,
                comments=post.comments,
                relevance_score=post.relevance_score,
                posted_at=parse_flexible_date(post.created_at),
            )
            for post in posts
        ]
        inserted = await self._conversations.insert_many(documents)
        if inserted:
            logger.info(f"Stored {inserted} {platform.value} conversations for search {search_id}")
        return inserted
