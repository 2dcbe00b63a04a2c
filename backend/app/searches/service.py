"""Search service - creation, dispatch and read access for the dashboard."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from pymongo.errors import PyMongoError

from app.core.interfaces import IUserRepository
from app.searches.exceptions import (
    InvalidSearchRequestError,
    SearchNotFoundError,
    WorkflowDispatchError,
)
from app.searches.interfaces import (
    IConversationRepository,
    ISearchRepository,
    IWorkflowDispatcher,
)
from app.searches.models import create_search_document
from app.searches.schemas import PlatformName, PlatformStatus
from app.webhook.status import StatusAggregator

logger = logging.getLogger(__name__)


def parse_platforms(platforms: list[str] | None) -> list[PlatformName]:
    """Validate requested platform names (case-insensitive), keeping order."""
    if not platforms:
        raise InvalidSearchRequestError("At least one platform must be selected")

    invalid = [
        str(p) for p in platforms
        if not isinstance(p, str) or p.upper() not in PlatformName.__members__
    ]
    if invalid:
        raise InvalidSearchRequestError(f"Invalid platforms: {', '.join(invalid)}")

    selected: list[PlatformName] = []
    for name in platforms:
        platform = PlatformName(name.upper())
        if platform not in selected:
            selected.append(platform)
    return selected


class SearchService:
    """Search business logic (Dependency Inversion)."""

    def __init__(
        self,
        search_repository: ISearchRepository,
        conversation_repository: IConversationRepository,
        user_repository: IUserRepository,
        dispatcher: IWorkflowDispatcher,
        aggregator: StatusAggregator,
    ) -> None:
        self._searches = search_repository
        self._conversations = conversation_repository
        self._users = user_repository
        self._dispatcher = dispatcher
        self._aggregator = aggregator

    async def create_search(
        self,
        user_id: str,
        product_url: str | None,
        platforms: list[str] | None,
    ) -> str:
        """Create a search and trigger the workflow for each selected platform.

        A platform whose workflow cannot be triggered is marked failed; the
        search itself is still created. The search is removed again if the
        user counter cannot be updated.
        """
        if not product_url or not isinstance(product_url, str) or not product_url.strip():
            raise InvalidSearchRequestError("Product URL is required and must be a string")

        selected = parse_platforms(platforms)
        product_url = product_url.strip()

        document = create_search_document(
            user_id=user_id,
            product_url=product_url,
            selected_platforms=selected,
        )
        search = await self._searches.create(document)
        search_id = search["_id"]
        try:
            await self._users.increment_search_count(user_id)
        except PyMongoError:
            logger.error(f"Could not count search {search_id} for user {user_id}, removing it")
            await self._searches.delete(search_id)
            raise

        dispatched = await asyncio.gather(
            *(
                self._dispatch_platform(search_id, product_url, user_id, platform)
                for platform in selected
            )
        )
        if not all(dispatched):
            # No callback will arrive for failed platforms.
            await self._aggregator.reconcile(search_id)
        return search_id

    async def _dispatch_platform(
        self,
        search_id: str,
        product_url: str,
        user_id: str,
        platform: PlatformName,
    ) -> bool:
        try:
            await self._dispatcher.dispatch(
                search_id=search_id,
                product_url=product_url,
                user_id=user_id,
                platform=platform,
            )
        except WorkflowDispatchError as e:
            logger.warning(f"Platform {platform.value} failed for search {search_id}: {e.message}")
            await self._searches.update_platform(
                search_id,
                platform,
                status=PlatformStatus.FAILED,
                error_message=e.message,
            )
            return False
        return True

    async def list_searches(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> list[dict[str, Any]]:
        return await self._searches.list_for_user(user_id, limit=limit, offset=offset)

    async def get_search(self, search_id: str, user_id: str) -> dict[str, Any]:
        search = await self._searches.get_for_user(search_id, user_id)
        if not search:
            raise SearchNotFoundError(search_id)
        return search

    async def get_conversations(self, search_id: str, user_id: str) -> list[dict[str, Any]]:
        await self.get_search(search_id, user_id)
        return await self._conversations.list_for_search(search_id)

    async def delete_search(self, search_id: str, user_id: str) -> None:
        """Delete a search together with its conversations."""
        await self.get_search(search_id, user_id)
        deleted_conversations = await self._conversations.delete_for_search(search_id)
        await self._searches.delete(search_id)
        logger.info(f"Deleted search {search_id} ({deleted_conversations} conversations)")

    async def get_stats(self, user_id: str) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        return await self._searches.get_stats(user_id, month_start)
