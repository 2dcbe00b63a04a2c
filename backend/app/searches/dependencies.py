"""Search module dependencies (Dependency Injection)."""

from typing import Annotated

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.config import Settings, get_settings
from app.database import get_database
from app.searches.dispatcher import N8nWorkflowDispatcher
from app.searches.repository import ConversationRepository, SearchRepository
from app.searches.service import SearchService
from app.users.repository import UserRepository
from app.webhook.status import StatusAggregator


def get_workflow_dispatcher(
    settings: Annotated[Settings, Depends(get_settings)],
) -> N8nWorkflowDispatcher:
    """Get the n8n dispatcher built from the process settings."""
    return N8nWorkflowDispatcher.from_settings(settings)


def get_search_service(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)],
    dispatcher: Annotated[N8nWorkflowDispatcher, Depends(get_workflow_dispatcher)],
) -> SearchService:
    """Get search service."""
    search_repository = SearchRepository(db)
    return SearchService(
        search_repository=search_repository,
        conversation_repository=ConversationRepository(db),
        user_repository=UserRepository(db),
        dispatcher=dispatcher,
        aggregator=StatusAggregator(search_repository),
    )
