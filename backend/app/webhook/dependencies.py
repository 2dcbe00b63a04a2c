"""Webhook module dependencies (Dependency Injection)."""

import logging
import secrets
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.config import Settings, get_settings
from app.database import get_database
from app.searches.repository import ConversationRepository, SearchRepository
from app.webhook.service import WebhookService
from app.webhook.status import StatusAggregator

logger = logging.getLogger(__name__)


def verify_webhook_secret(
    settings: Annotated[Settings, Depends(get_settings)],
    x_api_key: Annotated[str | None, Header()] = None,
) -> None:
    """Reject callbacks without the shared secret before any other work."""
    expected = settings.n8n_webhook_secret
    if not expected or not x_api_key or not secrets.compare_digest(
        x_api_key.encode(), expected.encode()
    ):
        logger.error("Invalid API key on workflow webhook")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: Invalid API key",
        )


def get_webhook_service(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)],
) -> WebhookService:
    """Get webhook service."""
    search_repository = SearchRepository(db)
    return WebhookService(
        search_repository=search_repository,
        conversation_repository=ConversationRepository(db),
        aggregator=StatusAggregator(search_repository),
    )
