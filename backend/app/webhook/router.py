"""Inbound workflow webhook router."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pymongo.errors import PyMongoError

from app.webhook.dependencies import get_webhook_service, verify_webhook_secret
from app.webhook.exceptions import InvalidWebhookPayloadError, WebhookSearchNotFoundError
from app.webhook.schemas import N8nWebhookPayload, WebhookResponse
from app.webhook.service import WebhookService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/webhook",
    tags=["webhook"],
    dependencies=[Depends(verify_webhook_secret)],
)


@router.post("/n8n", response_model=WebhookResponse, response_model_exclude_none=True)
async def receive_n8n_callback(
    payload: N8nWebhookPayload,
    service: Annotated[WebhookService, Depends(get_webhook_service)],
) -> WebhookResponse:
    """
    Receive a stage callback from an n8n workflow.
    Requires the shared secret in the x-api-key header.
    """
    try:
        return await service.handle(payload)
    except InvalidWebhookPayloadError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except WebhookSearchNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )
    except PyMongoError as e:
        logger.exception(f"Storage error while handling webhook for search {payload.search_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e) or "Internal server error",
        )
