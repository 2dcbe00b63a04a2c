"""Search API router (Single Responsibility)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.auth.dependencies import get_current_user
from app.searches.dependencies import get_search_service
from app.searches.exceptions import InvalidSearchRequestError, SearchNotFoundError
from app.searches.models import search_to_response_dict
from app.searches.schemas import (
    ConversationResponse,
    CreateSearchRequest,
    CreateSearchResponse,
    DeleteSearchResponse,
    SearchResponse,
    SearchStatsResponse,
)
from app.searches.service import SearchService

router = APIRouter(prefix="/api/search", tags=["search"])


def _user_id(user: dict) -> str:
    return str(user["_id"])


@router.post("", response_model=CreateSearchResponse, status_code=status.HTTP_201_CREATED)
async def create_search(
    request: CreateSearchRequest,
    user: Annotated[dict, Depends(get_current_user)],
    service: Annotated[SearchService, Depends(get_search_service)],
) -> CreateSearchResponse:
    """
    Create a new search and trigger the workflow for each selected platform.
    Requires authentication.
    """
    try:
        search_id = await service.create_search(
            user_id=_user_id(user),
            product_url=request.product_url,
            platforms=request.platforms,
        )
    except InvalidSearchRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

    return CreateSearchResponse(
        search_id=search_id,
        message="Search request submitted successfully",
    )


@router.get("", response_model=list[SearchResponse])
async def list_searches(
    user: Annotated[dict, Depends(get_current_user)],
    service: Annotated[SearchService, Depends(get_search_service)],
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> list[SearchResponse]:
    """Search history, newest first."""
    searches = await service.list_searches(_user_id(user), limit=limit, offset=offset)
    return [SearchResponse(**search_to_response_dict(s)) for s in searches]


# Declared before /{search_id} so "stats" is not taken for an ID.
@router.get("/stats", response_model=SearchStatsResponse)
async def get_stats(
    user: Annotated[dict, Depends(get_current_user)],
    service: Annotated[SearchService, Depends(get_search_service)],
) -> SearchStatsResponse:
    """Aggregate counters and the five most recent searches."""
    stats = await service.get_stats(_user_id(user))
    return SearchStatsResponse(**stats)


@router.get("/{search_id}", response_model=SearchResponse)
async def get_search(
    search_id: str,
    user: Annotated[dict, Depends(get_current_user)],
    service: Annotated[SearchService, Depends(get_search_service)],
) -> SearchResponse:
    """Get one search with its platforms."""
    try:
        search = await service.get_search(search_id, _user_id(user))
    except SearchNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return SearchResponse(**search_to_response_dict(search))


@router.get("/{search_id}/conversations", response_model=list[ConversationResponse])
async def get_conversations(
    search_id: str,
    user: Annotated[dict, Depends(get_current_user)],
    service: Annotated[SearchService, Depends(get_search_service)],
) -> list[ConversationResponse]:
    """Conversations for a search, most relevant and most recent first."""
    try:
        conversations = await service.get_conversations(search_id, _user_id(user))
    except SearchNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return [
        ConversationResponse(id=c["_id"], **{k: v for k, v in c.items() if k != "_id"})
        for c in conversations
    ]


@router.delete("/{search_id}", response_model=DeleteSearchResponse)
async def delete_search(
    search_id: str,
    user: Annotated[dict, Depends(get_current_user)],
    service: Annotated[SearchService, Depends(get_search_service)],
) -> DeleteSearchResponse:
    """Delete a search and its conversations."""
    try:
        await service.delete_search(search_id, _user_id(user))
    except SearchNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return DeleteSearchResponse(message="Search deleted successfully")
