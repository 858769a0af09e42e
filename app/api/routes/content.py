"""Content catalog routes."""

import math

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_content_service, get_interaction_service
from app.api.envelope import ApiResponse, success
from app.api.schemas import ContentPageResponse, ContentResponse, RatingResponse
from app.domain.entities import ContentType, SortField, SortOrder
from app.services.content import ContentService
from app.services.interaction import InteractionService

router = APIRouter(prefix="/content", tags=["Content"])


@router.get("", response_model=ApiResponse[ContentPageResponse])
async def list_content(
    type: ContentType | None = None,
    tags: list[str] | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_field: SortField = SortField.CREATED_AT,
    sort_order: SortOrder = SortOrder.DESC,
    service: ContentService = Depends(get_content_service),
) -> ApiResponse[ContentPageResponse]:
    result = await service.list_content(
        type=type,
        tags=tags,
        skip=(page - 1) * limit,
        limit=limit,
        sort_field=sort_field,
        sort_order=sort_order,
    )
    return success(
        ContentPageResponse(
            content=[ContentResponse.model_validate(i) for i in result.items],
            total=result.total,
            page=page,
            limit=limit,
            total_pages=math.ceil(result.total / limit),
        ),
        "Content retrieved successfully",
    )


@router.get("/search", response_model=ApiResponse[list[ContentResponse]])
async def search_content(
    type: ContentType,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: ContentService = Depends(get_content_service),
) -> ApiResponse[list[ContentResponse]]:
    items = await service.search_content(type, skip=(page - 1) * limit, limit=limit)
    return success(
        [ContentResponse.model_validate(i) for i in items],
        "Content filtered by type successfully",
    )


@router.get("/{content_id}", response_model=ApiResponse[ContentResponse])
async def get_content(
    content_id: str,
    service: ContentService = Depends(get_content_service),
) -> ApiResponse[ContentResponse]:
    content = await service.get_content(content_id)
    return success(ContentResponse.model_validate(content), "Content retrieved successfully")


@router.get("/{content_id}/rating", response_model=ApiResponse[RatingResponse])
async def get_content_rating(
    content_id: str,
    service: InteractionService = Depends(get_interaction_service),
) -> ApiResponse[RatingResponse]:
    """Average rating of a content item; ``rating`` is null when unrated."""
    summary = await service.get_content_rating(content_id)
    message = (
        "Content has no ratings yet"
        if summary.average is None
        else "Content rating retrieved successfully"
    )
    return success(RatingResponse(rating=summary.average, rating_count=summary.count), message)
