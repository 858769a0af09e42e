"""Recommendation routes."""

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_recommendation_service
from app.api.envelope import ApiResponse, success
from app.api.schemas import ContentResponse
from app.config import settings
from app.domain.entities import ContentType, RecommendationOptions
from app.services.recommendation import RecommendationService

router = APIRouter(prefix="/recommendations", tags=["Recommendations"])


@router.get("/filter", response_model=ApiResponse[list[ContentResponse]])
async def filter_content(
    type: ContentType | None = None,
    tags: list[str] | None = Query(None),
    limit: int = Query(10, ge=1, le=settings.max_recommendation_limit),
    offset: int = Query(0, ge=0),
    service: RecommendationService = Depends(get_recommendation_service),
) -> ApiResponse[list[ContentResponse]]:
    """Filter the catalog by type and tags, most popular first."""
    items = await service.filter_content(type=type, tags=tags, limit=limit, offset=offset)
    return success(
        [ContentResponse.model_validate(i) for i in items],
        "Filtered content retrieved successfully",
    )


@router.get("/{user_id}", response_model=ApiResponse[list[ContentResponse]])
async def get_recommendations(
    user_id: str,
    limit: int = Query(
        settings.default_recommendation_limit, ge=1, le=settings.max_recommendation_limit
    ),
    type: ContentType | None = None,
    tags: list[str] | None = Query(None),
    service: RecommendationService = Depends(get_recommendation_service),
) -> ApiResponse[list[ContentResponse]]:
    """Personalized content suggestions for a user."""
    options = RecommendationOptions(limit=limit, type=type, tags=tags)
    items = await service.get_recommendations(user_id, options)
    return success(
        [ContentResponse.model_validate(i) for i in items],
        "Recommendations retrieved successfully",
    )
