"""Interaction routes."""

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_interaction_service
from app.api.envelope import ApiResponse, success
from app.api.schemas import InteractionCreateRequest, InteractionResponse
from app.domain.entities import InteractionType
from app.services.interaction import InteractionService

router = APIRouter(prefix="/interactions", tags=["Interactions"])


@router.post(
    "",
    response_model=ApiResponse[InteractionResponse],
    status_code=status.HTTP_201_CREATED,
)
async def record_interaction(
    data: InteractionCreateRequest,
    service: InteractionService = Depends(get_interaction_service),
) -> ApiResponse[InteractionResponse]:
    """Record a user interaction with a content item."""
    interaction = await service.record_interaction(
        user_id=data.user_id,
        content_id=data.content_id,
        type=data.type,
        duration=data.duration,
        comment=data.comment,
        rating=data.rating,
    )
    return success(
        InteractionResponse.model_validate(interaction),
        "Interaction recorded successfully",
    )


@router.get("/users/{user_id}", response_model=ApiResponse[list[InteractionResponse]])
async def get_user_interactions(
    user_id: str,
    type: InteractionType | None = None,
    service: InteractionService = Depends(get_interaction_service),
) -> ApiResponse[list[InteractionResponse]]:
    interactions = await service.get_user_interactions(user_id, type)
    return success(
        [InteractionResponse.model_validate(i) for i in interactions],
        "User interactions retrieved successfully",
    )
