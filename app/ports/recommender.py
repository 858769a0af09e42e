"""Recommender port — abstract interface for the recommendation engine."""

from abc import ABC, abstractmethod

from app.domain.entities import ContentItem, RecommendationOptions


class RecommenderPort(ABC):
    """Abstraction for the content recommendation engine."""

    @abstractmethod
    async def get_recommendations(
        self,
        user_id: str,
        options: RecommendationOptions | None = None,
    ) -> list[ContentItem]:
        """Return ranked content recommendations for a user."""
        ...
