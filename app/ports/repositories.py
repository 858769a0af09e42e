"""Repository ports — abstract providers for users, content and interactions."""

from abc import ABC, abstractmethod

from app.domain.entities import (
    ContentFilter,
    ContentItem,
    ContentSort,
    InteractionRecord,
    InteractionType,
    UserProfile,
)


class UserRepositoryPort(ABC):
    """Read-only access to users owned by the auth subsystem."""

    @abstractmethod
    async def find_by_id(self, user_id: str) -> UserProfile | None:
        ...


class ContentRepositoryPort(ABC):
    """Access to the content catalog."""

    @abstractmethod
    async def find_by_id(self, content_id: str) -> ContentItem | None:
        ...

    @abstractmethod
    async def find_many(
        self,
        predicate: ContentFilter,
        sort: list[ContentSort] | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> tuple[list[ContentItem], int]:
        """Return one page of matching items and the total match count."""
        ...

    @abstractmethod
    async def increment_popularity(self, content_id: str, delta: int) -> ContentItem | None:
        """Atomically add ``delta`` to the popularity counter."""
        ...


class InteractionRepositoryPort(ABC):
    """Append-only interaction log."""

    @abstractmethod
    async def find_by_user(
        self, user_id: str, type: InteractionType | None = None
    ) -> list[InteractionRecord]:
        """Interactions of a user, newest first."""
        ...

    @abstractmethod
    async def find_by_content(
        self, content_id: str, type: InteractionType | None = None
    ) -> list[InteractionRecord]:
        """Interactions on a content item, newest first."""
        ...

    @abstractmethod
    async def insert(self, interaction: InteractionRecord) -> InteractionRecord:
        ...
