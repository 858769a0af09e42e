"""Domain exceptions raised by services and adapters."""


class RecommenderError(Exception):
    """Base class for all domain errors."""


class NotFoundError(RecommenderError):
    def __init__(self, resource: str, resource_id: str) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found: {resource_id}")


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str) -> None:
        super().__init__("User", user_id)


class ContentNotFoundError(NotFoundError):
    def __init__(self, content_id: str) -> None:
        super().__init__("Content", content_id)


class StoreUnavailableError(RecommenderError):
    """A backing store failed to complete an operation."""


class CacheUnavailableError(StoreUnavailableError):
    """The cache provider could not be reached. Never surfaces past the cache service."""
