"""Plain domain objects passed between ports, services and the API layer."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from app.config import settings


class ContentType(str, Enum):
    ARTICLE = "article"
    VIDEO = "video"
    PODCAST = "podcast"
    IMAGE = "image"


class InteractionType(str, Enum):
    VIEW = "view"
    LIKE = "like"
    SHARE = "share"
    COMMENT = "comment"
    SAVE = "save"
    RATING = "rating"


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortField(str, Enum):
    TITLE = "title"
    CREATED_AT = "createdAt"
    POPULARITY = "popularity"


@dataclass
class UserProfile:
    id: str
    role: UserRole = UserRole.USER
    preferences: list[str] = field(default_factory=list)


@dataclass
class ContentItem:
    id: str
    title: str
    type: ContentType
    tags: list[str]
    popularity: int
    created_at: datetime


@dataclass
class InteractionRecord:
    user_id: str
    content_id: str
    type: InteractionType
    timestamp: datetime
    duration: float | None = None
    comment: str | None = None
    rating: int | None = None
    id: str | None = None


@dataclass
class EnrichedInteraction:
    """An interaction joined with the content it references. Never persisted."""

    interaction: InteractionRecord
    content: ContentItem


@dataclass
class ContentScore:
    content: ContentItem
    score: float


@dataclass
class ContentFilter:
    """Predicate for catalog queries. Unset fields do not constrain."""

    id_in: list[str] | None = None
    id_not_in: list[str] | None = None
    type: ContentType | None = None
    tags_any_of: list[str] | None = None


@dataclass
class ContentSort:
    field: SortField = SortField.CREATED_AT
    order: SortOrder = SortOrder.DESC


@dataclass
class RecommendationOptions:
    limit: int = field(default_factory=lambda: settings.default_recommendation_limit)
    type: ContentType | None = None
    tags: list[str] | None = None
    skip_content_ids: list[str] | None = None


@dataclass
class RatingSummary:
    average: float | None
    count: int


@dataclass
class ContentPage:
    items: list[ContentItem]
    total: int
