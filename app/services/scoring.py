"""
Relevance scoring for candidate content.

Pure and synchronous: the score of a candidate depends only on the candidate,
the user's preference tags, the enriched interaction history and the
reference time.
"""

from datetime import datetime, timedelta, timezone

from app.domain.entities import (
    ContentItem,
    ContentScore,
    EnrichedInteraction,
    InteractionRecord,
    InteractionType,
    UserProfile,
)

PREFERENCE_TAG_POINTS = 2.0
FRESHNESS_MAX = 5.0
FRESHNESS_DECAY_DAYS = 7.0
POPULARITY_DIVISOR = 10.0
POPULARITY_MAX = 5.0
HISTORY_TAG_POINTS = 1.5
RECENT_TAG_POINTS = 2.0
RECENT_WINDOW = timedelta(days=7)

INTERACTION_TYPE_WEIGHTS: dict[InteractionType, float] = {
    InteractionType.VIEW: 1.0,
    InteractionType.LIKE: 3.0,
    InteractionType.SHARE: 4.0,
    InteractionType.COMMENT: 3.5,
    InteractionType.SAVE: 4.5,
}
DEFAULT_INTERACTION_WEIGHT = 1.0


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def freshness(content: ContentItem, now: datetime) -> float:
    age_days = (now - _aware(content.created_at)).total_seconds() / 86400
    return max(0.0, FRESHNESS_MAX - age_days / FRESHNESS_DECAY_DAYS)


def popularity_bonus(content: ContentItem) -> float:
    return min(POPULARITY_MAX, content.popularity / POPULARITY_DIVISOR)


def score(
    content: ContentItem,
    user: UserProfile,
    history: list[EnrichedInteraction],
    now: datetime | None = None,
) -> float:
    """Compute the relevance of ``content`` for ``user``."""
    now = now or datetime.now(timezone.utc)
    preferences = set(user.preferences)

    total = sum(PREFERENCE_TAG_POINTS for tag in content.tags if tag in preferences)
    total += freshness(content, now)
    total += popularity_bonus(content)

    seen_tags: set[str] = set()
    recent_tags: set[str] = set()
    recent_since = now - RECENT_WINDOW
    for entry in history:
        seen_tags.update(entry.content.tags)
        if entry.content.type == content.type:
            weight = INTERACTION_TYPE_WEIGHTS.get(entry.interaction.type, DEFAULT_INTERACTION_WEIGHT)
            total += weight / 2
        if _aware(entry.interaction.timestamp) > recent_since:
            recent_tags.update(entry.content.tags)

    total += sum(HISTORY_TAG_POINTS for tag in content.tags if tag in seen_tags)
    total += sum(RECENT_TAG_POINTS for tag in content.tags if tag in recent_tags)
    return total


def enrich(
    interactions: list[InteractionRecord],
    contents: dict[str, ContentItem],
) -> list[EnrichedInteraction]:
    """Join interactions with their content; unresolved ones are dropped."""
    return [
        EnrichedInteraction(interaction=i, content=contents[i.content_id])
        for i in interactions
        if i.content_id in contents
    ]


def rank(
    candidates: list[ContentItem],
    user: UserProfile,
    history: list[EnrichedInteraction],
    now: datetime | None = None,
) -> list[ContentScore]:
    """Score candidates and sort by score, highest first.

    The sort is stable: equal scores keep the candidates' incoming order.
    """
    now = now or datetime.now(timezone.utc)
    scored = [ContentScore(content=c, score=score(c, user, history, now)) for c in candidates]
    return sorted(scored, key=lambda s: s.score, reverse=True)
