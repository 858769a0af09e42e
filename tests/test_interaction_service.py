"""Interaction recorder tests."""

import asyncio
import logging

import pytest
from conftest import UnavailableCache
from sqlalchemy import text

from app.adapters.repositories.sql import SqlContentRepository
from app.domain.entities import InteractionType
from app.domain.errors import ContentNotFoundError, StoreUnavailableError, UserNotFoundError
from app.services.cache import CacheService
from app.services.content import ContentService
from app.services.interaction import InteractionService, popularity_delta


class BrokenCounterRepository(SqlContentRepository):
    async def increment_popularity(self, content_id, delta):
        raise StoreUnavailableError("counter shard offline")


@pytest.mark.parametrize(
    "interaction_type, rating, expected",
    [
        (InteractionType.VIEW, None, 1),
        (InteractionType.LIKE, None, 3),
        (InteractionType.SHARE, None, 4),
        (InteractionType.COMMENT, None, 5),
        (InteractionType.SAVE, None, 5),
        (InteractionType.RATING, 5, 5),
        (InteractionType.RATING, 1, 1),
        (InteractionType.RATING, None, 3),
    ],
)
def test_popularity_delta(interaction_type, rating, expected):
    assert popularity_delta(interaction_type, rating) == expected


async def test_record_persists_and_bumps_popularity(seed, interaction_service, contents, interactions):
    await seed.user("u1")
    await seed.content("c1", popularity=10)

    saved = await interaction_service.record_interaction(
        "u1", "c1", InteractionType.VIEW, duration=42.0
    )

    assert saved.id is not None
    assert saved.type is InteractionType.VIEW
    assert saved.duration == 42.0
    assert (await contents.find_by_id("c1")).popularity == 11
    assert [i.id for i in await interactions.find_by_user("u1")] == [saved.id]


async def test_popularity_counts_likes_and_views(seed, interaction_service, contents):
    await seed.user("u1")
    await seed.user("u2")
    await seed.content("c1", popularity=7)

    for user_id in ("u1", "u2", "u1"):
        await interaction_service.record_interaction(user_id, "c1", InteractionType.LIKE)
    for user_id in ("u2", "u2"):
        await interaction_service.record_interaction(
            user_id, "c1", InteractionType.VIEW, duration=5
        )

    assert (await contents.find_by_id("c1")).popularity == 7 + 3 * 3 + 2


async def test_unknown_content_writes_nothing(seed, interaction_service, interactions):
    await seed.user("u1")

    with pytest.raises(ContentNotFoundError):
        await interaction_service.record_interaction("u1", "missing", InteractionType.LIKE)

    assert await interactions.find_by_user("u1") == []


async def test_unknown_user_writes_nothing(seed, interaction_service, contents, interactions):
    await seed.content("c1", popularity=2)

    with pytest.raises(UserNotFoundError):
        await interaction_service.record_interaction("ghost", "c1", InteractionType.SAVE)

    assert (await contents.find_by_id("c1")).popularity == 2
    assert await interactions.find_by_content("c1") == []


async def test_side_effect_failures_do_not_fail_the_write(
    seed, session_factory, users, interactions, caplog
):
    broken = BrokenCounterRepository(session_factory)
    cache = CacheService(UnavailableCache())
    service = InteractionService(users, broken, interactions, ContentService(broken, cache), cache)
    await seed.user("u1")
    await seed.content("c1", popularity=0)

    with caplog.at_level(logging.WARNING):
        saved = await service.record_interaction("u1", "c1", InteractionType.LIKE)

    assert saved.content_id == "c1"
    assert len(await interactions.find_by_user("u1")) == 1
    assert "popularity increment failed" in caplog.text


async def test_user_interactions_newest_first_and_filtered(seed, interaction_service):
    await seed.user("u1")
    await seed.content("c1")
    await seed.interaction("u1", "c1", type="like", age_days=3)
    await seed.interaction("u1", "c1", type="share", age_days=1)
    await seed.interaction("u1", "c1", type="like", age_days=2)

    everything = await interaction_service.get_user_interactions("u1")
    likes = await interaction_service.get_user_interactions("u1", InteractionType.LIKE)

    assert [i.type for i in everything] == [
        InteractionType.SHARE, InteractionType.LIKE, InteractionType.LIKE
    ]
    assert len(likes) == 2


async def test_user_interactions_for_unknown_user(interaction_service):
    with pytest.raises(UserNotFoundError):
        await interaction_service.get_user_interactions("ghost")


async def test_average_rating(seed, interaction_service):
    await seed.user("u1")
    await seed.content("rated")
    await seed.content("unrated")
    for value in (5, 3, 4):
        await seed.interaction("u1", "rated", type="rating", rating=value)
    await seed.interaction("u1", "unrated", type="like")

    assert await interaction_service.get_content_average_rating("rated") == 4.0
    assert await interaction_service.get_content_average_rating("unrated") is None

    summary = await interaction_service.get_content_rating("rated")
    assert (summary.average, summary.count) == (4.0, 3)


async def test_average_rating_rounds_to_one_decimal(seed, interaction_service):
    await seed.user("u1")
    await seed.content("c1")
    for value in (5, 4, 4):
        await seed.interaction("u1", "c1", type="rating", rating=value)

    assert await interaction_service.get_content_average_rating("c1") == 4.3


async def test_rating_for_unknown_content(interaction_service):
    with pytest.raises(ContentNotFoundError):
        await interaction_service.get_content_rating("missing")


async def test_concurrent_likes_all_count(seed, interaction_service, contents):
    await seed.user("u1")
    await seed.content("c1", popularity=4)

    await asyncio.gather(
        *(
            interaction_service.record_interaction("u1", "c1", InteractionType.LIKE)
            for _ in range(8)
        )
    )

    assert (await contents.find_by_id("c1")).popularity == 4 + 3 * 8


async def test_failed_insert_is_raised_as_store_unavailable(seed, engine, interaction_service):
    await seed.user("u1")
    await seed.content("c1")
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE interactions"))

    with pytest.raises(StoreUnavailableError):
        await interaction_service.record_interaction("u1", "c1", InteractionType.LIKE)
