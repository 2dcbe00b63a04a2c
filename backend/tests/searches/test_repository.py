from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from app.searches.models import create_conversation_document, create_search_document
from app.searches.repository import ConversationRepository, SearchRepository
from app.searches.schemas import PlatformName, PlatformStatus, SearchStatus


@pytest_asyncio.fixture
async def db():
    client = AsyncMongoMockClient()
    yield client["test_db"]
    client.close()


@pytest.fixture
def search_repository(db):
    return SearchRepository(db)


@pytest.fixture
def conversation_repository(db):
    return ConversationRepository(db)


def _search(user_id: str = "user-1", *platforms: PlatformName) -> dict:
    return create_search_document(
        user_id=user_id,
        product_url="https://example.com",
        selected_platforms=list(platforms) or [PlatformName.REDDIT],
    )


def _conversation(search_id: str, title: str, relevance: float, found_offset: int = 0) -> dict:
    document = create_conversation_document(
        search_id=search_id,
        platform=PlatformName.REDDIT,
        title=title,
        url=f"https://reddit.com/{title}",
        posted_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        relevance_score=relevance,
    )
    document["found_at"] = datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=found_offset)
    return document


@pytest.mark.asyncio
async def test_create_search_embeds_every_platform(search_repository):
    """A new search holds one pending entry per known platform."""
    created = await search_repository.create(_search("user-1", PlatformName.LINKEDIN))

    stored = await search_repository.get_by_id(created["_id"])

    assert stored["status"] == "pending"
    assert stored["version"] == 0
    assert set(stored["platforms"]) == {"REDDIT", "LINKEDIN", "TWITTER"}
    assert stored["platforms"]["LINKEDIN"]["selected"] is True
    assert stored["platforms"]["REDDIT"]["selected"] is False
    assert all(p["status"] == "pending" for p in stored["platforms"].values())


@pytest.mark.asyncio
async def test_get_for_user_checks_ownership(search_repository):
    created = await search_repository.create(_search("owner"))

    assert await search_repository.get_for_user(created["_id"], "owner") is not None
    assert await search_repository.get_for_user(created["_id"], "someone-else") is None


@pytest.mark.asyncio
async def test_list_for_user_newest_first_with_pagination(search_repository):
    ids = []
    for day in range(3):
        document = _search("user-1")
        document["created_at"] = datetime(2024, 1, day + 1, tzinfo=timezone.utc)
        await search_repository.create(document)
        ids.append(document["_id"])
    await search_repository.create(_search("user-2"))

    first_page = await search_repository.list_for_user("user-1", limit=2)
    second_page = await search_repository.list_for_user("user-1", limit=2, offset=2)

    assert [s["_id"] for s in first_page] == [ids[2], ids[1]]
    assert [s["_id"] for s in second_page] == [ids[0]]


@pytest.mark.asyncio
async def test_set_website_info_once_is_first_writer_wins(search_repository):
    created = await search_repository.create(_search())

    assert await search_repository.set_website_info_once(created["_id"], {"name": "A"})
    assert not await search_repository.set_website_info_once(created["_id"], {"name": "B"})

    stored = await search_repository.get_by_id(created["_id"])
    assert stored["website_info"] == {"name": "A"}
    assert stored["status"] == "analyzing"


@pytest.mark.asyncio
async def test_set_keywords_once_is_first_writer_wins(search_repository):
    created = await search_repository.create(_search())

    assert await search_repository.set_keywords_once(created["_id"], ["crm"])
    assert not await search_repository.set_keywords_once(created["_id"], ["other"])

    stored = await search_repository.get_by_id(created["_id"])
    assert stored["keywords"] == ["crm"]
    assert stored["status"] == "searching"


@pytest.mark.asyncio
async def test_update_platform_increments_counters_and_version(search_repository):
    created = await search_repository.create(_search())
    search_id = created["_id"]

    await search_repository.update_platform(
        search_id, PlatformName.REDDIT, status=PlatformStatus.SEARCHING, results_increment=3
    )
    await search_repository.update_platform(
        search_id,
        PlatformName.REDDIT,
        status=PlatformStatus.COMPLETED,
        results_increment=2,
        search_status=SearchStatus.SEARCHING,
    )

    stored = await search_repository.get_by_id(search_id)
    assert stored["platforms"]["REDDIT"]["status"] == "completed"
    assert stored["platforms"]["REDDIT"]["results_count"] == 5
    assert stored["results_count"] == 5
    assert stored["status"] == "searching"
    assert stored["version"] == 2


@pytest.mark.asyncio
async def test_update_platform_unknown_search(search_repository):
    assert not await search_repository.update_platform(
        "missing", PlatformName.REDDIT, status=PlatformStatus.FAILED
    )


@pytest.mark.asyncio
async def test_set_status_if_version_rejects_stale_version(search_repository):
    created = await search_repository.create(_search())
    search_id = created["_id"]
    await search_repository.update_platform(
        search_id, PlatformName.REDDIT, status=PlatformStatus.COMPLETED
    )

    assert not await search_repository.set_status_if_version(search_id, 0, SearchStatus.FAILED)
    assert await search_repository.set_status_if_version(search_id, 1, SearchStatus.COMPLETE)

    stored = await search_repository.get_by_id(search_id)
    assert stored["status"] == "complete"


@pytest.mark.asyncio
async def test_mark_failed(search_repository):
    created = await search_repository.create(_search())

    assert await search_repository.mark_failed(created["_id"], "Workflow crashed")

    stored = await search_repository.get_by_id(created["_id"])
    assert stored["status"] == "failed"
    assert stored["error_message"] == "Workflow crashed"


@pytest.mark.asyncio
async def test_get_stats(search_repository):
    now = datetime.now(timezone.utc)

    active = _search("user-1")
    active["results_count"] = 4
    await search_repository.create(active)

    finished = _search("user-1")
    finished["status"] = "complete"
    finished["results_count"] = 6
    finished["created_at"] = now - timedelta(days=400)
    await search_repository.create(finished)

    await search_repository.create(_search("user-2"))

    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    stats = await search_repository.get_stats("user-1", month_start)

    assert stats["total_searches"] == 2
    assert stats["active_searches"] == 1
    assert stats["total_leads"] == 10
    assert stats["searches_this_month"] == 1
    assert [r["id"] for r in stats["recent"]] == [active["_id"], finished["_id"]]


@pytest.mark.asyncio
async def test_get_stats_for_user_without_searches(search_repository):
    stats = await search_repository.get_stats("nobody", datetime.now(timezone.utc))

    assert stats["total_searches"] == 0
    assert stats["total_leads"] == 0
    assert stats["recent"] == []


@pytest.mark.asyncio
async def test_delete_search(search_repository):
    created = await search_repository.create(_search())

    assert await search_repository.delete(created["_id"])
    assert not await search_repository.delete(created["_id"])
    assert await search_repository.get_by_id(created["_id"]) is None


@pytest.mark.asyncio
async def test_conversations_ordered_by_relevance_then_recency(conversation_repository):
    await conversation_repository.insert_many(
        [
            _conversation("search-1", "low", 0.2, found_offset=5),
            _conversation("search-1", "high-old", 0.9, found_offset=0),
            _conversation("search-1", "high-new", 0.9, found_offset=10),
            _conversation("search-2", "other", 1.0),
        ]
    )

    conversations = await conversation_repository.list_for_search("search-1")

    assert [c["title"] for c in conversations] == ["high-new", "high-old", "low"]


@pytest.mark.asyncio
async def test_insert_many_with_no_documents(conversation_repository):
    assert await conversation_repository.insert_many([]) == 0


@pytest.mark.asyncio
async def test_delete_for_search(conversation_repository):
    await conversation_repository.insert_many(
        [
            _conversation("search-1", "a", 0.5),
            _conversation("search-1", "b", 0.5),
            _conversation("search-2", "c", 0.5),
        ]
    )

    assert await conversation_repository.delete_for_search("search-1") == 2
    assert await conversation_repository.list_for_search("search-1") == []
    assert len(await conversation_repository.list_for_search("search-2")) == 1
