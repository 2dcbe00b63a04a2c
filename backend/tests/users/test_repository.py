import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from app.users.model import create_user_document
from app.users.repository import UserRepository


@pytest_asyncio.fixture
async def user_repository():
    """Provide a UserRepository with mock database."""
    client = AsyncMongoMockClient()
    db = client["test_db"]
    repo = UserRepository(db)
    yield repo
    client.close()


@pytest.fixture
def user_document():
    return create_user_document(
        email="test@example.com",
        hashed_password="hashed_password_here",
        name="Test User",
    )


@pytest.mark.asyncio
async def test_create_user_stores_in_db(user_repository, user_document):
    """Test that create() stores user in database."""
    result = await user_repository.create(user_document)

    assert result is not None
    assert result["email"] == "test@example.com"
    assert result["name"] == "Test User"
    assert result["plan"] == "free"
    assert "_id" in result


@pytest.mark.asyncio
async def test_get_by_email_is_case_insensitive(user_repository, user_document):
    """Test that get_by_email() normalizes the lookup email."""
    await user_repository.create(user_document)

    result = await user_repository.get_by_email("TEST@example.com ")

    assert result is not None
    assert result["email"] == "test@example.com"


@pytest.mark.asyncio
async def test_get_by_email_returns_none_if_not_found(user_repository):
    """Test that get_by_email() returns None for non-existent user."""
    result = await user_repository.get_by_email("nonexistent@example.com")

    assert result is None


@pytest.mark.asyncio
async def test_get_by_id_returns_user(user_repository, user_document):
    """Test that get_by_id() returns existing user."""
    created = await user_repository.create(user_document)

    result = await user_repository.get_by_id(str(created["_id"]))

    assert result is not None
    assert result["email"] == "test@example.com"


@pytest.mark.asyncio
async def test_get_by_id_returns_none_for_malformed_id(user_repository):
    """Test that get_by_id() returns None for an ID that is not an ObjectId."""
    result = await user_repository.get_by_id("not-an-object-id")

    assert result is None


@pytest.mark.asyncio
async def test_increment_search_count(user_repository, user_document):
    """Test that increment_search_count() bumps the counter by one."""
    created = await user_repository.create(user_document)
    user_id = str(created["_id"])

    await user_repository.increment_search_count(user_id)
    await user_repository.increment_search_count(user_id)

    result = await user_repository.get_by_id(user_id)
    assert result["search_count"] == 2
