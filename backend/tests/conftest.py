import pytest
import pytest_asyncio
from unittest.mock import AsyncMock
from mongomock_motor import AsyncMongoMockClient
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.config import Settings, get_settings
from app.database import get_database
from app.searches.dependencies import get_workflow_dispatcher

WEBHOOK_SECRET = "test-webhook-secret"


@pytest.fixture
def test_settings():
    """Settings with a known webhook secret and workflow URLs."""
    return Settings(
        n8n_webhook_secret=WEBHOOK_SECRET,
        n8n_webhook_reddit="http://n8n.test/webhook/reddit",
        n8n_webhook_linkedin="http://n8n.test/webhook/linkedin",
        n8n_webhook_twitter="",
    )


@pytest.fixture
def mock_dispatcher():
    """Workflow dispatcher that records calls instead of sending requests."""
    return AsyncMock()


@pytest_asyncio.fixture
async def mock_db():
    """Provide a mock MongoDB database for testing."""
    client = AsyncMongoMockClient()
    db = client["test_db"]
    yield db
    client.close()


@pytest_asyncio.fixture
async def test_client(mock_db, test_settings, mock_dispatcher):
    """Provide an async test client with mocked database and workflow engine."""
    app.dependency_overrides[get_database] = lambda: mock_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_workflow_dispatcher] = lambda: mock_dispatcher

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
