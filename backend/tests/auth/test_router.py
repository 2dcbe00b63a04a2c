import pytest


@pytest.fixture
def user_data():
    """Sample user data for testing."""
    return {
        "email": "test@example.com",
        "password": "SecurePass123!",
        "name": "Test User",
    }


@pytest.mark.asyncio
async def test_signup_endpoint_creates_user_and_sets_cookie(test_client, user_data):
    """Test POST /api/auth/signup creates user and starts a session."""
    response = await test_client.post("/api/auth/signup", json=user_data)

    assert response.status_code == 200
    data = response.json()["user"]
    assert data["email"] == user_data["email"]
    assert data["name"] == user_data["name"]
    assert data["plan"] == "free"
    assert data["search_count"] == 0
    assert "id" in data
    assert "password" not in data
    assert "hashed_password" not in data
    assert "session" in response.cookies


@pytest.mark.asyncio
async def test_signup_normalizes_email(test_client, mock_db, user_data):
    """Test POST /api/auth/signup stores a lower-cased email."""
    user_data["email"] = "Test@Example.COM"

    response = await test_client.post("/api/auth/signup", json=user_data)

    assert response.status_code == 200
    assert await mock_db["users"].find_one({"email": "test@example.com"}) is not None


@pytest.mark.asyncio
async def test_signup_endpoint_returns_422_for_short_password(test_client):
    """Test POST /api/auth/signup rejects passwords under 8 characters."""
    response = await test_client.post(
        "/api/auth/signup",
        json={"email": "short@example.com", "password": "pass"},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_signup_endpoint_returns_422_for_invalid_email(test_client):
    """Test POST /api/auth/signup rejects malformed emails."""
    response = await test_client.post(
        "/api/auth/signup",
        json={"email": "invalid-email", "password": "longenough"},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_signup_endpoint_returns_409_for_existing_email(test_client, user_data):
    """Test POST /api/auth/signup returns 409 for duplicate email."""
    await test_client.post("/api/auth/signup", json=user_data)

    response = await test_client.post("/api/auth/signup", json=user_data)

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_login_endpoint_sets_session_cookie(test_client, user_data):
    """Test POST /api/auth/login returns the user and a session cookie."""
    await test_client.post("/api/auth/signup", json=user_data)
    test_client.cookies.clear()

    response = await test_client.post(
        "/api/auth/login",
        json={"email": user_data["email"], "password": user_data["password"]},
    )

    assert response.status_code == 200
    assert response.json()["user"]["email"] == user_data["email"]
    assert "session" in response.cookies


@pytest.mark.asyncio
async def test_login_endpoint_returns_401_for_bad_credentials(test_client, user_data):
    """Test POST /api/auth/login returns 401 for invalid credentials."""
    await test_client.post("/api/auth/signup", json=user_data)

    response = await test_client.post(
        "/api/auth/login",
        json={"email": user_data["email"], "password": "wrongpassword"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_endpoint_returns_401_for_nonexistent_user(test_client):
    """Test POST /api/auth/login returns 401 for non-existent user."""
    response = await test_client.post(
        "/api/auth/login",
        json={"email": "nonexistent@example.com", "password": "anypassword"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_session_endpoint_returns_user_with_cookie(test_client, user_data):
    """Test GET /api/auth/session returns the logged-in user."""
    await test_client.post("/api/auth/signup", json=user_data)

    response = await test_client.get("/api/auth/session")

    assert response.status_code == 200
    assert response.json()["user"]["email"] == user_data["email"]


@pytest.mark.asyncio
async def test_session_endpoint_accepts_bearer_token(test_client, user_data):
    """Test GET /api/auth/session accepts the token as a Bearer header."""
    signup = await test_client.post("/api/auth/signup", json=user_data)
    token = signup.cookies["session"]
    test_client.cookies.clear()

    response = await test_client.get(
        "/api/auth/session",
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.json()["user"]["email"] == user_data["email"]


@pytest.mark.asyncio
async def test_session_endpoint_returns_null_without_session(test_client):
    """Test GET /api/auth/session returns a null user when logged out."""
    response = await test_client.get("/api/auth/session")

    assert response.status_code == 200
    assert response.json() == {"user": None}


@pytest.mark.asyncio
async def test_session_endpoint_returns_null_for_invalid_token(test_client):
    """Test GET /api/auth/session never fails on a bad token."""
    response = await test_client.get(
        "/api/auth/session",
        headers={"Authorization": "Bearer invalidtoken"},
    )

    assert response.status_code == 200
    assert response.json()["user"] is None


@pytest.mark.asyncio
async def test_logout_clears_session(test_client, user_data):
    """Test POST /api/auth/logout ends the session."""
    await test_client.post("/api/auth/signup", json=user_data)

    response = await test_client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"success": True}

    session = await test_client.get("/api/auth/session")
    assert session.json()["user"] is None
