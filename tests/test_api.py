"""API endpoint tests."""

from qrsystem.services.auth import create_access_token


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_signup_user(client):
    """Test user signup."""
    response = client.post(
        "/api/auth/signup",
        json={"name": "Alice", "email": "a@x.com", "password": "secret1"},
    )
    assert response.status_code == 201
    data = response.json()
    assert "token" in data
    assert data["user"]["name"] == "Alice"
    assert data["user"]["email"] == "a@x.com"
    assert "password" not in data["user"]
    assert "password_hash" not in data["user"]


def test_signup_missing_fields(client):
    """Test signup without a password is rejected."""
    response = client.post("/api/auth/signup", json={"name": "Alice", "email": "a@x.com"})
    assert response.status_code == 400


def test_signup_blank_name(client):
    """Test signup with a whitespace-only name is rejected."""
    response = client.post(
        "/api/auth/signup",
        json={"name": "   ", "email": "a@x.com", "password": "secret1"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Please provide name, email, and password"


def test_signup_duplicate_email(client, auth_headers):
    """Test signup with duplicate email fails."""
    response = client.post(
        "/api/auth/signup",
        json={"name": "Duplicate", "email": auth_headers.email, "password": "password123"},
    )
    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]


def test_signup_duplicate_email_different_case(client, auth_headers):
    """Test that emails are compared case-insensitively."""
    response = client.post(
        "/api/auth/signup",
        json={"name": "Duplicate", "email": "TEST@Example.com", "password": "password123"},
    )
    assert response.status_code == 400


def test_login(client, auth_headers):
    """Test user login."""
    response = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert response.status_code == 200
    data = response.json()
    assert "token" in data
    assert data["user"]["id"] == auth_headers.user_id


def test_login_wrong_password_matches_unknown_email(client, auth_headers):
    """Test wrong password and unknown email fail identically."""
    wrong_password = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    unknown_email = client.post(
        "/api/auth/login", json={"email": "nobody@example.com", "password": "testpass123"}
    )

    assert wrong_password.status_code == 400
    assert unknown_email.status_code == 400
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["detail"] == "Invalid credentials"


def test_get_profile(client, auth_headers):
    """Test getting current user profile."""
    response = client.get("/api/auth/profile", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == auth_headers.email
    assert data["name"] == "Test User"
    assert "password_hash" not in data


def test_get_profile_unknown_user(client):
    """Test profile of a user that no longer exists is not found."""
    token = create_access_token(999999, "ghost@example.com")
    response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 404


def test_get_profile_without_token(client):
    """Test that the profile requires authentication."""
    response = client.get("/api/auth/profile")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_get_profile_with_garbage_token(client):
    """Test that a malformed token is rejected."""
    response = client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_unauthorized_access(client):
    """Test that QR code endpoints require authentication."""
    assert client.get("/api/qrcodes").status_code == 401
    assert client.post("/api/qrcodes", json={"text": "hello"}).status_code == 401
    assert client.delete("/api/qrcodes/1").status_code == 401
    assert client.post("/api/qrcodes/share", json={"id": 1, "email": "b@x.com"}).status_code == 401
