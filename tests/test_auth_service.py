"""Authentication service tests."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from qrsystem.config import get_settings
from qrsystem.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from qrsystem.services import auth


def test_signup_hashes_password(db):
    """Test that the plaintext password is never stored."""
    token, user = auth.signup(db, "Alice", "Alice@Example.com", "secret1")

    assert user.email == "alice@example.com"
    assert user.password_hash != "secret1"
    assert auth.verify_password("secret1", user.password_hash)
    assert auth.verify_token(token) == user.id


def test_signup_requires_all_fields(db):
    """Test that missing fields are a validation error."""
    with pytest.raises(ValidationError):
        auth.signup(db, "Alice", None, "secret1")
    with pytest.raises(ValidationError):
        auth.signup(db, "", "a@x.com", "secret1")
    with pytest.raises(ValidationError):
        auth.signup(db, "Alice", "a@x.com", "")


def test_signup_duplicate_email(db):
    """Test that an email can only be registered once."""
    auth.signup(db, "Alice", "a@x.com", "secret1")
    with pytest.raises(DuplicateEmailError):
        auth.signup(db, "Another Alice", "a@x.com", "secret2")


def test_login_errors_are_identical(db):
    """Test that unknown emails and wrong passwords are indistinguishable."""
    auth.signup(db, "Alice", "a@x.com", "secret1")

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        auth.login(db, "a@x.com", "nope")
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        auth.login(db, "b@x.com", "secret1")

    assert str(wrong_password.value) == str(unknown_email.value)


def test_token_expires_after_seven_days(db):
    """Test the token validity window."""
    _, user = auth.signup(db, "Alice", "a@x.com", "secret1")
    token = auth.create_access_token(user.id, user.email)
    settings = get_settings()

    payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    expires = datetime.fromtimestamp(payload["exp"], UTC)
    assert timedelta(days=6, hours=23) < expires - datetime.now(UTC) <= timedelta(days=7)


@pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c"])
def test_verify_token_rejects_malformed(token):
    """Test that missing and malformed tokens are unauthorized."""
    with pytest.raises(UnauthorizedError):
        auth.verify_token(token)


def test_verify_token_rejects_expired():
    """Test that expired tokens are unauthorized."""
    settings = get_settings()
    token = jwt.encode(
        {"sub": "1", "exp": datetime.now(UTC) - timedelta(minutes=1)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(UnauthorizedError):
        auth.verify_token(token)


def test_verify_token_rejects_wrong_signature():
    """Test that tokens signed with another key are unauthorized."""
    settings = get_settings()
    token = jwt.encode(
        {"sub": "1", "exp": datetime.now(UTC) + timedelta(minutes=5)},
        "some-other-secret",
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(UnauthorizedError):
        auth.verify_token(token)


def test_verify_token_requires_subject():
    """Test that tokens without a user id are unauthorized."""
    settings = get_settings()
    token = jwt.encode(
        {"exp": datetime.now(UTC) + timedelta(minutes=5)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(UnauthorizedError):
        auth.verify_token(token)


def test_get_profile_unknown_user(db):
    """Test that a missing user is not found."""
    with pytest.raises(NotFoundError):
        auth.get_profile(db, 999999)
