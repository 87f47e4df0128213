"""Authentication service for JWT and password handling."""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from qrsystem.config import get_settings
from qrsystem.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from qrsystem.models.user import User

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user_id: int, email: str) -> str:
    """Create a JWT access token."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "exp": expire,
    }
    encoded_jwt = jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return encoded_jwt


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return payload
    except JWTError:
        return None


def verify_token(token: str | None) -> int:
    """Return the user id a bearer token was issued for.

    Raises UnauthorizedError if the token is missing, malformed, expired or forged.
    """
    if not token:
        raise UnauthorizedError("No token, authorization denied")

    payload = decode_access_token(token)
    if payload is None:
        raise UnauthorizedError("Token is not valid")

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise UnauthorizedError("Token is not valid") from None


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user(db: Session, user_id: int) -> User | None:
    """Get a user by id."""
    return db.query(User).filter(User.id == user_id).first()


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def create_user(db: Session, email: str, password: str, name: str) -> User:
    """Create a new user."""
    hashed_password = get_password_hash(password)
    user = User(email=normalize_email(email), password_hash=hashed_password, name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def signup(
    db: Session, name: str | None, email: str | None, password: str | None
) -> tuple[str, User]:
    """Register a user and issue their first token.

    Returns (token, user).
    """
    name = (name or "").strip()
    email = (email or "").strip()
    if not name or not email or not password:
        raise ValidationError("Please provide name, email, and password")

    if get_user_by_email(db, email):
        raise DuplicateEmailError()

    try:
        user = create_user(db, email, password, name)
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        db.rollback()
        raise DuplicateEmailError() from None

    logger.info(f"User {user.id} signed up")
    return create_access_token(user.id, user.email), user


def login(db: Session, email: str | None, password: str | None) -> tuple[str, User]:
    """Check credentials and issue a fresh token.

    Unknown emails and wrong passwords fail with the same error.
    """
    user = authenticate_user(db, email or "", password or "")
    if not user:
        raise InvalidCredentialsError()

    logger.info(f"User {user.id} logged in")
    return create_access_token(user.id, user.email), user


def get_profile(db: Session, user_id: int) -> User:
    """Get a user's profile."""
    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
