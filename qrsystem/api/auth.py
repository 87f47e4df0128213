"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from qrsystem.api.dependencies import get_current_user_id
from qrsystem.database import get_db
from qrsystem.schemas.auth import AuthResponse, UserLogin, UserResponse, UserSignup
from qrsystem.services import auth as auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserSignup,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user."""
    token, user = auth_service.signup(db, user_data.name, user_data.email, user_data.password)

    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password."""
    token, user = auth_service.login(db, credentials.email, credentials.password)

    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/profile", response_model=UserResponse)
async def get_profile(
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the current user's profile."""
    return auth_service.get_profile(db, user_id)
