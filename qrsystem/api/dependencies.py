"""FastAPI dependencies for authentication, database and services."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from qrsystem.config import get_settings
from qrsystem.database import get_db
from qrsystem.errors import UnauthorizedError
from qrsystem.models.user import User
from qrsystem.services.auth import get_user, verify_token
from qrsystem.services.email import EmailService
from qrsystem.services.qr_service import QRCodeService
from qrsystem.services.storage import ArtifactStorage

# Missing credentials are reported as 401 by verify_token
security = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> int:
    """Get the id of the authenticated user from the bearer token."""
    token = credentials.credentials if credentials else None
    return verify_token(token)


def get_current_user(
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    user = get_user(db, user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def get_artifact_storage() -> ArtifactStorage:
    """Get storage for rendered QR code images."""
    settings = get_settings()
    return ArtifactStorage(settings.upload_dir, settings.uploads_url_prefix)


def get_email_service() -> EmailService:
    """Get email service instance."""
    return EmailService()


def get_qr_service(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[ArtifactStorage, Depends(get_artifact_storage)],
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> QRCodeService:
    """Get QR code service with dependencies."""
    return QRCodeService(db, storage, email_service)
