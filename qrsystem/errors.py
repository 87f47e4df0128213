"""Application errors and their HTTP status codes."""

from fastapi import status


class AppError(Exception):
    """Base class for errors that are reported to API clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Raised when required input is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class DuplicateEmailError(AppError):
    """Raised when signing up with an email that is already registered."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User already exists with this email"


class InvalidCredentialsError(AppError):
    """Raised on failed login, whether the email or the password was wrong."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid credentials"


class UnauthorizedError(AppError):
    """Raised when a bearer token is missing, malformed, expired or forged."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid authentication credentials"


class NotFoundError(AppError):
    """Raised when a resource does not exist or is not owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class DeliveryError(AppError):
    """Raised when the email transport fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to send email"


class InternalError(AppError):
    """Raised on storage or artifact I/O failures."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"
