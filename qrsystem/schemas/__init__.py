"""Pydantic schemas for API requests and responses."""

from qrsystem.schemas.auth import AuthResponse, UserLogin, UserResponse, UserSignup
from qrsystem.schemas.qr_code import (
    MessageResponse,
    Pagination,
    QRCodeCreate,
    QRCodeGenerateResponse,
    QRCodeListResponse,
    QRCodeResponse,
    QRCodeShare,
    ScanResponse,
    ScanResult,
)

__all__ = [
    "UserSignup",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "QRCodeCreate",
    "QRCodeShare",
    "QRCodeResponse",
    "QRCodeGenerateResponse",
    "QRCodeListResponse",
    "Pagination",
    "ScanResult",
    "ScanResponse",
    "MessageResponse",
]
