"""QR code schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from qrsystem.models.enums import QRCodeType


class CamelModel(BaseModel):
    """Base model that reads snake_case and writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QRCodeCreate(BaseModel):
    """Generate a new QR code."""

    text: str | None = Field(None, max_length=2000)
    title: str | None = Field(None, max_length=255)
    type: QRCodeType | None = None


class QRCodeShare(BaseModel):
    """Email a QR code to someone."""

    id: int | None = None
    email: EmailStr | None = None
    message: str | None = Field(None, max_length=2000)


class QRCodeResponse(CamelModel):
    """QR code record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    text: str
    title: str
    type: QRCodeType
    image_url: str
    created_at: datetime


class QRCodeGenerateResponse(CamelModel):
    """Response to a generation request, including the inline image."""

    message: str = "QR Code generated successfully"
    qr_code: QRCodeResponse
    image_url: str
    data_url: str = Field(..., alias="dataURL")


class Pagination(BaseModel):
    """Pagination metadata for list responses."""

    total: int
    page: int
    limit: int
    pages: int


class QRCodeListResponse(CamelModel):
    """A page of QR codes."""

    qr_codes: list[QRCodeResponse]
    pagination: Pagination


class ScanResult(BaseModel):
    """A payload decoded from an uploaded image."""

    text: str
    type: QRCodeType


class ScanResponse(BaseModel):
    """All QR codes found in an uploaded image."""

    results: list[ScanResult]


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
