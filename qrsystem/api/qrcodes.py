"""QR code API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from qrsystem.api.dependencies import get_current_user, get_current_user_id, get_qr_service
from qrsystem.config import get_settings
from qrsystem.models.enums import QRCodeType
from qrsystem.models.user import User
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
from qrsystem.services.qr_service import QRCodeService, parse_date_bound

router = APIRouter(prefix="/api/qrcodes", tags=["qrcodes"])


@router.post("", response_model=QRCodeGenerateResponse, status_code=status.HTTP_201_CREATED)
def generate_qr_code(
    qr_data: QRCodeCreate,
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[QRCodeService, Depends(get_qr_service)],
):
    """Generate and save a new QR code."""
    generated = service.generate(user_id, qr_data.text, qr_data.title, qr_data.type)

    return QRCodeGenerateResponse(
        qr_code=QRCodeResponse.model_validate(generated.qr_code),
        image_url=generated.qr_code.image_url,
        data_url=generated.data_url,
    )


@router.get("", response_model=QRCodeListResponse)
def list_qr_codes(
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[QRCodeService, Depends(get_qr_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
    start_date: Annotated[str | None, Query(alias="startDate")] = None,
    end_date: Annotated[str | None, Query(alias="endDate")] = None,
    qr_type: Annotated[QRCodeType | None, Query(alias="type")] = None,
):
    """Get the current user's QR codes with pagination and filters."""
    settings = get_settings()
    limit = min(limit or settings.default_page_size, settings.max_page_size)

    result = service.list_qr_codes(
        user_id,
        page=page,
        limit=limit,
        start_date=parse_date_bound(start_date),
        end_date=parse_date_bound(end_date, end_of_day=True),
        qr_type=qr_type,
    )

    return QRCodeListResponse(
        qr_codes=[QRCodeResponse.model_validate(qr) for qr in result.qr_codes],
        pagination=Pagination(
            total=result.total, page=result.page, limit=result.limit, pages=result.pages
        ),
    )


@router.post("/share", response_model=MessageResponse)
def share_qr_code(
    share_data: QRCodeShare,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[QRCodeService, Depends(get_qr_service)],
):
    """Share a QR code via email."""
    service.share(current_user, share_data.id, share_data.email, share_data.message)

    return MessageResponse(message="QR Code shared successfully via email")


@router.post(
    "/scan", response_model=ScanResponse, dependencies=[Depends(get_current_user_id)]
)
def scan_qr_code(file: Annotated[UploadFile, File()]):
    """Decode the QR codes in an uploaded image."""
    image_data = file.file.read()
    results = QRCodeService.scan(image_data)

    return ScanResponse(results=[ScanResult(text=text, type=qr_type) for text, qr_type in results])


@router.delete("/{qr_code_id}", response_model=MessageResponse)
def delete_qr_code(
    qr_code_id: int,
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[QRCodeService, Depends(get_qr_service)],
):
    """Delete a QR code and its image."""
    service.delete(user_id, qr_code_id)

    return MessageResponse(message="QR Code deleted successfully")
