"""QR code service for generation, history, deletion and sharing."""

import html
import logging
import math
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from qrsystem.errors import InternalError, NotFoundError, ValidationError
from qrsystem.models.enums import QRCodeType
from qrsystem.models.qr_code import DEFAULT_TITLE, QRCode
from qrsystem.models.user import User
from qrsystem.services import qr_codec
from qrsystem.services.email import Attachment, EmailService, InlineImage
from qrsystem.services.storage import ArtifactStorage

logger = logging.getLogger(__name__)

DEFAULT_SHARE_MESSAGE = "Check out this QR Code!"
QR_CONTENT_ID = "qrcode"


@dataclass
class GeneratedQRCode:
    """A freshly stored QR code plus its image inline."""

    qr_code: QRCode
    data_url: str


@dataclass
class QRCodePage:
    """One page of a user's QR codes."""

    qr_codes: list[QRCode]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit)


def _is_bare_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def parse_date_bound(value: str | None, end_of_day: bool = False) -> datetime | None:
    """Parse an ISO date or datetime filter value into an aware UTC datetime.

    A bare date used as an upper bound covers that whole day.
    """
    if value is None or not value.strip():
        return None
    value = value.strip()
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid date: {value}") from None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    else:
        parsed = parsed.astimezone(UTC)

    if end_of_day and _is_bare_date(value):
        parsed = parsed + timedelta(days=1) - timedelta(microseconds=1)
    return parsed


class QRCodeService:
    """Service for a user's QR codes and their rendered images."""

    def __init__(
        self,
        db: Session,
        storage: ArtifactStorage,
        email_service: EmailService | None = None,
    ):
        self.db = db
        self.storage = storage
        self.email_service = email_service

    def _get_owned(self, user_id: int, qr_code_id: int) -> QRCode:
        """Get a QR code owned by the user.

        Codes owned by someone else are reported as missing.
        """
        qr_code = (
            self.db.query(QRCode)
            .filter(QRCode.id == qr_code_id, QRCode.user_id == user_id)
            .first()
        )
        if not qr_code:
            raise NotFoundError("QR Code not found")
        return qr_code

    def generate(
        self,
        user_id: int,
        text: str | None,
        title: str | None = None,
        qr_type: QRCodeType | str | None = None,
    ) -> GeneratedQRCode:
        """Render text to a PNG, store it, and record the QR code."""
        if not text or not text.strip():
            raise ValidationError("Text or URL is required")

        try:
            qr_type = QRCodeType(qr_type) if qr_type else QRCodeType.URL
        except ValueError:
            raise ValidationError(f"Invalid QR code type: {qr_type}") from None

        try:
            png = qr_codec.render_png(text)
        except ValueError as e:
            raise ValidationError(str(e)) from None

        # Step 1: Write the image; nothing is recorded if this fails
        try:
            image_url = self.storage.save(png)
        except OSError as e:
            logger.error(f"Failed to store QR code image for user {user_id}: {e}")
            raise InternalError("Failed to store QR code image") from e

        # Step 2: Record the QR code
        qr_code = QRCode(
            user_id=user_id,
            text=text,
            title=(title or "").strip() or DEFAULT_TITLE,
            type=qr_type.value,
            image_url=image_url,
        )
        try:
            self.db.add(qr_code)
            self.db.commit()
            self.db.refresh(qr_code)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save QR code for user {user_id}: {e}")
            self._remove_image(image_url)
            raise InternalError("Failed to save QR code") from e

        logger.info(f"Generated QR code {qr_code.id} for user {user_id}")
        return GeneratedQRCode(qr_code=qr_code, data_url=qr_codec.to_data_url(png))

    def list_qr_codes(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        qr_type: QRCodeType | str | None = None,
    ) -> QRCodePage:
        """List the user's QR codes, newest first, with optional filters."""
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive integers")

        query = self.db.query(QRCode).filter(QRCode.user_id == user_id)

        if start_date is not None:
            query = query.filter(QRCode.created_at >= start_date)
        if end_date is not None:
            query = query.filter(QRCode.created_at <= end_date)
        if qr_type:
            try:
                qr_type = QRCodeType(qr_type)
            except ValueError:
                raise ValidationError(f"Invalid QR code type: {qr_type}") from None
            query = query.filter(QRCode.type == qr_type.value)

        total = query.count()
        offset = (page - 1) * limit
        if offset >= total:
            # Past the last page
            return QRCodePage(qr_codes=[], total=total, page=page, limit=limit)

        qr_codes = (
            query.order_by(QRCode.created_at.desc(), QRCode.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

        return QRCodePage(qr_codes=qr_codes, total=total, page=page, limit=limit)

    def delete(self, user_id: int, qr_code_id: int) -> None:
        """Delete a QR code, then try to remove its image."""
        qr_code = self._get_owned(user_id, qr_code_id)
        image_url = qr_code.image_url

        try:
            self.db.delete(qr_code)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete QR code {qr_code_id} for user {user_id}: {e}")
            raise InternalError("Failed to delete QR code") from e
        logger.info(f"Deleted QR code {qr_code_id} for user {user_id}")

        self._remove_image(image_url)

    def _remove_image(self, image_url: str) -> None:
        """Remove a stored image, logging instead of raising on failure."""
        try:
            self.storage.delete(image_url)
        except OSError as e:
            logger.warning(f"Failed to remove QR code image {image_url}: {e}")

    def share(
        self,
        user: User,
        qr_code_id: int | None,
        recipient_email: str | None,
        message: str | None = None,
    ) -> None:
        """Email a QR code to someone.

        The image is rendered again from the stored text rather than read from disk.
        """
        if not qr_code_id or not recipient_email:
            raise ValidationError("QR Code ID and recipient email are required")

        qr_code = self._get_owned(user.id, qr_code_id)
        png = qr_codec.render_png(qr_code.text)

        email_service = self.email_service or EmailService()
        msg = email_service.build_message(
            to_email=recipient_email,
            subject=f"QR Code shared by {user.name}",
            html_content=self._share_html(user.name, qr_code.text, message),
            inline_images=[InlineImage(content_id=QR_CONTENT_ID, data=png)],
            attachments=[Attachment(filename=f"qrcode-{qr_code.id}.png", data=png)],
        )
        email_service.send(msg)

        logger.info(f"User {user.id} shared QR code {qr_code.id} with {recipient_email}")

    @staticmethod
    def _share_html(sender_name: str, text: str, message: str | None) -> str:
        return f"""
        <div>
          <h2>QR Code from {html.escape(sender_name)}</h2>
          <p>{html.escape(message or DEFAULT_SHARE_MESSAGE)}</p>
          <p>This QR Code contains: {html.escape(text)}</p>
          <img src="cid:{QR_CONTENT_ID}" alt="QR Code" />
          <p>Scan the QR code with your device to access the content.</p>
        </div>
        """

    @staticmethod
    def scan(image_data: bytes) -> list[tuple[str, QRCodeType]]:
        """Decode the QR codes in an image and guess each payload's type."""
        if not image_data:
            raise ValidationError("An image file is required")
        try:
            payloads = qr_codec.decode_image(image_data)
        except ValueError:
            raise ValidationError("Could not read the uploaded image") from None
        if not payloads:
            raise ValidationError("No QR code found in the image")
        return [(payload, QRCodeType.detect(payload)) for payload in payloads]
