"""QR code model."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from qrsystem.database import Base
from qrsystem.models.enums import QRCodeType

DEFAULT_TITLE = "Untitled QR Code"


def utcnow() -> datetime:
    return datetime.now(UTC)


class QRCode(Base):
    """A generated QR code and the location of its rendered image."""

    __tablename__ = "qr_codes"
    __table_args__ = (Index("ix_qr_codes_user_id_created_at", "user_id", "created_at"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    text = Column(Text, nullable=False)
    title = Column(String(255), nullable=False, default=DEFAULT_TITLE)
    type = Column(String(20), nullable=False, default=QRCodeType.URL.value)
    image_url = Column(String(500), nullable=False)
    # Set in Python so ordering and date filters see full precision
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    owner = relationship("User", backref="qr_codes")
