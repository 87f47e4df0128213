"""SQLAlchemy models."""

from qrsystem.models.qr_code import QRCode
from qrsystem.models.user import User

__all__ = [
    "User",
    "QRCode",
]
