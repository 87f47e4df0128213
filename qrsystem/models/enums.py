"""Enums for model fields."""

from enum import Enum


class QRCodeType(str, Enum):
    """Kind of payload encoded in a QR code."""

    URL = "URL"
    TEXT = "TEXT"
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    SMS = "SMS"
    WIFI = "WIFI"

    @classmethod
    def detect(cls, payload: str) -> "QRCodeType":
        """Guess the type of a decoded payload from its scheme prefix."""
        lowered = payload.strip().lower()
        if lowered.startswith("mailto:"):
            return cls.EMAIL
        if lowered.startswith("tel:"):
            return cls.PHONE
        if lowered.startswith(("sms:", "smsto:")):
            return cls.SMS
        if lowered.startswith("wifi:"):
            return cls.WIFI
        if lowered.startswith(("http://", "https://")):
            return cls.URL
        return cls.TEXT
