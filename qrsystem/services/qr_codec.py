"""Render text to QR code PNGs and decode QR codes from images."""

import base64
import io

import cv2
import numpy as np
import qrcode
from qrcode.exceptions import DataOverflowError

PNG_DATA_URL_PREFIX = "data:image/png;base64,"


def render_png(text: str) -> bytes:
    """Render text as a QR code and return the PNG bytes.

    Raises ValueError if the text does not fit in the largest QR code version.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(text)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as e:
        raise ValueError("Text is too long to encode as a QR code") from e
    img = qr.make_image(fill_color="black", back_color="white")

    buffered = io.BytesIO()
    img.save(buffered, format="PNG")
    return buffered.getvalue()


def to_data_url(png: bytes) -> str:
    """Encode PNG bytes as a data URL usable directly in an <img> tag."""
    return PNG_DATA_URL_PREFIX + base64.b64encode(png).decode("ascii")


def decode_image(data: bytes) -> list[str]:
    """Decode every QR code found in an encoded image (PNG, JPEG, ...).

    Raises ValueError if the bytes are not a readable image.
    """
    buffer = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(buffer, cv2.IMREAD_COLOR) if buffer.size else None
    if img is None:
        raise ValueError("Unreadable image")

    detector = cv2.QRCodeDetector()

    try:
        ok, decoded, _points, _ = detector.detectAndDecodeMulti(img)
    except cv2.error:
        ok, decoded = False, ()
    if ok:
        payloads = [text for text in decoded if text]
        if payloads:
            return payloads

    # Single fallback
    text, _points, _ = detector.detectAndDecode(img)
    return [text] if text else []
