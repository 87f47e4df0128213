"""Filesystem storage for rendered QR code images."""

import logging
import secrets
import time
from pathlib import Path

logger = logging.getLogger(__name__)


class ArtifactStorage:
    """Stores PNG files in a directory that is served under a URL prefix.

    The directory is created on the first write.
    """

    def __init__(self, directory: str | Path, url_prefix: str = "/uploads") -> None:
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")

    @staticmethod
    def new_filename() -> str:
        """Generate a unique file name for a QR code image."""
        return f"qr-{int(time.time() * 1000)}-{secrets.token_hex(4)}.png"

    def url_for(self, filename: str) -> str:
        return f"{self.url_prefix}/{filename}"

    def path_for_url(self, image_url: str) -> Path | None:
        """Map an image URL back to its file, or None if it is not one of ours."""
        prefix = self.url_prefix + "/"
        if not image_url.startswith(prefix):
            return None
        filename = image_url[len(prefix) :]
        # Reject anything that is not a plain file name
        if not filename or Path(filename).name != filename:
            return None
        return self.directory / filename

    def save(self, data: bytes) -> str:
        """Write the image and return the URL it will be served from.

        Raises OSError if the file cannot be written.
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        filename = self.new_filename()
        (self.directory / filename).write_bytes(data)
        return self.url_for(filename)

    def delete(self, image_url: str) -> bool:
        """Remove the image behind a URL.

        Returns True if a file was removed. Raises OSError if removal fails.
        """
        path = self.path_for_url(image_url)
        if path is None:
            logger.warning(f"Refusing to delete image outside storage: {image_url}")
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True
