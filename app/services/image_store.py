"""Filesystem storage for vehicle images.

Files live flat under ``settings.upload_dir`` with generated names and are
referenced from the vehicle row by their public path (``/uploads/<name>``).
"""
import logging
import os
import uuid

from fastapi import UploadFile

from app.config import settings
from app.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")
URL_PREFIX = "/uploads"


class ImageStore:
    def __init__(self, root: str, max_size_bytes: int, url_prefix: str = URL_PREFIX):
        self.root = root
        self.max_size_bytes = max_size_bytes
        self.url_prefix = url_prefix.rstrip("/")

    def validate(self, filename: str | None, size: int) -> str:
        """Check extension and size, returning the normalized extension."""
        ext = os.path.splitext(filename or "")[1].lower()
        if ext not in ALLOWED_EXTENSIONS:
            shown = ext or "(none)"
            raise ValidationError(
                f"File type '{shown}' is not allowed. Allowed: {', '.join(ALLOWED_EXTENSIONS)}"
            )
        if size > self.max_size_bytes:
            limit_mb = self.max_size_bytes / (1024 * 1024)
            raise ValidationError(f"File size exceeds the {limit_mb:g} MB limit.")
        return ext

    async def save(self, upload: UploadFile) -> str:
        """Validate and store an upload under a fresh name.

        Returns the public path to persist on the vehicle. Replacing an older
        image is left to the caller so the old file survives a failed commit.
        """
        content = await upload.read()
        ext = self.validate(upload.filename, len(content))

        os.makedirs(self.root, exist_ok=True)
        filename = f"{uuid.uuid4().hex}{ext}"
        with open(os.path.join(self.root, filename), "wb") as f:
            f.write(content)

        logger.info("Stored image %s (%d bytes)", filename, len(content))
        return f"{self.url_prefix}/{filename}"

    def path_for(self, public_path: str) -> str:
        return os.path.join(self.root, os.path.basename(public_path))

    def delete(self, public_path: str | None) -> None:
        """Remove a stored image. Missing files are ignored."""
        if not public_path:
            return
        full_path = self.path_for(public_path)
        try:
            os.remove(full_path)
            logger.info("Deleted image %s", full_path)
        except FileNotFoundError:
            logger.debug("Image already gone: %s", full_path)


def get_image_store() -> ImageStore:
    return ImageStore(settings.upload_dir, settings.max_image_size_bytes)
