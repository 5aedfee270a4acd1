"""
Evidence photo uploads: intake filter and on-disk storage.
"""

from __future__ import annotations

import asyncio
import logging
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from fastapi import Request, UploadFile

from csrms.services.validation import image_size_error

logger = logging.getLogger(__name__)

IMAGE_FIELD_NAME = "image"
ALLOWED_IMAGE_PATTERN = re.compile(r"jpeg|jpg|png")


@dataclass
class ImageUpload:
    """An uploaded image held in memory until the submission is accepted."""

    filename: str
    content_type: Optional[str]
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return Path(self.filename).suffix.lower()


async def read_image_upload(upload: UploadFile, max_bytes: int) -> ImageUpload:
    """
    Read an uploaded file into memory.

    At most ``max_bytes + 1`` bytes are read, enough to tell that a file is
    over the limit without buffering the rest of it.
    """
    content = await upload.read(max_bytes + 1)
    return ImageUpload(
        filename=upload.filename or "",
        content_type=upload.content_type,
        content=content,
    )


def check_image_upload(image: ImageUpload, max_bytes: int) -> List[str]:
    """Return the reasons an upload is refused before validation (empty if accepted)."""
    errors = []
    extension_ok = bool(ALLOWED_IMAGE_PATTERN.search(image.extension))
    mimetype_ok = bool(ALLOWED_IMAGE_PATTERN.search(image.content_type or ""))
    if not (extension_ok and mimetype_ok):
        errors.append("Only image files are allowed")
    if image.size > max_bytes:
        errors.append(image_size_error(max_bytes))
    return errors


class ImageStore:
    """Writes accepted images under ``root`` and returns their public path."""

    def __init__(self, root: str | Path, url_prefix: str = "/uploads"):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def _filename(self, image: ImageUpload) -> str:
        unique_suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
        return f"{IMAGE_FIELD_NAME}-{unique_suffix}{image.extension}"

    async def save(self, image: ImageUpload) -> str:
        """Persist ``image`` and return the path stored on the service request."""
        filename = self._filename(image)
        destination = self.root / filename
        await asyncio.to_thread(self._write, destination, image.content)
        logger.info("Stored uploaded image %s (%d bytes)", filename, image.size)
        return f"{self.url_prefix}/{filename}"

    @staticmethod
    def _write(destination: Path, content: bytes) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(content)


def get_image_store(request: Request) -> ImageStore:
    """Dependency returning the image store created during startup."""
    return request.app.state.image_store
