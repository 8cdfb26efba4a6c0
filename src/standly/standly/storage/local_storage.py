from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Protocol

from ..core.constants import IMAGE_EXTENSIONS
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class FileStorage(Protocol):
    def save(self, folder: str, filename: str, data: bytes) -> str:
        """Persist ``data`` and return its public URL."""

        raise NotImplementedError


def image_extension(filename: str) -> str:
    ext = Path(filename or "").suffix.lower().lstrip(".")
    if ext not in IMAGE_EXTENSIONS:
        raise ValidationError("Only image files are allowed (png, jpg, jpeg, gif, webp)")
    return ext


class LocalFileStorage(FileStorage):
    """Stores uploads under ``root/<folder>/<uuid>.<ext>`` and serves them from ``public_url``."""

    def __init__(self, root: str | Path, *, public_url: str = "/uploads", max_bytes: int = 5 * 1024 * 1024):
        self._root = Path(root)
        self._public_url = public_url.rstrip("/")
        self._max_bytes = int(max_bytes)

    @property
    def root(self) -> Path:
        return self._root

    def save(self, folder: str, filename: str, data: bytes) -> str:
        if not data:
            raise ValidationError("Uploaded file is empty")
        if len(data) > self._max_bytes:
            raise ValidationError(f"File is too large (max {self._max_bytes // 1024} KB)")

        ext = image_extension(filename)
        folder = folder.strip("/")
        target_dir = self._root / folder
        target_dir.mkdir(parents=True, exist_ok=True)

        name = f"{uuid.uuid4().hex}.{ext}"
        (target_dir / name).write_bytes(data)
        logger.info("Stored upload %s/%s (%d bytes)", folder, name, len(data))
        return f"{self._public_url}/{folder}/{name}"
