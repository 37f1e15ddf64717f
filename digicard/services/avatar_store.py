"""Local avatar storage: validate an uploaded image, resize it and write it under the uploads dir."""
from __future__ import annotations

import hashlib
import io
import os
import time
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

from digicard.core.config import get_settings

JPEG_MAGIC = b"\xFF\xD8\xFF"
PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
ALLOWED_TYPES = {"image/jpeg", "image/png", "image/jpg", "image/pjpeg"}
AVATAR_SIZE = (800, 800)


class AvatarUploadError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class AvatarUpload:
    data: bytes
    content_type: str
    filename: str = ""


def has_valid_signature(data: bytes, content_type: str) -> bool:
    if content_type in {"image/jpeg", "image/jpg", "image/pjpeg"}:
        return data.startswith(JPEG_MAGIC)
    if content_type == "image/png":
        return data.startswith(PNG_MAGIC)
    return False


class LocalAvatarStore:
    """Writes resized JPEGs to ``uploads_dir`` and returns their public path."""

    def __init__(self, uploads_dir: str | None = None, max_bytes: int | None = None) -> None:
        settings = get_settings()
        self.uploads_dir = uploads_dir or settings.uploads_dir
        self.max_bytes = max_bytes or settings.max_upload_bytes

    def validate(self, upload: AvatarUpload) -> None:
        ct = (upload.content_type or "").lower()
        if ct not in ALLOWED_TYPES:
            raise AvatarUploadError("Unsupported image format (use JPEG or PNG).")
        if not upload.data:
            raise AvatarUploadError("Empty image.")
        if len(upload.data) > self.max_bytes:
            raise AvatarUploadError(f"Image exceeds {self.max_bytes // (1024 * 1024)}MB.")
        if not has_valid_signature(upload.data, ct):
            raise AvatarUploadError("Invalid image file.")

    def store(self, user_id: str, upload: AvatarUpload) -> str:
        self.validate(upload)
        try:
            image = Image.open(io.BytesIO(upload.data))
            image = ImageOps.exif_transpose(image)
            image = image.convert("RGB")
        except (UnidentifiedImageError, OSError) as exc:
            raise AvatarUploadError("Invalid image file.") from exc
        image.thumbnail(AVATAR_SIZE, Image.LANCZOS)
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=85, optimize=True)
        payload = buffer.getvalue()

        filename = f"{user_id}-{int(time.time())}.jpg"
        try:
            os.makedirs(self.uploads_dir, exist_ok=True)
            with open(os.path.join(self.uploads_dir, filename), "wb") as f:
                f.write(payload)
        except OSError as exc:
            raise AvatarUploadError(f"Failed to upload photo: {exc.strerror or exc}") from exc
        etag = hashlib.md5(payload).hexdigest()[:8]
        return f"/static/uploads/{filename}?v={etag}"
