# baytkom/utils/security.py

import os
import uuid
from fastapi import UploadFile

from baytkom.core.config import settings
from baytkom.core.constants import ALLOWED_IMAGE_TYPES
from baytkom.core.errors import ValidationError

EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/webp": "webp"}


async def validate_and_read_image(file: UploadFile) -> bytes:
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Invalid file type.")

    contents = await file.read()

    if not contents:
        raise ValidationError("Empty file.")
    if len(contents) > settings.max_upload_bytes:
        raise ValidationError(f"File too large ({settings.max_upload_bytes // (1024 * 1024)}MB max).")

    return contents


def generate_safe_filename(original_filename: str, content_type: str) -> str:
    ext = os.path.splitext(original_filename or "")[1].lstrip(".").lower()
    if ext not in EXTENSIONS.values():
        ext = EXTENSIONS[content_type]
    return f"{uuid.uuid4()}.{ext}"
