"""
Helpers for image uploads arriving as multipart/form-data.
"""

import time
from dataclasses import dataclass
from typing import Iterable, List
import azure.functions as func
from .permissions import ValidationError

JPEG_PNG = ("image/jpeg", "image/png")
JPEG_PNG_WEBP = ("image/jpeg", "image/png", "image/webp")

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


@dataclass
class ImageUpload:
    """A file part read fully into memory."""
    name: str
    data: bytes
    content_type: str


def is_multipart(req: func.HttpRequest) -> bool:
    return "multipart/form-data" in req.headers.get("Content-Type", "")


def read_uploads(req: func.HttpRequest, field: str = "file") -> List[ImageUpload]:
    """
    Read every non-empty file part named ``field``.
    """
    uploads = []
    for part in req.files.getlist(field):
        data = part.read()
        if not data:
            continue
        uploads.append(ImageUpload(
            name=part.filename or "",
            data=data,
            content_type=part.content_type or "application/octet-stream",
        ))
    return uploads


def form_value(req: func.HttpRequest, field: str) -> str:
    """Trimmed text value of a form field ("" when absent)."""
    return str(req.form.get(field) or "").strip()


def ensure_images(uploads: Iterable[ImageUpload], allowed=JPEG_PNG_WEBP) -> None:
    """
    Raises:
        ValidationError: If any upload is not one of the allowed MIME types
    """
    for upload in uploads:
        if upload.content_type not in allowed:
            formats = ", ".join(_EXTENSIONS[t].upper() for t in allowed)
            formats = " o ".join(formats.rsplit(", ", 1))
            raise ValidationError(
                f"Formato inválido. Solo {formats}.",
                [{"field": "file", "message": f"Unsupported type {upload.content_type}"}]
            )


def extension_for(upload: ImageUpload) -> str:
    return _EXTENSIONS.get(upload.content_type, "jpg")


def timestamp_ms() -> int:
    return int(time.time() * 1000)
