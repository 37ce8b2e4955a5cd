"""
Business logic for the admin image gallery bucket.
"""

import logging
import re
from typing import Dict, List
from shared.supabase_client import SupabaseService, PlatformError, get_gallery_bucket, error_message
from shared.permissions import ValidationError
from shared.uploads import ImageUpload, ensure_images, timestamp_ms, JPEG_PNG_WEBP

logger = logging.getLogger(__name__)

LIST_LIMIT = 100
_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class GalleryService(SupabaseService):
    """Service class for gallery images."""

    def __init__(self):
        super().__init__()
        self.gallery_bucket = get_gallery_bucket()

    async def list_images(self) -> List[Dict]:
        """First images of the bucket by name, with public URLs."""
        try:
            files = self.storage.from_(self.gallery_bucket).list(
                "",
                {"limit": LIST_LIMIT, "offset": 0, "sortBy": {"column": "name", "order": "asc"}}
            )
        except Exception as e:
            logger.error(f"Error listing gallery images: {str(e)}")
            raise PlatformError(error_message(e)) from e

        return [
            {"name": item["name"], "publicUrl": self.public_url(item["name"], self.gallery_bucket)}
            for item in files or []
            if item.get("name") and not item["name"].startswith(".")
        ]

    async def upload_image(self, upload: ImageUpload) -> Dict:
        """
        Store an image as "<ms>-<original name>".

        Raises:
            ValidationError: If the file is missing or not an image
        """
        if upload is None:
            raise ValidationError("Seleccioná una imagen.", [{"field": "file", "message": "Required"}])

        ensure_images([upload], JPEG_PNG_WEBP)

        safe_name = _UNSAFE_NAME_CHARS.sub("-", upload.name).strip("-") or "imagen"
        name = f"{timestamp_ms()}-{safe_name}"
        url = self.upload_file(name, upload.data, upload.content_type, bucket=self.gallery_bucket)

        return {"name": name, "publicUrl": url}

    async def delete_image(self, name: str) -> None:
        if not name or "/" in name:
            raise ValidationError("Nombre de imagen inválido.", [{"field": "name", "message": "Invalid"}])
        self.delete_files([name], bucket=self.gallery_bucket)
