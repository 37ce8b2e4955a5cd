"""
Business logic for the public landing page and its CMS sections.
"""

import logging
from typing import Dict, List, Optional
from shared.supabase_client import SupabaseService, PlatformError
from shared.permissions import ValidationError
from shared.uploads import ImageUpload, ensure_images, extension_for, timestamp_ms, JPEG_PNG
from . import content

logger = logging.getLogger(__name__)

SECTION_KEYS = ("hero", "obras", "detalles")
MAX_SORT_ORDER = 20


def parse_sort_order(value) -> Optional[int]:
    """Parse a form sort order; blank means 1, anything non-integral is None."""
    if value is None or str(value).strip() == "":
        return 1
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if not number.is_integer():
        return None
    return int(number)


class LandingService(SupabaseService):
    """Service class for landing page content."""

    async def list_sections(self) -> List[Dict]:
        """All CMS rows ordered by section then position."""
        result = self.execute(
            self.table("landing_sections")
                .select("section_key, sort_order, title, image_url")
                .order("section_key")
                .order("sort_order"),
            "list landing sections"
        )
        return result.data or []

    async def get_landing(self) -> Dict:
        """
        Assemble the landing page: CMS rows per section, built-in content
        for sections with no rows.
        """
        by_section: Dict[str, List[Dict]] = {}
        for row in await self.list_sections():
            key = (row.get("section_key") or "").strip().lower()
            if key in SECTION_KEYS and row.get("image_url"):
                by_section.setdefault(key, []).append(row)

        hero = dict(content.HERO)
        if by_section.get("hero"):
            hero_row = by_section["hero"][0]
            hero["image_url"] = hero_row["image_url"]
            if hero_row.get("title"):
                hero["title"] = hero_row["title"]

        if by_section.get("obras"):
            obras = [
                {"caption": row.get("title") or "", "image_url": row["image_url"]}
                for row in by_section["obras"]
            ]
        else:
            obras = [dict(item) for item in content.OBRAS]

        if by_section.get("detalles"):
            detalles = [row["image_url"] for row in by_section["detalles"]]
        else:
            detalles = list(content.DETALLES)

        return {
            "hero": hero,
            "obras": obras,
            "detalles": detalles,
            "servicios": list(content.SERVICIOS),
            "contacto": dict(content.CONTACTO),
        }

    async def replace_section_image(
        self,
        section_key: str,
        sort_order_value,
        title: str,
        upload: Optional[ImageUpload]
    ) -> Dict:
        """
        Upload a landing image and make it the row for (section_key, sort_order).

        Raises:
            ValidationError: If the key, position or file is invalid
            PlatformError: If a Supabase step fails
        """
        section_key = (section_key or "").strip().lower()
        sort_order = parse_sort_order(sort_order_value)
        title = (title or "").strip() or None

        if not section_key or sort_order is None or upload is None:
            raise ValidationError("Faltan datos para actualizar landing_sections.", [
                {"field": field, "message": "Required"}
                for field, missing in (
                    ("sectionKey", not section_key),
                    ("sortOrder", sort_order is None),
                    ("file", upload is None),
                )
                if missing
            ])

        if section_key not in SECTION_KEYS:
            raise ValidationError(
                f"Sección inválida: {section_key}.",
                [{"field": "sectionKey", "message": f"Must be one of {', '.join(SECTION_KEYS)}"}]
            )

        max_order = 1 if section_key == "hero" else MAX_SORT_ORDER
        if not 1 <= sort_order <= max_order:
            raise ValidationError(
                f"Posición inválida para {section_key}: {sort_order}.",
                [{"field": "sortOrder", "message": f"Must be between 1 and {max_order}"}]
            )

        ensure_images([upload], JPEG_PNG)

        path = f"landing/{section_key}/{sort_order}-{timestamp_ms()}.{extension_for(upload)}"
        image_url = self.upload_file(path, upload.data, upload.content_type, upsert=True)

        row = {
            "section_key": section_key,
            "sort_order": sort_order,
            "title": title,
            "image_url": image_url,
        }

        try:
            self.execute(
                self.table("landing_sections")
                    .delete()
                    .eq("section_key", section_key)
                    .eq("sort_order", sort_order),
                "clear landing slot"
            )
            self.execute(self.table("landing_sections").insert(row), "insert landing section")
        except PlatformError:
            try:
                self.delete_files([path])
            except PlatformError as e:
                logger.warning(f"Rollback: could not remove landing image {path}: {str(e)}")
            raise

        logger.info(f"Landing slot {section_key}/{sort_order} updated")
        return row
