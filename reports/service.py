"""
Business logic for weekly progress reports.

Photos are uploaded to storage first; report rows are inserted only after
every upload succeeded, and uploaded objects are removed again when the
insert fails.
"""

import logging
import uuid
from datetime import date
from typing import Dict, List, Optional
from urllib.parse import unquote, urlparse
from shared.supabase_client import SupabaseService, PlatformError
from shared.permissions import NotFoundError, ValidationError
from shared.uploads import ImageUpload, ensure_images, extension_for, timestamp_ms, JPEG_PNG_WEBP

logger = logging.getLogger(__name__)

MISSING_DATA_MESSAGE = "Faltan datos para cargar el reporte semanal."


class ReportService(SupabaseService):
    """Service class for weekly report operations."""

    def _report_path(self, user_id: str, upload: ImageUpload) -> str:
        return f"weekly-reports/{user_id}/{timestamp_ms()}-{uuid.uuid4()}.{extension_for(upload)}"

    def _storage_path_from_url(self, url: str) -> Optional[str]:
        """
        Path of an object inside the storage bucket, given its public URL.
        Returns None for URLs that point elsewhere.
        """
        marker = f"/storage/v1/object/public/{self.storage_bucket}/"
        path = urlparse(url or "").path
        if marker not in path:
            return None
        return unquote(path.split(marker, 1)[1])

    async def upload_reports(
        self,
        user_id: str,
        description: str,
        uploads: List[ImageUpload]
    ) -> List[Dict]:
        """
        Upload report photos and insert one report row per photo.

        Args:
            user_id: The client's auth user id
            description: Text shown under the photos
            uploads: JPEG/PNG/WEBP images

        Returns:
            The inserted report rows

        Raises:
            ValidationError: If data is missing or a file is not an image
            PlatformError: If an upload or the insert fails
        """
        user_id = (user_id or "").strip()
        description = (description or "").strip()

        if not user_id or not description or not uploads:
            raise ValidationError(MISSING_DATA_MESSAGE, [
                {"field": field, "message": "Required"}
                for field, value in (("userId", user_id), ("description", description), ("file", uploads))
                if not value
            ])

        ensure_images(uploads, JPEG_PNG_WEBP)

        uploaded_paths = []
        rows = []
        report_date = date.today().isoformat()

        try:
            for upload in uploads:
                path = self._report_path(user_id, upload)
                photo_url = self.upload_file(path, upload.data, upload.content_type, upsert=False)
                uploaded_paths.append(path)
                rows.append({
                    "user_id": user_id,
                    "description": description,
                    "photo_url": photo_url,
                    "report_date": report_date,
                })

            result = self.execute(
                self.table("weekly_reports").insert(rows),
                "insert weekly reports"
            )
        except PlatformError:
            self._remove_uploaded(uploaded_paths)
            raise

        logger.info(f"Stored {len(rows)} weekly report photo(s) for {user_id}")
        return result.data or rows

    def _remove_uploaded(self, paths: List[str]) -> None:
        if not paths:
            return
        try:
            self.delete_files(paths)
            logger.warning(f"Rollback: removed {len(paths)} uploaded report photo(s)")
        except PlatformError as e:
            logger.warning(f"Rollback: could not remove uploaded photos {paths}: {str(e)}")

    async def create_reports_batch(self, data: Dict) -> int:
        """
        Insert report rows for photos already uploaded by the dashboard.

        Args:
            data: {"userId", "description"?, "reports": [{"photo_url", "description"?, "report_date"?}]}

        Returns:
            Number of rows created

        Raises:
            ValidationError: If the batch is empty or an entry lacks user or photo
            PlatformError: If the insert fails
        """
        default_user = str(data.get("userId") or "").strip()
        default_description = str(data.get("description") or "").strip()
        entries = data.get("reports")

        if not isinstance(entries, list) or not entries:
            raise ValidationError(MISSING_DATA_MESSAGE, [{"field": "reports", "message": "Required"}])

        today = date.today().isoformat()
        rows = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ValidationError(MISSING_DATA_MESSAGE, [{"field": f"reports[{index}]", "message": "Invalid entry"}])

            user_id = str(entry.get("user_id") or default_user).strip()
            photo_url = str(entry.get("photo_url") or "").strip()
            if not user_id or not photo_url:
                raise ValidationError(MISSING_DATA_MESSAGE, [
                    {"field": f"reports[{index}]", "message": "user_id and photo_url are required"}
                ])

            rows.append({
                "user_id": user_id,
                "photo_url": photo_url,
                "description": str(entry.get("description") or default_description).strip(),
                "report_date": str(entry.get("report_date") or today),
            })

        self.execute(self.table("weekly_reports").insert(rows), "insert weekly report batch")
        logger.info(f"Inserted {len(rows)} weekly report row(s)")
        return len(rows)

    async def list_reports(self, user_id: str) -> List[Dict]:
        """List a client's reports, newest first."""
        result = self.execute(
            self.table("weekly_reports")
                .select("*")
                .eq("user_id", user_id)
                .order("report_date", desc=True)
                .order("created_at", desc=True),
            "list weekly reports"
        )
        return result.data or []

    async def delete_report(self, report_id: str) -> None:
        """
        Delete a report row and, when it lives in our bucket, its photo.

        Raises:
            NotFoundError: If the report doesn't exist
        """
        result = self.execute(
            self.table("weekly_reports").select("id, photo_url").eq("id", report_id).limit(1),
            "load weekly report"
        )
        if not result.data:
            raise NotFoundError("Report not found")

        self.execute(
            self.table("weekly_reports").delete().eq("id", report_id),
            "delete weekly report"
        )

        path = self._storage_path_from_url(result.data[0].get("photo_url"))
        if path:
            try:
                self.delete_files([path])
            except PlatformError as e:
                logger.warning(f"Report {report_id} deleted but its photo {path} was kept: {str(e)}")
