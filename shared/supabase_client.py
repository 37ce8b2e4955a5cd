"""
Supabase client singleton for database and storage operations.
"""

import os
import logging
from typing import Optional, List
from supabase import create_client, Client

logger = logging.getLogger(__name__)

# Singleton instance
_supabase_client: Optional[Client] = None


class PlatformError(Exception):
    """Raised when a Supabase call (auth, table or storage) fails."""
    pass


def get_supabase_url() -> str:
    """Get the Supabase URL from environment variables."""
    url = os.environ.get("SUPABASE_URL")
    if not url:
        raise ValueError("SUPABASE_URL environment variable not set")
    return url


def get_supabase_service_key() -> str:
    """Get the Supabase service key from environment variables."""
    key = os.environ.get("SUPABASE_SERVICE_KEY")
    if not key:
        raise ValueError("SUPABASE_SERVICE_KEY environment variable not set")
    return key


def get_supabase_anon_key() -> str:
    """Get the Supabase anon (public) key from environment variables."""
    key = os.environ.get("SUPABASE_ANON_KEY")
    if not key:
        raise ValueError("SUPABASE_ANON_KEY environment variable not set")
    return key


def get_storage_bucket() -> str:
    """Get the bucket holding report photos and landing images."""
    return os.environ.get("SUPABASE_STORAGE_BUCKET", "proyectos")


def get_gallery_bucket() -> str:
    """Get the bucket backing the admin image gallery."""
    return os.environ.get("SUPABASE_GALLERY_BUCKET", "gallery")


def get_supabase_client() -> Client:
    """
    Get the Supabase client singleton.
    Uses service role key for full database access.

    Returns:
        Supabase Client instance
    """
    global _supabase_client

    if _supabase_client is None:
        url = get_supabase_url()
        key = get_supabase_service_key()
        _supabase_client = create_client(url, key)
        logger.info("Supabase client initialized")

    return _supabase_client


def create_auth_client() -> Client:
    """
    Create a short-lived client with the anon key for password sign-in.

    Signing in stores the user session on the client, so this is never
    the shared service-role singleton.
    """
    return create_client(get_supabase_url(), get_supabase_anon_key())


def error_message(error: Exception) -> str:
    """Best-effort human readable message from a Supabase SDK exception."""
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error) or error.__class__.__name__


class SupabaseService:
    """
    Base service class for Supabase operations.
    Provides common database and storage utilities.
    """

    def __init__(self):
        self.client = get_supabase_client()
        self.storage_bucket = get_storage_bucket()

    @property
    def storage(self):
        """Get the storage client."""
        return self.client.storage

    def table(self, table_name: str):
        """Get a table reference for queries."""
        return self.client.table(table_name)

    def execute(self, query, action: str):
        """
        Run a prepared query builder.

        Args:
            query: Any postgrest request builder
            action: Short description used in logs

        Returns:
            The query result (``result.data`` holds the rows)

        Raises:
            PlatformError: If Supabase rejects the query
        """
        try:
            return query.execute()
        except Exception as e:
            logger.error(f"Error while trying to {action}: {str(e)}")
            raise PlatformError(error_message(e)) from e

    def public_url(self, path: str, bucket: Optional[str] = None) -> str:
        """Public URL of an object in a public bucket."""
        return self.storage.from_(bucket or self.storage_bucket).get_public_url(path)

    def upload_file(
        self,
        path: str,
        file_data: bytes,
        content_type: str,
        upsert: bool = False,
        bucket: Optional[str] = None
    ) -> str:
        """
        Upload a file to Supabase Storage.

        Args:
            path: Storage path (e.g., "weekly-reports/user_id/123.jpg")
            file_data: File content as bytes
            content_type: MIME type of the file
            upsert: Overwrite an existing object at the same path
            bucket: Target bucket (default: the storage bucket)

        Returns:
            Public URL of the uploaded file
        """
        bucket = bucket or self.storage_bucket
        try:
            self.storage.from_(bucket).upload(
                path,
                file_data,
                {"content-type": content_type, "upsert": "true" if upsert else "false"}
            )
        except Exception as e:
            logger.error(f"Error uploading file {path}: {str(e)}")
            raise PlatformError(error_message(e)) from e

        return self.public_url(path, bucket)

    def delete_files(self, paths: List[str], bucket: Optional[str] = None) -> bool:
        """
        Delete files from Supabase Storage.

        Args:
            paths: Storage paths of the files to delete
            bucket: Bucket holding the files (default: the storage bucket)

        Returns:
            True if successful
        """
        if not paths:
            return True
        try:
            self.storage.from_(bucket or self.storage_bucket).remove(paths)
            return True
        except Exception as e:
            logger.error(f"Error deleting files {paths}: {str(e)}")
            raise PlatformError(error_message(e)) from e
