"""
Object storage uploads (listing pictures, profile pictures).
"""

import secrets
import time
from pathlib import PurePath

import structlog
from supabase import Client

from babui.exceptions import StorageError

logger = structlog.get_logger()


def listing_image_name(original_name: str) -> str:
    """Unique object name: `{millis}-{random}.{ext}`."""
    ext = PurePath(original_name).suffix.lstrip(".").lower() or "jpg"
    return f"{int(time.time() * 1000)}-{secrets.token_hex(3)}.{ext}"


def avatar_path(user_id: str, original_name: str) -> str:
    ext = PurePath(original_name).suffix.lstrip(".").lower() or "jpg"
    return f"public/{user_id}/avatar.{ext}"


class StorageService:
    """Uploads blobs to a bucket and returns their public URL."""

    def __init__(self, client: Client):
        self.client = client

    def upload(
        self,
        bucket: str,
        filename: str,
        data: bytes,
        content_type: str | None = None,
        upsert: bool = False,
    ) -> str:
        """
        Upload one object.

        Returns:
            The object's public URL

        Raises:
            StorageError: If the upload is rejected or the backend is unreachable
        """
        file_options = {"upsert": "true" if upsert else "false"}
        if content_type:
            file_options["content-type"] = content_type

        bucket_api = self.client.storage.from_(bucket)
        try:
            bucket_api.upload(path=filename, file=data, file_options=file_options)
        except Exception as e:
            logger.error("Upload failed", bucket=bucket, filename=filename, error=str(e))
            raise StorageError(f"Failed to upload {filename}: {e}") from e

        url = bucket_api.get_public_url(filename)
        logger.info("Uploaded object", bucket=bucket, filename=filename)
        return url
