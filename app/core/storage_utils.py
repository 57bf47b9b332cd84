# app/core/storage_utils.py
import logging
import uuid

from app.core.config import get_settings
from app.core.errors import DependencyError, ValidationError
from app.core.supabase_client import supabase_admin

logger = logging.getLogger(__name__)

MB = 1024 * 1024

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


def validate_image(content_type: str | None, file_bytes: bytes, max_bytes: int) -> str:
    """
    Check an uploaded image and return its file extension.

    Raises:
        ValidationError(400): empty file, unsupported type or too large.
    """
    if not file_bytes:
        raise ValidationError("Please upload a valid image file")

    if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
        raise ValidationError("Unsupported image type. Allowed: JPEG, PNG, WEBP.")

    if len(file_bytes) > max_bytes:
        raise ValidationError(f"Image too large (max {max_bytes // MB}MB).")

    return ALLOWED_IMAGE_CONTENT_TYPES[content_type]


def generate_filename(ext: str) -> str:
    """
    Generate a random filename using UUID4.

    Args:
        ext: File extension without dot (e.g. "png", "jpg")
    """
    return f"{uuid.uuid4()}.{ext}"


class ObjectStorage:
    """
    Thin wrapper over a Supabase Storage bucket.

    Any client failure is re-raised as DependencyError so the parent
    operation fails with 502 instead of an opaque 500.
    """

    def __init__(self, bucket: str):
        self.bucket = bucket

    def upload(self, folder: str, ext: str, file_bytes: bytes, content_type: str) -> str:
        """
        Upload bytes under <folder>/<uuid>.<ext> and return the public URL.
        """
        path = f"{folder}/{generate_filename(ext)}"
        try:
            bucket = supabase_admin().storage.from_(self.bucket)
            bucket.upload(path, file_bytes, {"content-type": content_type, "upsert": "true"})
            return bucket.get_public_url(path)
        except Exception as exc:
            logger.exception("Upload to %s/%s failed", self.bucket, path)
            raise DependencyError("File upload failed") from exc

    def extract_path_from_public_url(self, url: str) -> str | None:
        """
        Given a public URL, extract the object path relative to the bucket.

        Example:
            https://<proj>.supabase.co/storage/v1/object/public/assets/user-photos/a.png
            -> 'user-photos/a.png'
        """
        marker = f"/storage/v1/object/public/{self.bucket}/"
        idx = url.find(marker)
        if idx == -1:
            return None
        return url[idx + len(marker):]

    def delete_public_url(self, url: str) -> None:
        """
        Delete a file by its public URL.
        No-op if the URL does not belong to this bucket.
        """
        path = self.extract_path_from_public_url(url)
        if not path:
            return
        try:
            supabase_admin().storage.from_(self.bucket).remove([path])
        except Exception as exc:
            raise DependencyError("File delete failed") from exc


def get_storage() -> ObjectStorage:
    """FastAPI dependency; overridden in tests."""
    return ObjectStorage(get_settings().STORAGE_BUCKET)
