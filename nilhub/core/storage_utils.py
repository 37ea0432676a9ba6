# nilhub/core/storage_utils.py
import logging
import uuid

from nilhub.core.config import get_settings
from nilhub.core.errors import StorageError
from nilhub.core.supabase_client import supabase_admin

logger = logging.getLogger(__name__)


def _bucket():
    return supabase_admin().storage.from_(get_settings().STORAGE_BUCKET)


def upload_to_storage(path: str, file_bytes: bytes, content_type: str) -> str:
    """
    Upload raw bytes to Supabase Storage and return the public URL.

    Args:
        path: Full object path inside the bucket; doubles as the asset id.
              Example: "nilhub/products/<uuid>.png"
        file_bytes: File content in bytes.
        content_type: MIME type stored with the object.

    Raises:
        StorageError: if the Supabase client fails for any reason.
    """
    try:
        bucket = _bucket()
        bucket.upload(path, file_bytes, {"content-type": content_type, "upsert": "false"})
        url = bucket.get_public_url(path)
    except Exception as e:
        logger.error("Supabase storage upload failed for %s: %s", path, e)
        raise StorageError(f"Supabase storage upload failed: {e}") from e

    logger.info("Image uploaded: %s", path)
    return url


def delete_from_storage(path: str) -> None:
    """
    Delete a file from Supabase Storage by its object path (asset id).

    Deleting a path that does not exist is not an error.

    Raises:
        StorageError: if the Supabase client fails.
    """
    try:
        # Supabase Python client expects a list of paths.
        _bucket().remove([path])
    except Exception as e:
        logger.error("Supabase storage delete failed for %s: %s", path, e)
        raise StorageError(f"Supabase storage delete failed: {e}") from e

    logger.info("Image deleted: %s", path)


def generate_asset_path(folder: str, ext: str) -> str:
    """
    Generate a unique object path inside `folder`.

    Args:
        folder: e.g. "nilhub/products" (leading/trailing slashes ignored)
        ext: File extension without dot (e.g. "png", "jpg")

    Returns:
        A path like "nilhub/products/<uuid4>.png"
    """
    folder = folder.strip("/")
    filename = f"{uuid.uuid4()}.{ext}"
    return f"{folder}/{filename}" if folder else filename
