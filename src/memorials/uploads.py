"""Media-upload collaborator: store a file, hand back its public URL."""

import logging
import uuid
from pathlib import Path

from django.conf import settings
from django.core.files.storage import default_storage

from src.core.errors import PersistenceError, ValidationError

logger = logging.getLogger(__name__)

MEDIA_FOLDERS = {"photos", "videos", "audios", "profiles", "covers", "tributes"}
ALLOWED_CONTENT_TYPES = ("image/", "video/", "audio/")


def store_media(uploaded_file, folder: str) -> str:
    """
    Save an uploaded file through the default storage backend.

    Works with both local filesystem storage and S3 (django-storages).

    Returns:
        Public URL of the stored file
    """
    if folder not in MEDIA_FOLDERS:
        raise ValidationError(
            f"Unknown media folder. Allowed: {', '.join(sorted(MEDIA_FOLDERS))}",
            fields=["folder"],
        )

    content_type = getattr(uploaded_file, "content_type", "") or ""
    if not content_type.startswith(ALLOWED_CONTENT_TYPES):
        raise ValidationError(
            "Only image, video and audio files can be uploaded", fields=["file"]
        )

    max_bytes = getattr(settings, "MEDIA_UPLOAD_MAX_BYTES", 50 * 1024 * 1024)
    if uploaded_file.size > max_bytes:
        raise ValidationError(
            f"File too large (limit {max_bytes // (1024 * 1024)} MB)", fields=["file"]
        )

    ext = Path(uploaded_file.name).suffix.lower()
    filename = f"{folder}/{uuid.uuid4()}{ext}"
    try:
        saved_path = default_storage.save(filename, uploaded_file)
        url = default_storage.url(saved_path)
    except Exception as e:
        logger.exception(f"Failed to store upload {uploaded_file.name}: {e}")
        raise PersistenceError("Could not store the uploaded file") from e

    logger.info(f"Stored {uploaded_file.name} as {saved_path}")
    return url
