"""Upload validation for images and audio handed over by the caller."""
import mimetypes
from typing import Optional, Sequence, Tuple

from agri_assist.domain.models import UploadedAsset


ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"}
ALLOWED_AUDIO_TYPES = {"audio/webm", "audio/wav", "audio/mp4", "audio/mpeg", "audio/ogg", "audio/x-m4a"}

DEFAULT_MAX_FILES = 5
DEFAULT_MAX_IMAGE_MB = 10
DEFAULT_MAX_AUDIO_MB = 25


def guess_mime_type(asset: UploadedAsset) -> Optional[str]:
    if asset.mime_type:
        return asset.mime_type.lower()
    guessed, _ = mimetypes.guess_type(asset.name)
    return guessed


def validate_asset_count(assets: Sequence[UploadedAsset], max_files: int = DEFAULT_MAX_FILES) -> Tuple[bool, str]:
    """
    Check the number of images in a request.

    Args:
        assets: Uploaded images
        max_files: Per-request cap

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not assets:
        return False, "At least one image is required for diagnosis"

    if len(assets) > max_files:
        return False, f"Too many files. Maximum is {max_files} per request."

    return True, ""


def validate_image_type(asset: UploadedAsset) -> Tuple[bool, str]:
    """
    Check an image's MIME type, guessing it from the file name when the caller
    did not provide one.
    """
    mime_type = guess_mime_type(asset)
    if mime_type not in ALLOWED_IMAGE_TYPES:
        return False, f"Unsupported file type: {mime_type}. Allowed: JPEG, PNG, WebP, GIF"
    return True, ""


def validate_audio_type(mime_type: str) -> Tuple[bool, str]:
    mime_type = (mime_type or "").lower()
    if mime_type in ALLOWED_AUDIO_TYPES or mime_type.startswith("audio/"):
        return True, ""
    return False, f"Unsupported audio type: {mime_type or 'unknown'}"


def validate_file_size(size_bytes: Optional[int], max_size_mb: int) -> Tuple[bool, str]:
    """Unknown sizes are accepted."""
    if size_bytes is not None and size_bytes > max_size_mb * 1024 * 1024:
        return False, f"File too large. Maximum size is {max_size_mb}MB."
    return True, ""
