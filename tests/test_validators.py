"""Unit tests for upload validators."""
import pytest

from agri_assist.application.validators import (
    guess_mime_type,
    validate_asset_count,
    validate_audio_type,
    validate_file_size,
    validate_image_type,
)
from agri_assist.domain.models import UploadedAsset


def make_asset(name="leaf.jpg", mime_type=None, size_bytes=None):
    return UploadedAsset(path=f"/tmp/{name}", name=name, mime_type=mime_type, size_bytes=size_bytes)


class TestValidateAssetCount:
    """Test per-request image limits."""

    def test_within_limit(self):
        is_valid, error = validate_asset_count([make_asset()] * 5, max_files=5)
        assert is_valid
        assert error == ""

    def test_no_assets(self):
        is_valid, error = validate_asset_count([])
        assert not is_valid
        assert error == "At least one image is required for diagnosis"

    def test_too_many(self):
        is_valid, error = validate_asset_count([make_asset()] * 6, max_files=5)
        assert not is_valid
        assert "Maximum is 5" in error


class TestValidateImageType:
    """Test image MIME type checks."""

    def test_valid_types(self):
        for mime_type in ["image/jpeg", "image/png", "image/webp", "image/gif", "IMAGE/JPEG"]:
            is_valid, error = validate_image_type(make_asset(mime_type=mime_type))
            assert is_valid, f"{mime_type} should be accepted but got error: {error}"

    def test_invalid_type(self):
        is_valid, error = validate_image_type(make_asset("scan.pdf", mime_type="application/pdf"))
        assert not is_valid
        assert error.startswith("Unsupported file type: application/pdf")

    def test_type_guessed_from_name(self):
        assert guess_mime_type(make_asset("leaf.png")) == "image/png"
        is_valid, _ = validate_image_type(make_asset("leaf.jpg"))
        assert is_valid

    def test_unknown_type_rejected(self):
        is_valid, error = validate_image_type(make_asset("leaf"))
        assert not is_valid
        assert "Unsupported file type" in error


class TestValidateAudioType:
    @pytest.mark.parametrize("mime_type", ["audio/webm", "audio/x-m4a", "audio/flac"])
    def test_audio_types_accepted(self, mime_type):
        assert validate_audio_type(mime_type) == (True, "")

    def test_non_audio_rejected(self):
        is_valid, error = validate_audio_type("video/webm")
        assert not is_valid
        assert error == "Unsupported audio type: video/webm"


class TestValidateFileSize:
    def test_unknown_size_accepted(self):
        assert validate_file_size(None, 10) == (True, "")

    def test_at_limit_accepted(self):
        assert validate_file_size(10 * 1024 * 1024, 10) == (True, "")

    def test_over_limit(self):
        is_valid, error = validate_file_size(10 * 1024 * 1024 + 1, 10)
        assert not is_valid
        assert error == "File too large. Maximum size is 10MB."
