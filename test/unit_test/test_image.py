"""
Test Image Validation

Tests for embedded token image checks.
"""

import sys
from pathlib import Path

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from funnyfun_sdk.api import validate_image
from funnyfun_sdk.errors import ImageValidationError, ValidationError

# 1x1 transparent PNG
PNG_B64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk"
    "YPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)
# 1x1 GIF
GIF_B64 = "R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7"
# "hello world"
TEXT_B64 = "aGVsbG8gd29ybGQ="


class TestValidateImage:
    """Test validate_image"""

    def test_raw_png(self):
        image = validate_image(PNG_B64)
        assert image.mime_type == "image/png"
        assert image.size > 0
        assert image.data_uri == f"data:image/png;base64,{PNG_B64}"

    def test_data_uri(self):
        image = validate_image(f"data:image/gif;base64,{GIF_B64}")
        assert image.mime_type == "image/gif"

    def test_whitespace_is_stripped(self):
        wrapped = PNG_B64[:20] + "\n" + PNG_B64[20:]
        assert validate_image(wrapped).data_uri == f"data:image/png;base64,{PNG_B64}"

    def test_declared_type_mismatch_uses_detected_type(self):
        image = validate_image(f"data:image/jpeg;base64,{PNG_B64}")
        assert image.mime_type == "image/png"

    @pytest.mark.parametrize("data", ["", "   ", None])
    def test_empty(self, data):
        with pytest.raises(ImageValidationError):
            validate_image(data)

    def test_invalid_base64(self):
        with pytest.raises(ImageValidationError) as exc_info:
            validate_image("not*base64!")
        assert "encoding" in exc_info.value.message

    def test_data_uri_without_base64(self):
        with pytest.raises(ImageValidationError):
            validate_image("data:image/png,rawbytes")

    def test_too_large(self):
        with pytest.raises(ImageValidationError) as exc_info:
            validate_image(PNG_B64, max_bytes=10)
        assert "too large" in exc_info.value.message

    def test_unsupported_type(self):
        with pytest.raises(ImageValidationError) as exc_info:
            validate_image(TEXT_B64)
        assert "Unsupported" in exc_info.value.message

    def test_custom_allow_list(self):
        with pytest.raises(ImageValidationError):
            validate_image(PNG_B64, allowed_types=["image/gif"])

    def test_is_validation_error(self):
        with pytest.raises(ValidationError):
            validate_image(TEXT_B64)
