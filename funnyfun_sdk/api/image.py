"""
Embedded token image validation

Images travel to the platform as base64 strings inside JSON bodies, so they
are checked locally before any upload request is made.
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

import filetype

from ..config import get_config
from ..errors import ImageValidationError

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^,;]*)*?);base64,(?P<data>.*)$", re.DOTALL)


@dataclass(frozen=True)
class ValidatedImage:
    """
    Accepted image

    Attributes:
        mime_type: MIME type detected from the decoded bytes
        size: Decoded size in bytes
        data_uri: Normalized "data:<mime>;base64,<data>" URI
    """
    mime_type: str
    size: int
    data_uri: str


def _split_payload(data: str):
    """Return (declared_mime, base64_text)"""
    text = data.strip()
    if text.startswith("data:"):
        match = _DATA_URI_RE.match(text)
        if not match:
            raise ImageValidationError.invalid_encoding("data URI must be base64 encoded")
        return match.group("mime"), match.group("data")
    return None, text


def validate_image(
    data: str,
    max_bytes: Optional[int] = None,
    allowed_types: Optional[Iterable[str]] = None,
) -> ValidatedImage:
    """
    Validate a base64 image or data URI

    Args:
        data: Raw base64 string or "data:<mime>;base64," URI
        max_bytes: Decoded size ceiling (defaults to TOKEN_IMAGE_MAX_BYTES)
        allowed_types: Allowed MIME types (defaults to TOKEN_IMAGE_TYPES)

    Returns:
        ValidatedImage

    Raises:
        ImageValidationError: Empty payload, invalid base64, oversized image,
            or a MIME type outside the allow-list
    """
    max_bytes = max_bytes if max_bytes is not None else get_config().token.image_max_bytes
    allowed = frozenset(allowed_types if allowed_types is not None else get_config().token.image_types)

    if not isinstance(data, str) or not data.strip():
        raise ImageValidationError.invalid_encoding("image is empty")

    declared_mime, encoded = _split_payload(data)
    encoded = re.sub(r"\s+", "", encoded)
    if not encoded:
        raise ImageValidationError.invalid_encoding("image is empty")

    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageValidationError.invalid_encoding(str(e))

    if len(raw) > max_bytes:
        raise ImageValidationError.too_large(len(raw), max_bytes)

    kind = filetype.guess(raw)
    mime_type = kind.mime if kind is not None else None
    if mime_type not in allowed:
        raise ImageValidationError.unsupported_type(mime_type, allowed)

    if declared_mime and declared_mime != mime_type:
        logger.warning(f"Image declared as {declared_mime} but content is {mime_type}")

    return ValidatedImage(
        mime_type=mime_type,
        size=len(raw),
        data_uri=f"data:{mime_type};base64,{encoded}",
    )
