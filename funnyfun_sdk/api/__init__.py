"""
Platform API layer
"""

from .image import ValidatedImage, validate_image
from .platform import PlatformAPI

__all__ = [
    "PlatformAPI",
    "ValidatedImage",
    "validate_image",
]
