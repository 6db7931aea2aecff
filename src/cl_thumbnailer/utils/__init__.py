"""Collaborators for external tools: MIME sniffing and ownership."""

from .media_types import (
    FileCommandTypeDetector,
    MagicTypeDetector,
    MediaType,
    TypeDetector,
    get_type_detector,
    is_image,
    mime_is_image,
)
from .ownership import ChownOwnershipChanger, OwnershipChanger, change_ownership

__all__ = [
    "ChownOwnershipChanger",
    "FileCommandTypeDetector",
    "MagicTypeDetector",
    "MediaType",
    "OwnershipChanger",
    "TypeDetector",
    "change_ownership",
    "get_type_detector",
    "is_image",
    "mime_is_image",
]
