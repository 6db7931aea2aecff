"""MIME-type detection used to gate the run on image inputs.

Two detectors are available: the ``file`` command (the default) and libmagic
through python-magic. Both report a MIME string; ``is_image`` decides.
"""

import subprocess
from enum import StrEnum
from pathlib import Path
from typing import Protocol

import magic
from loguru import logger

from ..errors import TypeDetectionError


class MediaType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    FILE = "file"

    @classmethod
    def from_mime(cls, file_type: str) -> "MediaType":
        if file_type.startswith("image"):
            return MediaType.IMAGE
        elif file_type.startswith("video"):
            return MediaType.VIDEO
        elif file_type.startswith("audio"):
            return MediaType.AUDIO
        elif file_type.startswith("text"):
            return MediaType.TEXT
        else:
            return MediaType.FILE


class TypeDetector(Protocol):
    def mime_type(self, path: str | Path) -> str: ...


class FileCommandTypeDetector:
    """Runs ``file --mime-type -b`` on the input."""

    def __init__(self, command: str = "file") -> None:
        self.command: str = command

    def mime_type(self, path: str | Path) -> str:
        cmd = [self.command, "--mime-type", "-b", str(path)]
        logger.debug(" ".join(cmd))

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise TypeDetectionError(f"Failed to determine file type: {exc}") from exc

        return result.stdout.strip()


class MagicTypeDetector:
    """Asks libmagic directly, no external process."""

    def __init__(self) -> None:
        self._magic: magic.Magic = magic.Magic(mime=True)

    def mime_type(self, path: str | Path) -> str:
        try:
            file_type = self._magic.from_file(str(path))
        except (OSError, magic.MagicException) as exc:
            raise TypeDetectionError(f"Failed to determine file type: {exc}") from exc

        if not file_type:
            file_type = "application/octet-stream"
        return file_type


def get_type_detector(name: str = "file") -> TypeDetector:
    if name == "magic":
        return MagicTypeDetector()
    if name == "file":
        return FileCommandTypeDetector()
    raise ValueError(f"Unknown MIME detector: {name}")


def mime_is_image(mime: str) -> bool:
    return "image" in mime


def is_image(path: str | Path, detector: TypeDetector) -> bool:
    """True when the detector's MIME type for ``path`` mentions "image".

    Raises:
        TypeDetectionError: If the detector itself cannot run
    """
    mime = detector.mime_type(path)
    logger.debug(f"{path}: {mime} ({MediaType.from_mime(mime)})")
    return mime_is_image(mime)
