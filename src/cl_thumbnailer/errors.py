"""Exception hierarchy for cl_thumbnailer.

Fatal errors stop the whole run; size errors only stop the current size.
Core functions raise, and only the CLI turns them into exit codes.
"""


class ThumbnailerError(Exception):
    """Base class for all cl_thumbnailer errors."""


class FatalError(ThumbnailerError):
    """Raised when the run cannot continue at all."""


class UsageError(FatalError):
    """Raised when the command line is incomplete."""


class ConfigError(FatalError):
    """Raised when the env file or a required key is missing."""


class TypeDetectionError(FatalError):
    """Raised when the MIME sniffer cannot be run."""


class NotAnImageError(FatalError):
    """Raised when the input file is not an image."""

    def __init__(self, path: str) -> None:
        self.path: str = path
        super().__init__(f"File {path} is not a valid image")


class OutputDirectoryError(FatalError):
    """Raised when a size directory cannot be created."""


class SizeError(ThumbnailerError):
    """Raised for failures scoped to a single size variant."""


class ImageProcessingError(SizeError):
    """Raised when decoding, resizing, watermarking or saving fails."""


class OwnershipError(SizeError):
    """Raised when the ownership change command fails."""

    def __init__(self, message: str, output: str = "") -> None:
        self.output: str = output
        super().__init__(f"{message}, output: {output}" if output else message)
