"""cl_thumbnailer - resize an image into predefined size variants."""

__version__ = "0.1.0"

from .algo.image_resize import process_image, watermark_scale_factor
from .config import SizeLabel, SizeSelection, ThumbnailerConfig, load_config
from .errors import (
    ConfigError,
    FatalError,
    ImageProcessingError,
    NotAnImageError,
    OutputDirectoryError,
    OwnershipError,
    SizeError,
    ThumbnailerError,
    TypeDetectionError,
    UsageError,
)
from .runner import RunReport, SizeOutcome, run
from .utils.media_types import TypeDetector, is_image
from .utils.ownership import OwnershipChanger, change_ownership

__all__ = [
    "ConfigError",
    "FatalError",
    "ImageProcessingError",
    "NotAnImageError",
    "OutputDirectoryError",
    "OwnershipChanger",
    "OwnershipError",
    "RunReport",
    "SizeError",
    "SizeLabel",
    "SizeOutcome",
    "SizeSelection",
    "ThumbnailerConfig",
    "ThumbnailerError",
    "TypeDetectionError",
    "TypeDetector",
    "UsageError",
    "__version__",
    "change_ownership",
    "is_image",
    "load_config",
    "process_image",
    "run",
    "watermark_scale_factor",
]
