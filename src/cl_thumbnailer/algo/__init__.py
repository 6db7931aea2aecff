"""Image computation for size variants."""

from .image_resize import (
    apply_watermark,
    overlay_center,
    parse_dimension,
    process_image,
    resize_to_width,
    save_image,
    watermark_scale_factor,
)

__all__ = [
    "apply_watermark",
    "overlay_center",
    "parse_dimension",
    "process_image",
    "resize_to_width",
    "save_image",
    "watermark_scale_factor",
]
