"""Pure image resize and watermark logic (one size variant per call)."""

from pathlib import Path

from loguru import logger
from PIL import Image

from ..config import WATERMARKED_SIZES, SizeLabel
from ..errors import ImageProcessingError

# Watermark width as a percentage of the resized output width.
WATERMARK_SCALE_FACTORS: dict[str, int] = {
    SizeLabel.L: 66,
    SizeLabel.M: 33,
}
DEFAULT_WATERMARK_SCALE_FACTOR = 100

JPEG_QUALITY = 95


def watermark_scale_factor(size: str) -> int:
    return WATERMARK_SCALE_FACTORS.get(size, DEFAULT_WATERMARK_SCALE_FACTOR)


def parse_dimension(dimension: str) -> int:
    """Parse a configured pixel width.

    Raises:
        ImageProcessingError: If the value is not a positive integer
    """
    try:
        width = int(dimension.strip(), 10)
    except ValueError as exc:
        raise ImageProcessingError(f"invalid dimension: {dimension!r}") from exc
    if width <= 0:
        raise ImageProcessingError(f"invalid dimension: {dimension!r} (must be > 0)")
    return width


def resize_to_width(img: Image.Image, width: int) -> Image.Image:
    """Resize to ``width`` pixels wide, keeping the aspect ratio (Lanczos)."""
    src_width, src_height = img.size
    height = max(1, int(width * src_height / src_width + 0.5))
    return img.resize((width, height), Image.Resampling.LANCZOS)


def overlay_center(base: Image.Image, overlay: Image.Image) -> Image.Image:
    """Composite ``overlay`` over the center of ``base`` at full opacity.

    The overlay's own alpha channel is honoured. Parts of the overlay that
    fall outside ``base`` are clipped. Returns RGBA when ``base`` carries
    alpha, RGB otherwise.
    """
    has_alpha = base.mode in ("RGBA", "LA") or "transparency" in base.info
    left = (base.width - overlay.width) // 2
    top = (base.height - overlay.height) // 2

    layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
    layer.paste(overlay.convert("RGBA"), (left, top))

    composed = Image.alpha_composite(base.convert("RGBA"), layer)
    return composed if has_alpha else composed.convert("RGB")


def apply_watermark(img: Image.Image, watermark_path: str | Path | None, size: str) -> Image.Image:
    """Scale the watermark for ``size`` and center it on ``img``.

    Raises:
        ImageProcessingError: If the watermark cannot be opened or applied
    """
    if not watermark_path:
        raise ImageProcessingError("failed to open watermark image: WATERMARK_FILE is not set")

    try:
        with Image.open(watermark_path) as watermark:
            watermark.load()
            scale = watermark_scale_factor(size)
            target_width = max(1, img.width * scale // 100)
            logger.debug(f"Watermark for {size}: {scale}% of {img.width}px -> {target_width}px")
            resized = resize_to_width(watermark, target_width)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageProcessingError(f"failed to open watermark image: {exc}") from exc

    try:
        return overlay_center(img, resized)
    except (OSError, ValueError) as exc:
        raise ImageProcessingError(f"failed to apply watermark: {exc}") from exc


def save_image(img: Image.Image, output_path: str | Path) -> None:
    """Save ``img`` with the format implied by the output extension.

    Raises:
        ImageProcessingError: If Pillow cannot write the file
    """
    output_path = Path(output_path)
    fmt = Image.registered_extensions().get(output_path.suffix.lower())

    save_kwargs: dict[str, object] = {}
    if fmt == "JPEG":
        save_kwargs["quality"] = JPEG_QUALITY

    try:
        # JPEG does not support alpha channel
        if fmt == "JPEG" and img.mode not in ("RGB", "L", "CMYK"):
            img = img.convert("RGB")

        img.save(output_path, format=fmt, **save_kwargs)
    except (OSError, ValueError, KeyError) as exc:
        raise ImageProcessingError(f"failed to save output image: {exc}") from exc


def process_image(
    *,
    input_path: str | Path,
    watermark_path: str | Path | None,
    output_path: str | Path,
    dimension: str,
    size: str,
    add_watermark: bool,
) -> str:
    """
    Produce one size variant of an image.

    Args:
        input_path: Path to the source image (decoded fresh on every call)
        watermark_path: Watermark image, only read when watermarking applies
        output_path: Destination file; its directory must already exist
        dimension: Target width in pixels, as configured
        size: Size label (s, m, l, xl)
        add_watermark: Overlay the watermark when the label allows it

    Returns:
        Output file path as string

    Raises:
        ImageProcessingError: If decoding, parsing, watermarking or saving fails
    """
    input_path = Path(input_path)
    output_path = Path(output_path)

    try:
        with Image.open(input_path) as src:
            src.load()
            source = src.copy()
    except (OSError, Image.DecompressionBombError) as exc:
        raise ImageProcessingError(f"failed to open input image: {exc}") from exc

    width = parse_dimension(dimension)
    try:
        output = resize_to_width(source, width)
    except (OSError, ValueError) as exc:
        raise ImageProcessingError(f"failed to resize image: {exc}") from exc

    if add_watermark and size in WATERMARKED_SIZES:
        output = apply_watermark(output, watermark_path, size)

    save_image(output, output_path)
    logger.info(f"Image saved: {output_path}")

    return str(output_path)
