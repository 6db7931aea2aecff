"""Straight-line pipeline: type gate, then one pass per enabled size."""

from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from .algo.image_resize import process_image
from .config import SizeLabel, SizeSelection, ThumbnailerConfig
from .errors import ImageProcessingError, NotAnImageError, OutputDirectoryError, OwnershipError
from .utils.media_types import TypeDetector, get_type_detector, is_image
from .utils.ownership import ChownOwnershipChanger, OwnershipChanger
from .utils.profiling import Stopwatch

# ─────────────────────────────────────────────────────────────
# Run results
# ─────────────────────────────────────────────────────────────


class SizeOutcome(BaseModel):
    """What happened to one size variant."""

    label: SizeLabel
    status: Literal["ok", "skipped", "error"]
    output_path: str | None = None
    error: str | None = None
    elapsed: float | None = None
    ownership_error: str | None = None

    model_config = ConfigDict(extra="forbid")


class RunReport(BaseModel):
    """Per-size outcomes for one input file. Informational only."""

    input_path: str
    outcomes: list[SizeOutcome] = Field(default_factory=list)

    @property
    def processed(self) -> list[SizeOutcome]:
        return [o for o in self.outcomes if o.status == "ok"]

    @property
    def skipped(self) -> list[SizeOutcome]:
        return [o for o in self.outcomes if o.status == "skipped"]

    @property
    def failed(self) -> list[SizeOutcome]:
        return [o for o in self.outcomes if o.status == "error"]


# ─────────────────────────────────────────────────────────────
# Pipeline
# ─────────────────────────────────────────────────────────────


def output_path_for(config: ThumbnailerConfig, label: SizeLabel, input_path: str | Path) -> Path:
    return config.output_dir_for(label) / Path(input_path).name


def ensure_output_dir(path: Path) -> None:
    try:
        path.mkdir(mode=0o755, parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputDirectoryError(f"Failed to create directory {path}: {exc}") from exc


def check_image(input_path: str | Path, detector: TypeDetector) -> None:
    """Abort the run unless ``input_path`` is an image.

    Raises:
        TypeDetectionError: If the detector cannot run
        NotAnImageError: If the input is not an image
    """
    if not is_image(input_path, detector):
        raise NotAnImageError(str(input_path))


def process_size(
    config: ThumbnailerConfig,
    label: SizeLabel,
    input_path: str | Path,
    *,
    add_watermark: bool,
    ownership: OwnershipChanger,
) -> SizeOutcome:
    """Produce one size variant and fix its ownership.

    Per-size failures are logged and returned as an ``error`` outcome.

    Raises:
        OutputDirectoryError: If the size directory cannot be created
    """
    dimension = config.dimension_for(label)
    if not dimension:
        logger.warning(f"No dimension found for size {label}. Skipping.")
        return SizeOutcome(label=label, status="skipped")

    output_dir = config.output_dir_for(label)
    output_file = output_path_for(config, label, input_path)
    ensure_output_dir(output_dir)

    logger.info(f"Processing {input_path} as {label} ({dimension} pixels)")

    watch = Stopwatch()
    try:
        with watch:
            process_image(
                input_path=input_path,
                watermark_path=config.watermark_file,
                output_path=output_file,
                dimension=dimension,
                size=label,
                add_watermark=add_watermark,
            )
    except ImageProcessingError as exc:
        logger.error(f"Failed to process {input_path} as {label}: {exc}")
        return SizeOutcome(label=label, status="error", output_path=str(output_file), error=str(exc))

    logger.info(f"Successfully processed {input_path} as {label} in {watch.elapsed:.3f}s")

    outcome = SizeOutcome(label=label, status="ok", output_path=str(output_file), elapsed=watch.elapsed)
    try:
        ownership.change(output_file, config.owner_user)
    except OwnershipError as exc:
        logger.error(f"Failed to change ownership for {output_file}: {exc}")
        outcome.ownership_error = str(exc)

    return outcome


def run(
    config: ThumbnailerConfig,
    selection: SizeSelection,
    input_path: str | Path,
    *,
    add_watermark: bool = False,
    detector: TypeDetector | None = None,
    ownership: OwnershipChanger | None = None,
) -> RunReport:
    """Resize ``input_path`` into every enabled size.

    Args:
        config: Loaded configuration
        selection: Enabled size labels
        input_path: Source image
        add_watermark: Overlay the watermark on m, l and xl
        detector: MIME detector; defaults to the one named in ``config``
        ownership: Ownership changer; defaults to ``chown``

    Returns:
        RunReport with one outcome per enabled size

    Raises:
        TypeDetectionError: If the MIME sniffer cannot run
        NotAnImageError: If the input is not an image
        OutputDirectoryError: If a size directory cannot be created
    """
    detector = detector or get_type_detector(config.mime_detector)
    ownership = ownership or ChownOwnershipChanger()

    check_image(input_path, detector)

    report = RunReport(input_path=str(input_path))
    for label in selection.enabled():
        report.outcomes.append(
            process_size(
                config,
                label,
                input_path,
                add_watermark=add_watermark,
                ownership=ownership,
            )
        )

    return report
