"""Test configuration and fixtures for cl_thumbnailer.

This module provides:
- Pytest configuration (markers, external tool checks)
- Environment isolation for the config loader
- Function-scoped fixtures (synthetic images, .env writer, log capture)
- Fakes for the MIME detector and ownership changer
"""

import shutil
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from loguru import logger
from PIL import Image, ImageDraw

from cl_thumbnailer.config import SizeLabel
from cl_thumbnailer.errors import OwnershipError, TypeDetectionError

ENV_KEYS = (
    "OUTPUT_BASE_DIR",
    "OWNER_USER",
    "WATERMARK_FILE",
    "MIME_DETECTOR",
    *(label.env_key for label in SizeLabel),
)

SOURCE_COLOR = (0, 0, 255)
WATERMARK_COLOR = (255, 255, 255, 255)


# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "requires_file_command: requires the `file` utility to be installed",
    )


def pytest_runtest_setup(item):
    """Check dependencies before running tests - FAIL if missing (not skip)."""
    if item.get_closest_marker("requires_file_command") and not shutil.which("file"):
        pytest.fail(
            "`file` not installed. "
            "Install: apt-get install file (Linux)\n"
            "Or exclude with: pytest -m 'not requires_file_command'",
            pytrace=False,
        )


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's shell environment out of config loading."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


# ============================================================================
# Image Fixtures
# ============================================================================


@pytest.fixture
def synthetic_image(tmp_path: Path) -> Path:
    """Generate synthetic 800x600 test image using PIL."""
    output_path = tmp_path / "synthetic.jpg"

    img = Image.new("RGB", (800, 600), color=(73, 109, 137))
    draw = ImageDraw.Draw(img)

    for i in range(0, 800, 50):
        draw.line([(i, 0), (i, 600)], fill=(255, 255, 255), width=2)
    for i in range(0, 600, 50):
        draw.line([(0, i), (800, i)], fill=(255, 255, 255), width=2)

    draw.ellipse([300, 200, 500, 400], fill=(200, 100, 100))

    img.save(output_path, "JPEG", quality=85)

    return output_path


@pytest.fixture
def solid_image(tmp_path: Path) -> Path:
    """Generate a uniformly blue 800x600 PNG (lossless, so pixels can be compared)."""
    source_dir = tmp_path / "source"
    source_dir.mkdir()
    output_path = source_dir / "photo.png"
    Image.new("RGB", (800, 600), color=SOURCE_COLOR).save(output_path)
    return output_path


@pytest.fixture
def watermark_image(tmp_path: Path) -> Path:
    """Generate an opaque white 100x50 RGBA watermark."""
    output_path = tmp_path / "watermark.png"
    Image.new("RGBA", (100, 50), color=WATERMARK_COLOR).save(output_path)
    return output_path


@pytest.fixture
def text_file(tmp_path: Path) -> Path:
    output_path = tmp_path / "notes.txt"
    output_path.write_text("definitely not an image\n", encoding="utf-8")
    return output_path


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def output_base_dir(tmp_path: Path) -> Path:
    return tmp_path / "output"


@pytest.fixture
def write_env(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a .env file; ``None`` values are left out entirely."""

    def _write(name: str = ".env", **values: Any) -> Path:
        env_path = tmp_path / name
        lines = [f"{key}={value}" for key, value in values.items() if value is not None]
        env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return env_path

    return _write


# ============================================================================
# Collaborator Fakes
# ============================================================================


class FakeTypeDetector:
    """Returns a fixed MIME type and records every path it was asked about."""

    def __init__(self, mime: str = "image/png", fail: bool = False) -> None:
        self.mime = mime
        self.fail = fail
        self.calls: list[Path] = []

    def mime_type(self, path: str | Path) -> str:
        self.calls.append(Path(path))
        if self.fail:
            raise TypeDetectionError("Failed to determine file type: fake failure")
        return self.mime


class RecordingOwnershipChanger:
    """Records ownership changes instead of calling chown."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[Path, str]] = []

    def change(self, path: str | Path, user: str) -> None:
        self.calls.append((Path(path), user))
        if self.fail:
            raise OwnershipError("failed to change ownership: exit status 1", output="invalid user")


@pytest.fixture
def image_detector() -> FakeTypeDetector:
    return FakeTypeDetector("image/png")


@pytest.fixture
def ownership() -> RecordingOwnershipChanger:
    return RecordingOwnershipChanger()


# ============================================================================
# Log Capture
# ============================================================================


@pytest.fixture
def log_records() -> Iterator[list[dict[str, Any]]]:
    """Capture loguru records emitted during the test."""
    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


def messages_at(records: list[dict[str, Any]], level: str) -> list[str]:
    return [r["message"] for r in records if r["level"].name == level]
