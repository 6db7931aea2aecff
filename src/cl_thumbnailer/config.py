"""Runtime configuration loaded once from a .env file and the environment."""

import os
from collections.abc import Iterator, Mapping
from enum import StrEnum
from pathlib import Path
from typing import Literal

from dotenv import dotenv_values
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

DEFAULT_ENV = ".env"


class SizeLabel(StrEnum):
    S = "s"
    M = "m"
    L = "l"
    XL = "xl"

    @property
    def env_key(self) -> str:
        return f"DIMENSION_{self.value.upper()}"


# Labels that receive a watermark when watermarking is on.
WATERMARKED_SIZES: frozenset[SizeLabel] = frozenset({SizeLabel.M, SizeLabel.L, SizeLabel.XL})


class ThumbnailerConfig(BaseModel):
    """Immutable configuration for one run.

    Attributes:
        output_base_dir: Root directory; each size writes into a sub-directory
        owner_user: User (and group) that receives ownership of every output
        watermark_file: Watermark image, or None when not configured
        dimensions: Raw pixel-width strings keyed by size label
        mime_detector: Which type detector backs the image check
    """

    model_config = ConfigDict(frozen=True)

    output_base_dir: Path
    owner_user: str = Field(..., min_length=1)
    watermark_file: Path | None = None
    dimensions: dict[SizeLabel, str] = Field(default_factory=dict)
    mime_detector: Literal["file", "magic"] = "file"

    @field_validator("output_base_dir", mode="before")
    @classmethod
    def validate_output_base_dir(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            raise ValueError("OUTPUT_BASE_DIR must not be empty")
        return v

    @field_validator("watermark_file", mode="before")
    @classmethod
    def empty_watermark_is_none(cls, v: object) -> object:
        if v == "":
            return None
        return v

    def dimension_for(self, label: SizeLabel) -> str:
        return self.dimensions.get(label, "")

    def output_dir_for(self, label: SizeLabel) -> Path:
        return self.output_base_dir / label.value


class SizeSelection(BaseModel):
    """Which size variants to produce."""

    model_config = ConfigDict(frozen=True)

    s: bool = False
    m: bool = False
    l: bool = False  # noqa: E741
    xl: bool = False

    @classmethod
    def from_flags(
        cls,
        *,
        all_sizes: bool = False,
        s: bool = False,
        m: bool = False,
        l: bool = False,  # noqa: E741
        xl: bool = False,
    ) -> "SizeSelection":
        return cls(s=s or all_sizes, m=m or all_sizes, l=l or all_sizes, xl=xl or all_sizes)

    def is_enabled(self, label: SizeLabel) -> bool:
        return bool(getattr(self, label.value))

    def enabled(self) -> Iterator[SizeLabel]:
        for label in SizeLabel:
            if self.is_enabled(label):
                yield label


def read_env_file(env_path: str | Path) -> dict[str, str]:
    """Parse a .env file into a plain dict.

    Raises:
        ConfigError: If the file does not exist or cannot be read
    """
    path = Path(env_path)
    if not path.is_file():
        raise ConfigError(f"Failed to load .env file: {path} does not exist")

    try:
        raw = dotenv_values(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to load .env file: {exc}") from exc

    # Keys declared without "=" come back as None
    return {key: value for key, value in raw.items() if value is not None}


def _require(values: Mapping[str, str], key: str) -> str:
    value = values.get(key, "")
    if not value:
        raise ConfigError(f"Environment variable {key} is not set. Exiting.")
    logger.info(f"Loaded environment variable: {key}={value}")
    return value


def load_config(
    env_path: str | Path = DEFAULT_ENV,
    environ: Mapping[str, str] | None = None,
) -> ThumbnailerConfig:
    """Build the run configuration from a .env file and the process environment.

    Values already present in ``environ`` win over the file, the same way a
    non-overriding .env loader behaves. ``environ`` defaults to ``os.environ``
    and is never modified.

    Raises:
        ConfigError: If the env file cannot be loaded or a required key is empty
    """
    logger.info(f"Loading environment variables from {env_path}")
    file_values = read_env_file(env_path)

    values: dict[str, str] = {**file_values, **(os.environ if environ is None else environ)}

    output_base_dir = _require(values, "OUTPUT_BASE_DIR")
    owner_user = _require(values, "OWNER_USER")

    try:
        return ThumbnailerConfig(
            output_base_dir=Path(output_base_dir),
            owner_user=owner_user,
            watermark_file=values.get("WATERMARK_FILE", ""),
            dimensions={label: values.get(label.env_key, "") for label in SizeLabel},
            mime_detector=values.get("MIME_DETECTOR") or "file",
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
