from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

PRESETS = ("default", "photo", "picture", "drawing", "icon", "text")


@dataclass(frozen=True)
class ResizeOptions:
    width: int
    height: int


@dataclass(frozen=True)
class CropOptions:
    x_position: int
    y_position: int
    width: int
    height: int


@dataclass(frozen=True)
class LosslessOptions:
    """Lossless encoding.

    ``level`` (0-9) selects a predefined lossless setting and wins over
    ``preserve_transparency``. Without a level the plain lossless mode is
    used, optionally keeping the RGB values under fully transparent pixels.
    """

    level: int | None = None
    preserve_transparency: bool = False


@dataclass(frozen=True)
class CompressOptions:
    quality: int | None = None
    resize: ResizeOptions | None = None
    crop: CropOptions | None = None
    lossless: LosslessOptions | None = None
    near_lossless: int | None = None
    alpha_quality: int | None = None
    preset: str | None = None
    compression_level: int | None = None
    multi_threaded: bool = False
    low_memory: bool = False

    def __post_init__(self) -> None:
        if self.preset is not None and self.preset not in PRESETS:
            raise ValueError(f"Unknown preset: {self.preset!r} (expected one of {', '.join(PRESETS)})")


@dataclass(frozen=True)
class CompressResult:
    log: str
    output_path: Path
