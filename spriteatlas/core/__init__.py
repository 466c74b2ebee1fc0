"""Core data model for the sprite atlas pipeline."""

__all__ = [
    "PixelBuffer",
    "ColorKey",
    "NamedSprite",
    "Placement",
    "FrameRecord",
    "Atlas",
    "PipelineSettings",
    "DEFAULT_TOLERANCE",
    "DEFAULT_PADDING",
    "DEFAULT_IMAGE_NAME",
]

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import numpy as np

from .errors import DecodeError, ValidationError

DEFAULT_TOLERANCE = 30
DEFAULT_PADDING = 2
DEFAULT_IMAGE_NAME = "atlas.png"


@dataclass(frozen=True)
class PixelBuffer:
    """Decoded RGBA image, row-major, four bytes per pixel."""

    width: int
    height: int
    pixels: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.pixels, bytes):
            object.__setattr__(self, "pixels", bytes(self.pixels))

    @classmethod
    def blank(cls, width: int, height: int) -> "PixelBuffer":
        """Return a fully transparent buffer."""

        return cls(width, height, bytes(width * height * 4))

    @classmethod
    def filled(cls, width: int, height: int, rgba: tuple[int, int, int, int]) -> "PixelBuffer":
        """Return a buffer where every pixel is ``rgba``."""

        return cls(width, height, bytes(rgba) * (width * height))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Build a buffer from an ``(height, width, 4)`` uint8 array."""

        if array.ndim != 3 or array.shape[2] != 4:
            raise DecodeError(0, 0, array.size, reason=f"expected HxWx4 array, got shape {array.shape}")
        height, width = array.shape[:2]
        return cls(width, height, np.ascontiguousarray(array, dtype=np.uint8).tobytes())

    def validate(self) -> "PixelBuffer":
        """Raise DecodeError unless ``len(pixels) == width * height * 4``."""

        if self.width < 0 or self.height < 0:
            raise DecodeError(self.width, self.height, len(self.pixels), reason="negative dimensions")
        if len(self.pixels) != self.width * self.height * 4:
            raise DecodeError(self.width, self.height, len(self.pixels))
        return self

    def to_array(self) -> np.ndarray:
        """Return a writable ``(height, width, 4)`` copy of the pixels."""

        self.validate()
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(self.height, self.width, 4).copy()

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        offset = (y * self.width + x) * 4
        r, g, b, a = self.pixels[offset : offset + 4]
        return (r, g, b, a)

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class ColorKey:
    """One background color to strip, with a tolerance in percent of the RGB cube diagonal."""

    r: int
    g: int
    b: int
    tolerance: int = DEFAULT_TOLERANCE

    def __post_init__(self) -> None:
        for channel, value in (("r", self.r), ("g", self.g), ("b", self.b)):
            if not 0 <= value <= 255:
                raise ValidationError(f"Color key channel {channel} must be between 0 and 255, got {value}")
        if not 0 <= self.tolerance <= 100:
            raise ValidationError(f"Color key tolerance must be between 0 and 100, got {self.tolerance}")

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


@dataclass(frozen=True)
class NamedSprite:
    """A frame to pack, keyed by its unique name.

    The offset is an authored nudge for animation compositing and never affects where the
    packer places the sprite.
    """

    name: str
    buffer: PixelBuffer
    offset_x: int = 0
    offset_y: int = 0


@dataclass(frozen=True)
class Placement:
    """Top-left corner of a padded box inside the working bin."""

    sprite_index: int
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def overlaps(self, other: "Placement") -> bool:
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )


@dataclass(frozen=True)
class FrameRecord:
    """Where one sprite landed in the atlas, in engine JSON terms."""

    x: int
    y: int
    width: int
    height: int
    offset_x: int = 0
    offset_y: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "frame": {"x": self.x, "y": self.y, "w": self.width, "h": self.height},
            "rotated": False,
            "trimmed": False,
            "spriteSourceSize": {"x": 0, "y": 0, "w": self.width, "h": self.height},
            "sourceSize": {"w": self.width, "h": self.height},
            "pivot": {"x": 0.5, "y": 0.5},
            "offset": {"x": self.offset_x, "y": self.offset_y},
        }


@dataclass(frozen=True)
class Atlas:
    """A composed atlas image plus its per-frame metadata."""

    image: PixelBuffer
    frames: dict[str, FrameRecord]
    image_name: str = DEFAULT_IMAGE_NAME

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def to_metadata(self) -> dict[str, Any]:
        """Return the atlas JSON document with frames in lexical name order."""

        width, height = self.size
        return {
            "frames": {name: self.frames[name].to_dict() for name in sorted(self.frames)},
            "meta": {"image": self.image_name, "size": {"w": width, "h": height}, "scale": 1},
        }

    def metadata_json(self) -> str:
        return json.dumps(self.to_metadata(), indent=2)


@dataclass
class PipelineSettings:
    """User-configurable settings for one sheet-to-atlas run."""

    input_path: Path
    output_dir: Path
    color_keys: list[ColorKey] = field(default_factory=list)
    horizontal_cuts: Optional[list[int]] = None
    vertical_cuts: Optional[list[int]] = None
    rows: Optional[int] = None
    columns: Optional[int] = None
    padding: int = DEFAULT_PADDING
    character: str = "character"
    image_name: str = DEFAULT_IMAGE_NAME
