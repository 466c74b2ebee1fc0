"""Pillow-backed conversion between image files and pixel buffers."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..core import PixelBuffer
from ..core.errors import DecodeError, ValidationError
from . import file_tools

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp", ".bmp", ".gif"}


def image_to_buffer(image: Image.Image) -> PixelBuffer:
    """Flatten a Pillow image to RGBA bytes."""

    rgba = image.convert("RGBA")
    return PixelBuffer(rgba.width, rgba.height, rgba.tobytes())


def buffer_to_image(buffer: PixelBuffer) -> Image.Image:
    """Wrap a pixel buffer in a new RGBA Pillow image."""

    buffer.validate()
    return Image.frombytes("RGBA", buffer.size, buffer.pixels)


def load_buffer(path: Path) -> PixelBuffer:
    """Decode an image file into a pixel buffer."""

    if not path.exists():
        raise ValidationError(f"Image not found: {path}")
    try:
        with Image.open(path) as image:
            buffer = image_to_buffer(image)
    except (UnidentifiedImageError, OSError) as exc:
        raise DecodeError(0, 0, 0, reason=f"could not decode {path}: {exc}") from exc
    logger.debug("Loaded %s (%sx%s)", path, buffer.width, buffer.height)
    return buffer


def save_buffer(buffer: PixelBuffer, path: Path) -> Path:
    """Persist a pixel buffer as PNG."""

    file_tools.ensure_directory(path.parent)
    buffer_to_image(buffer).save(path, format="PNG")
    return path
