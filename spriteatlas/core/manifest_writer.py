"""Writing atlases and sliced tiles to disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from . import Atlas, PixelBuffer
from ..utils import file_tools, image_io

logger = logging.getLogger(__name__)


def write_atlas(atlas: Atlas, output_dir: Path) -> tuple[Path, Path]:
    """Write the atlas image and its JSON next to each other.

    The JSON file shares the image's stem, so ``atlas.png`` pairs with ``atlas.json``.
    """

    file_tools.ensure_directory(output_dir)
    image_path = output_dir / atlas.image_name
    manifest_path = image_path.with_suffix(".json")

    image_io.save_buffer(atlas.image, image_path)
    manifest_path.write_text(atlas.metadata_json(), encoding="utf-8")
    logger.info("Wrote atlas to %s and manifest to %s", image_path, manifest_path)
    return image_path, manifest_path


def write_tiles(tiles: Iterable[PixelBuffer], output_dir: Path) -> list[Path]:
    """Write tiles as ``0.png``, ``1.png``, ... in the order given."""

    file_tools.ensure_directory(output_dir)
    paths = [image_io.save_buffer(tile, output_dir / f"{index}.png") for index, tile in enumerate(tiles)]
    logger.info("Wrote %s tiles to %s", len(paths), output_dir)
    return paths
