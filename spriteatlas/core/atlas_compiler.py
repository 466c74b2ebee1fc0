"""Texture atlas composition: pack named sprites and describe where they landed."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Sequence

import numpy as np

from . import DEFAULT_IMAGE_NAME, Atlas, FrameRecord, NamedSprite, PixelBuffer
from .errors import DuplicateSpriteNameError, EmptyInputError, ValidationError
from .packer import MAX_BIN_EDGE, MIN_BIN_EDGE, pack_boxes

logger = logging.getLogger(__name__)


def padded_sizes(sprites: Sequence[NamedSprite], padding: int) -> list[tuple[int, int]]:
    """Return each sprite's packing box, its own size plus ``padding`` on every side."""

    return [(s.buffer.width + 2 * padding, s.buffer.height + 2 * padding) for s in sprites]


def _check_sprites(sprites: Sequence[NamedSprite], padding: int) -> None:
    if not sprites:
        raise EmptyInputError("No sprites to pack")
    if padding < 0:
        raise ValidationError(f"Padding must be zero or greater, got {padding}")
    duplicates = [name for name, count in Counter(s.name for s in sprites).items() if count > 1]
    if duplicates:
        raise DuplicateSpriteNameError(duplicates)
    for sprite in sprites:
        sprite.buffer.validate()


def compile_atlas(
    sprites: Sequence[NamedSprite],
    padding: int,
    image_name: str = DEFAULT_IMAGE_NAME,
    min_edge: int = MIN_BIN_EDGE,
    max_edge: int = MAX_BIN_EDGE,
) -> Atlas:
    """Pack ``sprites`` into one image and build a frame record per sprite.

    Every sprite is copied verbatim at its packed corner plus ``padding``; the atlas is
    cropped to the placed boxes. Either the whole atlas is returned or an error is raised.
    """

    _check_sprites(sprites, padding)
    result = pack_boxes(padded_sizes(sprites, padding), min_edge=min_edge, max_edge=max_edge)

    canvas = np.zeros((result.height, result.width, 4), dtype=np.uint8)
    frames: dict[str, FrameRecord] = {}
    for placement in result.placements:
        sprite = sprites[placement.sprite_index]
        x = placement.x + padding
        y = placement.y + padding
        width, height = sprite.buffer.size
        canvas[y : y + height, x : x + width] = sprite.buffer.to_array()
        frames[sprite.name] = FrameRecord(
            x=x,
            y=y,
            width=width,
            height=height,
            offset_x=sprite.offset_x,
            offset_y=sprite.offset_y,
        )

    logger.info(
        "Compiled %s sprites into %sx%s atlas (bin %s, padding %s)",
        len(sprites),
        result.width,
        result.height,
        result.bin_edge,
        padding,
    )
    return Atlas(image=PixelBuffer.from_array(canvas), frames=frames, image_name=image_name)


def extract_frame(atlas: Atlas, name: str) -> PixelBuffer:
    """Crop a sprite back out of the atlas using its frame rectangle."""

    record = atlas.frames[name]
    array = atlas.image.to_array()
    return PixelBuffer.from_array(array[record.y : record.y + record.height, record.x : record.x + record.width])
