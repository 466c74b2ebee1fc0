"""Color-keyed transparency: strip background colors from a pixel buffer."""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from . import ColorKey, PixelBuffer

logger = logging.getLogger(__name__)

# Distance between black and white in RGB space; tolerance 100 covers all of it.
MAX_COLOR_DISTANCE = math.sqrt(3 * 255**2)

NO_MATCH = -1


def tolerance_radius(key: ColorKey) -> float:
    """Return the RGB distance a key's tolerance percentage stands for."""

    return key.tolerance / 100 * MAX_COLOR_DISTANCE


def match_keys(buffer: PixelBuffer, keys: Sequence[ColorKey]) -> np.ndarray:
    """Return, per pixel, the index of the first key that matches it.

    Keys are tried in list order and a pixel belongs to the first key within its radius;
    later keys never reclaim it. Pixels no key matches hold ``NO_MATCH``. Alpha is ignored.
    """

    rgb = buffer.to_array()[..., :3].astype(np.float64)
    owners = np.full((buffer.height, buffer.width), NO_MATCH, dtype=np.int32)
    unclaimed = np.ones(owners.shape, dtype=bool)

    for index, key in enumerate(keys):
        distance = np.sqrt(((rgb - np.array(key.rgb, dtype=np.float64)) ** 2).sum(axis=-1))
        hit = unclaimed & (distance <= tolerance_radius(key))
        owners[hit] = index
        unclaimed &= ~hit
        if not unclaimed.any():
            break
    return owners


def remove_colors(buffer: PixelBuffer, keys: Sequence[ColorKey]) -> PixelBuffer:
    """Return a copy of ``buffer`` with every keyed pixel's alpha set to 0."""

    buffer.validate()
    if not keys:
        return PixelBuffer(buffer.width, buffer.height, buffer.pixels)

    array = buffer.to_array()
    owners = match_keys(buffer, keys)
    array[..., 3][owners != NO_MATCH] = 0
    logger.debug(
        "Cleared %s of %s pixels with %s color keys",
        int((owners != NO_MATCH).sum()),
        owners.size,
        len(keys),
    )
    return PixelBuffer.from_array(array)
