"""Boundary-aware grid slicing of sprite sheets."""

from __future__ import annotations

import logging
import math
import numbers
from typing import Sequence

from . import PixelBuffer
from .errors import InvalidCutError

logger = logging.getLogger(__name__)


def even_cuts(length: int, parts: int) -> list[int]:
    """Split ``[0, length]`` into ``parts`` near-equal spans, boundaries included.

    Interior positions round half up, so a 10px axis in 4 parts gives ``[0, 3, 5, 8, 10]``.
    """

    if parts < 1:
        raise InvalidCutError("generated", [], f"need at least one part, got {parts}")
    if length < parts:
        raise InvalidCutError("generated", [], f"cannot split {length}px into {parts} parts")
    interior = [math.floor(length / parts * i + 0.5) for i in range(1, parts)]
    return [0, *interior, length]


def validate_cuts(cuts: Sequence[int], axis_length: int, axis: str) -> list[int]:
    """Check one axis' cut list and return it as a plain list."""

    values = list(cuts)
    if len(values) < 2:
        raise InvalidCutError(axis, values, "need both boundary cuts")
    if any(isinstance(v, bool) or not isinstance(v, numbers.Integral) for v in values):
        raise InvalidCutError(axis, values, "positions must be integers")
    values = [int(v) for v in values]
    if values[0] < 0:
        raise InvalidCutError(axis, values, "first cut is before the image start")
    if values[-1] > axis_length:
        raise InvalidCutError(axis, values, f"last cut is past the image end ({axis_length})")
    for previous, current in zip(values, values[1:]):
        if current <= previous:
            raise InvalidCutError(axis, values, f"{current} does not follow {previous}; tiles would be empty")
    return values


def tile_boxes(horizontal_cuts: Sequence[int], vertical_cuts: Sequence[int]) -> list[tuple[int, int, int, int]]:
    """Return ``(x, y, width, height)`` for every tile, row-major.

    Horizontal cuts are y positions and vertical cuts are x positions.
    """

    boxes = []
    for top, bottom in zip(horizontal_cuts, horizontal_cuts[1:]):
        for left, right in zip(vertical_cuts, vertical_cuts[1:]):
            boxes.append((left, top, right - left, bottom - top))
    return boxes


def slice_grid(
    buffer: PixelBuffer,
    horizontal_cuts: Sequence[int],
    vertical_cuts: Sequence[int],
) -> list[PixelBuffer]:
    """Crop ``buffer`` into tiles between adjacent cuts.

    Pixels outside the first and last cut on either axis are dropped.
    """

    buffer.validate()
    rows = validate_cuts(horizontal_cuts, buffer.height, "horizontal")
    columns = validate_cuts(vertical_cuts, buffer.width, "vertical")

    array = buffer.to_array()
    tiles = [
        PixelBuffer.from_array(array[y : y + height, x : x + width])
        for x, y, width, height in tile_boxes(rows, columns)
    ]
    logger.debug(
        "Sliced %sx%s image into %s tiles (%s rows x %s columns)",
        buffer.width,
        buffer.height,
        len(tiles),
        len(rows) - 1,
        len(columns) - 1,
    )
    return tiles
