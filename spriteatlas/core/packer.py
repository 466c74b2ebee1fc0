"""Rectangle bin packing with a growing square bin."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from . import Placement
from .errors import PackingOverflowError

logger = logging.getLogger(__name__)

MIN_BIN_EDGE = 256
MAX_BIN_EDGE = 4096


@dataclass(frozen=True)
class FreeSection:
    """An empty region of the bin that a box may be placed in."""

    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    def fits(self, width: int, height: int) -> bool:
        return width <= self.width and height <= self.height


@dataclass(frozen=True)
class PackResult:
    """Placements for every box plus the bin edge and tight bounds they used."""

    placements: list[Placement]
    bin_edge: int
    width: int
    height: int


def _split(section: FreeSection, width: int, height: int) -> list[FreeSection]:
    """Cut the remainder of ``section`` after a box lands in its top-left corner.

    Of the two guillotine cuts, keep the one whose larger leftover is bigger.
    """

    wide = [
        FreeSection(section.x + width, section.y, section.width - width, height),
        FreeSection(section.x, section.y + height, section.width, section.height - height),
    ]
    tall = [
        FreeSection(section.x + width, section.y, section.width - width, section.height),
        FreeSection(section.x, section.y + height, width, section.height - height),
    ]
    best_wide = max(s.area for s in wide)
    best_tall = max(s.area for s in tall)
    chosen = tall if best_tall > best_wide else wide
    return [s for s in chosen if s.width > 0 and s.height > 0]


def _packing_order(sizes: Sequence[tuple[int, int]]) -> list[int]:
    # Largest area first; equal boxes keep their input order.
    return sorted(
        range(len(sizes)),
        key=lambda i: (-sizes[i][0] * sizes[i][1], -max(sizes[i]), -sizes[i][1], i),
    )


def try_pack(sizes: Sequence[tuple[int, int]], edge: int) -> Optional[list[Placement]]:
    """Pack every ``(width, height)`` box into one ``edge`` x ``edge`` bin, or return None.

    Each box goes into the free section that leaves the least unused area around it, ties
    broken by the smallest bounding box of everything placed so far, then top-left first.
    """

    if any(w > edge or h > edge for w, h in sizes):
        return None
    if sum(w * h for w, h in sizes) > edge * edge:
        return None

    free = [FreeSection(0, 0, edge, edge)]
    placements: dict[int, Placement] = {}
    used_w = used_h = 0

    for index in _packing_order(sizes):
        width, height = sizes[index]
        best = None
        best_score = None
        for position, section in enumerate(free):
            if not section.fits(width, height):
                continue
            bound_w = max(used_w, section.x + width)
            bound_h = max(used_h, section.y + height)
            score = (
                section.area - width * height,
                bound_w * bound_h,
                max(bound_w, bound_h),
                section.y,
                section.x,
            )
            if best_score is None or score < best_score:
                best, best_score = position, score
        if best is None:
            return None

        section = free.pop(best)
        free.extend(_split(section, width, height))
        placements[index] = Placement(index, section.x, section.y, width, height)
        used_w = max(used_w, section.x + width)
        used_h = max(used_h, section.y + height)

    return [placements[i] for i in range(len(sizes))]


def pack_boxes(
    sizes: Sequence[tuple[int, int]],
    min_edge: int = MIN_BIN_EDGE,
    max_edge: int = MAX_BIN_EDGE,
) -> PackResult:
    """Pack boxes into the smallest power-of-two bin from ``min_edge`` up to ``max_edge``.

    The first bin size that holds every box wins; the reported width and height are the
    tight bounds of the placed boxes and may be smaller than the bin.
    """

    edge = min_edge
    while edge <= max_edge:
        placements = try_pack(sizes, edge)
        if placements is not None:
            width = max((p.right for p in placements), default=0)
            height = max((p.bottom for p in placements), default=0)
            logger.debug("Packed %s boxes into %sx%s bin, used %sx%s", len(sizes), edge, edge, width, height)
            return PackResult(placements=placements, bin_edge=edge, width=width, height=height)
        logger.debug("%s boxes do not fit a %sx%s bin", len(sizes), edge, edge)
        edge *= 2
    raise PackingOverflowError(len(sizes), max_edge)
