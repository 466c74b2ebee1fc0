"""Validation helpers for user inputs."""

from __future__ import annotations

from typing import Optional

from ..core import DEFAULT_TOLERANCE, ColorKey
from ..core.errors import ValidationError


def _parse_int(value: str, field: str, minimum: int) -> int:
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise ValidationError(f"{field} must be a whole number, got {value!r}") from exc
    if parsed < minimum:
        bound = "greater than zero" if minimum == 1 else f"at least {minimum}"
        raise ValidationError(f"{field} must be {bound}")
    return parsed


def parse_optional_int(value: str | None, field: str) -> Optional[int]:
    """Positive integer, or None for a blank value."""

    if value is None or not value.strip():
        return None
    return _parse_int(value, field, minimum=1)


def parse_non_negative_int(value: str, field: str) -> int:
    return _parse_int(value, field, minimum=0)


def parse_color_key(value: str, default_tolerance: int = DEFAULT_TOLERANCE) -> ColorKey:
    """Parse ``'R,G,B'`` or ``'R,G,B,TOLERANCE'`` into a ColorKey."""

    parts = [p.strip() for p in value.split(",")]
    if len(parts) not in (3, 4):
        raise ValidationError("Color key must be R,G,B[,TOLERANCE]")
    try:
        numbers = [int(p) for p in parts]
    except ValueError as exc:
        raise ValidationError("Color key must be numeric R,G,B[,TOLERANCE]") from exc
    if len(numbers) == 3:
        numbers.append(default_tolerance)
    r, g, b, tolerance = numbers
    return ColorKey(r, g, b, tolerance)


def parse_cut_list(value: str, field: str = "Cuts") -> list[int]:
    """Parse a comma-separated list of pixel positions like ``'0,32,64'``."""

    parts = [p.strip() for p in value.split(",") if p.strip()]
    if len(parts) < 2:
        raise ValidationError(f"{field} need at least the two boundary positions")
    try:
        return [int(p) for p in parts]
    except ValueError as exc:
        raise ValidationError(f"{field} must be comma-separated integers") from exc


def validate_grid(columns: Optional[int], rows: Optional[int]) -> None:
    for name, count in (("Columns", columns), ("Rows", rows)):
        if count is not None and count < 1:
            raise ValidationError(f"{name} must be greater than zero")


def validate_slice_mode(
    rows: Optional[int],
    columns: Optional[int],
    horizontal_cuts: Optional[list[int]],
    vertical_cuts: Optional[list[int]],
) -> None:
    """Require either a rows/columns grid or explicit cut lists, not a mix."""

    grid = rows is not None or columns is not None
    cuts = horizontal_cuts is not None or vertical_cuts is not None
    if grid and cuts:
        raise ValidationError("Use either rows/columns or explicit cuts, not both")
    if cuts and (horizontal_cuts is None or vertical_cuts is None):
        raise ValidationError("Provide both horizontal and vertical cuts")
    validate_grid(columns, rows)
