"""Sheet-to-atlas pipeline: color keys, slicing, action grouping, packing."""

from __future__ import annotations

import logging
from pathlib import Path

from . import Atlas, PipelineSettings, PixelBuffer
from . import atlas_compiler, color_key, grid_slicer, manifest_writer, sprite_catalog
from .errors import ValidationError
from ..utils import image_io

logger = logging.getLogger(__name__)


def resolve_cuts(buffer: PixelBuffer, settings: PipelineSettings) -> tuple[list[int], list[int]]:
    """Return explicit cuts from settings, or even cuts for the rows/columns grid."""

    if settings.horizontal_cuts is not None:
        horizontal = list(settings.horizontal_cuts)
    else:
        horizontal = grid_slicer.even_cuts(buffer.height, settings.rows or 1)
    if settings.vertical_cuts is not None:
        vertical = list(settings.vertical_cuts)
    else:
        vertical = grid_slicer.even_cuts(buffer.width, settings.columns or 1)
    return horizontal, vertical


def build_character(buffer: PixelBuffer, settings: PipelineSettings) -> sprite_catalog.Character:
    """Key out backgrounds, slice the sheet, and group its rows into actions."""

    keyed = color_key.remove_colors(buffer, settings.color_keys)
    horizontal, vertical = resolve_cuts(keyed, settings)
    tiles = grid_slicer.slice_grid(keyed, horizontal, vertical)
    return sprite_catalog.group_tiles_by_action(
        tiles, rows=len(horizontal) - 1, columns=len(vertical) - 1, character=settings.character
    )


def run_sheet_pipeline(settings: PipelineSettings) -> tuple[Atlas, Path, Path]:
    """Load a sheet, turn it into an atlas, and write image and JSON to the output directory."""

    if not settings.character:
        raise ValidationError("Character name must not be empty")
    buffer = image_io.load_buffer(settings.input_path)
    logger.info("Processing %s (%sx%s)", settings.input_path, buffer.width, buffer.height)

    character = build_character(buffer, settings)
    atlas = atlas_compiler.compile_atlas(
        character.to_named_sprites(), settings.padding, image_name=settings.image_name
    )
    image_path, manifest_path = manifest_writer.write_atlas(atlas, settings.output_dir)
    return atlas, image_path, manifest_path
