"""Filesystem helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


def ensure_directory(directory: Path) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    logger.debug("Output directory ready: %s", directory)
    return directory


def default_output_path(image_path: Path, tag: str = "keyed") -> Path:
    """Return ``<stem>_<tag>.png`` next to the source image."""

    return image_path.with_name(f"{image_path.stem}_{tag}.png")


def list_files_with_extensions(directory: Path, extensions: set[str]) -> list[Path]:
    """Files directly inside ``directory`` whose suffix is in ``extensions``, by name."""

    return sorted(
        (entry for entry in directory.glob("*") if entry.is_file() and entry.suffix.lower() in extensions),
        key=lambda entry: entry.name,
    )


def expand_image_paths(paths: Iterable[Path], extensions: set[str]) -> list[Path]:
    """Replace directories with the matching files inside them, keeping argument order."""

    expanded: list[Path] = []
    for path in paths:
        if path.is_dir():
            expanded.extend(list_files_with_extensions(path, extensions))
        else:
            expanded.append(path)
    return expanded
