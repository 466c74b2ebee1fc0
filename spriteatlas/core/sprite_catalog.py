"""Characters, actions and frames: the ordered catalogue that feeds the atlas compiler."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Sequence

from PIL import Image

from . import NamedSprite, PixelBuffer
from .errors import ValidationError
from ..utils.image_io import buffer_to_image, image_to_buffer

logger = logging.getLogger(__name__)

DEFAULT_ACTION_NAMES = ("idle", "run", "atk", "hurt", "magic", "die")


@dataclass(frozen=True)
class Frame:
    """One animation frame and its authored offset."""

    buffer: PixelBuffer
    offset_x: int = 0
    offset_y: int = 0


@dataclass
class Action:
    name: str
    frames: list[Frame] = field(default_factory=list)


@dataclass
class Character:
    """A named set of actions, each an ordered list of frames."""

    name: str
    actions: list[Action] = field(default_factory=list)

    def action(self, name: str) -> Action:
        for action in self.actions:
            if action.name == name:
                return action
        raise KeyError(name)

    def set_offset(
        self,
        action_index: int,
        frame_index: int,
        offset_x: int,
        offset_y: int,
        sync_column: bool = False,
    ) -> None:
        """Set a frame's offset; with ``sync_column`` the same frame index in every action changes."""

        targets = self.actions if sync_column else [self.actions[action_index]]
        for action in targets:
            if frame_index < len(action.frames):
                action.frames[frame_index] = replace(
                    action.frames[frame_index], offset_x=offset_x, offset_y=offset_y
                )

    def to_named_sprites(self) -> list[NamedSprite]:
        """Flatten to ``<character>_<action>_<index>`` sprites in catalogue order."""

        return [
            NamedSprite(
                name=f"{self.name}_{action.name}_{index}",
                buffer=frame.buffer,
                offset_x=frame.offset_x,
                offset_y=frame.offset_y,
            )
            for action in self.actions
            for index, frame in enumerate(action.frames)
        ]


def action_name_for_row(row: int, names: Sequence[str] = DEFAULT_ACTION_NAMES) -> str:
    return names[row] if row < len(names) else f"action_{row + 1}"


def group_tiles_by_action(
    tiles: Sequence[PixelBuffer],
    rows: int,
    columns: int,
    character: str,
    names: Sequence[str] = DEFAULT_ACTION_NAMES,
) -> Character:
    """Turn row-major sheet tiles into a character: each row an action, each column a frame."""

    if rows < 1 or columns < 1:
        raise ValidationError("Rows and columns must be greater than zero")
    if len(tiles) != rows * columns:
        raise ValidationError(f"Expected {rows * columns} tiles for a {rows}x{columns} grid, got {len(tiles)}")

    actions = [
        Action(
            name=action_name_for_row(row, names),
            frames=[Frame(tiles[row * columns + column]) for column in range(columns)],
        )
        for row in range(rows)
    ]
    logger.debug("Grouped %s tiles into %s actions for %s", len(tiles), len(actions), character)
    return Character(name=character, actions=actions)


def render_offset_frames(frames: Sequence[Frame]) -> list[PixelBuffer]:
    """Draw each frame, shifted by its offset, onto a transparent canvas shared by all frames.

    The canvas is wide and tall enough for the largest frame pushed by its offset in either
    direction; frames are centred before the offset is applied.
    """

    if not frames:
        return []
    canvas_w = max(f.buffer.width + abs(f.offset_x) * 2 for f in frames)
    canvas_h = max(f.buffer.height + abs(f.offset_y) * 2 for f in frames)

    rendered = []
    for frame in frames:
        canvas = Image.new("RGBA", (canvas_w, canvas_h), (0, 0, 0, 0))
        left = (canvas_w - frame.buffer.width) // 2 + frame.offset_x
        top = (canvas_h - frame.buffer.height) // 2 + frame.offset_y
        canvas.paste(buffer_to_image(frame.buffer), (left, top))
        rendered.append(image_to_buffer(canvas))
    return rendered
