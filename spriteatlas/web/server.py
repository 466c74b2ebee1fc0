"""FastAPI surface for the sprite atlas pipeline."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field, field_validator
from starlette.concurrency import run_in_threadpool

from ..core import DEFAULT_IMAGE_NAME, DEFAULT_PADDING, DEFAULT_TOLERANCE, ColorKey, NamedSprite
from ..core import atlas_compiler, color_key, grid_slicer
from ..core.errors import PackingOverflowError, ProcessingError
from ..utils import validators
from . import image_tools

logger = logging.getLogger(__name__)

MAX_PAYLOAD_BYTES = int(os.environ.get("SPRITEATLAS_MAX_PAYLOAD_MB", "50")) * 1024 * 1024
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("SPRITEATLAS_ALLOWED_ORIGINS", "http://localhost:8000").split(",")
    if origin.strip()
]


class ColorKeyPayload(BaseModel):
    """One color to strip; tolerance is a percentage of the RGB cube diagonal."""

    r: int = Field(..., ge=0, le=255)
    g: int = Field(..., ge=0, le=255)
    b: int = Field(..., ge=0, le=255)
    tolerance: int = Field(DEFAULT_TOLERANCE, ge=0, le=100)

    def to_key(self) -> ColorKey:
        return ColorKey(self.r, self.g, self.b, self.tolerance)


class RemoveColorsRequest(BaseModel):
    image: str
    colors: list[ColorKeyPayload] = Field(default_factory=list)

    @field_validator("colors", mode="before")
    @classmethod
    def _parse_colors(cls, value):
        if value in (None, "", "null"):
            return []
        if not isinstance(value, list):
            raise ValueError("colors must be a list")
        parsed = []
        for item in value:
            if isinstance(item, str):
                key = validators.parse_color_key(item)
                item = {"r": key.r, "g": key.g, "b": key.b, "tolerance": key.tolerance}
            parsed.append(item)
        return parsed


class SliceRequest(BaseModel):
    """Cut positions are explicit lists or derived from an even rows x columns grid."""

    image: str
    horizontal_cuts: Optional[list[int]] = None
    vertical_cuts: Optional[list[int]] = None
    rows: Optional[int] = Field(None, ge=1)
    columns: Optional[int] = Field(None, ge=1)


class SpritePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    image: str
    offset_x: int = Field(0, alias="offsetX")
    offset_y: int = Field(0, alias="offsetY")


class AtlasRequest(BaseModel):
    sprites: list[SpritePayload]
    padding: int = Field(DEFAULT_PADDING, ge=0)
    image_name: str = DEFAULT_IMAGE_NAME


def _enforce_size_limit(request: Request) -> None:
    """Simple guardrail on payload size based on Content-Length."""

    content_length = request.headers.get("content-length")
    if not content_length:
        return
    try:
        size = int(content_length)
    except ValueError:
        return
    if size > MAX_PAYLOAD_BYTES:
        raise HTTPException(status_code=413, detail="Payload exceeds limit")


async def _run(func, *args):
    """Run a pipeline call off the event loop and map domain errors to HTTP errors."""

    try:
        return await run_in_threadpool(func, *args)
    except PackingOverflowError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ProcessingError as exc:
        logger.exception("Processing failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def _run_remove_colors(payload: RemoveColorsRequest) -> dict[str, str]:
    buffer = image_tools.decode_data_url(payload.image)
    keys = [color.to_key() for color in payload.colors]
    return {"image": image_tools.encode_data_url(color_key.remove_colors(buffer, keys))}


def _run_slice(payload: SliceRequest) -> dict[str, Any]:
    validators.validate_slice_mode(payload.rows, payload.columns, payload.horizontal_cuts, payload.vertical_cuts)
    buffer = image_tools.decode_data_url(payload.image)
    if payload.horizontal_cuts is not None and payload.vertical_cuts is not None:
        horizontal, vertical = payload.horizontal_cuts, payload.vertical_cuts
    else:
        horizontal = grid_slicer.even_cuts(buffer.height, payload.rows or 1)
        vertical = grid_slicer.even_cuts(buffer.width, payload.columns or 1)
    tiles = grid_slicer.slice_grid(buffer, horizontal, vertical)
    return {
        "images": [image_tools.encode_data_url(tile) for tile in tiles],
        "rows": len(horizontal) - 1,
        "columns": len(vertical) - 1,
    }


def _run_atlas(payload: AtlasRequest) -> dict[str, Any]:
    sprites = [
        NamedSprite(
            name=sprite.name,
            buffer=image_tools.decode_data_url(sprite.image),
            offset_x=sprite.offset_x,
            offset_y=sprite.offset_y,
        )
        for sprite in payload.sprites
    ]
    atlas = atlas_compiler.compile_atlas(sprites, payload.padding, image_name=payload.image_name)
    width, height = atlas.size
    return {
        "image_base64": image_tools.encode_data_url(atlas.image),
        "json": atlas.metadata_json(),
        "width": width,
        "height": height,
    }


def create_app() -> FastAPI:
    app = FastAPI(title="Sprite Atlas", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/remove-colors")
    async def remove_colors(payload: RemoveColorsRequest, request: Request) -> dict[str, str]:
        _enforce_size_limit(request)
        return await _run(_run_remove_colors, payload)

    @app.post("/api/slice")
    async def slice_image(payload: SliceRequest, request: Request) -> dict[str, Any]:
        _enforce_size_limit(request)
        return await _run(_run_slice, payload)

    @app.post("/api/atlas")
    async def create_atlas(payload: AtlasRequest, request: Request) -> dict[str, Any]:
        _enforce_size_limit(request)
        return await _run(_run_atlas, payload)

    return app


app = create_app()


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run("spriteatlas.web.server:app", host="0.0.0.0", port=8000, reload=True)
