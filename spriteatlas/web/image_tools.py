"""Base64 PNG data-URL transport for the web surface."""

from __future__ import annotations

import base64
import binascii
import io
import logging

from PIL import Image, UnidentifiedImageError

from ..core import PixelBuffer
from ..core.errors import DecodeError
from ..utils.image_io import buffer_to_image, image_to_buffer

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:image/png;base64,"


def decode_data_url(value: str) -> PixelBuffer:
    """Decode a PNG data URL (prefix optional) into a pixel buffer."""

    payload = value.strip()
    if payload.startswith("data:"):
        _, _, payload = payload.partition(",")
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(0, 0, 0, reason=f"invalid base64 payload: {exc}") from exc
    try:
        with Image.open(io.BytesIO(raw)) as image:
            return image_to_buffer(image)
    except (UnidentifiedImageError, OSError) as exc:
        raise DecodeError(0, 0, len(raw), reason=f"undecodable image: {exc}") from exc


def encode_data_url(buffer: PixelBuffer) -> str:
    """Encode a pixel buffer as a PNG data URL."""

    stream = io.BytesIO()
    buffer_to_image(buffer).save(stream, format="PNG")
    return DATA_URL_PREFIX + base64.b64encode(stream.getvalue()).decode("ascii")
