"""Entry point for the sprite atlas web service."""

from __future__ import annotations

import logging
import os
import sys


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(name)s: %(message)s",
    )


def run() -> int:
    """Serve the API with uvicorn."""

    import uvicorn

    configure_logging()
    host = os.environ.get("SPRITEATLAS_HOST", "127.0.0.1")
    port = int(os.environ.get("SPRITEATLAS_PORT", "8000"))
    uvicorn.run("spriteatlas.web.server:app", host=host, port=port)
    return 0


if __name__ == "__main__":
    sys.exit(run())
