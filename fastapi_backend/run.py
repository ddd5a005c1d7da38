"""
Uvicorn launcher for the FastAPI app.

Reads host and port from Settings (env/.env) and starts the server through the
application factory. This binds to 0.0.0.0:3000 by default and can be used in
environments that prefer `python run.py` over a shell uvicorn command.
"""

import os
from contextlib import suppress

import uvicorn  # type: ignore

from inventory_api.core.config import get_settings
from inventory_api.core.logger import get_logger

logger = get_logger(__name__)


def _get_bind() -> tuple:
    """
    Resolve the host/port to bind:
    - Prefer Settings.HOST / Settings.PORT (pydantic BaseSettings reads .env/env automatically)
    - Fallback to HOST / PORT env vars if settings cannot be loaded
    - Default to 0.0.0.0:3000
    """
    try:
        settings = get_settings()
        return settings.HOST, int(settings.PORT or 3000)
    except Exception:
        host = os.getenv("HOST", "0.0.0.0")
        with suppress(Exception):
            return host, int(os.getenv("PORT", "3000"))
        return host, 3000


# PUBLIC_INTERFACE
def main() -> None:
    """Start the FastAPI application with uvicorn."""
    host, port = _get_bind()
    logger.info("Server is running", extra={"url": f"http://{host}:{port}"})
    uvicorn.run(
        "inventory_api.api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=bool(os.getenv("UVICORN_RELOAD", "").lower() in ("1", "true", "yes")),
        log_level="info",
    )


if __name__ == "__main__":
    main()
