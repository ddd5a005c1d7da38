"""
Convenience entrypoint to run the FastAPI app with uvicorn.

This allows environments that look for a top-level main.py to start the server
without custom commands. It binds to HOST (default 0.0.0.0) and PORT (default 3000).
"""

import os
from contextlib import suppress

import uvicorn  # type: ignore
from dotenv import load_dotenv

# Load environment variables from .env so HOST/PORT there apply (no raise if absent)
load_dotenv()


def _resolve_port() -> int:
    """Resolve the port from environment variable PORT or default to 3000."""
    with suppress(Exception):
        return int(os.getenv("PORT", "3000"))
    return 3000


# PUBLIC_INTERFACE
def main() -> None:
    """Start uvicorn for the FastAPI application on the resolved port."""
    # Use the factory path to avoid import side effects here
    uvicorn.run(
        "inventory_api.api.main:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=_resolve_port(),
        reload=bool(os.getenv("UVICORN_RELOAD", "").lower() in ("1", "true", "yes")),
        log_level="info",
    )


if __name__ == "__main__":
    main()
