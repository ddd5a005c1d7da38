#!/usr/bin/env python3
"""
Utility script to validate inventory backend readiness.

- Verifies requirements are importable (uvicorn, fastapi, sqlalchemy, multipart)
- Builds the app through 'inventory_api.api.main:create_app'
- Serves it in-process on 0.0.0.0:3000 (or PORT env) with uvicorn
- Checks GET /health, GET /health/db and GET /inventory over one connection
  and exits 0 when all answer, non-zero otherwise

This script is intended for local/CI diagnostics.
"""
import os
import sys
import time
import threading
import socket
import contextlib

# (path, fragment the body must contain)
CHECKS = [
    ("/health", '"ok"'),
    ("/health/db", '"ok"'),
    ("/inventory", "["),
]


def _port():
    with contextlib.suppress(Exception):
        return int(os.getenv("PORT", "3000"))
    return 3000


def _check_imports():
    for module in ("fastapi", "uvicorn", "sqlalchemy", "multipart"):
        try:
            __import__(module)
        except ImportError as exc:
            print(f"[verify] Missing dependency {module}: {exc}", file=sys.stderr)
            sys.exit(2)
    try:
        from inventory_api.api.main import create_app  # noqa: F401
    except Exception as exc:
        print(f"[verify] Failed to import inventory_api.api.main:create_app -> {exc}", file=sys.stderr)
        sys.exit(3)


def _wait_port(host: str, port: int, timeout: float = 10.0) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.settimeout(1.0)
            if s.connect_ex((host, port)) == 0:
                return True
        time.sleep(0.25)
    return False


def main():
    _check_imports()
    import http.client
    import uvicorn
    from inventory_api.api.main import create_app

    port = _port()
    server = uvicorn.Server(config=uvicorn.Config(create_app(), host="0.0.0.0", port=port, log_level="warning"))
    threading.Thread(target=server.run, daemon=True).start()

    if not _wait_port("127.0.0.1", port, timeout=15.0):
        print(f"[verify] Server did not open port {port}", file=sys.stderr)
        sys.exit(4)

    conn = http.client.HTTPConnection("127.0.0.1", port, timeout=5)
    path = None
    try:
        for path, fragment in CHECKS:
            conn.request("GET", path)
            resp = conn.getresponse()
            body = resp.read().decode("utf-8", errors="ignore")
            if resp.status != 200 or fragment not in body:
                print(f"[verify] GET {path} failed: {resp.status} {body}", file=sys.stderr)
                sys.exit(5)
            print(f"[verify] GET {path} passed.")
    except OSError as exc:
        print(f"[verify] Connection error during GET {path}: {exc}", file=sys.stderr)
        sys.exit(6)
    finally:
        with contextlib.suppress(Exception):
            conn.close()
        server.should_exit = True
    sys.exit(0)


if __name__ == "__main__":
    main()
