#!/usr/bin/env python3
"""
Smoke-test a running inventory server through its JSON endpoints.

Registers an item, reads it back, updates it, finds it through /search, deletes it
and confirms it is gone. Photo upload is covered by the test suite.

This script assumes the FastAPI app is running on 127.0.0.1:<PORT> (default 3000).

Usage:
  python scripts/smoke_inventory.py
  PORT=3000 python scripts/smoke_inventory.py
"""
import os
import sys
import http.client
import json
from urllib.parse import urlencode


def _port() -> int:
    try:
        return int(os.getenv("PORT", "3000"))
    except ValueError:
        return 3000


def _call(method: str, path: str, body=None, content_type: str = "application/json"):
    conn = http.client.HTTPConnection("127.0.0.1", _port(), timeout=5)
    try:
        headers = {}
        payload = None
        if body is not None:
            headers["Content-Type"] = content_type
            payload = json.dumps(body) if content_type == "application/json" else urlencode(body)
        conn.request(method, path, body=payload, headers=headers)
        resp = conn.getresponse()
        raw = resp.read().decode("utf-8", errors="ignore")
        return resp.status, raw
    finally:
        conn.close()


def _expect(label: str, status: int, expected: int, raw: str) -> None:
    if status != expected:
        print(f"[smoke] {label} -> {status} (expected {expected}) {raw}", file=sys.stderr)
        sys.exit(1)
    print(f"[smoke] {label} OK: {status}")


def main():
    status, raw = _call(
        "POST",
        "/register",
        {"name": "Smoke Laptop", "description": "created by smoke test"},
        content_type="application/x-www-form-urlencoded",
    )
    _expect("register", status, 201, raw)
    item = json.loads(raw)
    item_id = item["id"]
    if item.get("photo_url") is not None:
        print(f"[smoke] unexpected photo_url: {raw}", file=sys.stderr)
        sys.exit(2)

    status, raw = _call("GET", f"/inventory/{item_id}")
    _expect("get", status, 200, raw)

    status, raw = _call("PUT", f"/inventory/{item_id}", {"name": "Smoke Laptop v2", "description": ""})
    _expect("update", status, 200, raw)
    updated = json.loads(raw)
    if updated["name"] != "Smoke Laptop v2" or updated["description"] != "created by smoke test":
        print(f"[smoke] partial update mismatch: {raw}", file=sys.stderr)
        sys.exit(3)

    status, raw = _call("POST", "/search", {"id": item_id})
    _expect("search", status, 201, raw)

    status, raw = _call("POST", "/search", {"id": "abc"})
    _expect("search invalid id", status, 400, raw)

    status, raw = _call("DELETE", f"/inventory/{item_id}")
    _expect("delete", status, 200, raw)

    status, raw = _call("GET", f"/inventory/{item_id}")
    _expect("get after delete", status, 404, raw)

    print("[smoke] Inventory endpoints verified successfully.")
    sys.exit(0)


if __name__ == "__main__":
    main()
