"""
Container health check for the statement fetcher API.

Exits 0 only when `/health` answers with `{"status": "ok"}`.
"""

from __future__ import annotations

import json
import os
from urllib.error import URLError
from urllib.request import urlopen


def main() -> int:
    port = os.getenv("PORT", "3003")
    url = f"http://127.0.0.1:{port}/health"

    try:
        timeout_seconds = float(os.getenv("HEALTHCHECK_TIMEOUT_SECONDS", "2"))
        with urlopen(url, timeout=timeout_seconds) as response:
            if response.status != 200:
                return 1
            body = json.loads(response.read().decode("utf-8"))
    except (URLError, TimeoutError, ValueError):
        return 1

    return 0 if isinstance(body, dict) and body.get("status") == "ok" else 1


if __name__ == "__main__":
    raise SystemExit(main())
