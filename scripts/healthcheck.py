#!/usr/bin/env python
"""Container healthcheck probing the song library readiness endpoint."""

import os
import sys
from urllib import request, error


def main() -> int:
    host = os.getenv("HEALTHCHECK_HOST", "127.0.0.1")
    port = os.getenv("PORT", "8080")
    target = f"http://{host}:{port}/readyz"
    try:
        with request.urlopen(target, timeout=5) as resp:
            return 0 if resp.status == 200 else 1
    except error.URLError:
        # HTTPError (503 from /readyz) is a URLError too
        return 1


if __name__ == "__main__":
    sys.exit(main())
