"""Container healthcheck: exit 0 when the lightpoint API answers /ready."""

from __future__ import annotations

import os
import sys
import urllib.error
import urllib.request

port = os.environ.get("LIGHTPOINT_API_PORT", "8080")

try:
    with urllib.request.urlopen(f"http://localhost:{port}/ready", timeout=5) as resp:
        sys.exit(0 if resp.status == 200 else 1)
except (urllib.error.URLError, OSError):
    sys.exit(1)
