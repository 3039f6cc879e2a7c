from __future__ import annotations

LIBRARY_NAME = "tracking-py"
LIBRARY_VERSION = "0.1.0"
