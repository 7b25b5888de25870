"""
Structured logging configuration for the entire application.
Call setup_logging() once at startup (main.py).
"""

import logging
import os
import sys


def setup_logging(debug: bool | None = None):
    """Configure structured logging to stdout for the 'app' namespace. DEBUG=true lowers the level."""
    if debug is None:
        debug = os.getenv("DEBUG", "").strip().lower() in ("1", "true", "yes", "on")

    root = logging.getLogger("app")
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    # Uvicorn --reload re-imports main; keep a single handler
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)
