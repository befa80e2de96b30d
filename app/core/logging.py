from __future__ import annotations

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send service logs to stdout at ``level`` (LOG_LEVEL); safe to call twice."""
    root = logging.getLogger()
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    if root.handlers:
        # Reloads and test runs: keep the existing handlers.
        root.setLevel(numeric_level)
        return

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, stream=sys.stdout)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "app")
