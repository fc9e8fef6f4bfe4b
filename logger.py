"""
logger.py

Responsibility: Configures Python's standard logging for the process.
Modules log through logging.getLogger(__name__); this file only decides
where those records go and how they look.
Does NOT: write log files or keep application log history.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks the handler installed here so repeated calls do not stack handlers.
_HANDLER_NAME = "dyndns-stream"


def configure_logging(level: str = "INFO") -> None:
    """
    Installs a single stdout handler on the root logger.

    Safe to call more than once (e.g. once per TestClient lifespan); later
    calls only adjust the level.

    Args:
        level: Log level name such as "DEBUG" or "INFO". Unknown names fall back to INFO.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)

    # httpx logs every request at INFO; keep it for DEBUG runs only.
    logging.getLogger("httpx").setLevel(logging.WARNING if root.level > logging.DEBUG else logging.DEBUG)
