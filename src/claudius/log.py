"""Logging setup for callers that embed claudius in a command-line tool."""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the ``claudius`` logger.

    Calling it again only adjusts the level.
    """
    logger = logging.getLogger("claudius")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not any(getattr(h, "_claudius", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._claudius = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
