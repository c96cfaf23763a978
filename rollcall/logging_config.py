"""
Centralized logging configuration for Rollcall.

Call setup_logging() once at application startup (from the CLI entry
point or from the host integration).  Every source module then gets its
own logger via:

    import logging
    logger = logging.getLogger(__name__)

Level mapping:
  DEBUG   – config merges, normalization traces, dialog cancellations
  INFO    – completed group evaluations
  WARNING – rejected requests, method fallbacks, missing actor data
  ERROR   – dialog collaborator failures
"""

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Configure root logger and quiet noisy third-party loggers."""
    fmt = "[%(name)s] %(message)s"
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=fmt,
        stream=sys.stdout,
        force=True,
    )

    # Quiet noisy third-party loggers
    for name in ("asyncio", "markdown_it"):
        logging.getLogger(name).setLevel(logging.WARNING)
