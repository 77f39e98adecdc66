"""
Logging setup for framedata entry points.

Library modules only create loggers (`logging.getLogger(__name__)`);
configuring handlers is left to whoever runs the pipeline. The CLI calls
setup_logging() once before loading anything.

What each level shows:
  DEBUG   – tables found, per-table normalization, skipped rows
  INFO    – one line per loaded character plus a roster summary
  WARNING – notation collisions, retries, characters that failed
  ERROR   – unexpected pipeline errors, a roster load with no survivors
"""

import logging
import sys
from typing import Union

# HTTP client chatter drowns out the per-table detail at DEBUG
HTTP_LOGGERS = ("urllib3", "requests", "charset_normalizer")


def setup_logging(level: Union[str, int] = "INFO", *, verbose_http: bool = False) -> None:
    """Configure the root logger; unknown level names fall back to INFO."""
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(levelname)-7s [%(name)s] %(message)s",
        stream=sys.stderr,
        force=True,
    )
    if not verbose_http:
        for name in HTTP_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
