from __future__ import annotations

import logging
from typing import Optional

from .config import TRACE_BASIC, TRACE_NONE

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"

# Above CRITICAL, so nothing gets through.
SILENT = logging.CRITICAL + 1


def level_for_trace(trace_level: int) -> int:
    """Map a connector trace level onto a logging level."""
    if trace_level <= TRACE_NONE:
        return SILENT
    if trace_level == TRACE_BASIC:
        return logging.WARNING
    return logging.DEBUG


def configure_logging(level: Optional[int]) -> None:
    """Configure root logging once; safe to call multiple times."""
    lvl = level if level is not None else logging.WARNING
    root = logging.getLogger()

    if root.handlers:
        # Logging already configured elsewhere – just adjust the level.
        root.setLevel(lvl)
    else:
        logging.basicConfig(
            level=lvl,
            format=_DEFAULT_FMT,
            datefmt=_DEFAULT_DATEFMT,
        )

    # requests/urllib3 header parsing warnings are noise at the REPL
    urllib3_conn_logger = logging.getLogger("urllib3.connection")
    if urllib3_conn_logger.level == logging.NOTSET or urllib3_conn_logger.level < logging.ERROR:
        urllib3_conn_logger.setLevel(logging.ERROR)
