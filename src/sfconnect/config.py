from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, fields, replace
from typing import Any, Optional

_logger = logging.getLogger(__name__)

# Trace levels understood by the connector.
TRACE_NONE = -1
TRACE_BASIC = 0
TRACE_DETAIL = 1

TRACE_LEVEL_ENV = "TRACE_LEVEL"
SFDX_COMMAND_ENV = "SFDX_COMMAND"

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def _env_int(name: str) -> Optional[int]:
    """Leading integer of the env var ("1abc" reads as 1), or None if there is none."""
    raw = os.getenv(name)
    if raw is None:
        return None
    m = _LEADING_INT.match(raw)
    if m is None:
        _logger.debug("Ignoring non-integer %s=%r", name, raw)
        return None
    return int(m.group(1), 10)


@dataclass(frozen=True)
class ConnectorOptions:
    """Options for SalesforceCliConnector."""

    # -1 = silent, 0 = basic error logging, >0 = detail logging
    trace_level: int = TRACE_BASIC

    # Salesforce CLI executable; arguments are always force:org:display --json
    sfdx_command: str = "sfdx"

    @classmethod
    def from_env(cls, **overrides: Any) -> ConnectorOptions:
        """Defaults, then environment variables, then explicit overrides."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise TypeError(f"Unknown connector option(s): {', '.join(unknown)}")

        opts = cls()
        env_level = _env_int(TRACE_LEVEL_ENV)
        if env_level is not None:
            opts = replace(opts, trace_level=env_level)
        env_cmd = os.getenv(SFDX_COMMAND_ENV)
        if env_cmd:
            opts = replace(opts, sfdx_command=env_cmd)

        explicit = {k: v for k, v in overrides.items() if v is not None}
        return replace(opts, **explicit)
