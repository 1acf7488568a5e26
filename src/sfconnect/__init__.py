from __future__ import annotations

import logging

try:  # prefer importlib.metadata, fall back on dev installs
    from importlib.metadata import PackageNotFoundError, version
except Exception:  # pragma: no cover
    version = None
    PackageNotFoundError = Exception  # type: ignore[misc]

try:
    __version__ = version("sfconnect") if version else "0.0.0"
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

# Keep library modules quiet unless the app configures logging:
logging.getLogger(__name__).addHandler(logging.NullHandler())

from .api import Connection  # noqa: E402
from .config import TRACE_BASIC, TRACE_DETAIL, TRACE_NONE, ConnectorOptions  # noqa: E402
from .connector import (  # noqa: E402
    ConnectionOutcome,
    SalesforceCliConnector,
    default_connector,
    get_connection,
    get_connection_detail,
    list_files,
    read_file,
    read_json,
    write_file,
)
from .exceptions import (  # noqa: E402
    DeveloperError,
    IoFailure,
    MalformedResponse,
    ResolutionFailed,
    ToolUnavailable,
)

__all__ = [
    "Connection",
    "ConnectionOutcome",
    "ConnectorOptions",
    "DeveloperError",
    "IoFailure",
    "MalformedResponse",
    "ResolutionFailed",
    "SalesforceCliConnector",
    "TRACE_BASIC",
    "TRACE_DETAIL",
    "TRACE_NONE",
    "ToolUnavailable",
    "default_connector",
    "get_connection",
    "get_connection_detail",
    "list_files",
    "read_file",
    "read_json",
    "write_file",
]
