from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import files
from .api import Connection
from .config import ConnectorOptions
from .exceptions import DeveloperError
from .org_detail import OrgDetailResult, resolve_org_detail, run_org_display

_logger = logging.getLogger(__name__)


@dataclass
class ConnectionOutcome:
    """Either a connection or the classified error that prevented one."""

    connection: Optional[Connection] = None
    error: Optional[DeveloperError] = None

    @property
    def ok(self) -> bool:
        return self.connection is not None


class SalesforceCliConnector:
    """Builds Salesforce connections from Salesforce CLI aliases.

    Meant for notebooks and the REPL: failures are logged (according to
    ``trace_level``) and ``None`` is returned rather than raising.
    """

    def __init__(self, options: Optional[ConnectorOptions] = None) -> None:
        self.options = options or ConnectorOptions.from_env()

    def set_options(self, **options: Any) -> None:
        """Reset options; explicit values win over TRACE_LEVEL / SFDX_COMMAND."""
        self.options = ConnectorOptions.from_env(**options)

    @property
    def trace_level(self) -> int:
        return self.options.trace_level

    # --------------------------- Connections --------------------------

    def get_connection(self, alias: Optional[str] = None) -> Optional[Connection]:
        """Connection for ``alias`` (or the CLI default), or None on failure."""
        outcome = self.try_get_connection(alias)
        if outcome.error is not None:
            outcome.error.log(self.trace_level)
        return outcome.connection

    def try_get_connection(self, alias: Optional[str] = None) -> ConnectionOutcome:
        """Like get_connection, but hands back the error instead of logging it."""
        try:
            info = OrgDetailResult.from_dict(self.get_connection_detail(alias) or {})
            conn = Connection(
                server_url=info.instance_url or "",
                session_id=info.access_token or "",
            )
        except Exception as e:
            return ConnectionOutcome(error=DeveloperError.from_exception(e))
        _logger.debug("Connected to %s for alias %s", conn.server_url, alias or "default")
        return ConnectionOutcome(connection=conn)

    def get_connection_detail(self, alias: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Result record from the CLI; raises ToolUnavailable, MalformedResponse or
        ResolutionFailed."""
        return resolve_org_detail(alias, options=self.options, logger=_logger)

    def get_org_detail(self, alias: Optional[str] = None) -> str:
        """Raw CLI output, for debugging."""
        return run_org_display(alias, command=self.options.sfdx_command).combined

    # --------------------------- Files --------------------------------

    def read_json(self, file_path: files.PathLike) -> Any:
        return files.read_json(file_path, trace_level=self.trace_level)

    def read_file(self, file_path: files.PathLike) -> Optional[str]:
        return files.read_file(file_path, trace_level=self.trace_level)

    def write_file(self, file_path: files.PathLike, contents: Any) -> Optional[Path]:
        return files.write_file(file_path, contents, trace_level=self.trace_level)

    def list_files(self, directory_path: files.PathLike) -> Optional[List[str]]:
        return files.list_files(directory_path, trace_level=self.trace_level)


# Shared instance for one-line use in scripts:
#   from sfconnect import get_connection
#   conn = get_connection("my-dev-org")
default_connector = SalesforceCliConnector()


def get_connection(alias: Optional[str] = None) -> Optional[Connection]:
    return default_connector.get_connection(alias)


def get_connection_detail(alias: Optional[str] = None) -> Optional[Dict[str, Any]]:
    return default_connector.get_connection_detail(alias)


def read_json(file_path: files.PathLike) -> Any:
    return default_connector.read_json(file_path)


def read_file(file_path: files.PathLike) -> Optional[str]:
    return default_connector.read_file(file_path)


def write_file(file_path: files.PathLike, contents: Any) -> Optional[Path]:
    return default_connector.write_file(file_path, contents)


def list_files(directory_path: files.PathLike) -> Optional[List[str]]:
    return default_connector.list_files(directory_path)
