"""Ask the Salesforce CLI for the details of an authenticated org.

The CLI is run as ``sfdx force:org:display --json [-u <alias>]``. Success is
decided by the ``status`` field of the JSON payload, never by the process
exit code. A typical payload::

    {"status": 0,
     "result": {"username": "...", "id": "00D...", "connectedStatus": "Connected",
                "accessToken": "00D...!AQ...", "instanceUrl": "https://...",
                "clientId": "PlatformCLI", "alias": "dev"}}
"""

from __future__ import annotations

import json
import logging
import subprocess
import traceback
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config import TRACE_BASIC, ConnectorOptions
from .exceptions import MalformedResponse, ResolutionFailed, ToolUnavailable

_logger = logging.getLogger(__name__)

ORG_DISPLAY_ARGS = ["force:org:display", "--json"]


# ----------------------------------------------------------------------
# Wire types
# ----------------------------------------------------------------------
@dataclass
class OrgDetailResult:
    """The result record of a successful org display."""

    username: Optional[str] = None
    id: Optional[str] = None
    connected_status: Optional[str] = None
    access_token: Optional[str] = None
    instance_url: Optional[str] = None
    client_id: Optional[str] = None
    alias: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> OrgDetailResult:
        return cls(
            username=d.get("username"),
            id=d.get("id"),
            connected_status=d.get("connectedStatus"),
            access_token=d.get("accessToken"),
            instance_url=d.get("instanceUrl"),
            client_id=d.get("clientId"),
            alias=d.get("alias"),
            raw=dict(d),
        )


@dataclass
class OrgDetail:
    """The full response envelope."""

    status: int
    message: Optional[str] = None
    stack: Optional[str] = None
    name: Optional[str] = None
    result: Optional[Dict[str, Any]] = None

    @classmethod
    def from_json(cls, text: str) -> OrgDetail:
        """Parse the CLI payload; raises ValueError if it is not a JSON object."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        return cls(
            status=data.get("status"),
            message=data.get("message"),
            stack=data.get("stack"),
            name=data.get("name"),
            result=data.get("result"),
        )

    @property
    def succeeded(self) -> bool:
        # only the integer 0 is success; JSON false is not
        return type(self.status) is int and self.status == 0


@dataclass
class CliOutput:
    """Captured output of one CLI run."""

    stdout: str
    stderr: str
    returncode: Optional[int] = None

    @property
    def combined(self) -> str:
        return self.stdout + self.stderr

    @property
    def payload(self) -> str:
        """Text to parse: stdout, or stderr when stdout is blank."""
        if self.stdout.strip():
            return self.stdout
        return self.stderr


# ----------------------------------------------------------------------
# Subprocess
# ----------------------------------------------------------------------
def build_command(alias: Optional[str] = None, command: str = "sfdx") -> List[str]:
    args = [command, *ORG_DISPLAY_ARGS]
    if alias:
        args += ["-u", alias]
    return args


def run_org_display(alias: Optional[str] = None, *, command: str = "sfdx") -> CliOutput:
    """Run the CLI once and capture both streams.

    No timeout is applied; a hung CLI hangs the caller.
    """
    cmd = build_command(alias, command)
    _logger.debug("Running %s", " ".join(cmd))
    try:
        proc = subprocess.run(  # noqa: S603
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as e:
        raise ToolUnavailable(alias, str(e), traceback.format_exc()) from e

    return CliOutput(stdout=proc.stdout or "", stderr=proc.stderr or "", returncode=proc.returncode)


# ----------------------------------------------------------------------
# Parsing
# ----------------------------------------------------------------------
def parse_org_detail(text: str, alias: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Turn CLI output into the result record, or raise a classified error."""
    try:
        detail = OrgDetail.from_json(text)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError
        raise MalformedResponse(alias, str(e), traceback.format_exc()) from e

    if detail.succeeded:
        return detail.result

    raise ResolutionFailed(
        alias,
        detail.message,
        detail.stack,
        status=detail.status,
        name=detail.name,
    )


def resolve_org_detail(
    alias: Optional[str] = None,
    *,
    options: Optional[ConnectorOptions] = None,
    logger: Optional[logging.Logger] = None,
) -> Optional[Dict[str, Any]]:
    """Run the CLI for ``alias`` (or the default org) and return its result record."""
    opts = options or ConnectorOptions.from_env()
    log = logger or _logger

    output = run_org_display(alias, command=opts.sfdx_command)

    if opts.trace_level > TRACE_BASIC:
        log.info("captured result: %s", output.combined)

    return parse_org_detail(output.payload, alias)
