from __future__ import annotations

import code
import json
import logging
from typing import Optional

import click

from . import __version__, files
from .config import TRACE_BASIC, ConnectorOptions
from .connector import SalesforceCliConnector
from .env_loader import load_env_files
from .exceptions import DeveloperError
from .logging_config import configure_logging, level_for_trace
from .org_detail import OrgDetailResult

_logger = logging.getLogger(__name__)

_DISPLAY_FIELDS = (
    ("Alias", "alias"),
    ("Username", "username"),
    ("Org Id", "id"),
    ("Instance URL", "instance_url"),
    ("Connected Status", "connected_status"),
    ("Client Id", "client_id"),
    ("Access Token", "access_token"),
)


def _mask(token: str) -> str:
    if len(token) <= 16:
        return "*" * len(token)
    return f"{token[:10]}...{token[-6:]}"


def _connector(ctx: click.Context) -> SalesforceCliConnector:
    return ctx.find_object(SalesforceCliConnector)


def _connect_or_fail(ctx: click.Context, alias: Optional[str]):
    outcome = _connector(ctx).try_get_connection(alias)
    if not outcome.ok:
        err = outcome.error
        _logger.debug("%s\n%s", err.detail_message, err.stack)
        raise click.ClickException(f"{err.message}\n{err.detail_message}".rstrip())
    return outcome.connection


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
)
@click.version_option(__version__, "--version", prog_name="sfconnect")
@click.option(
    "-v",
    "--verbose",
    "loglevel",
    flag_value=logging.INFO,
    default=None,
    help="Enable INFO logs.",
)
@click.option(
    "-vv",
    "--very-verbose",
    "loglevel",
    flag_value=logging.DEBUG,
    help="Enable DEBUG logs.",
)
@click.option(
    "--trace-level",
    type=int,
    default=None,
    help="-1 silent, 0 basic errors, 1+ detail. Overrides TRACE_LEVEL.",
)
@click.pass_context
def cli(ctx: click.Context, loglevel: Optional[int], trace_level: Optional[int]) -> None:
    """Salesforce CLI connector. Use subcommands like 'display' or 'query'."""
    # Load .env first so TRACE_LEVEL / SFDX_COMMAND can live there
    load_env_files()
    connector = SalesforceCliConnector(ConnectorOptions.from_env(trace_level=trace_level))
    ctx.obj = connector

    if loglevel is None and connector.trace_level != TRACE_BASIC:
        loglevel = level_for_trace(connector.trace_level)
    configure_logging(loglevel)
    _logger.debug("CLI start, version=%s trace_level=%s", __version__, connector.trace_level)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("display")
@click.argument("alias", required=False)
@click.option("--json", "as_json", is_flag=True, help="Print the raw result record as JSON.")
@click.option("--show-token", is_flag=True, help="Do not mask the access token.")
@click.pass_context
def cmd_display(ctx: click.Context, alias: Optional[str], as_json: bool, show_token: bool) -> None:
    """Show the org details the Salesforce CLI holds for ALIAS (or the default org)."""
    connector = _connector(ctx)
    try:
        record = connector.get_connection_detail(alias)
    except DeveloperError as e:
        # reported once, through click; detail only when tracing
        msg = e.message
        if connector.trace_level > TRACE_BASIC and e.detail_message:
            msg = f"{msg}\n{e.detail_message}"
        raise click.ClickException(msg) from None

    info = OrgDetailResult.from_dict(record or {})
    if not show_token and info.access_token:
        info.access_token = _mask(info.access_token)
        info.raw["accessToken"] = info.access_token

    if as_json:
        click.echo(json.dumps(info.raw, indent=2))
        return

    for label, attr in _DISPLAY_FIELDS:
        value = getattr(info, attr)
        if value:
            click.echo(f"{label + ':':<18}{value}")


@cli.command("query")
@click.argument("soql")
@click.option("-a", "--alias", default=None, help="Salesforce CLI alias (default org if omitted).")
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
@click.option("--all", "all_pages", is_flag=True, help="Follow nextRecordsUrl and print every record.")
@click.pass_context
def cmd_query(ctx: click.Context, soql: str, alias: Optional[str], pretty: bool, all_pages: bool) -> None:
    """Run a SOQL query against the org behind ALIAS."""
    conn = _connect_or_fail(ctx, alias)
    if all_pages:
        res = {"records": list(conn.query_all_iter(soql))}
        res["totalSize"] = len(res["records"])
    else:
        res = conn.query(soql)
    click.echo(json.dumps(res, indent=2 if pretty else None))


@cli.command("limits")
@click.option("-a", "--alias", default=None, help="Salesforce CLI alias (default org if omitted).")
@click.pass_context
def cmd_limits(ctx: click.Context, alias: Optional[str]) -> None:
    """Show daily API request usage for the org behind ALIAS."""
    conn = _connect_or_fail(ctx, alias)
    core = conn.limits().get("DailyApiRequests", {})
    click.echo(f"Daily API requests: {core.get('Remaining')} remaining of {core.get('Max')}")


@cli.command("shell")
@click.option("-a", "--alias", default=None, help="Salesforce CLI alias (default org if omitted).")
@click.pass_context
def cmd_shell(ctx: click.Context, alias: Optional[str]) -> None:
    """Open a Python console with `conn` bound to the org behind ALIAS."""
    connector = _connector(ctx)
    conn = _connect_or_fail(ctx, alias)
    namespace = {
        "conn": conn,
        "connector": connector,
        "read_json": connector.read_json,
        "read_file": connector.read_file,
        "write_file": connector.write_file,
        "list_files": connector.list_files,
    }
    banner = (
        f"sfconnect {__version__} - connected to {conn.server_url}\n"
        "Names: conn, connector, read_json, read_file, write_file, list_files"
    )
    code.interact(banner=banner, local=namespace, exitmsg="")


@cli.command("ls")
@click.argument("directory", default=".")
@click.pass_context
def cmd_ls(ctx: click.Context, directory: str) -> None:
    """List DIRECTORY entries (unsorted, as the filesystem returns them)."""
    names = files.list_files(directory, trace_level=_connector(ctx).trace_level)
    if names is None:
        raise click.Abort()
    for name in names:
        click.echo(name)
