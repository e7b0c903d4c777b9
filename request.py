"""
Sinfonia Request CLI.

Sends one command to the Sinfonia sound server and copies the response
body to stdout. Exit codes follow curl: 0 whenever the server answered,
7 when it could not be reached, 28 on timeout, 26 when the theme file
could not be read, 22 for HTTP errors with --fail.

Usage:
    python request.py play
    python request.py pause
    python request.py drivers
    python request.py library > library.json
    python request.py upload --file themes/forest.json
    python request.py trigger thunder
    python request.py volume 0.5 --verbose
"""

import asyncio
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

import click
import httpx
import structlog
from rich.console import Console

from sinfonia_request.cli.client import APIClient
from sinfonia_request.cli.commands import COMMANDS, dispatch
from sinfonia_request.core.config import get_server_base_url, validate_project_root
from sinfonia_request.core.exceptions import (
    ApplicationError,
    InvalidArgumentError,
    MissingArgumentError,
)
from sinfonia_request.core.logging import get_logger, setup_logging

logger = get_logger(__name__)

HTTP_ERROR_EXIT_CODE = 22


def _command_list() -> str:
    width = max(len(name) for name in COMMANDS)
    lines = []
    for command in COMMANDS.values():
        usage = f"{command.name} {command.argument}" if command.argument else command.name
        lines.append(f"  {usage:<{width + 6}} {command.method} {command.path}  {command.help}")
    return "\n".join(lines)


def _print_trace(console: Console, response: httpx.Response) -> None:
    """Print a curl -v style trace of the exchange to stderr."""
    request = response.request
    console.print(
        f"> {request.method} {request.url.raw_path.decode()} HTTP/1.1",
        style="cyan",
        markup=False,
        highlight=False,
    )
    for name, value in request.headers.items():
        console.print(f"> {name}: {value}", style="cyan", markup=False, highlight=False)
    console.print(">", style="cyan")
    console.print(
        f"< {response.http_version} {response.status_code} {response.reason_phrase}",
        style="green" if response.is_success else "red",
        markup=False,
        highlight=False,
    )
    for name, value in response.headers.items():
        console.print(f"< {name}: {value}", style="dim", markup=False, highlight=False)
    console.print("<", style="dim")


async def _send(
    client: APIClient,
    command: str,
    argument: str | None,
    theme_path: Path | None,
) -> httpx.Response | None:
    try:
        return await dispatch(client, command, argument, theme_path)
    finally:
        await client.close()


@click.command(epilog=f"\b\nCommands:\n{_command_list()}")
@click.argument("command")
@click.argument("argument", required=False)
@click.option("--host", default=None, help="Server host (default from application.yaml).")
@click.option("--port", default=None, type=int, help="Server port (default from application.yaml).")
@click.option("--token", default=None, help="Bearer token (default from config/.env).")
@click.option(
    "--file", "-f", "theme_file",
    default=None,
    type=click.Path(path_type=Path, dir_okay=False),
    help="Theme file to send with 'upload' (default from application.yaml).",
)
@click.option("--fail", "-F", "fail", is_flag=True, help="Exit 22 without output on HTTP error responses.")
@click.option("--verbose", "-v", is_flag=True, help="Trace the request and response on stderr (INFO level logging).")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output (DEBUG level logging).")
@click.pass_context
def main(
    ctx: click.Context,
    command: str,
    argument: str | None,
    host: str | None,
    port: int | None,
    token: str | None,
    theme_file: Path | None,
    fail: bool,
    verbose: bool,
    debug: bool,
) -> None:
    """Send COMMAND to the Sinfonia sound server."""
    validate_project_root()

    if debug:
        setup_logging(level="DEBUG", format_type="console")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging(format_type="console")

    structlog.contextvars.bind_contextvars(source="cli")

    base_url, timeout = get_server_base_url()
    overrides = {key: value for key, value in (("host", host), ("port", port)) if value is not None}
    if overrides:
        base_url = str(httpx.URL(base_url).copy_with(**overrides))

    client = APIClient(source="cli", token=token, base_url=base_url, timeout=timeout)
    stderr = Console(stderr=True, soft_wrap=True)

    logger.debug("Dispatching command", extra={"command": command, "base_url": base_url})

    try:
        response = asyncio.run(_send(client, command, argument, theme_file))
    except (MissingArgumentError, InvalidArgumentError) as e:
        raise click.UsageError(e.message, ctx=ctx) from e
    except ApplicationError as e:
        stderr.print(f"Error: {e.message}", style="red", markup=False, highlight=False)
        ctx.exit(e.exit_code)

    if response is None:
        return

    if verbose:
        _print_trace(stderr, response)

    if fail and response.is_error:
        stderr.print(
            f"Error: The requested URL returned error: {response.status_code}",
            style="red",
            markup=False,
            highlight=False,
        )
        ctx.exit(HTTP_ERROR_EXIT_CODE)

    click.echo(response.content, nl=False)


if __name__ == "__main__":
    main()
