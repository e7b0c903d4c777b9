"""
Command Dispatch Table.

Explicit routing from a command token to the single HTTP request it sends
to the sound server. Shared by request.py and tui.py.

Invariants:
    - Every command -> request mapping is visible in COMMANDS, no auto-discovery
    - A recognized command sends exactly one request
    - An unknown command sends nothing; dispatch returns None
    - Bodies are JSON and go out with Content-Type: application/json
    - Upload bodies are the theme file's bytes, unmodified

Usage:
    from sinfonia_request.cli.commands import dispatch

    response = await dispatch(client, "trigger", "thunder")
"""

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import httpx

from sinfonia_request.cli.client import APIClient
from sinfonia_request.core.config import get_theme_path
from sinfonia_request.core.exceptions import (
    InvalidArgumentError,
    MissingArgumentError,
    RequestTimeoutError,
    ServerUnreachableError,
    ThemeFileError,
    TransportError,
)
from sinfonia_request.core.logging import get_logger

logger = get_logger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


@dataclass(frozen=True)
class OutboundRequest:
    """A fully built request, ready to hand to the HTTP client."""

    method: str
    path: str
    content: bytes | None = None
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Command:
    name: str
    method: str
    path: str
    help: str
    argument: str | None = None
    body: Callable[[str], bytes] | None = None


def _name_body(argument: str) -> bytes:
    return json.dumps({"name": argument}, ensure_ascii=False).encode("utf-8")


def _volume_body(argument: str) -> bytes:
    try:
        value = float(argument)
    except ValueError as e:
        raise InvalidArgumentError(f"Volume must be a number, got '{argument}'") from e
    return json.dumps({"value": value}).encode("utf-8")


def _driver_body(argument: str) -> bytes:
    try:
        driver_id = int(argument)
    except ValueError as e:
        raise InvalidArgumentError(f"Driver id must be an integer, got '{argument}'") from e
    return json.dumps({"id": driver_id}).encode("utf-8")


def read_theme(path: Path) -> bytes:
    """Read the theme file as raw bytes."""
    try:
        return path.read_bytes()
    except OSError as e:
        raise ThemeFileError(f"Cannot read theme file {path}: {e.strerror or e}") from e


UPLOAD = "upload"

COMMANDS: dict[str, Command] = {
    command.name: command
    for command in (
        Command("play", "POST", "/play", "Resume playback"),
        Command("pause", "POST", "/pause", "Pause playback"),
        Command("reload", "POST", "/reload", "Reload the current theme"),
        Command("drivers", "GET", "/driver/list", "List audio drivers"),
        Command("library", "GET", "/library", "List the sound library"),
        Command(UPLOAD, "POST", "/theme", "Upload the theme file"),
        Command("trigger", "POST", "/trigger", "Trigger a named event", argument="NAME", body=_name_body),
        Command("status", "GET", "/status", "Show playback status"),
        Command("preview", "POST", "/preview", "Preview a single sound", argument="NAME", body=_name_body),
        Command("volume", "POST", "/volume", "Set the master volume", argument="VALUE", body=_volume_body),
        Command("driver", "GET", "/driver", "Show the active audio driver"),
        Command("set-driver", "POST", "/driver", "Switch audio driver", argument="ID", body=_driver_body),
    )
}


def get_command(name: str) -> Command | None:
    """Look up a command by name. Returns None for unknown commands."""
    return COMMANDS.get(name)


def build_request(
    name: str,
    argument: str | None = None,
    theme_path: Path | None = None,
) -> OutboundRequest | None:
    """
    Build the request for a command without sending it.

    Args:
        name: Command token (play, trigger, upload, ...)
        argument: Secondary argument for commands that take one
        theme_path: File to upload; defaults to theme.path from application.yaml

    Returns:
        OutboundRequest, or None when the command is not recognized

    Raises:
        MissingArgumentError: Command requires an argument and none was given
        InvalidArgumentError: Argument has the wrong type
        ThemeFileError: Upload file cannot be read
    """
    command = get_command(name)
    if command is None:
        return None

    if command.name == UPLOAD:
        content = read_theme(theme_path if theme_path is not None else get_theme_path())
        return OutboundRequest(command.method, command.path, content, dict(JSON_HEADERS))

    if command.body is None:
        return OutboundRequest(command.method, command.path)

    if argument is None:
        raise MissingArgumentError(command.name, command.argument or "ARGUMENT")

    return OutboundRequest(command.method, command.path, command.body(argument), dict(JSON_HEADERS))


async def dispatch(
    client: APIClient,
    name: str,
    argument: str | None = None,
    theme_path: Path | None = None,
) -> httpx.Response | None:
    """
    Build and send the request for a command.

    Non-2xx responses are returned, not raised; the server's answer is
    relayed as-is.

    Returns:
        The server response, or None when the command is not recognized

    Raises:
        ServerUnreachableError: Connection could not be established
        RequestTimeoutError: Server did not answer within the timeout
        TransportError: Any other httpx transport failure
    """
    outbound = build_request(name, argument, theme_path)
    if outbound is None:
        logger.debug("Unknown command ignored", extra={"command": name})
        return None

    try:
        return await client.request(
            outbound.method,
            outbound.path,
            content=outbound.content,
            headers=outbound.headers,
        )
    except httpx.ConnectError as e:
        raise ServerUnreachableError(f"Cannot connect to {client.base_url}: {e}") from e
    except httpx.TimeoutException as e:
        raise RequestTimeoutError(f"No answer from {client.base_url} within {client.timeout}s") from e
    except httpx.HTTPError as e:
        raise TransportError(f"Request to {client.base_url}{outbound.path} failed: {e}") from e
