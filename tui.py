"""
TUI Client — Terminal Remote for the Sinfonia sound server.

Interactive terminal interface. Commands typed into the input use the
same syntax and dispatch table as request.py; the status bar polls
GET /status to show what the server is doing.

Usage:
    python tui.py
    python tui.py --verbose
    python tui.py --debug
"""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

import click
import structlog

from sinfonia_request.cli.client import APIClient, get_api_client
from sinfonia_request.cli.commands import COMMANDS, UPLOAD, dispatch
from sinfonia_request.core.config import get_app_config, validate_project_root
from sinfonia_request.core.exceptions import ApplicationError
from sinfonia_request.core.logging import get_logger, setup_logging

from rich.text import Text
from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.reactive import reactive
from textual.widgets import Footer, Header, Input, RichLog, Static

logger = get_logger(__name__)


class StatusBar(Static):
    """Persistent status bar showing the server's playback state."""

    connected: reactive[bool] = reactive(False)
    playing: reactive[bool] = reactive(False)
    theme_loaded: reactive[bool] = reactive(False)
    sounds_playing: reactive[int] = reactive(0)

    def render(self) -> Text:
        if not self.connected:
            return Text.from_markup(" [red]server unreachable[/]")
        state = "[bold green]playing[/]" if self.playing else "[bold yellow]paused[/]"
        theme = "[green]loaded[/]" if self.theme_loaded else "[dim]none[/]"
        return Text.from_markup(
            f" {state} | "
            f"Theme: {theme} | "
            f"Sounds: [bold]{self.sounds_playing}[/] | "
            f"[green]connected[/]"
        )


class OutputLog(RichLog):
    """Command and response display."""


class SinfoniaRemote(App):
    """Terminal remote for the Sinfonia sound server."""

    TITLE = "Sinfonia Remote"
    SUB_TITLE = "Sound server control"

    CSS = """
    Screen {
        layout: vertical;
    }

    #output-container {
        height: 1fr;
    }

    OutputLog {
        height: 1fr;
        border: solid $primary;
        padding: 0 1;
        scrollbar-gutter: stable;
    }

    #command-input {
        dock: bottom;
        margin: 0 0;
    }

    StatusBar {
        dock: bottom;
        height: 1;
        background: $surface;
        color: $text;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("f5", "send('play')", "Play"),
        Binding("f6", "send('pause')", "Pause"),
        Binding("f7", "refresh_status", "Status"),
        Binding("ctrl+l", "clear_log", "Clear"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, client: APIClient, status_interval: float = 5.0) -> None:
        super().__init__()
        self._client = client
        self._status_interval = status_interval

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="output-container"):
            yield OutputLog(id="output-log", highlight=True, markup=True)
            yield Input(placeholder="play | pause | trigger <name> | upload [file] (Enter to send)", id="command-input")
        yield StatusBar()
        yield Footer()

    def on_mount(self) -> None:
        output = self.query_one("#output-log", OutputLog)
        output.write(Text.from_markup("[bold]Sinfonia Remote[/]").append(f" — {self._client.base_url}"))
        output.write(Text(f"Commands: {', '.join(COMMANDS)}", style="dim"))
        output.write(Text("─────────────────────────────────────────\n"))
        self._poll_status()
        if self._status_interval > 0:
            self.set_interval(self._status_interval, self._poll_status)

    def action_clear_log(self) -> None:
        self.query_one("#output-log", OutputLog).clear()

    def action_send(self, line: str) -> None:
        self._run_command(line)

    def action_refresh_status(self) -> None:
        self._poll_status()

    @on(Input.Submitted, "#command-input")
    def on_command_submit(self, event: Input.Submitted) -> None:
        if not event.value.strip():
            return
        line = event.value.strip()
        event.input.value = ""
        self._run_command(line)

    @work(thread=False, group="commands")
    async def _run_command(self, line: str) -> None:
        """Dispatch one input line and show the server's answer."""
        output = self.query_one("#output-log", OutputLog)
        name, _, argument = line.partition(" ")
        argument = argument.strip() or None

        output.write(Text.from_markup("\n[bold cyan]>[/] ").append(line))

        theme_path = None
        if name == UPLOAD and argument is not None:
            theme_path, argument = Path(argument), None

        try:
            response = await dispatch(self._client, name, argument, theme_path)
        except ApplicationError as e:
            output.write(Text(e.message, style="red"))
            return

        if response is None:
            output.write(Text(f"Unknown command '{name}'", style="dim"))
            return

        color = "green" if response.is_success else "red"
        output.write(Text(f"{response.status_code} {response.reason_phrase}", style=color))
        if response.content:
            output.write(Text(response.text))

        if name != "status":
            self._poll_status()

    @work(thread=False, exclusive=True, group="status")
    async def _poll_status(self) -> None:
        """Poll GET /status and update the status bar."""
        status = self.query_one(StatusBar)

        try:
            response = await dispatch(self._client, "status")
        except ApplicationError as e:
            logger.debug("Status poll failed", extra={"error": e.message})
            status.connected = False
            return

        status.connected = True
        if response is None or not response.is_success:
            return

        try:
            data = response.json()
        except ValueError:
            logger.warning("Status response is not JSON", extra={"body": response.text[:200]})
            return

        status.playing = bool(data.get("playing", False))
        status.theme_loaded = bool(data.get("theme_loaded", False))
        status.sounds_playing = len(data.get("sounds_playing", []))

    async def on_unmount(self) -> None:
        await self._client.close()


@click.command()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output (INFO level logging).")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output (DEBUG level logging).")
def main(verbose: bool, debug: bool) -> None:
    """Sinfonia Remote — terminal remote for the sound server."""
    validate_project_root()

    # The TUI owns the terminal, so logs only go to the JSONL file.
    if debug:
        setup_logging(level="DEBUG", enable_console=False, enable_file_logging=True)
    elif verbose:
        setup_logging(level="INFO", enable_console=False, enable_file_logging=True)
    else:
        setup_logging(level="WARNING", enable_console=False, enable_file_logging=True)

    structlog.contextvars.bind_contextvars(source="tui")

    logger.debug("Starting TUI", extra={"debug": debug, "verbose": verbose})

    interval = get_app_config().application.tui.status_interval
    tui_app = SinfoniaRemote(client=get_api_client(source="tui"), status_interval=interval)
    tui_app.run()


if __name__ == "__main__":
    main()
