"""procman - Interactive process manager menu."""

import logging
import sys
from datetime import datetime
from enum import Enum
from typing import TextIO

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from procman.control import parse_signal_kind, terminate
from procman.errors import MalformedInput, ProcmanError
from procman.launcher import launch
from procman.models import Abnormal, Completed, LaunchOutcome, ProcessRecord
from procman.load import report_load
from procman.reader import ProcessReader
from procman.registry import TrackingRegistry

logger = logging.getLogger(__name__)


class MenuState(Enum):
    """States of the menu loop."""

    AWAITING_CHOICE = "awaiting"
    DISPATCHING = "dispatching"
    TERMINAL = "terminal"


MENU_OPTIONS = [
    (1, "List Active Processes"),
    (2, "Terminate Process"),
    (3, "Monitor System Load"),
    (4, "Get Process Details"),
    (5, "Start New Process"),
    (6, "Track New Process"),
    (7, "Show Tracked Processes"),
    (8, "Exit"),
]
EXIT_CHOICE = 8


def format_bytes(size: int) -> str:
    """Format bytes as human-readable string."""
    for unit in ["B", "K", "M", "G", "T"]:
        if size < 1024:
            return f"{size:.1f}{unit}" if unit != "B" else f"{size:d}{unit}"
        size = size / 1024
    return f"{size:.1f}P"


def parse_pid(text: str) -> int:
    """Parse operator input as a process identifier."""
    value = text.strip()
    if not (value.isascii() and value.isdigit()) or int(value) <= 0:
        raise MalformedInput(value, "a positive process id")
    return int(value)


def parse_choice(text: str) -> int:
    """Parse operator input as a menu choice number."""
    value = text.strip()
    try:
        return int(value)
    except ValueError:
        raise MalformedInput(value, "a number") from None


def describe_outcome(outcome: LaunchOutcome) -> str:
    """Render a launch outcome as a console message."""
    if isinstance(outcome, Completed):
        return f"[green]Process completed with status {outcome.exit_code}[/green]"
    if isinstance(outcome, Abnormal):
        if outcome.timed_out:
            return "[red]Process terminated abnormally (timed out)[/red]"
        if outcome.signal is not None:
            return f"[red]Process terminated abnormally (signal {outcome.signal})[/red]"
        return "[red]Process terminated abnormally[/red]"
    if outcome.exit_code is not None:
        return f"[red]Failed to start process: {escape(outcome.reason)} (status {outcome.exit_code})[/red]"
    return f"[red]Failed to start process: {escape(outcome.reason)}[/red]"


class ProcessManagerApp:
    """
    Numbered-menu front end over the procman components.

    Reads one choice per line, runs the chosen action to completion, and
    returns to the prompt. Errors from an action are printed and never
    leave the loop.
    """

    TITLE = "Advanced Process Manager"
    SUB_TITLE = "System Monitoring & Control Center"

    def __init__(
        self,
        console: Console | None = None,
        stdin: TextIO | None = None,
        reader: ProcessReader | None = None,
        registry: TrackingRegistry | None = None,
        launch_timeout: float | None = None,
    ) -> None:
        """
        Initialize the ProcessManagerApp.

        Args:
            console: Console to render to. Defaults to stdout.
            stdin: Stream operator input is read from. Defaults to sys.stdin.
            reader: Process metadata reader.
            registry: Tracking registry owned by this session.
            launch_timeout: Optional limit for launched commands (seconds).
        """
        self.console = console or Console()
        self._stdin = stdin or sys.stdin
        self.reader = reader or ProcessReader()
        self.registry = registry or TrackingRegistry(self.reader)
        self._launch_timeout = launch_timeout
        self._state = MenuState.AWAITING_CHOICE
        self._actions = {
            1: self.list_processes,
            2: self.terminate_process,
            3: self.system_load,
            4: self.process_details,
            5: self.start_process,
            6: self.track_process,
            7: self.show_tracked,
        }

    @property
    def state(self) -> MenuState:
        """Get the current menu state."""
        return self._state

    def run(self) -> int:
        """Run the menu loop until exit. Returns the process exit code."""
        self.display_banner()
        while self._state is not MenuState.TERMINAL:
            self.display_menu()
            try:
                line = self._ask("[green]Enter your choice: [/green]")
            except KeyboardInterrupt:
                line = None
            if line is None:
                self.console.print()
                self._quit()
                break
            try:
                self.handle_input(line)
            except KeyboardInterrupt:
                self.console.print()
                self._quit()
        return 0

    def handle_input(self, line: str) -> None:
        """Process one line typed at the menu prompt."""
        try:
            choice = parse_choice(line)
        except MalformedInput:
            self.console.print("[red]Invalid input. Please enter a number.[/red]")
            return

        if choice == EXIT_CHOICE:
            self._quit()
            return

        action = self._actions.get(choice)
        if action is None:
            self.console.print("[red]Invalid choice. Please try again.[/red]")
            return

        logger.debug("Dispatching choice %d", choice)
        self._state = MenuState.DISPATCHING
        try:
            action()
        except ProcmanError as exc:
            self.console.print(f"[red]{escape(str(exc))}[/red]")
        finally:
            if self._state is MenuState.DISPATCHING:
                self._state = MenuState.AWAITING_CHOICE

    def _quit(self) -> None:
        self.console.print("[red]Exiting Process Manager.[/red]")
        self._state = MenuState.TERMINAL

    def _ask(self, prompt: str) -> str | None:
        """Prompt and read one line; None at end of input."""
        line = self.console.input(prompt, stream=self._stdin)
        if not line:
            return None
        return line.rstrip("\n")

    def _ask_required(self, prompt: str) -> str:
        """Prompt for a field that must be answered."""
        line = self._ask(prompt)
        if line is None:
            raise MalformedInput("", "a value")
        return line

    def display_banner(self) -> None:
        """Print the startup banner."""
        self.console.print(
            Panel.fit(
                f"[bold]{self.TITLE}[/bold]\n[dim]{self.SUB_TITLE}[/dim]",
                style="cyan",
                box=box.DOUBLE,
            )
        )

    def display_menu(self) -> None:
        """Print the numbered menu."""
        lines = []
        for number, label in MENU_OPTIONS:
            color = "red" if number == EXIT_CHOICE else "cyan"
            lines.append(f"{number}. [{color}]{label}[/{color}]")
        self.console.print(
            Panel("\n".join(lines), title="MENU OPTIONS", style="blue", box=box.DOUBLE, expand=False)
        )

    # Actions

    def list_processes(self) -> None:
        """Print every active process."""
        table = Table(title="ACTIVE PROCESSES", box=box.SIMPLE, title_style="bold green")
        table.add_column("PID", justify="right")
        table.add_column("USER")
        table.add_column("STATE")
        table.add_column("COMMAND")
        for record in self.reader.iter_records():
            table.add_row(
                str(record.pid),
                escape(record.username),
                record.state,
                escape(record.name),
            )
        self.console.print(table)

    def terminate_process(self) -> None:
        """Ask for a pid and a signal name, then signal the process."""
        pid = parse_pid(self._ask_required("Enter PID to terminate: "))
        kind = parse_signal_kind(self._ask_required("Enter signal (SIGTERM/SIGKILL): "))
        terminate(pid, kind)
        self.console.print(
            f"[green]Process {pid} terminated successfully with {kind.value}[/green]"
        )

    def system_load(self) -> None:
        """Print load averages and the memory summary."""
        report = report_load(self.reader.proc_root)
        self.console.print("[magenta]SYSTEM LOAD ANALYSIS:[/magenta]")
        if report.load_avg is not None:
            one, five, fifteen = report.load_avg
            self.console.print(
                f"Load Averages: {one:.2f} (1m), {five:.2f} (5m), {fifteen:.2f} (15m)"
            )
        if report.memory_lines is not None:
            self.console.print("\nMemory Information:")
            for line in report.memory_lines:
                self.console.print(escape(line), highlight=False)

    def process_details(self) -> None:
        """Ask for a pid and print its details."""
        pid = parse_pid(self._ask_required("Enter PID for details: "))
        record = self.reader.read(pid)
        self.console.print(self._render_details(record))

    def _render_details(self, record: ProcessRecord) -> Table:
        state = record.state
        if record.state_description:
            state = f"{state} ({record.state_description})"

        table = Table(
            title=f"Process Details for PID {record.pid}",
            box=box.SIMPLE,
            show_header=False,
            title_style="yellow",
        )
        table.add_column("Field", style="bold")
        table.add_column("Value")
        table.add_row("Name", escape(record.name))
        table.add_row("State", escape(state))
        table.add_row("Pid", str(record.pid))
        table.add_row("PPid", str(record.ppid))
        table.add_row("User", escape(record.username))
        table.add_row("VmSize", format_bytes(record.vm_size))
        table.add_row("VmRSS", format_bytes(record.vm_rss))
        table.add_row("Threads", str(record.threads))
        table.add_row("Command", escape(record.command_line))
        return table

    def start_process(self) -> None:
        """Ask for a shell command and run it to completion."""
        command = self._ask_required("Enter command to execute: ").strip()
        if not command:
            raise MalformedInput(command, "a command")
        outcome = launch(command, timeout=self._launch_timeout)
        self.console.print(describe_outcome(outcome))

    def track_process(self) -> None:
        """Ask for a pid and add it to the tracking registry."""
        pid = parse_pid(self._ask_required("Enter PID to track: "))
        entry = self.registry.track(pid)
        self.console.print(f"[green]Now tracking process {entry.pid} ({escape(entry.name)})[/green]")

    def show_tracked(self) -> None:
        """Print every tracked process with its current liveness."""
        views = self.registry.list_tracked()
        if not views:
            self.console.print("[yellow]No processes being tracked[/yellow]")
            return

        table = Table(title="TRACKED PROCESSES", box=box.SIMPLE, title_style="bold green")
        table.add_column("PID", justify="right")
        table.add_column("NAME")
        table.add_column("STATE")
        table.add_column("RUNTIME(s)", justify="right")
        table.add_column("SINCE")
        for view, entry in zip(views, self.registry.entries):
            since = datetime.fromtimestamp(entry.started_at).strftime("%H:%M:%S")
            if view.running:
                table.add_row(str(view.pid), escape(view.name), view.state, str(view.elapsed_seconds), since)
            else:
                table.add_row(str(view.pid), escape(view.name), "[red]ENDED[/red]", "-", since)
        self.console.print(table)


def main() -> None:
    """Entry point for procman."""
    logging.basicConfig(
        level=logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    app = ProcessManagerApp()
    raise SystemExit(app.run())


if __name__ == "__main__":
    main()
