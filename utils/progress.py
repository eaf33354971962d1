import platform
from rich.console import Console
from rich.spinner import Spinner
from rich.live import Live
from rich.progress import (
    Progress, BarColumn, TextColumn, DownloadColumn, TransferSpeedColumn, TimeElapsedColumn
)

# Platform detection for compatible symbols
IS_WINDOWS = platform.system().lower() == 'windows'

# Use ASCII-compatible symbols for Windows cmd.exe, Unicode for Linux/Mac
if IS_WINDOWS:
    SYMBOL_SUCCESS = "[OK]"
    SYMBOL_FAILED = "[X]"
    SPINNER_STYLE = "line"  # ASCII-compatible spinner for Windows
else:
    SYMBOL_SUCCESS = "✅"
    SYMBOL_FAILED = "❌"
    SPINNER_STYLE = "dots"  # Unicode spinner for Linux/Mac

console = Console()


class ProgressMonitor:
    """Context manager showing a spinner while a blocking operation runs."""

    def __init__(self, message: str = "Operation in progress"):
        """Initialize the progress monitor. """
        self.message = message
        self.spinner = Spinner(SPINNER_STYLE, text=f"│     {message}")
        self.live = None
        self.success = False
        self.failure_reason = None

    def __enter__(self):
        """Start the spinner display."""
        self.live = Live(self.spinner, console=console, refresh_per_second=10, transient=True)
        self.live.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Stop the spinner and show final status."""
        if self.live:
            self.live.stop()

        if self.success:
            console.print(f"  │     {SYMBOL_SUCCESS} {self.message} - Complete!", style="bold green")
        elif exc_type is not None:
            console.print(f"  │     {SYMBOL_FAILED} {self.message} - Failed ({exc_type.__name__})", style="bold red")
        elif self.failure_reason:
            console.print(f"  │     {SYMBOL_FAILED} {self.message} - {self.failure_reason}", style="bold red")
        return False

    def set_exit_code(self, exit_code: int):
        """Record the process exit code and derive the final status."""
        self.success = exit_code == 0
        if not self.success:
            self.failure_reason = f"Failed (exit code {exit_code})"


def download_progress():
    '''Progress bar for byte transfers (total may be unknown)'''
    return Progress(
        TextColumn("  │     [progress.description]{task.description}"),
        BarColumn(bar_width=40),
        DownloadColumn(),
        TransferSpeedColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False
    )
