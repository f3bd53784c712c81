"""Shared utility functions for project-factory.

Provides async command execution, small file-system helpers and Rich-based
console reporting.  External tools are always invoked with an explicit
working directory; nothing here changes the process-wide cwd.
"""

from __future__ import annotations

import asyncio
import os
import shlex
import stat
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

console = Console()


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class FactoryError(Exception):
    """Base class for every error the scaffolder reports to the user."""


class CommandError(FactoryError):
    """Raised when an external tool exits non-zero or cannot be started."""

    def __init__(
        self,
        message: str,
        command: str = "",
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
    env: dict[str, str] | None = None,
    echo: bool = False,
) -> tuple[int, str, str]:
    """Run an external command asynchronously.

    Args:
        cmd: Program and arguments.  No shell is involved.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds, ``None`` to wait indefinitely.
        env: Optional extra environment variables merged on top of ``os.environ``.
        echo: Print the command line before running it.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A program that cannot be
        found reports return code 127 and the OS error on stderr.
    """
    cmd_str = shlex.join(cmd)
    if echo:
        console.print(f"[dim]$ {escape(cmd_str)}[/dim]")

    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )
    except FileNotFoundError as exc:
        return (127, "", f"{cmd[0]}: {exc.strerror or 'command not found'}")

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {cmd_str}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace")
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


async def run_checked(
    cmd: list[str],
    cwd: str | Path | None = None,
    env: dict[str, str] | None = None,
    echo: bool = False,
) -> str:
    """Run *cmd* and return its stdout, raising ``CommandError`` on failure."""
    returncode, stdout, stderr = await run_command(cmd, cwd=cwd, env=env, echo=echo)
    if returncode != 0:
        cmd_str = shlex.join(cmd)
        raise CommandError(
            f"Command failed (exit {returncode}): {cmd_str}\n{stderr}".rstrip(),
            command=cmd_str,
            returncode=returncode,
            stderr=stderr,
        )
    return stdout


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def write_text(path: Path, content: str) -> Path:
    """Write *content* to *path*, creating parent directories, overwriting."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def append_text(path: Path, content: str) -> Path:
    """Append *content* to *path*, creating the file if it does not exist."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as handle:
        handle.write(content)
    return path


def make_executable(path: Path) -> None:
    """Set the executable bits on a file for user, group and others."""
    current = path.stat().st_mode
    path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_step(message: str) -> None:
    """Print a scaffold step as a cyan rule."""
    console.print(Rule(f"[bold bright_cyan]{escape(message)}[/bold bright_cyan]", style="bright_cyan"))


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(key), escape(str(value)))

    console.print(table)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
