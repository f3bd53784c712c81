"""Git repository operations used while scaffolding.

Initialises the repository, points ``core.hooksPath`` at the generated hook
directory and makes the initial commit.
"""

from __future__ import annotations

import shlex
from pathlib import Path

from rich.markup import escape

from project_factory.utils import CommandError, console, run_command


class GitError(CommandError):
    """Raised when a git command fails."""


async def _run_git(
    *args: str,
    cwd: str | Path,
    echo: bool = False,
) -> str:
    """Run a git command and return its stdout.

    Raises GitError if the command exits with a non-zero code.
    """
    cmd = ["git", *args]
    returncode, stdout, stderr = await run_command(cmd, cwd=cwd, echo=echo)
    if returncode != 0:
        cmd_str = shlex.join(cmd)
        raise GitError(
            f"Git command failed (exit {returncode}): {cmd_str}\n{stderr}".rstrip(),
            command=cmd_str,
            returncode=returncode,
            stderr=stderr,
        )
    return stdout


class GitRepository:
    """Thin wrapper over the git CLI for one working tree."""

    def __init__(self, path: str | Path, echo: bool = False) -> None:
        self.path = Path(path)
        self.echo = echo

    async def init(self) -> None:
        await _run_git("init", "-q", cwd=self.path, echo=self.echo)
        console.print(f"[green]Initialized git repository[/green] in {escape(str(self.path))}")

    async def set_hooks_path(self, hooks_dir: str) -> None:
        """Point ``core.hooksPath`` at *hooks_dir* (relative to the work tree)."""
        await _run_git("config", "core.hooksPath", hooks_dir, cwd=self.path, echo=self.echo)

    async def add_all(self) -> None:
        await _run_git("add", "-A", cwd=self.path, echo=self.echo)

    async def commit(self, message: str, no_verify: bool = True) -> None:
        """Commit the index.

        The initial commit skips hooks by default: the linters may not be
        importable from the caller's interpreter yet.
        """
        args = ["commit", "-q", "-m", message]
        if no_verify:
            args.append("--no-verify")
        await _run_git(*args, cwd=self.path, echo=self.echo)

    async def status_porcelain(self) -> str:
        return await _run_git("status", "--porcelain", cwd=self.path, echo=self.echo)
