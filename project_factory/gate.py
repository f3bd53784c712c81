#!/usr/bin/env python3
"""Pre-commit gate installed into every generated project.

This file is copied verbatim to ``.githooks/pre-commit``, so it runs inside
the generated project's environment where only the standard library is
guaranteed.  Four stages run in a fixed order:

1. autoflake  -- removes unused imports and variables (rewrites files)
2. black      -- formats code (rewrites files)
3. flake8     -- style checks (read-only)
4. isort      -- sorts imports (rewrites files)

The staged file list is recomputed before every stage because an earlier
stage may have re-staged files.  Within a stage every file is processed even
after a failure; the commit is blocked once the stage finishes if any file
failed, and later stages never run.
"""

from __future__ import annotations

import hashlib
import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, TextIO

SOURCE_SUFFIXES: tuple[str, ...] = (".py",)


@dataclass(frozen=True)
class Stage:
    """One external tool run over every staged source file."""

    name: str
    args: tuple[str, ...]
    mutating: bool
    banner: str
    notice: str = ""


STAGES: tuple[Stage, ...] = (
    Stage(
        name="autoflake",
        args=("-m", "autoflake", "--in-place"),
        mutating=True,
        banner="Checking unused imports and variables with autoflake...",
        notice="Autoflake removed unused imports in {path}. Staging the file.",
    ),
    Stage(
        name="black",
        args=("-m", "black", "--config=./pyproject.toml"),
        mutating=True,
        banner="Checking code with black...",
        notice="Black formatted code in {path}. Staging the file.",
    ),
    Stage(
        name="flake8",
        args=("-m", "flake8"),
        mutating=False,
        banner="Checking code with flake8...",
    ),
    Stage(
        name="isort",
        args=("-m", "isort", "--settings-file=./pyproject.toml"),
        mutating=True,
        banner="Checking imports with isort...",
        notice="isort sorted imports in {path}. Staging the file.",
    ),
)


@dataclass(frozen=True)
class ToolResult:
    """Outcome of running one tool on one file."""

    ok: bool
    changed: bool


ToolRunner = Callable[[list[str], Path, Path], ToolResult]


# ---------------------------------------------------------------------------
# Tool execution
# ---------------------------------------------------------------------------


def file_digest(path: Path) -> str | None:
    """Return the sha256 of *path*'s bytes, or ``None`` if it does not exist."""
    try:
        return hashlib.sha256(path.read_bytes()).hexdigest()
    except FileNotFoundError:
        return None


def run_tool(command: list[str], path: Path, cwd: Path) -> ToolResult:
    """Run *command* on *path* and report whether it succeeded and changed it.

    The tool's own output goes straight to the terminal so its diagnostics
    reach the person committing.
    """
    before = file_digest(path)
    try:
        completed = subprocess.run([*command, str(path)], cwd=cwd)
    except OSError as exc:
        print(f"Could not run {command[0]}: {exc}", file=sys.stderr)
        return ToolResult(ok=False, changed=False)
    after = file_digest(path)
    return ToolResult(ok=completed.returncode == 0, changed=before != after)


# ---------------------------------------------------------------------------
# Git index helpers
# ---------------------------------------------------------------------------


def staged_files(repo_root: Path, suffixes: tuple[str, ...] = SOURCE_SUFFIXES) -> list[str]:
    """Staged paths with a matching suffix, in git's order, deletions excluded.

    Names are decoded with :func:`os.fsdecode`, so bytes that are not valid
    UTF-8 survive the round trip back to ``git add`` and the filesystem.
    """
    completed = subprocess.run(
        ["git", "diff", "--cached", "--name-only", "--diff-filter=d", "-z"],
        cwd=repo_root,
        capture_output=True,
        check=True,
    )
    names = [os.fsdecode(raw) for raw in completed.stdout.split(b"\0") if raw]
    return [name for name in names if name.endswith(suffixes)]


def stage_file(repo_root: Path, name: str) -> None:
    subprocess.run(["git", "add", "--", name], cwd=repo_root, check=True)


def display_name(name: str) -> str:
    """*name* made safe to print; undecodable bytes become U+FFFD."""
    return os.fsencode(name).decode("utf-8", errors="replace")


def resolve_python(repo_root: Path) -> str:
    """Interpreter used to run the tools.

    ``$FACTORY_HOOK_PYTHON`` wins, then the project's ``venv`` interpreter,
    then whatever ``python`` is on ``PATH`` (an activated Poetry shell).
    """
    override = os.environ.get("FACTORY_HOOK_PYTHON")
    if override:
        return override
    venv_python = repo_root / "venv" / "bin" / "python"
    if venv_python.exists():
        return str(venv_python)
    return "python"


# ---------------------------------------------------------------------------
# Gate
# ---------------------------------------------------------------------------


class Gate:
    """Runs the stages over the staged files of one repository."""

    def __init__(
        self,
        repo_root: Path,
        python: str = "python",
        stages: tuple[Stage, ...] = STAGES,
        runner: ToolRunner = run_tool,
        out: TextIO | None = None,
    ) -> None:
        self.repo_root = Path(repo_root)
        self.python = python
        self.stages = stages
        self.runner = runner
        self.out = out or sys.stdout

    def command_for(self, stage: Stage) -> list[str]:
        return [self.python, *stage.args]

    def run_stage(self, stage: Stage) -> bool:
        """Run *stage* over every staged file; return ``True`` if all passed."""
        print(stage.banner, file=self.out)
        command = self.command_for(stage)
        passed = True

        for name in staged_files(self.repo_root):
            result = self.runner(command, self.repo_root / name, self.repo_root)
            if not result.ok:
                passed = False
            if stage.mutating and result.changed:
                print(stage.notice.format(path=display_name(name)), file=self.out)
                stage_file(self.repo_root, name)

        return passed

    def run(self) -> int:
        """Run every stage in order; return the process exit status."""
        for stage in self.stages:
            if not self.run_stage(stage):
                print(f"{stage.name} failed, commit aborted.", file=self.out)
                return 1
        return 0


def main() -> int:
    repo_root = Path.cwd()
    return Gate(repo_root, python=resolve_python(repo_root)).run()


if __name__ == "__main__":
    sys.exit(main())
