"""Command-line entry point for project-factory.

Usage::

    project-factory ~/code demo
    project-factory ~/code demo --poetry --docker --line-length=100
    python -m project_factory /tmp demo -l=80 --vscode
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path

from pydantic import ValidationError

from project_factory import __version__
from project_factory.config import DEFAULT_LINE_LENGTH, DependencyManager, FactoryConfig
from project_factory.scaffolder import ProjectGenerator
from project_factory.utils import (
    FactoryError,
    format_duration,
    print_error,
    print_success,
    print_summary_table,
)


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with status 1 like every other failure."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        print_error(f"Error: {message}")
        sys.exit(1)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="project-factory",
        description="Scaffold a new Python project with git, linters and a pre-commit gate.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  project-factory ~/code demo\n"
            "  project-factory ~/code demo --poetry --docker\n"
            "  project-factory /tmp demo -l=80 --vscode --no-commit\n"
        ),
    )

    parser.add_argument("project_path", help="Parent directory of the new project")
    parser.add_argument(
        "project_name",
        help="Project name; creates <project_path>/<project_name>-project/<project_name>/",
    )
    parser.add_argument(
        "-d", "--docker",
        action="store_true",
        default=None,
        help="Create a docker compose development setup",
    )
    parser.add_argument(
        "-l", "--line-length",
        type=_positive_int,
        default=None,
        metavar="N",
        help=f"Line length for black, isort and the editor ruler (default: {DEFAULT_LINE_LENGTH})",
    )

    managers = parser.add_mutually_exclusive_group()
    managers.add_argument(
        "-p", "--poetry",
        dest="dependency_manager",
        action="store_const",
        const=DependencyManager.POETRY.value,
        help="Manage dependencies with poetry",
    )
    managers.add_argument(
        "--venv",
        dest="dependency_manager",
        action="store_const",
        const=DependencyManager.VENV.value,
        help="Use a plain virtual environment (default)",
    )

    parser.add_argument(
        "-n", "--no-commit",
        dest="commit",
        action="store_false",
        default=None,
        help="Do not make an initial commit",
    )
    parser.add_argument(
        "--vscode",
        action="store_true",
        default=None,
        help="Write .vscode/settings.json for the project's environment",
    )
    parser.add_argument(
        "--keep-partial",
        dest="rollback",
        action="store_false",
        default=None,
        help="Leave a half-built project in place when a step fails",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=None,
        help="Echo every external command",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace) -> FactoryConfig:
    """Resolve parsed arguments (over environment defaults) into a config."""
    return FactoryConfig.from_env(
        project_path=Path(args.project_path).expanduser().resolve(),
        project_name=args.project_name,
        line_length=args.line_length,
        docker=args.docker,
        dependency_manager=args.dependency_manager,
        commit=args.commit,
        vscode=args.vscode,
        rollback=args.rollback,
        verbose=args.verbose,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``project-factory`` and ``python -m project_factory``."""
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except ValidationError as exc:
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"])
            print_error(f"Error: invalid {field}: {error['msg']}")
        sys.exit(1)
    except ValueError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    started = time.monotonic()
    try:
        project_root = asyncio.run(ProjectGenerator(config).generate())
    except FactoryError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        print_error("Interrupted")
        sys.exit(1)

    print_summary_table(
        {
            "Project": str(project_root),
            "Package": config.project_name,
            "Environment": config.dependency_manager.value,
            "Line length": str(config.line_length),
            "Docker": "yes" if config.docker else "no",
            "VSCode settings": "yes" if config.vscode else "no",
            "Initial commit": "yes" if config.commit else "no",
            "Elapsed": format_duration(time.monotonic() - started),
        },
        title="Project created",
    )
    print_success("Done!")


if __name__ == "__main__":
    main()
