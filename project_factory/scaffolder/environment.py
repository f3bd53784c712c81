"""Dependency environment setup for the generated project.

Two strategies share one interface: a plain ``venv`` with a frozen
``requirements.txt``, or a Poetry project with an optional ``dev`` group.
Both install the same linter set the pre-commit gate relies on.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from project_factory.config import FactoryConfig
from project_factory.utils import append_text, console, run_checked, write_text

from . import artifacts
from .templates import TemplateRenderer


LINTERS: tuple[str, ...] = (
    "autoflake",
    "autopep8",
    "black",
    "flake8",
    "flake8-black",
    "flake8-bugbear",
    "flake8-comprehensions",
    "flake8-pyproject",
    "flake8-return",
    "flake8-tidy-imports",
    "flake8-implicit-str-concat",
    "flake8-simplify",
    "isort",
)


class EnvironmentSetup:
    """Creates the project's environment and installs the linters."""

    name = "environment"

    def __init__(self, renderer: TemplateRenderer, packages: tuple[str, ...] = LINTERS) -> None:
        self.renderer = renderer
        self.packages = packages

    async def setup(self, config: FactoryConfig) -> None:
        raise NotImplementedError

    async def executables_base(self, config: FactoryConfig) -> Path:
        """Environment root whose ``bin/`` holds the interpreter and linters."""
        raise NotImplementedError


class VenvEnvironment(EnvironmentSetup):
    """``python -m venv venv`` plus ``pip install`` and ``pip freeze``."""

    name = "venv"

    def __init__(
        self,
        renderer: TemplateRenderer,
        packages: tuple[str, ...] = LINTERS,
        python: str = sys.executable,
    ) -> None:
        super().__init__(renderer, packages)
        self.python = python

    async def setup(self, config: FactoryConfig) -> None:
        root = config.project_root
        pip = str(config.venv_dir / "bin" / "pip")

        console.print("[cyan]Setting up venv...[/cyan]")
        await run_checked(
            [self.python, "-m", "venv", config.venv_dir.name], cwd=root, echo=config.verbose
        )
        await run_checked([pip, "install", "-q", *self.packages], cwd=root, echo=config.verbose)

        frozen = await run_checked([pip, "freeze"], cwd=root, echo=config.verbose)
        await asyncio.to_thread(write_text, root / "requirements.txt", frozen)

    async def executables_base(self, config: FactoryConfig) -> Path:
        return config.venv_dir


class PoetryEnvironment(EnvironmentSetup):
    """``poetry init`` with the linters in an optional ``dev`` group."""

    name = "poetry"

    async def setup(self, config: FactoryConfig) -> None:
        root = config.project_root

        console.print("[cyan]Setting up poetry env...[/cyan]")
        await run_checked(
            ["poetry", "init", "-n", f"--name={config.project_name}"],
            cwd=root,
            echo=config.verbose,
        )
        await asyncio.to_thread(
            write_text, root / "README.md", artifacts.readme(config, self.renderer)
        )

        console.print("[cyan]Adding linters...[/cyan]")
        await asyncio.to_thread(
            append_text, config.pyproject_path, artifacts.poetry_dev_group(config, self.renderer)
        )
        await run_checked(
            ["poetry", "add", "-q", "--group", "dev", *self.packages],
            cwd=root,
            echo=config.verbose,
        )
        await run_checked(["poetry", "install", "-q", "--with", "dev"], cwd=root, echo=config.verbose)

    async def executables_base(self, config: FactoryConfig) -> Path:
        stdout = await run_checked(
            ["poetry", "env", "info", "-p"], cwd=config.project_root, echo=config.verbose
        )
        return Path(stdout.strip())


def environment_for(config: FactoryConfig, renderer: TemplateRenderer) -> EnvironmentSetup:
    """Pick the environment strategy named by ``config.dependency_manager``."""
    if config.uses_poetry:
        return PoetryEnvironment(renderer)
    return VenvEnvironment(renderer)
