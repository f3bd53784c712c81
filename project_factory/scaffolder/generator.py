"""Main scaffolding orchestrator.

Takes a ``FactoryConfig`` and produces ``<path>/<name>-project``: package
directory, git repository with the pre-commit gate installed, environment
with the linters, lint configuration, optional VSCode settings and Docker
setup, and the initial commit.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from project_factory.config import FactoryConfig
from project_factory.utils import FactoryError, append_text, print_step, print_warning, write_text

from . import artifacts
from .docker_gen import DockerGenerator
from .environment import EnvironmentSetup, environment_for
from .git import GitRepository
from .hooks import install_pre_commit_hook
from .templates import TemplateRenderer


class ProjectExistsError(FactoryError):
    """Raised when the target project directory is already present."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Project directory already exists: {path}")


class ProjectGenerator:
    """Runs every scaffolding step, in order, for one configuration.

    Steps never change the process working directory; each one derives its
    paths from ``config``.  When a step fails and ``config.rollback`` is set
    the half-built project directory is removed before the error propagates.
    """

    def __init__(
        self,
        config: FactoryConfig,
        environment: EnvironmentSetup | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()
        self.environment = environment or environment_for(config, self.renderer)
        self.docker_gen = DockerGenerator(self.renderer)
        self.git = GitRepository(config.project_root, echo=config.verbose)

    # -- Public API --------------------------------------------------------

    async def generate(self) -> Path:
        """Generate the project and return its root directory.

        Raises:
            ProjectExistsError: The target directory already exists.  Nothing
                is written in that case.
            CommandError: An external tool failed.
        """
        root = self.config.project_root
        if root.exists():
            raise ProjectExistsError(root)

        print_step("Creating directories")
        try:
            await asyncio.to_thread(root.mkdir, parents=True)
        except FileExistsError:
            raise ProjectExistsError(root) from None

        try:
            await self._create_package()
            await self._init_git()
            await self._setup_environment()
            await self._write_lint_config()
            if self.config.vscode:
                await self._write_vscode_settings()
            if self.config.docker:
                await self._generate_docker()
            if self.config.commit:
                await self._initial_commit()
        except BaseException:
            # Ctrl-C arrives as CancelledError or KeyboardInterrupt; removal stays synchronous
            if self.config.rollback:
                print_warning(f"Scaffolding failed, removing {root}")
                shutil.rmtree(root, ignore_errors=True)
            raise

        return root

    # -- Steps -------------------------------------------------------------

    async def _create_package(self) -> None:
        package_dir = self.config.package_dir
        await asyncio.to_thread(package_dir.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(write_text, package_dir / "__init__.py", "")

    async def _init_git(self) -> None:
        print_step("Initializing git repository")
        root = self.config.project_root
        await self.git.init()
        await asyncio.to_thread(
            append_text, root / ".gitignore", artifacts.gitignore(self.config, self.renderer)
        )
        await asyncio.to_thread(install_pre_commit_hook, self.config)
        await self.git.set_hooks_path(self.config.hooks_dir.name)

    async def _setup_environment(self) -> None:
        print_step(f"Setting up {self.environment.name} environment")
        await self.environment.setup(self.config)

    async def _write_lint_config(self) -> None:
        print_step("Writing linter configuration")
        await asyncio.to_thread(
            append_text, self.config.pyproject_path, artifacts.lint_config(self.config, self.renderer)
        )

    async def _write_vscode_settings(self) -> None:
        print_step("Creating VSCode settings")
        base = await self.environment.executables_base(self.config)
        settings = artifacts.vscode_settings(self.config, base)
        await asyncio.to_thread(
            write_text,
            self.config.project_root / ".vscode" / "settings.json",
            artifacts.dump_json(settings),
        )

    async def _generate_docker(self) -> None:
        print_step("Creating docker setup")
        await self.docker_gen.generate_all(self.config)

    async def _initial_commit(self) -> None:
        print_step("Making an initial commit")
        await self.git.add_all()
        await self.git.commit(self.config.commit_message)
        leftover = await self.git.status_porcelain()
        if leftover.strip():
            print_warning(f"Working tree not clean after the initial commit:\n{leftover.rstrip()}")
