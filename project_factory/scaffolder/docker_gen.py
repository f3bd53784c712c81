"""Docker development setup generation.

Writes ``docker/Dockerfile.dev``, ``docker/entrypoint.sh``,
``docker-compose.yml``, ``.dockerignore`` and the ``scripts/command.sh``
helper that runs a command inside the compose service.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable

from project_factory.config import FactoryConfig
from project_factory.utils import make_executable, write_text

from . import artifacts
from .templates import TemplateRenderer


class DockerGenerator:
    """Generates the Docker development files for one project."""

    # Output path (relative to the project root) -> content builder
    _FILES: dict[str, Callable[[FactoryConfig, TemplateRenderer | None], str]] = {
        "docker/Dockerfile.dev": artifacts.dockerfile,
        "docker/entrypoint.sh": artifacts.entrypoint,
        "docker-compose.yml": artifacts.compose,
        ".dockerignore": artifacts.dockerignore,
        "scripts/command.sh": artifacts.command_script,
    }

    _EXECUTABLES: tuple[str, ...] = ("docker/entrypoint.sh", "scripts/command.sh")

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    async def generate_all(self, config: FactoryConfig) -> dict[str, Path]:
        """Write every Docker file under ``config.project_root``.

        Returns:
            Mapping of relative name to written file path.
        """
        root = config.project_root
        result: dict[str, Path] = {}

        for relative, build in self._FILES.items():
            out = root / relative
            await asyncio.to_thread(write_text, out, build(config, self.renderer))
            if relative in self._EXECUTABLES:
                await asyncio.to_thread(make_executable, out)
            result[relative] = out

        return result
