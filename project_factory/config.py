"""project-factory configuration.

A single, immutable Pydantic v2 model resolved once from the command line
(and optionally from environment defaults) and then threaded through every
scaffolding step.  Nothing reads process-wide state after construction.
"""

from __future__ import annotations

import keyword
import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_LINE_LENGTH = 120
DEFAULT_PYTHON_IMAGE = "public.ecr.aws/docker/library/python:3.12"
DEFAULT_COMMIT_MESSAGE = "Initial project setup"

_TRUTHY = {"1", "true", "yes", "on"}


class DependencyManager(str, Enum):
    """How the generated project's environment is managed."""

    VENV = "venv"
    POETRY = "poetry"


class FactoryConfig(BaseModel):
    """Resolved options for one scaffolding run.

    Instances are frozen: every step receives the same value and derives its
    paths from it instead of changing directories.
    """

    model_config = ConfigDict(frozen=True)

    project_path: Path = Field(..., description="Parent directory of the new project")
    project_name: str = Field(
        ...,
        min_length=1,
        description="Project name, also used as the importable package directory name",
    )
    line_length: int = Field(default=DEFAULT_LINE_LENGTH, gt=0)
    docker: bool = Field(default=False, description="Emit the Docker development setup")
    dependency_manager: DependencyManager = Field(default=DependencyManager.VENV)
    commit: bool = Field(default=True, description="Make the initial commit")
    vscode: bool = Field(default=False, description="Write .vscode/settings.json")
    rollback: bool = Field(
        default=True, description="Remove the half-built project when a step fails"
    )
    verbose: bool = Field(default=False, description="Echo external commands")
    python_image: str = Field(default=DEFAULT_PYTHON_IMAGE)
    commit_message: str = Field(default=DEFAULT_COMMIT_MESSAGE, min_length=1)

    @field_validator("project_name")
    @classmethod
    def check_importable_name(cls, value: str) -> str:
        if not value.isidentifier() or keyword.iskeyword(value):
            raise ValueError(
                f"{value!r} is not a valid Python package name (use letters, digits and underscores)"
            )
        return value

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def project_root(self) -> Path:
        """The directory the scaffolder creates: ``<path>/<name>-project``."""
        return self.project_path / f"{self.project_name}-project"

    @property
    def package_dir(self) -> Path:
        """The importable package directory inside the project root."""
        return self.project_root / self.project_name

    @property
    def hooks_dir(self) -> Path:
        return self.project_root / ".githooks"

    @property
    def hook_path(self) -> Path:
        return self.hooks_dir / "pre-commit"

    @property
    def pyproject_path(self) -> Path:
        return self.project_root / "pyproject.toml"

    @property
    def venv_dir(self) -> Path:
        return self.project_root / "venv"

    @property
    def uses_poetry(self) -> bool:
        return self.dependency_manager is DependencyManager.POETRY

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, **overrides: Any) -> "FactoryConfig":
        """Build a ``FactoryConfig`` with environment variables as defaults.

        Recognised variables (all optional):
            FACTORY_LINE_LENGTH, FACTORY_DEPENDENCY_MANAGER, FACTORY_DOCKER,
            FACTORY_VSCODE, FACTORY_PYTHON_IMAGE.

        Keyword arguments whose value is not ``None`` win over the
        environment; ``project_path`` and ``project_name`` must be given.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("FACTORY_LINE_LENGTH"):
            kwargs["line_length"] = int(os.environ["FACTORY_LINE_LENGTH"])
        if os.environ.get("FACTORY_DEPENDENCY_MANAGER"):
            kwargs["dependency_manager"] = os.environ["FACTORY_DEPENDENCY_MANAGER"].lower()
        if os.environ.get("FACTORY_DOCKER"):
            kwargs["docker"] = os.environ["FACTORY_DOCKER"].lower() in _TRUTHY
        if os.environ.get("FACTORY_VSCODE"):
            kwargs["vscode"] = os.environ["FACTORY_VSCODE"].lower() in _TRUTHY
        if os.environ.get("FACTORY_PYTHON_IMAGE"):
            kwargs["python_image"] = os.environ["FACTORY_PYTHON_IMAGE"]

        kwargs.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**kwargs)
