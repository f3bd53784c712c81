"""Installation of the pre-commit gate into a generated project."""

from __future__ import annotations

from importlib import resources
from pathlib import Path

from project_factory.config import FactoryConfig
from project_factory.utils import make_executable, write_text


def gate_source() -> str:
    """Source of :mod:`project_factory.gate`, which doubles as the hook script."""
    return resources.files("project_factory").joinpath("gate.py").read_text(encoding="utf-8")


def install_pre_commit_hook(config: FactoryConfig) -> Path:
    """Write ``.githooks/pre-commit`` and set its executable bits.

    The permission change is a plain ``chmod`` on a file we own, so no
    elevated privileges are requested.
    """
    hook = write_text(config.hook_path, gate_source())
    make_executable(hook)
    return hook
