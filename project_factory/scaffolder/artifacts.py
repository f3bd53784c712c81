"""Content builders for every generated file.

Each function takes the ``FactoryConfig`` and returns the file's content:
text for templated files, a plain dict for JSON.  Nothing here touches the
filesystem, so content can be built in any order and asserted on directly.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from project_factory.config import FactoryConfig

from .templates import TemplateRenderer


GITIGNORE_ENTRIES: tuple[str, ...] = (
    "__pycache__/",
    "__pypackages__/",
    ".ipython/",
    "a.py",
    ".coverage",
    ".vscode",
    ".env",
    "venv",
)

# (code, reason) pairs written as commented entries of [tool.flake8].ignore
FLAKE8_IGNORES: tuple[tuple[str, str], ...] = (
    ("B009", "Do not call getattr(x, 'attr'), instead use normal property access: x.attr"),
    ("B010", "Do not call setattr(x, 'attr', val), instead use normal property access: x.attr = val"),
    ("B017", "assertRaises(Exception) and pytest.raises(Exception) should be considered evil"),
    ("B024", "Abstract base class has methods, but none of them are abstract."),
    ("E114", "indentation is not a multiple of four (comment)"),
    ("E116", "unexpected indentation (comment)"),
    ("E203", "whitespace before ',', ';', or ':'"),
    ("E225", "missing whitespace around operator"),
    ("E226", "missing whitespace around arithmetic operator"),
    ("E227", "missing whitespace around bitwise or shift operator"),
    ("E261", "at least two spaces before inline comment"),
    ("E265", "block comment should start with '# '"),
    ("E501", "line too long (82 > 79 characters)"),
    ("R503", "missing explicit return at the end of function able to return non-None value."),
    ("R504", "unnecessary variable assignment before return statement."),
    ("R505", "unnecessary else after return statement."),
    ("R506", "unnecessary else after raise statement."),
    ("SIM102", "Use a single if-statement instead of nested if-statements"),
    ("SIM110", "Use any(...)"),
    ("SIM114", "Combine conditions via a logical or to prevent duplicating code"),
    ("SIM905", "Split string directly if only constants are used"),
    ("SIM908", "Use dict.get(key)"),
    ("W503", "line break before binary operator"),
    ("W504", "line break after binary operator"),
)

FLAKE8_EXCLUDE: tuple[str, ...] = (".git",)

BANNED_MODULES: tuple[tuple[str, str], ...] = (
    ("typing.Optional", "Use | None"),
    ("typing.List", "Use list"),
    ("typing.Dict", "Use dict"),
    ("typing.Set", "Use set"),
    ("typing.Tuple", "Use tuple"),
    ("typing.Union", "Use |"),
)

IMMUTABLE_CALLS: tuple[str, ...] = ("Depends",)
MAX_COMPLEXITY = 15


@lru_cache(maxsize=1)
def default_renderer() -> TemplateRenderer:
    return TemplateRenderer()


def template_context(config: FactoryConfig) -> dict[str, Any]:
    """Variables shared by every template."""
    return {
        "project_name": config.project_name,
        "line_length": config.line_length,
        "uses_poetry": config.uses_poetry,
        "python_image": config.python_image,
    }


def _render(template: str, config: FactoryConfig, renderer: TemplateRenderer | None, **extra: Any) -> str:
    renderer = renderer or default_renderer()
    return renderer.render(template, {**template_context(config), **extra})


# ---------------------------------------------------------------------------
# Repository files
# ---------------------------------------------------------------------------


def gitignore(config: FactoryConfig, renderer: TemplateRenderer | None = None) -> str:
    return _render("gitignore.j2", config, renderer, entries=GITIGNORE_ENTRIES)


def lint_config(config: FactoryConfig, renderer: TemplateRenderer | None = None) -> str:
    """The ``[tool.flake8]``, ``[tool.black]`` and ``[tool.isort]`` block.

    Appended to ``pyproject.toml``; the line length appears in both the
    black and the isort section.
    """
    return _render(
        "pyproject/lint.toml.j2",
        config,
        renderer,
        flake8_ignores=FLAKE8_IGNORES,
        flake8_exclude=FLAKE8_EXCLUDE,
        banned_modules=BANNED_MODULES,
        immutable_calls=IMMUTABLE_CALLS,
        max_complexity=MAX_COMPLEXITY,
    )


def poetry_dev_group(config: FactoryConfig, renderer: TemplateRenderer | None = None) -> str:
    return _render("pyproject/poetry_dev_group.toml.j2", config, renderer)


def readme(config: FactoryConfig, renderer: TemplateRenderer | None = None) -> str:
    return _render("README.md.j2", config, renderer)


def vscode_settings(config: FactoryConfig, executables_base: Path) -> dict[str, Any]:
    """VSCode workspace settings pointing at the project's environment.

    Args:
        config: The run configuration (supplies the ruler position).
        executables_base: Environment root whose ``bin/`` holds the
            interpreter and the linters.
    """
    bin_dir = Path(executables_base) / "bin"
    return {
        "python.defaultInterpreterPath": str(bin_dir / "python"),
        "black-formatter.path": [str(bin_dir / "black")],
        "flake8.path": [str(bin_dir / "flake8")],
        "isort.check": True,
        "isort.path": [str(bin_dir / "isort")],
        "[python]": {
            "editor.defaultFormatter": "ms-python.black-formatter",
            "editor.formatOnSave": True,
        },
        "editor.rulers": [config.line_length],
    }


def dump_json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=4) + "\n"


# ---------------------------------------------------------------------------
# Docker development setup
# ---------------------------------------------------------------------------


def dockerfile(config: FactoryConfig, renderer: TemplateRenderer | None = None) -> str:
    """``docker/Dockerfile.dev``; installs from poetry.lock or requirements.txt."""
    return _render("docker/Dockerfile.dev.j2", config, renderer)


def entrypoint(config: FactoryConfig, renderer: TemplateRenderer | None = None) -> str:
    return _render("docker/entrypoint.sh.j2", config, renderer)


def compose(config: FactoryConfig, renderer: TemplateRenderer | None = None) -> str:
    return _render("docker-compose.yml.j2", config, renderer)


def dockerignore(config: FactoryConfig, renderer: TemplateRenderer | None = None) -> str:
    return _render("dockerignore.j2", config, renderer)


def command_script(config: FactoryConfig, renderer: TemplateRenderer | None = None) -> str:
    return _render("scripts/command.sh.j2", config, renderer)
