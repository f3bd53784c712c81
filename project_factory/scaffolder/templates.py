"""Jinja2 rendering of the text files a generated project starts with.

Templates ship inside the package (``project_factory/scaffolder/templates``)
as plain-text ``.j2`` files; they are never HTML-escaped.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import BaseLoader, Environment, FileSystemLoader, PackageLoader, StrictUndefined


class TemplateRenderer:
    """Loads and renders the scaffolding templates.

    A missing context variable raises ``jinja2.UndefinedError`` instead of
    silently rendering an empty string into a config file.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        loader: BaseLoader
        if template_dir is None:
            loader = PackageLoader("project_factory.scaffolder", "templates")
        else:
            loader = FileSystemLoader(str(template_dir))

        self.env = Environment(
            loader=loader,
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render *template_name* (e.g. ``"docker/Dockerfile.dev.j2"``)."""
        return self.env.get_template(template_name).render(**context)
