"""Shared pytest fixtures for the project-factory test suite.

Provides reusable fixtures for:
- An isolated git identity so real ``git commit`` works in any environment
- Temporary git repositories
- Factory configurations rooted in ``tmp_path``
- A fake environment strategy that skips venv/poetry installs
- Mock asyncio subprocess helpers
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from project_factory.config import FactoryConfig
from project_factory.scaffolder.environment import EnvironmentSetup
from project_factory.scaffolder.templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Git isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_git(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's git config (signing, hooks, templates) out of tests."""
    global_config = tmp_path_factory.mktemp("gitconfig") / "config"
    global_config.write_text("", encoding="utf-8")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Factory Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@project-factory.local")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Factory Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@project-factory.local")
    monkeypatch.delenv("FACTORY_HOOK_PYTHON", raising=False)
    for name in (
        "FACTORY_LINE_LENGTH",
        "FACTORY_DEPENDENCY_MANAGER",
        "FACTORY_DOCKER",
        "FACTORY_VSCODE",
        "FACTORY_PYTHON_IMAGE",
    ):
        monkeypatch.delenv(name, raising=False)


def git(repo: Path, *args: str) -> str:
    """Run git in *repo* and return stdout (test helper)."""
    completed = subprocess.run(
        ["git", *args], cwd=repo, check=True, capture_output=True, text=True
    )
    return completed.stdout


@pytest.fixture
def run_git():
    """The :func:`git` helper, for tests that inspect repositories."""
    return git


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Temporary git repository with an initial commit."""
    repo_dir = tmp_path / "test-repo"
    repo_dir.mkdir()
    git(repo_dir, "init", "-q")
    readme = repo_dir / "README.md"
    readme.write_text("# Test Project\n", encoding="utf-8")
    git(repo_dir, "add", ".")
    git(repo_dir, "commit", "-q", "-m", "Initial commit")
    yield repo_dir


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def factory_config(tmp_path: Path) -> FactoryConfig:
    """Default configuration creating ``<tmp_path>/demo-project``."""
    return FactoryConfig(project_path=tmp_path, project_name="demo")


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Fake environment strategy
# ---------------------------------------------------------------------------

class FakeEnvironment(EnvironmentSetup):
    """Writes a requirements file instead of creating a real environment."""

    name = "fake"

    def __init__(self, renderer: TemplateRenderer, fail_with: BaseException | None = None) -> None:
        super().__init__(renderer)
        self.fail_with = fail_with
        self.setup_calls = 0

    async def setup(self, config: FactoryConfig) -> None:
        self.setup_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        (config.project_root / "requirements.txt").write_text(
            "black==24.1.0\nflake8==7.0.0\n", encoding="utf-8"
        )

    async def executables_base(self, config: FactoryConfig) -> Path:
        return config.venv_dir


@pytest.fixture
def fake_environment(renderer: TemplateRenderer) -> FakeEnvironment:
    return FakeEnvironment(renderer)


@pytest.fixture
def make_environment(renderer: TemplateRenderer):
    """Factory for FakeEnvironment instances, e.g. one whose setup fails."""
    def factory(fail_with: BaseException | None = None) -> FakeEnvironment:
        return FakeEnvironment(renderer, fail_with=fail_with)

    return factory


# ---------------------------------------------------------------------------
# Mock subprocess
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
