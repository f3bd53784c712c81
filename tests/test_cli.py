"""Tests for the command-line entry point (project_factory.cli).

Covers:
- Positional arguments and flag parsing, including ``-l=N``
- Usage errors exit with status 1, --help with 0
- Mutually exclusive dependency-manager flags
- Config resolution from arguments over environment defaults
- main(): success path, existing target, tool failure
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from project_factory.cli import build_parser, config_from_args, main
from project_factory.config import DependencyManager
from project_factory.scaffolder import ProjectExistsError
from project_factory.utils import CommandError


pytestmark = pytest.mark.unit


def _config(argv: list[str]):
    return config_from_args(build_parser().parse_args(argv))


class TestParsing:
    def test_positional_arguments(self, tmp_path: Path):
        config = _config([str(tmp_path), "demo"])
        assert config.project_path == tmp_path.resolve()
        assert config.project_name == "demo"
        assert config.line_length == 120
        assert config.dependency_manager is DependencyManager.VENV
        assert config.docker is False
        assert config.commit is True

    @pytest.mark.parametrize(
        "flag", [["-l=80"], ["-l", "80"], ["--line-length=80"], ["--line-length", "80"]]
    )
    def test_line_length_spellings(self, tmp_path: Path, flag: list[str]):
        assert _config([str(tmp_path), "demo", *flag]).line_length == 80

    def test_short_flags(self, tmp_path: Path):
        config = _config([str(tmp_path), "demo", "-d", "-p", "-n", "-v"])
        assert config.docker is True
        assert config.dependency_manager is DependencyManager.POETRY
        assert config.commit is False
        assert config.verbose is True

    def test_long_flags(self, tmp_path: Path):
        config = _config(
            [str(tmp_path), "demo", "--docker", "--poetry", "--no-commit", "--vscode", "--keep-partial"]
        )
        assert config.docker is True
        assert config.uses_poetry is True
        assert config.commit is False
        assert config.vscode is True
        assert config.rollback is False

    def test_flags_before_positionals(self, tmp_path: Path):
        config = _config(["--docker", str(tmp_path), "demo"])
        assert config.docker is True

    def test_relative_path_resolved(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        assert _config([".", "demo"]).project_path == tmp_path.resolve()

    def test_env_defaults_apply_when_flags_absent(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FACTORY_LINE_LENGTH", "100")
        monkeypatch.setenv("FACTORY_DOCKER", "1")
        config = _config([str(tmp_path), "demo"])
        assert config.line_length == 100
        assert config.docker is True

    def test_flags_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FACTORY_DEPENDENCY_MANAGER", "poetry")
        assert _config([str(tmp_path), "demo", "--venv"]).dependency_manager is DependencyManager.VENV


class TestUsageErrors:
    def test_missing_arguments_exit_1(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args([])
        assert exc_info.value.code == 1

    def test_missing_name_exit_1(self, tmp_path: Path):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args([str(tmp_path)])
        assert exc_info.value.code == 1

    @pytest.mark.parametrize("value", ["0", "-3", "abc"])
    def test_invalid_line_length_exit_1(self, tmp_path: Path, value: str):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args([str(tmp_path), "demo", f"--line-length={value}"])
        assert exc_info.value.code == 1

    def test_poetry_and_venv_are_exclusive(self, tmp_path: Path):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args([str(tmp_path), "demo", "--poetry", "--venv"])
        assert exc_info.value.code == 1

    def test_help_exit_0(self, capsys: pytest.CaptureFixture[str]):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["-h"])
        assert exc_info.value.code == 0
        assert "project_path" in capsys.readouterr().out

    def test_invalid_project_name_exit_1(self, tmp_path: Path):
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path), "bad/name"])
        assert exc_info.value.code == 1

    def test_invalid_env_value_exit_1(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FACTORY_LINE_LENGTH", "wide")
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path), "demo"])
        assert exc_info.value.code == 1


class TestMain:
    def _patched_generator(self, generate: AsyncMock) -> MagicMock:
        generator_cls = MagicMock()
        generator_cls.return_value.generate = generate
        return generator_cls

    def test_success(self, tmp_path: Path):
        generate = AsyncMock(return_value=tmp_path / "demo-project")
        generator_cls = self._patched_generator(generate)

        with patch("project_factory.cli.ProjectGenerator", generator_cls):
            main([str(tmp_path), "demo", "-l=80"])

        config = generator_cls.call_args.args[0]
        assert config.line_length == 80
        generate.assert_awaited_once()

    def test_existing_target_exit_1(self, tmp_path: Path):
        generate = AsyncMock(side_effect=ProjectExistsError(tmp_path / "demo-project"))

        with patch("project_factory.cli.ProjectGenerator", self._patched_generator(generate)):
            with pytest.raises(SystemExit) as exc_info:
                main([str(tmp_path), "demo"])

        assert exc_info.value.code == 1

    def test_tool_failure_exit_1(self, tmp_path: Path):
        generate = AsyncMock(side_effect=CommandError("poetry: command not found"))

        with patch("project_factory.cli.ProjectGenerator", self._patched_generator(generate)):
            with pytest.raises(SystemExit) as exc_info:
                main([str(tmp_path), "demo", "--poetry"])

        assert exc_info.value.code == 1

    def test_tool_stderr_with_brackets_exit_1(self, tmp_path: Path):
        generate = AsyncMock(
            side_effect=CommandError("Command failed (exit 1): pip install\nmissing [/opt/wheels] index")
        )

        with patch("project_factory.cli.ProjectGenerator", self._patched_generator(generate)):
            with pytest.raises(SystemExit) as exc_info:
                main([str(tmp_path), "demo"])

        assert exc_info.value.code == 1

    def test_interrupt_exit_1(self, tmp_path: Path):
        generate = AsyncMock(side_effect=KeyboardInterrupt())

        with patch("project_factory.cli.ProjectGenerator", self._patched_generator(generate)):
            with pytest.raises(SystemExit) as exc_info:
                main([str(tmp_path), "demo"])

        assert exc_info.value.code == 1

    @pytest.mark.integration
    def test_end_to_end_with_fake_environment(self, tmp_path: Path, fake_environment, run_git):
        with patch(
            "project_factory.scaffolder.generator.environment_for", return_value=fake_environment
        ):
            main([str(tmp_path), "demo", "--line-length=80"])

        root = tmp_path / "demo-project"
        assert (root / "demo" / "__init__.py").is_file()
        assert (root / "pyproject.toml").read_text(encoding="utf-8").count("line_length = 80") == 2
        assert run_git(root, "log", "--format=%s").splitlines() == ["Initial project setup"]

    @pytest.mark.integration
    def test_existing_directory_end_to_end(self, tmp_path: Path, fake_environment):
        (tmp_path / "demo-project").mkdir()

        with patch(
            "project_factory.scaffolder.generator.environment_for", return_value=fake_environment
        ):
            with pytest.raises(SystemExit) as exc_info:
                main([str(tmp_path), "demo"])

        assert exc_info.value.code == 1
        assert list((tmp_path / "demo-project").iterdir()) == []
