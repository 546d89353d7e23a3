"""Tests for preflight checks."""

from unittest.mock import patch

from click.testing import CliRunner

from kickstart.cli import main
from kickstart.config.preflight import (
    check_git,
    check_node,
    check_package_managers,
    run_all_checks,
)


def _which(available: set[str]):
    def fake_which(cmd: str) -> str | None:
        return f"/usr/bin/{cmd}" if cmd in available else None

    return fake_which


def test_preflight_help() -> None:
    """Test that the preflight command exists and has help."""
    runner = CliRunner()
    result = runner.invoke(main, ["preflight", "--help"])
    assert result.exit_code == 0
    assert "package managers" in result.output


def test_check_node_accepts_bun() -> None:
    with patch("kickstart.config.preflight.shutil.which", side_effect=_which({"bun"})):
        assert check_node() is True


def test_check_node_missing() -> None:
    with patch("kickstart.config.preflight.shutil.which", side_effect=_which(set())):
        assert check_node() is False


def test_check_package_managers() -> None:
    with patch("shutil.which", side_effect=_which({"pnpm"})):
        assert check_package_managers() is True
    with patch("shutil.which", side_effect=_which(set())):
        assert check_package_managers() is False


def test_check_git() -> None:
    with patch("kickstart.config.preflight.shutil.which", side_effect=_which({"git"})):
        assert check_git() is True
    with patch("kickstart.config.preflight.shutil.which", side_effect=_which(set())):
        assert check_git() is False


def test_run_all_checks() -> None:
    with patch("shutil.which", side_effect=_which({"node", "npm", "git"})):
        assert run_all_checks() is True


def test_preflight_command_fails_without_tools() -> None:
    with patch("shutil.which", side_effect=_which(set())):
        result = CliRunner().invoke(main, ["preflight"])
    assert result.exit_code == 1
    assert "Some preflight checks failed" in result.output


def test_preflight_command_passes() -> None:
    with patch("shutil.which", side_effect=_which({"node", "npm", "yarn", "git"})):
        result = CliRunner().invoke(main, ["preflight"])
    assert result.exit_code == 0
    assert "All preflight checks passed" in result.output


def test_missing_git_only_warns() -> None:
    with patch("shutil.which", side_effect=_which({"node", "npm"})):
        result = CliRunner().invoke(main, ["preflight"])
    assert result.exit_code == 0
    assert "passed with warnings" in result.output
    assert "--skip-git" in result.output


def test_missing_package_manager_blocks() -> None:
    with patch("shutil.which", side_effect=_which({"node", "git"})):
        assert run_all_checks() is False
