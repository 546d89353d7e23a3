"""Tests for dependency installation."""

import os
import sys
import threading
import time
from pathlib import Path
from unittest.mock import patch

import pytest

from kickstart.install import DependencyInstaller, InstallStatus
from kickstart.install.installer import COMMAND_NOT_FOUND, tail_lines
from kickstart.package_managers import NPM, YARN, PackageManager


def python_manager(code: str) -> PackageManager:
    """A package manager whose install command runs a Python snippet."""
    return PackageManager(
        name="fake",
        cli_command=sys.executable,
        install_info="test",
        lockfiles=(),
        install_args=("-c", code),
        add_args=("-c", code),
        run_prefix=("fake",),
    )


def test_skip_reports_skipped(tmp_path: Path) -> None:
    with patch("kickstart.install.installer.subprocess.Popen") as mock_popen:
        result = DependencyInstaller().install(tmp_path, NPM, skip=True)

    assert result.status is InstallStatus.SKIPPED
    assert result.package_manager == "npm"
    assert not result.failed
    mock_popen.assert_not_called()


def test_missing_executable(tmp_path: Path) -> None:
    with patch("kickstart.install.installer.shutil.which", return_value=None):
        result = DependencyInstaller().install(tmp_path, YARN)

    assert result.status is InstallStatus.FAILED
    assert result.exit_code == COMMAND_NOT_FOUND
    assert result.command == ("yarn",)
    assert "yarn not found" in result.message


def test_spawn_error(tmp_path: Path) -> None:
    with (
        patch("kickstart.install.installer.shutil.which", return_value="/usr/bin/npm"),
        patch(
            "kickstart.install.installer.subprocess.Popen",
            side_effect=PermissionError("denied"),
        ),
    ):
        result = DependencyInstaller().install(tmp_path, NPM)

    assert result.status is InstallStatus.FAILED
    assert result.exit_code == COMMAND_NOT_FOUND
    assert "denied" in result.message


def test_success(tmp_path: Path) -> None:
    pm = python_manager("import os; open('installed', 'w').write(os.getcwd())")
    result = DependencyInstaller().install(tmp_path, pm)

    assert result.status is InstallStatus.SUCCEEDED
    assert result.succeeded
    assert result.exit_code == 0
    assert (tmp_path / "installed").read_text() == str(tmp_path)


def test_failure_keeps_stderr_tail(tmp_path: Path) -> None:
    code = (
        "import sys\n"
        "sys.stderr.write('\\n'.join(f'line {i}' for i in range(50)))\n"
        "sys.exit(3)\n"
    )
    result = DependencyInstaller().install(tmp_path, python_manager(code))

    assert result.status is InstallStatus.FAILED
    assert result.failed
    assert result.exit_code == 3
    lines = result.stderr_tail.splitlines()
    assert len(lines) == 20
    assert lines[0] == "line 30"
    assert lines[-1] == "line 49"


def test_timeout_kills_child(tmp_path: Path) -> None:
    pm = python_manager("import time; time.sleep(60)")
    installer = DependencyInstaller(timeout=0.5)

    start = time.monotonic()
    result = installer.install(tmp_path, pm)
    elapsed = time.monotonic() - start

    assert result.status is InstallStatus.TIMED_OUT
    assert result.failed
    assert elapsed < 30
    assert result.exit_code is not None  # reaped
    if os.name == "posix":
        assert result.exit_code < 0  # terminated by a signal


def test_per_call_timeout_overrides_default(tmp_path: Path) -> None:
    pm = python_manager("import time; time.sleep(60)")
    result = DependencyInstaller(timeout=None).install(tmp_path, pm, timeout=0.5)
    assert result.status is InstallStatus.TIMED_OUT


def test_add_runs_add_command(tmp_path: Path) -> None:
    with (
        patch("kickstart.install.installer.shutil.which", return_value="/usr/bin/yarn"),
        patch("kickstart.install.installer.subprocess.Popen") as mock_popen,
    ):
        mock_popen.return_value.communicate.return_value = ("", "")
        mock_popen.return_value.returncode = 0
        result = DependencyInstaller().add(tmp_path, YARN, ["@zendfi/sdk"])

    assert result.status is InstallStatus.SUCCEEDED
    assert result.command == ("yarn", "add", "@zendfi/sdk")
    argv = mock_popen.call_args.args[0]
    assert argv == ["/usr/bin/yarn", "add", "@zendfi/sdk"]
    assert mock_popen.call_args.kwargs["cwd"] == tmp_path


def test_tail_lines() -> None:
    assert tail_lines("") == ""
    assert tail_lines("a\n\nb\n") == "a\nb"
    numbers = "\n".join(str(i) for i in range(25))
    assert tail_lines(numbers).splitlines() == [str(i) for i in range(5, 25)]


def test_cancel_kills_running_child(tmp_path: Path) -> None:
    pm = python_manager(
        "import time; open('started', 'w').close(); time.sleep(60); open('finished', 'w').close()"
    )
    installer = DependencyInstaller()
    results = []
    worker = threading.Thread(target=lambda: results.append(installer.install(tmp_path, pm)))
    worker.start()

    deadline = time.monotonic() + 10
    while not (tmp_path / "started").exists() and time.monotonic() < deadline:
        time.sleep(0.05)
    installer.cancel()
    worker.join(timeout=10)

    assert not worker.is_alive()
    assert results[0].status is InstallStatus.FAILED
    assert results[0].message == "Cancelled"
    assert not (tmp_path / "finished").exists()


def test_cancelled_installer_starts_nothing(tmp_path: Path) -> None:
    installer = DependencyInstaller()
    installer.cancel()
    with patch("kickstart.install.installer.subprocess.Popen") as mock_popen:
        result = installer.install(tmp_path, python_manager("pass"))

    assert result.failed
    mock_popen.assert_not_called()
