"""Tests for tool invocation and the launcher."""

import logging
import os
import stat
import sys

import pytest

from jshell_launcher.lib.argument_builder import CLASSPATH_FLAG
from jshell_launcher.lib.config_parser import Configuration, ProjectConfig
from jshell_launcher.lib.launcher import ShellLauncher, ToolExecutionError
from jshell_launcher.lib.tool_invoker import (
    SubprocessToolInvoker,
    ToolInvoker,
    ToolUnavailableError,
)

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses a shell script as jshell")

FAKE_JSHELL = """#!/bin/sh
if [ "$1" = "--version" ]; then
    echo "jshell 17.0.2"
    exit 0
fi
for arg in "$@"; do
    echo "$arg"
done
exit {code}
"""


def make_fake_jshell(directory, code=0):
    """Write an executable script standing in for jshell."""
    path = directory / "jshell"
    path.write_text(FAKE_JSHELL.format(code=code))
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


class FakeInvoker(ToolInvoker):
    """Invoker that records calls and returns a fixed status."""

    def __init__(self, exit_code=0):
        self.exit_code = exit_code
        self.calls = []

    def run(self, args, stdin=None, stdout=None, stderr=None):
        self.calls.append((list(args), stdin, stdout, stderr))
        return self.exit_code


class UnavailableInvoker(ToolInvoker):
    def run(self, args, stdin=None, stdout=None, stderr=None):
        raise ToolUnavailableError("No jshell executable found.")


class TestShellLauncher:
    """Test ShellLauncher."""

    def test_runs_with_built_arguments(self):
        """Test that the invoker receives the built argument vector."""
        invoker = FakeInvoker()
        config = Configuration(use_assembled_classpath=False, scripts=["s1.jsh", "s2.jsh"])
        assert ShellLauncher(config, invoker).execute() == 0
        assert invoker.calls[0][0] == ["s1.jsh", "s2.jsh"]

    def test_streams_passed_through(self, tmp_path):
        """Test that standard streams reach the invoker unchanged."""
        invoker = FakeInvoker()
        with open(tmp_path / "out", "w") as out:
            ShellLauncher(Configuration(), invoker).execute(stdout=out)
            assert invoker.calls[0][2] is out
        assert invoker.calls[0][0] == [CLASSPATH_FLAG, ""]

    def test_non_zero_exit_raises(self):
        """Test that a non-zero status is raised with its code."""
        launcher = ShellLauncher(Configuration(), FakeInvoker(exit_code=3))
        with pytest.raises(ToolExecutionError) as excinfo:
            launcher.execute()
        assert excinfo.value.exit_code == 3
        assert "Exit code: 3" in str(excinfo.value)

    def test_tool_unavailable_propagates(self):
        """Test that an unavailable tool error is not altered."""
        launcher = ShellLauncher(Configuration(), UnavailableInvoker())
        with pytest.raises(ToolUnavailableError, match="No jshell"):
            launcher.execute()

    def test_skips_unselected_project(self, caplog):
        """Test that a project outside the selection is skipped."""
        caplog.set_level(logging.DEBUG, logger="jshell_launcher.lib.launcher")
        invoker = FakeInvoker(exit_code=1)
        project = ProjectConfig(name="app", selected=["lib"])
        assert ShellLauncher(Configuration(), invoker, project=project).execute() == 0
        assert invoker.calls == []
        assert "Skipping shell for: app" in caplog.text

    def test_runs_selected_project(self):
        invoker = FakeInvoker()
        project = ProjectConfig(name="app", selected=["app"])
        ShellLauncher(Configuration(), invoker, project=project).execute()
        assert len(invoker.calls) == 1


class TestSubprocessToolInvoker:
    """Test locating and running jshell."""

    @pytest.fixture(autouse=True)
    def isolated_environment(self, monkeypatch, tmp_path):
        monkeypatch.delenv("JAVA_HOME", raising=False)
        monkeypatch.setenv("PATH", str(tmp_path / "empty-path"))

    def test_unavailable(self):
        """Test that no executable anywhere raises ToolUnavailableError."""
        with pytest.raises(ToolUnavailableError):
            SubprocessToolInvoker().locate()

    def test_explicit_missing_executable(self, tmp_path):
        with pytest.raises(ToolUnavailableError):
            SubprocessToolInvoker(executable=str(tmp_path / "jshell")).locate()

    @posix_only
    def test_explicit_executable(self, tmp_path):
        fake = make_fake_jshell(tmp_path)
        assert SubprocessToolInvoker(executable=str(fake)).locate() == str(fake)

    @posix_only
    def test_java_home(self, tmp_path):
        """Test that <java_home>/bin/jshell is used."""
        bin_dir = tmp_path / "jdk" / "bin"
        bin_dir.mkdir(parents=True)
        fake = make_fake_jshell(bin_dir)
        invoker = SubprocessToolInvoker(java_home=str(tmp_path / "jdk"))
        assert invoker.locate() == str(fake)

    @posix_only
    def test_java_home_environment(self, tmp_path, monkeypatch):
        bin_dir = tmp_path / "jdk" / "bin"
        bin_dir.mkdir(parents=True)
        fake = make_fake_jshell(bin_dir)
        monkeypatch.setenv("JAVA_HOME", str(tmp_path / "jdk"))
        assert SubprocessToolInvoker().locate() == str(fake)

    @posix_only
    def test_path_lookup(self, tmp_path, monkeypatch):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        fake = make_fake_jshell(bin_dir)
        monkeypatch.setenv("PATH", str(bin_dir))
        assert os.path.samefile(SubprocessToolInvoker().locate(), fake)

    @posix_only
    def test_version(self, tmp_path):
        fake = make_fake_jshell(tmp_path)
        assert SubprocessToolInvoker(executable=str(fake)).version() == "17.0.2"

    def test_version_unavailable(self):
        assert SubprocessToolInvoker().version() is None

    @posix_only
    def test_run_passes_arguments_and_status(self, tmp_path):
        """Test that arguments reach the process one per argv entry."""
        fake = make_fake_jshell(tmp_path, code=5)
        out_path = tmp_path / "out.txt"
        with open(out_path, "w") as out:
            code = SubprocessToolInvoker(executable=str(fake)).run(
                ["--class-path", ":a:b", "-R -Dx=1"],
                stdout=out
            )
        assert code == 5
        assert out_path.read_text().splitlines() == ["--class-path", ":a:b", "-R -Dx=1"]

    @posix_only
    def test_launcher_with_subprocess(self, tmp_path):
        """Test a full launch through a child process."""
        fake = make_fake_jshell(tmp_path, code=2)
        config = Configuration(use_assembled_classpath=False, scripts=["s.jsh"])
        launcher = ShellLauncher(config, SubprocessToolInvoker(executable=str(fake)))
        with open(tmp_path / "out.txt", "w") as out:
            with pytest.raises(ToolExecutionError) as excinfo:
                launcher.execute(stdout=out)
        assert excinfo.value.exit_code == 2
        assert (tmp_path / "out.txt").read_text() == "s.jsh\n"
