"""jshell tool invocation.

Locates the jshell executable and runs it with the built argument vector.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any, Optional, Sequence

logger = logging.getLogger(__name__)

TOOL_NAME = "jshell"

Stream = Optional[IO[Any]]


class ToolUnavailableError(Exception):
    """Raised when the jshell tool cannot be located or started."""
    pass


class ToolInvoker(ABC):
    """Runs the shell tool with an argument vector and standard streams."""

    name: str = TOOL_NAME

    @abstractmethod
    def run(
        self,
        args: Sequence[str],
        stdin: Stream = None,
        stdout: Stream = None,
        stderr: Stream = None
    ) -> int:
        """Run the tool.

        Args:
            args: Argument vector, without the program name
            stdin: Input stream (None inherits the caller's)
            stdout: Output stream (None inherits the caller's)
            stderr: Error stream (None inherits the caller's)

        Returns:
            Exit status of the tool

        Raises:
            ToolUnavailableError: If the tool cannot be run
        """


class SubprocessToolInvoker(ToolInvoker):
    """Run jshell as a child process."""

    def __init__(
        self,
        executable: Optional[str] = None,
        java_home: Optional[str] = None
    ):
        """Initialize invoker.

        Args:
            executable: Explicit path to the jshell executable
            java_home: JDK home whose bin/jshell is used
        """
        self.executable = executable
        self.java_home = java_home

    def _candidates(self):
        if self.executable:
            yield self.executable
        for home in (self.java_home, os.environ.get("JAVA_HOME")):
            if home:
                yield str(Path(home) / "bin" / TOOL_NAME)
        found = shutil.which(TOOL_NAME)
        if found:
            yield found

    def locate(self) -> str:
        """Find the jshell executable.

        Returns:
            Path to the first existing executable candidate

        Raises:
            ToolUnavailableError: If no candidate exists
        """
        for candidate in self._candidates():
            if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
                logger.debug(f"Using {TOOL_NAME} executable: {candidate}")
                return candidate
            logger.debug(f"No {TOOL_NAME} executable at: {candidate}")

        raise ToolUnavailableError(
            f"No {TOOL_NAME} executable found. Install a JDK (9 or newer), "
            f"set JAVA_HOME or pass the executable path explicitly."
        )

    def version(self) -> Optional[str]:
        """Get the jshell version.

        Returns:
            Version string (e.g. "17.0.2"), or None if it cannot be determined
        """
        try:
            result = subprocess.run(
                [self.locate(), "--version"],
                capture_output=True,
                text=True,
                check=True
            )
            return result.stdout.strip().split()[-1]
        except (ToolUnavailableError, subprocess.CalledProcessError, OSError, IndexError) as e:
            logger.debug(f"Failed to check {TOOL_NAME} version: {e}")
            return None

    def run(
        self,
        args: Sequence[str],
        stdin: Stream = None,
        stdout: Stream = None,
        stderr: Stream = None
    ) -> int:
        cmd = [self.locate(), *args]
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                stdin=stdin,
                stdout=stdout,
                stderr=stderr,
                check=False
            )
        except OSError as e:
            raise ToolUnavailableError(f"Failed to start {cmd[0]}: {e}") from e

        return result.returncode
