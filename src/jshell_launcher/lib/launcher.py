"""Single jshell launch on behalf of a build."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from jshell_launcher.lib.argument_builder import ArgumentBuilder
from jshell_launcher.lib.classpath import ClasspathSource
from jshell_launcher.lib.config_parser import Configuration, ProjectConfig
from jshell_launcher.lib.tool_invoker import Stream, ToolInvoker

logger = logging.getLogger(__name__)


class ToolExecutionError(Exception):
    """Raised when jshell exits with a non-zero status."""

    def __init__(self, exit_code: int):
        self.exit_code = exit_code
        super().__init__(
            f"An error was encountered while executing. Exit code: {exit_code}"
        )


class ShellLauncher:
    """Build the jshell arguments for one project and run the tool."""

    def __init__(
        self,
        config: Configuration,
        invoker: ToolInvoker,
        sources: Iterable[ClasspathSource] = (),
        project: Optional[ProjectConfig] = None,
        builder: Optional[ArgumentBuilder] = None
    ):
        """Initialize launcher.

        Args:
            config: Shell argument configuration
            invoker: Tool invocation capability
            sources: Classpath sources resolved by the host build
            project: Current project and build selection
            builder: Argument builder (default filter and separator if None)
        """
        self.config = config
        self.invoker = invoker
        self.sources = list(sources)
        self.project = project or ProjectConfig()
        self.builder = builder or ArgumentBuilder()

    def should_run(self) -> bool:
        """Check whether the current project was selected for this build."""
        if self.project.is_selected():
            return True
        logger.debug(f"Skipping shell for: {self.project.name}")
        return False

    def arguments(self) -> List[str]:
        """Build the argument vector for the tool."""
        return self.builder.build(self.config, self.sources)

    def execute(
        self,
        stdin: Stream = None,
        stdout: Stream = None,
        stderr: Stream = None
    ) -> int:
        """Run jshell for the current project.

        Returns:
            0 when the tool succeeded or the project was not selected

        Raises:
            ToolUnavailableError: If the invoker cannot run the tool
            ToolExecutionError: If the tool exits with a non-zero status
        """
        if not self.should_run():
            return 0

        args = self.arguments()
        exit_code = self.invoker.run(args, stdin, stdout, stderr)
        if exit_code != 0:
            raise ToolExecutionError(exit_code)
        return exit_code
