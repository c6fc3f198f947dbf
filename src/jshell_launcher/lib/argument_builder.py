"""jshell argument construction.

Assembles the classpath from the resolved sources and turns a
Configuration into the argument vector passed to jshell.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, List, Optional

from jshell_launcher.lib.classpath import ClasspathScope, ClasspathSource, split_classpath
from jshell_launcher.lib.config_parser import Configuration
from jshell_launcher.lib.path_filter import FilteredClasspath, PathFilter

logger = logging.getLogger(__name__)

CLASSPATH_FLAG = "--class-path"
MODULE_PATH_FLAG = "--module-path"
ADD_MODULES_FLAG = "--add-modules"
ADD_EXPORTS_FLAG = "--add-exports"
# jshell reads "-R" options as flags for the remote execution engine
REMOTE_DEFINE_PREFIX = "-R -D"


def remote_define(key: str, value: str) -> str:
    """Synthesize the single-token remote property definition."""
    return f"{REMOTE_DEFINE_PREFIX}{key}={value}"


class ArgumentBuilder:
    """Build the jshell argument vector."""

    def __init__(
        self,
        path_filter: Optional[PathFilter] = None,
        separator: str = os.pathsep
    ):
        """Initialize argument builder.

        Args:
            path_filter: Filter applied to the assembled classpath
            separator: Platform path separator used to split and join classpaths
        """
        self.path_filter = path_filter or PathFilter()
        self.separator = separator

    @staticmethod
    def _paths_for(sources: Iterable[ClasspathSource], scope: ClasspathScope) -> List[str]:
        paths: List[str] = []
        for source in sources:
            if source.scope is scope:
                paths.extend(source.paths)
        return paths

    def assemble_candidates(
        self,
        config: Configuration,
        sources: Iterable[ClasspathSource]
    ) -> List[str]:
        """Concatenate classpath candidates in test, runtime, user, plugin order.

        Args:
            config: Launcher configuration
            sources: Classpath sources resolved by the host build

        Returns:
            Unfiltered candidate paths
        """
        sources = list(sources)
        candidates: List[str] = []

        if config.include_test_classpath:
            candidates.extend(self._paths_for(sources, ClasspathScope.TEST))
        if config.include_runtime_classpath:
            candidates.extend(self._paths_for(sources, ClasspathScope.RUNTIME))
        if config.explicit_classpath is not None:
            candidates.extend(split_classpath(config.explicit_classpath, self.separator))
        candidates.extend(self._paths_for(sources, ClasspathScope.USER))
        candidates.extend(
            os.path.abspath(path) for path in self._paths_for(sources, ClasspathScope.PLUGIN)
        )

        return candidates

    def build_classpath(
        self,
        config: Configuration,
        sources: Iterable[ClasspathSource]
    ) -> FilteredClasspath:
        """Assemble and filter the classpath."""
        return self.path_filter.filter(self.assemble_candidates(config, sources))

    def build(
        self,
        config: Configuration,
        sources: Iterable[ClasspathSource] = ()
    ) -> List[str]:
        """Build the argument vector.

        Args:
            config: Launcher configuration
            sources: Classpath sources resolved by the host build

        Returns:
            Arguments for jshell, scripts last
        """
        args: List[str] = []

        if config.use_assembled_classpath:
            classpath = self.build_classpath(config, sources).join(self.separator)
            logger.debug(f"Using classpath: {classpath}")
            args.extend([CLASSPATH_FLAG, classpath])

        if config.module_path is not None:
            args.extend([MODULE_PATH_FLAG, config.module_path])
        if config.add_modules is not None:
            args.extend([ADD_MODULES_FLAG, config.add_modules])
        if config.add_exports is not None:
            args.extend([ADD_EXPORTS_FLAG, config.add_exports])

        args.extend(config.extra_options)

        for key, value in sorted(config.properties.items()):
            args.append(remote_define(key, value))

        args.extend(config.scripts)

        return args


def build_arguments(
    config: Configuration,
    sources: Iterable[ClasspathSource] = ()
) -> List[str]:
    """Build the argument vector with the default filter and separator."""
    return ArgumentBuilder().build(config, sources)
