from __future__ import annotations

import argparse
import logging
import shlex
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

from jshell_launcher.lib.classpath import split_classpath
from jshell_launcher.lib.config_parser import ConfigParser, Configuration, LauncherConfig
from jshell_launcher.lib.launcher import ShellLauncher, ToolExecutionError
from jshell_launcher.lib.tool_invoker import SubprocessToolInvoker, ToolUnavailableError

DEFAULT_CONFIG = Path('jshell-launcher.yaml')


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging.

    Args:
        verbose: Enable debug logging
        quiet: Suppress info logging
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def generate_sample_config(output_path: Path) -> None:
    """Generate a sample configuration file.

    Args:
        output_path: Path to write the sample config
    """
    sample_config = """# project section decides whether this project takes part in the build
project:
  name: my-app
  # Only launch the shell when the current project is listed here (empty: always)
  selected: []

# classpath section lists elements already resolved by the build tool
classpath:
  test:
    - target/test-classes
    - target/classes
  runtime:
    - target/classes
  # Extra jars the shell itself needs
  plugin: []

# shell section controls the jshell argument vector
shell:
  include_test_classpath: true
  include_runtime_classpath: false
  use_assembled_classpath: true
  #explicit_classpath: "lib/a.jar:lib/b.jar"
  #module_path: "mods"
  #add_modules: "java.sql"
  #add_exports: "java.base/jdk.internal.misc=ALL-UNNAMED"
  extra_options: []
  properties: {}
  #  app.env: dev
  scripts: []
  #  - DEFAULT
  #  - setup.jsh

# tool section sets where jshell is found (default: JAVA_HOME, then PATH)
tool: {}
  #executable: /usr/lib/jvm/java-17/bin/jshell
  #java_home: /usr/lib/jvm/java-17
"""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        f.write(sample_config)

    logger.info(f"Generated sample configuration: {output_path}")


def exit_status(returncode: int) -> int:
    """Map a child return code to a process exit status.

    A child killed by signal N reports -N; shells report that as 128 + N.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


def parse_property(value: str) -> Tuple[str, str]:
    """Parse a KEY=VALUE property definition."""
    key, sep, prop_value = value.partition('=')
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Property must be KEY=VALUE, got '{value}'")
    return key, prop_value


def load_launcher_config(config_path: Optional[Path]) -> LauncherConfig:
    """Load the launcher configuration.

    A missing default config file yields the default configuration; an
    explicitly requested file must exist.
    """
    if config_path is None:
        if not DEFAULT_CONFIG.exists():
            logger.debug(f"No {DEFAULT_CONFIG} found, using defaults")
            return LauncherConfig()
        config_path = DEFAULT_CONFIG

    logger.info(f"Loading configuration from {config_path}")
    return ConfigParser(config_path).parse()


def apply_overrides(config: LauncherConfig, args: argparse.Namespace) -> LauncherConfig:
    """Apply command-line overrides on top of the file configuration.

    Args:
        config: Configuration loaded from file
        args: Parsed command-line arguments

    Returns:
        New configuration with the overrides applied
    """
    shell = config.shell
    shell_updates: Dict[str, Any] = {}

    if args.class_path is not None:
        shell_updates['explicit_classpath'] = args.class_path
    if args.module_path is not None:
        shell_updates['module_path'] = args.module_path
    if args.add_modules is not None:
        shell_updates['add_modules'] = args.add_modules
    if args.add_exports is not None:
        shell_updates['add_exports'] = args.add_exports
    if args.include_runtime_classpath:
        shell_updates['include_runtime_classpath'] = True
    if args.no_test_classpath:
        shell_updates['include_test_classpath'] = False
    if args.no_project_classpath:
        shell_updates['use_assembled_classpath'] = False
    if args.options:
        shell_updates['extra_options'] = shell.extra_options + tuple(args.options)
    if args.properties:
        properties = dict(shell.properties)
        properties.update(args.properties)
        shell_updates['properties'] = properties
    if args.scripts:
        shell_updates['scripts'] = shell.scripts + tuple(args.scripts)

    classpath_updates: Dict[str, Any] = {}
    for scope in ('test', 'runtime', 'plugin'):
        value = getattr(args, f"{scope}_classpath")
        if value is not None:
            classpath_updates[scope] = tuple(split_classpath(value))

    project_updates: Dict[str, Any] = {}
    if args.project is not None:
        project_updates['name'] = args.project
    if args.selected_projects is not None:
        project_updates['selected'] = tuple(
            name.strip() for name in args.selected_projects.split(',') if name.strip()
        )

    tool_updates: Dict[str, Any] = {}
    if args.jshell is not None:
        tool_updates['executable'] = args.jshell

    return config.model_copy(update={
        'shell': Configuration(**{**dict(shell), **shell_updates}),
        'classpath': config.classpath.model_copy(update=classpath_updates),
        'project': config.project.model_copy(update=project_updates),
        'tool': config.tool.model_copy(update=tool_updates),
    })


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Launch jshell with a project's classpath",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        'scripts',
        nargs='*',
        metavar='SCRIPT',
        help='Scripts to load, passed to jshell last'
    )

    getting_started = parser.add_argument_group(
        'Getting Started',
        'Configuration file handling'
    )
    getting_started.add_argument(
        '--config', '-c',
        type=Path,
        default=None,
        help=f'Path to configuration file (default: {DEFAULT_CONFIG} if present)'
    )
    getting_started.add_argument(
        '--generate-config',
        type=Path,
        metavar='PATH',
        help='Generate a sample configuration file and exit'
    )

    shell = parser.add_argument_group('Shell Options')
    shell.add_argument('--class-path', help='Additional classpath entries (path-separator joined)')
    shell.add_argument('--module-path', help='Module path passed verbatim to jshell')
    shell.add_argument('--add-modules', help='Modules to resolve, passed verbatim to jshell')
    shell.add_argument('--add-exports', help='Exports passed verbatim to jshell')
    shell.add_argument(
        '--option', '-O',
        dest='options',
        action='append',
        default=[],
        metavar='OPTION',
        help='Extra jshell option, passed verbatim (repeatable, e.g. --option=--feedback)'
    )
    shell.add_argument(
        '-D',
        dest='properties',
        action='append',
        type=parse_property,
        default=[],
        metavar='KEY=VALUE',
        help='Property defined in the remote execution engine (repeatable)'
    )

    classpath = parser.add_argument_group('Classpath Options')
    classpath.add_argument('--test-classpath', metavar='PATHS', help='Resolved test classpath elements')
    classpath.add_argument('--runtime-classpath', metavar='PATHS', help='Resolved runtime classpath elements')
    classpath.add_argument('--plugin-classpath', metavar='PATHS', help='Launcher support classpath elements')
    classpath.add_argument(
        '--include-runtime-classpath',
        action='store_true',
        help='Add runtime classpath elements to the shell classpath'
    )
    classpath.add_argument(
        '--no-test-classpath',
        action='store_true',
        help='Leave test classpath elements out of the shell classpath'
    )
    classpath.add_argument(
        '--no-project-classpath',
        action='store_true',
        help='Do not pass an assembled --class-path to jshell'
    )

    general = parser.add_argument_group('General Options')
    general.add_argument('--project', help='Name of the current project')
    general.add_argument(
        '--selected-projects',
        metavar='NAMES',
        help='Comma-separated projects selected for this build (default: all)'
    )
    general.add_argument('--jshell', metavar='PATH', help='Path to the jshell executable')
    general.add_argument(
        '--dry-run',
        action='store_true',
        help='Show the jshell command without running it'
    )
    general.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose (debug) logging'
    )
    general.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress informational output'
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    args = create_parser().parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    if args.generate_config:
        generate_sample_config(args.generate_config)
        return 0

    try:
        config = apply_overrides(load_launcher_config(args.config), args)
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        if args.verbose:
            logger.exception("Configuration error details:")
        return 1

    invoker = SubprocessToolInvoker(
        executable=config.tool.executable,
        java_home=config.tool.java_home
    )
    launcher = ShellLauncher(
        config.shell,
        invoker,
        sources=config.classpath.sources(),
        project=config.project
    )

    if args.dry_run:
        if launcher.should_run():
            logger.info(f"Would run: {shlex.join([invoker.name, *launcher.arguments()])}")
        return 0

    if args.verbose:
        version = invoker.version()
        if version:
            logger.debug(f"jshell version: {version}")

    try:
        return launcher.execute()
    except ToolUnavailableError as e:
        logger.error(str(e))
        return 1
    except ToolExecutionError as e:
        logger.error(str(e))
        return exit_status(e.exit_code)


if __name__ == "__main__":
    sys.exit(main())
