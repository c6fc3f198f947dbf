"""jshell-launcher library modules.

Core functionality for classpath assembly, argument construction and
tool invocation.
"""

__all__ = [
    "argument_builder",
    "classpath",
    "config_parser",
    "launcher",
    "path_filter",
    "tool_invoker",
]
