"""jshell-launcher - Launch jshell with a build's classpath.

Assembles the classpath resolved by a build tool, filters it down to what
jshell can load and runs jshell with the resulting argument vector.

Features:
- Test, runtime, user and plugin classpath assembly
- Filtering of missing and unsupported classpath elements
- Module path, module and export options
- Remote execution properties and startup scripts
- YAML configuration with command-line overrides
"""

__version__ = "1.0.0"
__license__ = "Apache-2.0"

from jshell_launcher.cli import main

__all__ = ["main", "__version__"]
