"""Configuration parser for the jshell launcher.

Parses and validates the launcher YAML file into immutable models.
"""

from __future__ import annotations

import yaml
from collections.abc import Mapping as MappingABC
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from jshell_launcher.lib.classpath import ClasspathScope, ClasspathSource, split_classpath


class Configuration(BaseModel):
    """Options that shape the jshell argument vector."""
    model_config = ConfigDict(frozen=True)

    include_test_classpath: bool = True
    include_runtime_classpath: bool = False
    use_assembled_classpath: bool = True
    explicit_classpath: Optional[str] = None
    module_path: Optional[str] = None
    add_modules: Optional[str] = None
    add_exports: Optional[str] = None
    extra_options: Tuple[str, ...] = ()
    properties: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    scripts: Tuple[str, ...] = ()

    @field_validator('properties', mode='before')
    @classmethod
    def properties_to_strings(cls, v: Any) -> Any:
        """Convert property keys and values to strings (YAML parses 1 as int)."""
        if v is None:
            return {}
        if isinstance(v, MappingABC):
            return {str(key): str(value) for key, value in v.items()}
        return v

    @field_validator('properties')
    @classmethod
    def freeze_properties(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        """Store properties read-only."""
        return MappingProxyType(dict(v))

    @field_validator('extra_options', 'scripts', mode='before')
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        """Treat an empty YAML entry as an empty sequence."""
        return () if v is None else v


class ClasspathConfig(BaseModel):
    """Classpath elements already resolved by the host build, per scope."""
    model_config = ConfigDict(frozen=True)

    test: Tuple[str, ...] = ()
    runtime: Tuple[str, ...] = ()
    plugin: Tuple[str, ...] = ()

    @field_validator('test', 'runtime', 'plugin', mode='before')
    @classmethod
    def normalize_paths(cls, v: Any) -> Any:
        """Accept a single separator-joined string or a list of paths."""
        if v is None:
            return ()
        if isinstance(v, str):
            return tuple(split_classpath(v))
        if not isinstance(v, (list, tuple)):
            raise ValueError(f"Classpath must be a list of paths or a joined string, got '{v}'")
        return tuple(str(p) for p in v)

    def sources(self) -> List[ClasspathSource]:
        """Get classpath sources in test, runtime, plugin order."""
        return [
            ClasspathSource.of(ClasspathScope.TEST, self.test),
            ClasspathSource.of(ClasspathScope.RUNTIME, self.runtime),
            ClasspathSource.of(ClasspathScope.PLUGIN, self.plugin),
        ]


class ProjectConfig(BaseModel):
    """Current project and the projects selected for this build."""
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    selected: Tuple[str, ...] = ()

    @field_validator('selected', mode='before')
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return () if v is None else v

    def is_selected(self) -> bool:
        """Check whether the current project takes part in the build.

        An empty selection means every project is selected.
        """
        if not self.selected:
            return True
        return self.name in self.selected


class ToolConfig(BaseModel):
    """Where to find the jshell executable."""
    model_config = ConfigDict(frozen=True)

    executable: Optional[str] = None
    java_home: Optional[str] = None


class LauncherConfig(BaseModel):
    """Top-level configuration."""
    model_config = ConfigDict(frozen=True)

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    classpath: ClasspathConfig = Field(default_factory=ClasspathConfig)
    shell: Configuration = Field(default_factory=Configuration)
    tool: ToolConfig = Field(default_factory=ToolConfig)

    @field_validator('project', 'classpath', 'shell', 'tool', mode='before')
    @classmethod
    def empty_section(cls, v: Any) -> Any:
        """Treat a section holding only comments as empty."""
        return {} if v is None else v


class ConfigParser:
    """Parse and validate launcher configuration."""

    def __init__(self, config_path: Union[str, Path]):
        """Initialize parser with config file path.

        Args:
            config_path: Path to the launcher YAML file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        self.config: Optional[LauncherConfig] = None
        self._raw_config: Optional[Dict[str, Any]] = None

    def parse(self) -> LauncherConfig:
        """Parse and validate configuration.

        Returns:
            Validated configuration object

        Raises:
            yaml.YAMLError: If YAML parsing fails
            pydantic.ValidationError: If validation fails
        """
        with open(self.config_path) as f:
            self._raw_config = yaml.safe_load(f) or {}

        self.config = LauncherConfig(**self._raw_config)
        return self.config

    def _require_config(self) -> LauncherConfig:
        if not self.config:
            raise ValueError("Configuration not parsed. Call parse() first.")
        return self.config

    def get_configuration(self) -> Configuration:
        """Get the shell argument configuration."""
        return self._require_config().shell

    def get_classpath_sources(self) -> List[ClasspathSource]:
        """Get resolved classpath sources.

        Returns:
            Test, runtime and plugin sources, in that order
        """
        return self._require_config().classpath.sources()

    def get_project(self) -> ProjectConfig:
        """Get project selection."""
        return self._require_config().project

    def get_tool(self) -> ToolConfig:
        """Get tool location settings."""
        return self._require_config().tool


def load_config(config_path: Union[str, Path]) -> ConfigParser:
    """Load and parse configuration file.

    Args:
        config_path: Path to the launcher YAML file

    Returns:
        Parsed configuration

    Example:
        >>> parser = load_config("jshell-launcher.yaml")
        >>> config = parser.get_configuration()
        >>> sources = parser.get_classpath_sources()
    """
    parser = ConfigParser(config_path)
    parser.parse()
    return parser
