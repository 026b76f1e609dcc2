"""
Configuration System for boredom_compiler.

This module loads build options from a single JSON or YAML file in the
project root, with a small set of environment variable overrides.
"""

import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .constants import CONFIG_FILENAMES, DEFAULT_BOOTSTRAP_FILENAME, DEFAULT_RUNTIME_FILENAME
from .exceptions import ConfigurationError
from .logging import get_logger

logger = get_logger(__name__)

_TRUTHY = ("1", "true", "yes")


@dataclass
class BuildConfig:
    """Component analysis and inlining switches."""

    inline_runtime: bool = True
    validate_components: bool = True
    optimize_styles: bool = True
    strict_dependencies: bool = False

    # Filter entries; "/pattern/" strings become regular expressions
    component_include: Optional[List[str]] = None
    component_exclude: Optional[List[str]] = None


@dataclass
class RuntimeConfig:
    """Runtime script lookup configuration."""

    filename: str = DEFAULT_RUNTIME_FILENAME
    bootstrap_filename: str = DEFAULT_BOOTSTRAP_FILENAME
    search_paths: List[str] = field(default_factory=list)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    enable_file_logging: bool = False
    log_file: str = "boredom-compiler.log"


def parse_filter_entries(entries: Optional[List[str]]) -> Optional[List[Union[str, re.Pattern]]]:
    """
    Turn configuration filter strings into filter objects.

    Args:
        entries: Filter strings from the configuration file

    Returns:
        List of strings and compiled patterns, or None when unset
    """
    if entries is None:
        return None
    if isinstance(entries, str):
        entries = [entries]

    filters: List[Union[str, re.Pattern]] = []
    for entry in entries:
        if not isinstance(entry, str):
            raise ConfigurationError(f"Component filter must be a string, got {type(entry).__name__}")
        if len(entry) > 2 and entry.startswith("/") and entry.endswith("/"):
            try:
                filters.append(re.compile(entry[1:-1]))
            except re.error as e:
                raise ConfigurationError(f"Invalid component filter pattern {entry}: {e}")
        else:
            filters.append(entry)
    return filters


class CompilerConfig:
    """
    Unified configuration manager for a component build.

    Reads `boredom.config.yaml`, `boredom.config.yml` or
    `boredom.config.json` from the project root (or an explicit file)
    and exposes one dataclass per section.
    """

    def __init__(self, config_file: Optional[str] = None, project_root: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration file. If None, searches the project root.
            project_root: Directory searched for the default file names
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self.config_file = self._get_config_file_path(config_file)
        self._config_data = self._load_config()

        self.build = self._create_build_config()
        self.runtime = self._create_runtime_config()
        self.logging = self._create_logging_config()

    def _get_config_file_path(self, config_file: Optional[str]) -> Optional[Path]:
        """Get the configuration file path."""
        if config_file:
            return Path(config_file)

        for name in CONFIG_FILENAMES:
            candidate = self.project_root / name
            if candidate.exists():
                return candidate
        return None

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file (JSON or YAML)."""
        if self.config_file is None:
            logger.debug("No configuration file found, using defaults")
            return {}

        try:
            if self.config_file.exists():
                with open(self.config_file, "r", encoding="utf-8") as f:
                    if self.config_file.suffix.lower() in [".yaml", ".yml"]:
                        config_data = yaml.safe_load(f)
                    else:
                        config_data = json.load(f)
                logger.info(f"Loaded configuration from {self.config_file}")
                return config_data or {}
            else:
                logger.warning(f"Configuration file {self.config_file} not found, using defaults")
                return {}
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Failed to load configuration: {e}")
            return {}

    def _create_build_config(self) -> BuildConfig:
        """Create build configuration from loaded data."""
        build_data = self._config_data.get("build", {})

        env_no_inline = os.getenv("BOREDOM_NO_INLINE_RUNTIME", "").lower() in _TRUTHY
        env_strict = os.getenv("BOREDOM_STRICT_DEPENDENCIES", "").lower() in _TRUTHY

        return BuildConfig(
            inline_runtime=not env_no_inline and build_data.get("inline_runtime", True),
            validate_components=build_data.get("validate_components", True),
            optimize_styles=build_data.get("optimize_styles", True),
            strict_dependencies=env_strict or build_data.get("strict_dependencies", False),
            component_include=build_data.get("component_include"),
            component_exclude=build_data.get("component_exclude"),
        )

    def _create_runtime_config(self) -> RuntimeConfig:
        """Create runtime configuration from loaded data."""
        runtime_data = self._config_data.get("runtime", {})

        return RuntimeConfig(
            filename=runtime_data.get("filename", DEFAULT_RUNTIME_FILENAME),
            bootstrap_filename=runtime_data.get("bootstrap_filename", DEFAULT_BOOTSTRAP_FILENAME),
            search_paths=list(runtime_data.get("search_paths", [])),
        )

    def _create_logging_config(self) -> LoggingConfig:
        """Create logging configuration from loaded data."""
        log_data = self._config_data.get("logging", {})

        return LoggingConfig(
            level=os.getenv("BOREDOM_LOG_LEVEL", log_data.get("level", "INFO")),
            enable_file_logging=log_data.get("enable_file_logging", False),
            log_file=log_data.get("log_file", "boredom-compiler.log"),
        )

    def include_filters(self) -> Optional[list]:
        """Include filters as filter objects."""
        return parse_filter_entries(self.build.component_include)

    def exclude_filters(self) -> Optional[list]:
        """Exclude filters as filter objects."""
        return parse_filter_entries(self.build.component_exclude)

    def save_config(self, path: Optional[str] = None) -> Path:
        """
        Save current configuration to file.

        Args:
            path: Target file; defaults to the loaded file or boredom.config.json

        Returns:
            Path that was written
        """
        target = Path(path) if path else (self.config_file or self.project_root / "boredom.config.json")
        config_data = {
            "build": {
                "inline_runtime": self.build.inline_runtime,
                "validate_components": self.build.validate_components,
                "optimize_styles": self.build.optimize_styles,
                "strict_dependencies": self.build.strict_dependencies,
                "component_include": self.build.component_include,
                "component_exclude": self.build.component_exclude,
            },
            "runtime": {
                "filename": self.runtime.filename,
                "bootstrap_filename": self.runtime.bootstrap_filename,
                "search_paths": self.runtime.search_paths,
            },
            "logging": {
                "level": self.logging.level,
                "enable_file_logging": self.logging.enable_file_logging,
                "log_file": self.logging.log_file,
            },
        }

        with open(target, "w", encoding="utf-8") as f:
            if target.suffix.lower() in [".yaml", ".yml"]:
                yaml.safe_dump(config_data, f, sort_keys=False)
            else:
                json.dump(config_data, f, indent=2)
        logger.info(f"Configuration saved to {target}")
        return target


# Global configuration instance
_global_config: Optional[CompilerConfig] = None


def get_config() -> CompilerConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = CompilerConfig()
    return _global_config


def set_config(config: Optional[CompilerConfig]) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def load_config(config_file: Optional[str] = None, project_root: Optional[str] = None) -> CompilerConfig:
    """Load configuration from a specific file or project root."""
    return CompilerConfig(config_file, project_root)
