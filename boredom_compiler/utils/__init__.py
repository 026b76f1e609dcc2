"""
Utils package for boredom_compiler.

This module provides the exception hierarchy, constants, configuration,
logging and text helpers shared by the rest of the package.
"""

# Core utilities
from .exceptions import (
    BoredomError,
    ComponentValidationError,
    ConfigurationError,
    ModuleParseError,
    RuntimeNotFoundError,
    StaticEvaluationError,
)
from .constants import *
from .string_utils import *

# Configuration and system utilities
from .config import (
    CompilerConfig,
    BuildConfig,
    RuntimeConfig,
    LoggingConfig,
    get_config,
    set_config,
    load_config,
)

from .logging import BuildLogger, get_logger, setup_logging

__all__ = [
    # Core exceptions
    "BoredomError",
    "ComponentValidationError",
    "ConfigurationError",
    "ModuleParseError",
    "RuntimeNotFoundError",
    "StaticEvaluationError",

    # Constants (exported via *)
    # String utilities (exported via *)

    # Configuration
    "CompilerConfig",
    "BuildConfig",
    "RuntimeConfig",
    "LoggingConfig",
    "get_config",
    "set_config",
    "load_config",

    # Logging
    "BuildLogger",
    "get_logger",
    "setup_logging",
]
