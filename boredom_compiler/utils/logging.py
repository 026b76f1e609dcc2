"""
Logging configuration and utilities.

This module provides centralized logging configuration for the
boredom_compiler package with appropriate formatting and levels.
"""

import logging
import os
from typing import Optional

ROOT_LOGGER_NAME = "boredom_compiler"


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure logging for the boredom_compiler package.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for log output
    """
    # Determine log level
    if level is None:
        level = os.environ.get("BOREDOM_LOG_LEVEL", "INFO")

    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level)

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Prevent propagation to root logger
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class BuildLogger:
    """
    Domain-level logging for a component build.

    Wraps a package logger with one method per build event so the
    compiler, sorter and inliner report progress in a uniform format.
    """

    def __init__(self, name: str):
        """
        Initialize logger for specific component.

        Args:
            name: Component name for logging context
        """
        self.logger = get_logger(name)

    def log_build_start(self, project_root: str) -> None:
        """Log creation of a new build session."""
        self.logger.debug(f"Starting component build in {project_root or '.'}")

    def log_transform_skipped(self, module_id: str) -> None:
        """Log a module rejected by the include/exclude filters."""
        self.logger.debug(f"Skipping {module_id}: filtered out")

    def log_component_registered(self, module_id: str, component_name: str) -> None:
        """
        Log a module that produced a component record.

        Args:
            module_id: Normalized module id
            component_name: Value of metadata.name
        """
        self.logger.debug(f"Registered component '{component_name}' from {module_id}")

    def log_component_rejected(self, module_id: str, issue_count: int) -> None:
        """
        Log a module that resembled a component but produced no record.

        Args:
            module_id: Normalized module id
            issue_count: Number of issues found for the module
        """
        self.logger.debug(f"No component record for {module_id} ({issue_count} issue(s))")

    def log_validation_warning(self, message: str) -> None:
        """Log an aggregated validation warning."""
        self.logger.warning(message)

    def log_sort_result(self, ordered_names: list) -> None:
        """
        Log the dependency order chosen for a bundle.

        Args:
            ordered_names: Component names in emission order
        """
        self.logger.info(f"Inlining {len(ordered_names)} component(s): {', '.join(ordered_names)}")

    def log_runtime_inlined(self, runtime_path: str) -> None:
        """Log the runtime file that was inlined."""
        self.logger.debug(f"Inlined runtime from {runtime_path}")

    def log_runtime_missing(self, searched: list) -> None:
        """
        Log that no runtime file could be found.

        Args:
            searched: Candidate paths that were checked
        """
        self.logger.warning(
            f"Could not find boreDOM runtime, using external script (searched {len(searched)} path(s))"
        )

    def log_chunks_pruned(self, file_names: list) -> None:
        """Log script chunks removed from the bundle."""
        if file_names:
            self.logger.debug(f"Removed inlined chunks: {', '.join(sorted(file_names))}")


# Initialize logging on module import
setup_logging()
