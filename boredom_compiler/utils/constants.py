"""
Constants and Enumerations for boredom_compiler.

This module consolidates the constant definitions shared by the analysis,
graph and code generation layers.
"""

from __future__ import annotations

import re
from enum import Enum

__all__ = [
    "BODY_CLOSE_TAG",
    "CONFIG_FILENAMES",
    "DEFAULT_BOOTSTRAP_FILENAME",
    "DEFAULT_COMPONENT_EXCLUDE",
    "DEFAULT_COMPONENT_INCLUDE",
    "DEFAULT_RUNTIME_FILENAME",
    "IssueSeverity",
    "LOG_PREFIX",
    "METADATA_LIST_FIELDS",
    "REQUIRED_EXPORTS",
    "RUNTIME_SEARCH_PATHS",
    "TRIPLET_ATTRIBUTE",
    "TRIPLET_SCRIPT_TYPE",
    "VIRTUAL_MODULE_PREFIX",
]


# =============================================================================
# Component Module Contract
# =============================================================================

REQUIRED_EXPORTS = ("metadata", "style", "template", "logic")

# Metadata fields normalized to string lists
METADATA_LIST_FIELDS = ("dependencies", "props", "events")


class IssueSeverity(Enum):
    """Severity of a problem found while validating a component module."""

    FATAL = "fatal"  # No record is produced
    WARNING = "warning"  # Field coerced to a safe default


# =============================================================================
# Module Filtering
# =============================================================================

DEFAULT_COMPONENT_INCLUDE = (re.compile(r"\.([cm]?js)$"),)
DEFAULT_COMPONENT_EXCLUDE = (re.compile(r"/node_modules/"),)

# Rollup-style virtual module prefix
VIRTUAL_MODULE_PREFIX = "\0"


# =============================================================================
# Triplet Output Contract
# =============================================================================

TRIPLET_SCRIPT_TYPE = "text/boredom"
TRIPLET_ATTRIBUTE = "data-component"
BODY_CLOSE_TAG = "</body>"

DEFAULT_RUNTIME_FILENAME = "boreDOM.js"
DEFAULT_BOOTSTRAP_FILENAME = "main.js"

# Candidate runtime locations, relative to the project root, tried in order
RUNTIME_SEARCH_PATHS = (
    "{filename}",
    "src/{filename}",
    "node_modules/@mr_hugo/boredom/dist/{filename}",
)


# =============================================================================
# Diagnostics
# =============================================================================

LOG_PREFIX = "[boredom-compiler]"

CONFIG_FILENAMES = (
    "boredom.config.yaml",
    "boredom.config.yml",
    "boredom.config.json",
)
