"""
String Manipulation Utilities for boredom_compiler.

This module provides the text helpers used when generating markup and
reporting diagnostics.
"""

from __future__ import annotations

import re
from typing import Iterable

from .constants import LOG_PREFIX

__all__ = ["format_validation_message", "normalize_module_id", "optimize_css"]

_CSS_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_WHITESPACE_RUN = re.compile(r"\s+")


def optimize_css(css: str) -> str:
    """
    Strip comments and collapse whitespace in a stylesheet.

    Args:
        css: Stylesheet source

    Returns:
        Single-line stylesheet
    """
    without_comments = _CSS_COMMENT.sub("", css)
    return _WHITESPACE_RUN.sub(" ", without_comments).strip()


def format_validation_message(module_id: str, issues: Iterable[object]) -> str:
    """
    Build the aggregated warning for one module.

    Args:
        module_id: Normalized module id
        issues: Issues found for the module

    Returns:
        Multi-line message, one bullet per issue
    """
    bullets = "\n".join(f"  - {issue}" for issue in issues)
    return f"{LOG_PREFIX} {module_id}\n{bullets}"


def normalize_module_id(module_id: str) -> str:
    """
    Drop query and hash suffixes and use forward slashes.

    Args:
        module_id: Module id as handed over by the build host

    Returns:
        Normalized id
    """
    return module_id.split("?")[0].split("#")[0].replace("\\", "/")
