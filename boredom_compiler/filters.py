"""
Module id filters.

Decides which module ids the compiler analyses. A filter is a string,
a compiled regular expression, a predicate over the normalized id, or a
list of those. Strings starting with `.` match as suffixes, other strings
as substrings.
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Sequence, Union

from .utils.constants import DEFAULT_COMPONENT_EXCLUDE, DEFAULT_COMPONENT_INCLUDE, VIRTUAL_MODULE_PREFIX
from .utils.exceptions import ConfigurationError

ComponentFilter = Union[str, re.Pattern, Callable[[str], bool]]
FilterSpec = Union[ComponentFilter, Sequence[ComponentFilter], None]


def normalize_filters(value: FilterSpec, fallback: Sequence[ComponentFilter]) -> List[ComponentFilter]:
    """
    Turn a filter option into a list of filters.

    Args:
        value: Option value; None selects the fallback
        fallback: Default filters

    Returns:
        List of filters
    """
    if value is None:
        return list(fallback)
    if isinstance(value, (str, re.Pattern)) or callable(value):
        filters = [value]
    else:
        filters = list(value)

    for entry in filters:
        if not isinstance(entry, (str, re.Pattern)) and not callable(entry):
            raise ConfigurationError(f"Unsupported component filter {entry!r}")
    return filters


def matches_filter(module_id: str, component_filter: ComponentFilter) -> bool:
    """Check one filter against a normalized module id."""
    if isinstance(component_filter, re.Pattern):
        return component_filter.search(module_id) is not None
    if isinstance(component_filter, str):
        if component_filter.startswith("."):
            return module_id.endswith(component_filter)
        return component_filter in module_id
    return bool(component_filter(module_id))


class ModuleFilter:
    """
    Include/exclude decision for module ids.

    Args:
        include: Include filters; defaults to `.js`, `.mjs` and `.cjs` files
        exclude: Exclude filters; defaults to anything under `node_modules`
    """

    def __init__(self, include: FilterSpec = None, exclude: FilterSpec = None):
        self.include = normalize_filters(include, DEFAULT_COMPONENT_INCLUDE)
        self.exclude = normalize_filters(exclude, DEFAULT_COMPONENT_EXCLUDE)

    def __call__(self, module_id: str) -> bool:
        return self.should_process(module_id)

    def should_process(self, module_id: Optional[str]) -> bool:
        """
        Check whether a normalized module id should be analysed.

        An empty include list accepts every id and an empty exclude list
        rejects none. Virtual ids are never processed.
        """
        if not module_id or module_id.startswith(VIRTUAL_MODULE_PREFIX):
            return False
        if self.include and not any(matches_filter(module_id, f) for f in self.include):
            return False
        return not any(matches_filter(module_id, f) for f in self.exclude)
