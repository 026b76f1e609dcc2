"""
Unit tests for module id filtering.
"""

import re

import pytest

from boredom_compiler.filters import ModuleFilter, matches_filter, normalize_filters
from boredom_compiler.utils.exceptions import ConfigurationError


class TestDefaults:
    """Test the default include and exclude filters."""

    @pytest.mark.parametrize("module_id", [
        "/app/src/button.js",
        "/app/src/button.mjs",
        "/app/src/button.cjs",
    ])
    def test_script_modules_are_included(self, module_id):
        """Test that JavaScript modules are processed."""
        assert ModuleFilter().should_process(module_id)

    @pytest.mark.parametrize("module_id", [
        "/app/src/style.css",
        "/app/src/button.ts",
        "/app/node_modules/lib/index.js",
        "\0virtual:entry.js",
        "",
        None,
    ])
    def test_rejected_ids(self, module_id):
        """Test other files, dependencies, virtual ids and empty ids."""
        assert not ModuleFilter().should_process(module_id)

    def test_filter_is_callable(self):
        """Test that a filter can be used as a predicate."""
        module_filter = ModuleFilter()
        assert list(filter(module_filter, ["a.js", "b.css"])) == ["a.js"]


class TestCustomFilters:
    """Test user supplied filters."""

    def test_suffix_and_substring_strings(self):
        """Test string filters starting with a dot match suffixes."""
        assert matches_filter("/app/x.component.js", ".component.js")
        assert not matches_filter("/app/x.js", ".component.js")
        assert matches_filter("/app/components/x.js", "/components/")

    def test_patterns_and_predicates(self):
        """Test regular expression and callable filters."""
        assert matches_filter("/app/ui/x.js", re.compile(r"/ui/"))
        assert matches_filter("/app/x.js", lambda module_id: module_id.endswith("x.js"))

    def test_include_and_exclude(self):
        """Test combined include and exclude lists."""
        module_filter = ModuleFilter(include="/components/", exclude=[re.compile(r"\.test\.js$")])
        assert module_filter.should_process("/app/components/a.js")
        assert not module_filter.should_process("/app/components/a.test.js")
        assert not module_filter.should_process("/app/pages/a.js")

    def test_empty_lists(self):
        """Test that empty include accepts all and empty exclude rejects none."""
        module_filter = ModuleFilter(include=[], exclude=[])
        assert module_filter.should_process("/app/node_modules/readme.md")

    def test_invalid_entry(self):
        """Test that unsupported filter entries are rejected."""
        with pytest.raises(ConfigurationError):
            normalize_filters([".js", 42], [])

    def test_none_selects_fallback(self):
        """Test that an unset option uses the defaults."""
        assert normalize_filters(None, [".js"]) == [".js"]
