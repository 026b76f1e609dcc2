"""
Unit tests for the configuration system.
"""

import json
import re
from unittest.mock import patch

import pytest
import yaml

from boredom_compiler.utils.config import (
    CompilerConfig,
    get_config,
    load_config,
    parse_filter_entries,
    set_config,
)
from boredom_compiler.utils.exceptions import ConfigurationError


class TestConfigLoading:
    """Test reading configuration files."""

    def test_defaults_without_file(self, tmp_path):
        """Test defaults when the project has no configuration file."""
        config = load_config(project_root=str(tmp_path))
        assert config.config_file is None
        assert config.build.inline_runtime is True
        assert config.build.validate_components is True
        assert config.build.optimize_styles is True
        assert config.build.strict_dependencies is False
        assert config.build.component_include is None
        assert config.runtime.filename == "boreDOM.js"
        assert config.runtime.bootstrap_filename == "main.js"
        assert config.runtime.search_paths == []
        assert config.logging.level == "INFO"

    def test_yaml_file_in_project_root(self, tmp_path):
        """Test that boredom.config.yaml is discovered."""
        (tmp_path / "boredom.config.yaml").write_text(
            "build:\n"
            "  inline_runtime: false\n"
            "  component_include: ['/components/']\n"
            "runtime:\n"
            "  filename: runtime.js\n"
            "  search_paths: [vendor/runtime.js]\n",
            encoding="utf-8",
        )
        config = load_config(project_root=str(tmp_path))
        assert config.config_file == tmp_path / "boredom.config.yaml"
        assert config.build.inline_runtime is False
        assert config.build.component_include == ["/components/"]
        assert config.runtime.filename == "runtime.js"
        assert config.runtime.search_paths == ["vendor/runtime.js"]

    def test_explicit_json_file(self, tmp_path):
        """Test loading an explicit JSON file."""
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"build": {"strict_dependencies": True}, "logging": {"level": "DEBUG"}}))
        config = load_config(str(path))
        assert config.build.strict_dependencies is True
        assert config.logging.level == "DEBUG"

    def test_malformed_file_uses_defaults(self, tmp_path):
        """Test that unreadable configuration falls back to defaults."""
        (tmp_path / "boredom.config.json").write_text("{not json", encoding="utf-8")
        config = load_config(project_root=str(tmp_path))
        assert config.build.inline_runtime is True

    def test_missing_explicit_file_uses_defaults(self, tmp_path):
        """Test an explicit path that does not exist."""
        config = load_config(str(tmp_path / "absent.yaml"))
        assert config.build.strict_dependencies is False


class TestEnvironmentOverrides:
    """Test environment variable overrides."""

    def test_overrides(self, tmp_path):
        """Test runtime, strictness and log level overrides."""
        env = {
            "BOREDOM_NO_INLINE_RUNTIME": "yes",
            "BOREDOM_STRICT_DEPENDENCIES": "1",
            "BOREDOM_LOG_LEVEL": "WARNING",
        }
        with patch.dict("os.environ", env):
            config = load_config(project_root=str(tmp_path))
        assert config.build.inline_runtime is False
        assert config.build.strict_dependencies is True
        assert config.logging.level == "WARNING"


class TestFilterEntries:
    """Test conversion of filter strings."""

    def test_strings_and_patterns(self):
        """Test that slash-delimited entries become patterns."""
        filters = parse_filter_entries([".js", r"/\.component\.js$/"])
        assert filters[0] == ".js"
        assert isinstance(filters[1], re.Pattern)
        assert filters[1].pattern == r"\.component\.js$"

    def test_single_string_and_unset(self):
        """Test a bare string and a missing option."""
        assert [f.pattern for f in parse_filter_entries("/components/")] == ["components"]
        assert parse_filter_entries(None) is None

    def test_invalid_entries(self):
        """Test non-string entries and bad patterns."""
        with pytest.raises(ConfigurationError):
            parse_filter_entries([1])
        with pytest.raises(ConfigurationError):
            parse_filter_entries(["/(/"])

    def test_config_filter_accessors(self, tmp_path):
        """Test the include and exclude accessors."""
        (tmp_path / "boredom.config.json").write_text(
            json.dumps({"build": {"component_exclude": ["/\\.test\\.js$/"]}})
        )
        config = load_config(project_root=str(tmp_path))
        assert config.include_filters() is None
        assert config.exclude_filters()[0].search("/a.test.js")


class TestSaveConfig:
    """Test writing configuration files."""

    def test_save_yaml_round_trip(self, tmp_path):
        """Test that saved YAML loads back with the same values."""
        config = load_config(project_root=str(tmp_path))
        config.build.strict_dependencies = True
        config.runtime.search_paths = ["vendor/boreDOM.js"]
        target = config.save_config(str(tmp_path / "boredom.config.yaml"))

        data = yaml.safe_load(target.read_text(encoding="utf-8"))
        assert data["build"]["strict_dependencies"] is True
        assert load_config(project_root=str(tmp_path)).runtime.search_paths == ["vendor/boreDOM.js"]

    def test_save_default_location(self, tmp_path):
        """Test that JSON in the project root is the default target."""
        target = load_config(project_root=str(tmp_path)).save_config()
        assert target == tmp_path / "boredom.config.json"
        assert json.loads(target.read_text())["runtime"]["filename"] == "boreDOM.js"


class TestGlobalConfig:
    """Test the process-wide configuration instance."""

    def test_set_and_get(self, tmp_path):
        """Test replacing the global configuration."""
        config = CompilerConfig(project_root=str(tmp_path))
        set_config(config)
        try:
            assert get_config() is config
        finally:
            set_config(None)
