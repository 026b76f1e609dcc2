"""
Unit tests for system information utilities.

Tests the installation report printed by `boredom-info`.
"""

import pytest
import platform
import sys
from importlib import metadata
from unittest.mock import patch
from boredom_compiler.utils.info import (
    get_compiler_info,
    get_dependency_versions,
    get_system_info,
    main,
    print_info,
)


class TestSystemInfo:
    """Test system information collection."""

    def test_get_system_info_basic(self):
        """Test getting basic system information."""
        info = get_system_info()

        assert info['python_version'] == sys.version
        assert info['platform'] == platform.platform()
        assert info['architecture'] == platform.architecture()

    def test_get_dependency_versions(self):
        """Test that every dependency is reported."""
        versions = get_dependency_versions()
        assert set(versions) == {'tree-sitter', 'tree-sitter-javascript', 'Jinja2', 'PyYAML'}
        assert versions['PyYAML'] != 'Not installed'

    def test_get_dependency_versions_missing(self):
        """Test reporting of distributions that are not installed."""
        with patch('boredom_compiler.utils.info.metadata.version',
                   side_effect=metadata.PackageNotFoundError('x')):
            versions = get_dependency_versions()
        assert set(versions.values()) == {'Not installed'}


class TestCompilerInfo:
    """Test package information."""

    def test_get_compiler_info(self):
        """Test version and grammar status."""
        info = get_compiler_info()
        assert info['version'] == '0.1.0'
        assert info['grammar_loaded'] is True
        assert 'grammar_error' not in info

    def test_get_compiler_info_grammar_failure(self):
        """Test that a broken grammar is reported instead of raised."""
        with patch('boredom_compiler.frontend.parser.parse_module', side_effect=RuntimeError('no grammar')):
            info = get_compiler_info()
        assert info['grammar_loaded'] is False
        assert info['grammar_error'] == 'no grammar'


class TestPrintInfo:
    """Test the printed report."""

    def test_print_info(self, capsys):
        """Test the report sections."""
        print_info()
        output = capsys.readouterr().out
        assert 'boreDOM Component Compiler' in output
        assert 'Version: 0.1.0' in output
        assert 'JavaScript Grammar Loaded: True' in output
        assert 'Dependencies:' in output
        assert 'Jinja2:' in output

    def test_main_error(self, capsys):
        """Test that main exits with status 1 on failure."""
        with patch('boredom_compiler.utils.info.print_info', side_effect=RuntimeError('boom')):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 1
        assert 'Error getting system information: boom' in capsys.readouterr().out
