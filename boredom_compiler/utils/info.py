"""
Package information utility.

This module provides a command-line utility for displaying
information about the boredom_compiler installation and environment.
"""

import sys
import platform
from importlib import metadata
from typing import Dict, Any

import boredom_compiler

# Distributions the compiler depends on, by index name
_DEPENDENCIES = (
    "tree-sitter",
    "tree-sitter-javascript",
    "Jinja2",
    "PyYAML",
)


def get_system_info() -> Dict[str, Any]:
    """
    Get system information relevant to boredom_compiler.

    Returns:
        Dictionary containing system information
    """
    return {
        'python_version': sys.version,
        'platform': platform.platform(),
        'architecture': platform.architecture(),
    }


def get_dependency_versions() -> Dict[str, str]:
    """Installed versions of the compiler's dependencies."""
    versions = {}
    for name in _DEPENDENCIES:
        try:
            versions[name] = metadata.version(name)
        except metadata.PackageNotFoundError:
            versions[name] = 'Not installed'
    return versions


def get_compiler_info() -> Dict[str, Any]:
    """
    Get boredom_compiler-specific information.

    Returns:
        Dictionary containing package information
    """
    info = {
        'version': boredom_compiler.__version__,
        'author': boredom_compiler.__author__,
        'grammar_loaded': False,
    }

    # Loading the grammar proves the native extensions work
    try:
        from boredom_compiler.frontend.parser import parse_module
        parse_module("export const ok = true;")
        info['grammar_loaded'] = True
    except Exception as e:
        info['grammar_error'] = str(e)

    return info


def print_info() -> None:
    """Print formatted information about boredom_compiler and the system."""
    print("boreDOM Component Compiler")
    print("=" * 40)

    compiler_info = get_compiler_info()
    print(f"\nVersion: {compiler_info['version']}")
    print(f"Author: {compiler_info['author']}")
    print(f"JavaScript Grammar Loaded: {compiler_info['grammar_loaded']}")

    if 'grammar_error' in compiler_info:
        print(f"Grammar Error: {compiler_info['grammar_error']}")

    system_info = get_system_info()
    print(f"\nPython Version: {system_info['python_version'].split()[0]}")
    print(f"Platform: {system_info['platform']}")
    print(f"Architecture: {system_info['architecture'][0]}")

    print("\nDependencies:")
    for name, version in get_dependency_versions().items():
        print(f"  {name}: {version}")


def main() -> None:
    """Main entry point for the boredom-info command."""
    try:
        print_info()
    except Exception as e:
        print(f"Error getting system information: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
