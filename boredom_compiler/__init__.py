"""
boredom_compiler: build-time compiler for boreDOM component modules

Analyses ES modules that export `metadata`, `style`, `template` and
`logic` without executing them, orders the components by their declared
dependencies and inlines them into a single HTML document.

Key Features:
- Constant folding over a safe JavaScript expression subset
- Validation with aggregated, per-module diagnostics
- Dependency ordering of component triplets
- Runtime inlining and bootstrap script removal

Usage:
    from boredom_compiler import ComponentCompiler

    compiler = ComponentCompiler()
    html = compiler.build_html(index_html, {"src/button.js": source})
"""

__version__ = "0.1.0"
__author__ = "boreDOM Team"
__email__ = "boredom@example.com"

# Public API exports
from .analysis import (
    ComponentAnalysis,
    ComponentIssue,
    ComponentMetadata,
    ComponentRecord,
    analyze_component_module,
    parse_component_module,
    require_component,
)

from .compiler import (
    BundleAsset,
    ComponentCompiler,
    CompilerOptions,
)

from .session import BuildSession

from .utils.config import (
    get_config,
    CompilerConfig,
)

__all__ = [
    "BuildSession",
    "BundleAsset",
    "ComponentAnalysis",
    "ComponentCompiler",
    "ComponentIssue",
    "ComponentMetadata",
    "ComponentRecord",
    "CompilerConfig",
    "CompilerOptions",
    "analyze_component_module",
    "get_config",
    "parse_component_module",
    "require_component",
]
