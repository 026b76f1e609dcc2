"""
Code generation for component bundles.

Renders component triplets with Jinja2 and splices them into HTML.
"""

from .html_inliner import (
    HtmlInliner,
    inline_runtime_script,
    insert_before_body_close,
    read_runtime,
    remove_bootstrap_scripts,
    runtime_candidates,
)
from .triplets import TripletRenderer

__all__ = [
    "HtmlInliner",
    "TripletRenderer",
    "inline_runtime_script",
    "insert_before_body_close",
    "read_runtime",
    "remove_bootstrap_scripts",
    "runtime_candidates",
]
