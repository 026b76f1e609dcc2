"""
Component triplet rendering.

Renders the `<style>`, `<template>` and `<script type="text/boredom">`
blocks the runtime consumes for each component, using the Jinja2 template
shipped in `codegen/templates`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional, Tuple

from jinja2 import Environment, FileSystemLoader, TemplateError

from ..analysis.classifier import ComponentRecord
from ..utils.constants import TRIPLET_ATTRIBUTE, TRIPLET_SCRIPT_TYPE
from ..utils.exceptions import BoredomError
from ..utils.string_utils import optimize_css

TRIPLET_TEMPLATE = "triplet.html.j2"


class TripletRenderer:
    """Jinja2-based renderer for component triplets."""

    def __init__(self, template_dir: Optional[str] = None, optimize_styles: bool = True):
        """
        Initialize the renderer.

        Args:
            template_dir: Directory holding `triplet.html.j2`; defaults to
                the package templates
            optimize_styles: Strip comments and collapse whitespace in styles
        """
        if template_dir is None:
            template_dir = os.path.join(os.path.dirname(__file__), "templates")

        self._template_dir = Path(template_dir)
        self._env = Environment(
            loader=FileSystemLoader(str(self._template_dir)),
            autoescape=False,
        )
        self.optimize_styles = optimize_styles

    def render(self, component: ComponentRecord) -> str:
        """
        Render one component's triplet.

        Args:
            component: Validated component record

        Returns:
            Markup preceded by a `<!-- Component: NAME -->` marker
        """
        style = optimize_css(component.style) if self.optimize_styles else component.style
        try:
            template = self._env.get_template(TRIPLET_TEMPLATE)
            return template.render(
                name=component.metadata.name,
                style=style,
                template=component.template,
                logic_source=component.logic_source,
                attribute=TRIPLET_ATTRIBUTE,
                script_type=TRIPLET_SCRIPT_TYPE,
            )
        except TemplateError as e:
            raise BoredomError(f"Triplet rendering failed: {e}", {"component": component.metadata.name})

    def render_all(self, components: Iterable[Tuple[str, ComponentRecord]]) -> str:
        """
        Render sorted components, one triplet per line group.

        Args:
            components: (module_id, record) pairs in emission order

        Returns:
            Triplets joined with newlines
        """
        return "\n".join(self.render(component) for _, component in components)
