"""
HTML inlining.

Splices rendered component triplets into an HTML document, replaces the
external runtime script with an inline copy and removes the development
bootstrap script that used to load components at runtime.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..analysis.classifier import ComponentRecord
from ..graph.component_graph import sort_components
from ..session import BuildSession
from ..utils.constants import (
    BODY_CLOSE_TAG,
    DEFAULT_BOOTSTRAP_FILENAME,
    DEFAULT_RUNTIME_FILENAME,
    LOG_PREFIX,
    RUNTIME_SEARCH_PATHS,
)
from ..utils.exceptions import RuntimeNotFoundError
from ..utils.logging import BuildLogger
from .triplets import TripletRenderer

build_logger = BuildLogger(__name__)


def runtime_candidates(project_root: str, filename: str = DEFAULT_RUNTIME_FILENAME,
                       search_paths: Sequence[str] = ()) -> List[Path]:
    """
    Candidate runtime locations in lookup order.

    Args:
        project_root: Build root directory
        filename: Runtime file name
        search_paths: Extra locations tried first; relative ones are
            resolved against the project root

    Returns:
        List of paths
    """
    root = Path(project_root or ".")
    candidates = [root / Path(path) for path in search_paths]
    candidates.extend(root / pattern.format(filename=filename) for pattern in RUNTIME_SEARCH_PATHS)
    return candidates


def read_runtime(project_root: str, filename: str = DEFAULT_RUNTIME_FILENAME,
                 search_paths: Sequence[str] = ()) -> Tuple[Path, str]:
    """
    Read the first runtime file that exists.

    Args:
        project_root: Build root directory
        filename: Runtime file name
        search_paths: Extra locations tried first

    Returns:
        Tuple of (path, file contents)

    Raises:
        RuntimeNotFoundError: If no candidate can be read
    """
    candidates = runtime_candidates(project_root, filename, search_paths)
    for candidate in candidates:
        if not candidate.is_file():
            continue
        try:
            return candidate, candidate.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            continue
    raise RuntimeNotFoundError(filename, [str(candidate) for candidate in candidates])


def insert_before_body_close(html: str, markup: str) -> Optional[str]:
    """
    Insert markup right before the last `</body>`.

    Args:
        html: HTML document
        markup: Markup to insert

    Returns:
        Updated document, or None if there is no `</body>`
    """
    insert_point = html.rfind(BODY_CLOSE_TAG)
    if insert_point == -1:
        return None
    return html[:insert_point] + markup + html[insert_point:]


def inline_runtime_script(html: str, runtime_code: str, filename: str = DEFAULT_RUNTIME_FILENAME) -> str:
    """
    Replace the first external runtime script tag with an inline script.

    Attributes after `src` are kept on the inline tag.

    Args:
        html: HTML document
        runtime_code: Runtime source
        filename: Runtime file name the `src` must end with

    Returns:
        Updated document
    """
    pattern = re.compile(r'<script src="[^"]*' + re.escape(filename) + r'"([^>]*)></script>')
    return pattern.sub(lambda match: f"<script{match.group(1)}>\n{runtime_code}\n</script>", html, count=1)


def remove_bootstrap_scripts(html: str, filename: str = DEFAULT_BOOTSTRAP_FILENAME) -> str:
    """
    Remove every `<script type="module" src=".../main.js">` tag.

    Args:
        html: HTML document
        filename: Bootstrap file name the `src` must end with

    Returns:
        Updated document
    """
    pattern = re.compile(r'<script type="module" src="[^"]*' + re.escape(filename) + r'"></script>\s*')
    return pattern.sub("", html)


class HtmlInliner:
    """
    Rewrites HTML documents for a finished build session.

    Args:
        renderer: Triplet renderer
        inline_runtime: Replace the external runtime script with its contents
        runtime_filename: Runtime file name
        bootstrap_filename: Development bootstrap file name
        search_paths: Extra runtime locations tried first
    """

    def __init__(self, renderer: Optional[TripletRenderer] = None, inline_runtime: bool = True,
                 runtime_filename: str = DEFAULT_RUNTIME_FILENAME,
                 bootstrap_filename: str = DEFAULT_BOOTSTRAP_FILENAME,
                 search_paths: Sequence[str] = ()):
        self.renderer = renderer or TripletRenderer()
        self.inline_runtime = inline_runtime
        self.runtime_filename = runtime_filename
        self.bootstrap_filename = bootstrap_filename
        self.search_paths = list(search_paths)

    def ordered_components(self, session: BuildSession) -> List[Tuple[str, ComponentRecord]]:
        ordered = sort_components(session.components_by_id, session.dependency_names_by_id)
        build_logger.log_sort_result([component.metadata.name for _, component in ordered])
        return ordered

    def _runtime_code(self, session: BuildSession) -> Optional[str]:
        try:
            path, code = read_runtime(session.project_root, self.runtime_filename, self.search_paths)
        except RuntimeNotFoundError as e:
            build_logger.log_runtime_missing(e.searched)
            session.warn(f"{LOG_PREFIX} Could not find {self.runtime_filename} runtime, using external script")
            return None
        if not code.strip():
            build_logger.logger.warning(f"Runtime file {path} is empty, using external script")
            session.warn(f"{LOG_PREFIX} {self.runtime_filename} runtime is empty, using external script")
            return None
        build_logger.log_runtime_inlined(str(path))
        return code

    def inline(self, html: str, session: BuildSession) -> str:
        """
        Produce the deployable document.

        Args:
            html: Source HTML document
            session: Finished build session

        Returns:
            Document with component triplets, the inlined runtime and no
            bootstrap script
        """
        ordered = self.ordered_components(session)
        markup = self.renderer.render_all(ordered)

        result = insert_before_body_close(html, markup)
        if result is None:
            result = html
            if ordered:
                session.warn(f"{LOG_PREFIX} No {BODY_CLOSE_TAG} found, components were not inlined")
                build_logger.logger.warning(f"No {BODY_CLOSE_TAG} in document, skipped {len(ordered)} component(s)")

        if self.inline_runtime:
            runtime_code = self._runtime_code(session)
            if runtime_code:
                result = inline_runtime_script(result, runtime_code, self.runtime_filename)

        return remove_bootstrap_scripts(result, self.bootstrap_filename)
