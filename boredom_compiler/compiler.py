"""
Component compiler build host.

ComponentCompiler drives a build the way a bundler plugin does: a session
is started, every module passes through `transform` as it is loaded, and
`finalize` rewrites the HTML assets of the output bundle once all modules
are known.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .analysis.classifier import ComponentAnalysis, analyze_component_module
from .codegen.html_inliner import HtmlInliner
from .codegen.triplets import TripletRenderer
from .filters import FilterSpec, ModuleFilter
from .graph.component_graph import dependency_diagnostics
from .session import BuildSession
from .utils.config import CompilerConfig
from .utils.constants import DEFAULT_BOOTSTRAP_FILENAME, DEFAULT_RUNTIME_FILENAME, LOG_PREFIX
from .utils.logging import BuildLogger
from .utils.string_utils import format_validation_message, normalize_module_id

build_logger = BuildLogger(__name__)


@dataclass
class CompilerOptions:
    """Options of a ComponentCompiler."""

    inline_runtime: bool = True
    validate_components: bool = True
    optimize_styles: bool = True
    strict_dependencies: bool = False
    component_include: FilterSpec = None
    component_exclude: FilterSpec = None
    runtime_filename: str = DEFAULT_RUNTIME_FILENAME
    bootstrap_filename: str = DEFAULT_BOOTSTRAP_FILENAME
    runtime_search_paths: List[str] = field(default_factory=list)

    @classmethod
    def from_config(cls, config: CompilerConfig) -> "CompilerOptions":
        """
        Build options from a loaded configuration.

        Args:
            config: Loaded CompilerConfig

        Returns:
            CompilerOptions
        """
        return cls(
            inline_runtime=config.build.inline_runtime,
            validate_components=config.build.validate_components,
            optimize_styles=config.build.optimize_styles,
            strict_dependencies=config.build.strict_dependencies,
            component_include=config.include_filters(),
            component_exclude=config.exclude_filters(),
            runtime_filename=config.runtime.filename,
            bootstrap_filename=config.runtime.bootstrap_filename,
            runtime_search_paths=list(config.runtime.search_paths),
        )


@dataclass
class BundleAsset:
    """An output file of a build."""

    file_name: str
    source: str


Bundle = Dict[str, BundleAsset]


class ComponentCompiler:
    """
    Compiles component modules into a single HTML document.

    Args:
        options: Compiler options; defaults apply when omitted
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()
        self.module_filter = ModuleFilter(self.options.component_include, self.options.component_exclude)
        self.inliner = HtmlInliner(
            renderer=TripletRenderer(optimize_styles=self.options.optimize_styles),
            inline_runtime=self.options.inline_runtime,
            runtime_filename=self.options.runtime_filename,
            bootstrap_filename=self.options.bootstrap_filename,
            search_paths=self.options.runtime_search_paths,
        )

    def start_build(self, project_root: str = "") -> BuildSession:
        """Create the session for a new build."""
        build_logger.log_build_start(project_root)
        return BuildSession(project_root=project_root)

    def transform(self, session: BuildSession, code: str, module_id: str) -> Optional[ComponentAnalysis]:
        """
        Analyse one module and update the session.

        Args:
            session: Current build session
            code: Module source
            module_id: Module id as given by the host; normalized here

        Returns:
            The module's analysis, or None if the filters skipped it
        """
        clean_id = normalize_module_id(module_id)
        if not self.module_filter.should_process(clean_id):
            build_logger.log_transform_skipped(clean_id)
            return None

        analysis = analyze_component_module(code)
        component = session.record(clean_id, analysis)

        if component is not None:
            build_logger.log_component_registered(clean_id, component.metadata.name)
        elif analysis.looks_like_component:
            build_logger.log_component_rejected(clean_id, len(analysis.issues))

        if self.options.validate_components and analysis.issues and analysis.looks_like_component:
            message = format_validation_message(clean_id, analysis.issues)
            session.warn(message)
            build_logger.log_validation_warning(message)

        return analysis

    def finalize(self, session: BuildSession, bundle: Bundle) -> Bundle:
        """
        Rewrite HTML assets and drop inlined script chunks.

        Args:
            session: Build session after all transforms
            bundle: Output file name to asset; modified in place

        Returns:
            The same bundle
        """
        if self.options.strict_dependencies:
            for problem in dependency_diagnostics(session.components_by_id, session.dependency_names_by_id):
                message = f"{LOG_PREFIX} {problem}"
                session.warn(message)
                build_logger.log_validation_warning(message)

        for asset in bundle.values():
            if asset.file_name.endswith(".html"):
                asset.source = self.inliner.inline(asset.source, session)

        pruned = [
            file_name for file_name in bundle
            if file_name.endswith(".js") and file_name != self.options.runtime_filename
        ]
        for file_name in pruned:
            del bundle[file_name]
        build_logger.log_chunks_pruned(pruned)
        return bundle

    generate_bundle = finalize

    def build_html(self, html: str, modules: Union[Mapping[str, str], Iterable[Tuple[str, str]]],
                   project_root: str = "", session: Optional[BuildSession] = None) -> str:
        """
        Run a complete build in memory.

        Args:
            html: Entry HTML document
            modules: Module id to source, or (id, source) pairs in load order
            project_root: Root used to locate the runtime
            session: Session to fill, so callers can inspect warnings

        Returns:
            The compiled HTML document
        """
        if session is None:
            session = self.start_build(project_root)
        elif project_root:
            session.project_root = project_root

        items = modules.items() if isinstance(modules, Mapping) else modules
        for module_id, code in items:
            self.transform(session, code, module_id)

        bundle: Bundle = {"index.html": BundleAsset("index.html", html)}
        return self.finalize(session, bundle)["index.html"].source
