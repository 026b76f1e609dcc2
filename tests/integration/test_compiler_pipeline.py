"""
Integration tests for the component build pipeline.

Tests complete builds: module transforms, session bookkeeping, bundle
finalization and the resulting HTML document.
"""

import pytest

from boredom_compiler import BundleAsset, ComponentCompiler, CompilerOptions
from boredom_compiler.utils.config import load_config


class TestBuildHtml:
    """End-to-end builds of an entry document."""

    def test_components_runtime_and_bootstrap(self, compiler, project_dir, triplet_names,
                                              index_html, button_source, card_source):
        """Test that one build inlines triplets and the runtime and drops the bootstrap."""
        session = compiler.start_build(str(project_dir))
        html = compiler.build_html(
            index_html,
            {"/app/src/card.js": card_source, "/app/src/button.js": button_source},
            session=session,
        )

        assert triplet_names(html) == ["ui-button", "ui-card"]
        assert html.count('<script type="text/boredom"') == 2
        assert '<script data-state="#initial">\nexport const inflictBoreDOM = () => {};\n</script>' in html
        assert "/src/main.js" not in html
        assert html.rstrip().endswith("</body>\n</html>")
        assert session.warnings == []

    def test_emitted_component_content(self, offline_compiler, triplet_names, index_html, button_source):
        """Test the folded content of each triplet."""
        html = offline_compiler.build_html(index_html, [("/app/src/button.js", button_source)])
        assert '<style data-component="ui-button">\n    button { color: red; }\n  </style>' in html
        assert '<template data-component="ui-button">\n    <button><slot></slot></button>\n  </template>' in html
        assert "export default ({ on }) => {\n  on('press', () => {});\n};" in html

    @pytest.mark.parametrize("order", [
        ["card", "button", "page"],
        ["button", "page", "card"],
        ["page", "card", "button"],
    ])
    def test_dependency_order_regardless_of_load_order(self, offline_compiler, component_factory,
                                                       triplet_names, order):
        """Test that dependencies always precede their dependents."""
        sources = {
            "card": component_factory("ui-card", ["ui-button"]),
            "button": component_factory("ui-button"),
            "page": component_factory("ui-page", ["ui-card", "ui-button"]),
        }
        modules = [(f"/app/src/{name}.js", sources[name]) for name in order]
        names = triplet_names(offline_compiler.build_html("<body></body>", modules))
        assert names.index("ui-button") < names.index("ui-card") < names.index("ui-page")
        assert sorted(names) == ["ui-button", "ui-card", "ui-page"]

    def test_long_concatenated_style(self, offline_compiler, triplet_names):
        """Test a style assembled from many concatenated pieces."""
        style = " + ".join(["'a{color:red}'"] * 600)
        source = (
            "export const metadata = { name: 'x-long' };\n"
            f"export const style = {style};\n"
            "export const template = '<p></p>';\n"
            "export function logic() {}\n"
        )
        session = offline_compiler.start_build("")
        html = offline_compiler.build_html("<body></body>", {"/app/long.js": source}, session=session)
        assert triplet_names(html) == ["x-long"]
        assert html.count("a{color:red}") == 600
        assert session.warnings == []

    def test_split_surrogate_is_rejected(self, offline_compiler, triplet_names):
        """Test that a style holding half an astral character is not emitted."""
        source = (
            "export const metadata = { name: 'x-emoji' };\n"
            "export const style = '\\u{1F600}'[0];\n"
            "export const template = '<p></p>';\n"
            "export function logic() {}\n"
        )
        session = offline_compiler.start_build("")
        html = offline_compiler.build_html("<body></body>", {"/app/emoji.js": source}, session=session)
        html.encode("utf-8")
        assert triplet_names(html) == []
        assert session.warnings == [
            "[boredom-compiler] /app/emoji.js\n"
            "  - `style` must resolve to a static string."
        ]

    def test_document_without_components(self, compiler, project_dir, index_html):
        """Test that only the runtime and bootstrap are rewritten."""
        html = compiler.build_html(index_html, {}, project_root=str(project_dir))
        assert "<!-- Component:" not in html
        assert "<ui-card></ui-card>" in html
        assert "/src/main.js" not in html

    def test_missing_runtime_keeps_external_script(self, compiler, tmp_path, index_html, button_source):
        """Test the warning when the runtime cannot be found."""
        session = compiler.start_build(str(tmp_path))
        html = compiler.build_html(index_html, {"/app/src/button.js": button_source}, session=session)
        assert '<script src="./boreDOM.js" data-state="#initial"></script>' in html
        assert session.warnings == [
            "[boredom-compiler] Could not find boreDOM.js runtime, using external script"
        ]


class TestTransform:
    """Tests for per-module transforms."""

    def test_filtered_modules_are_skipped(self, offline_compiler, button_source):
        """Test that non-script and dependency modules are not analysed."""
        session = offline_compiler.start_build()
        assert offline_compiler.transform(session, button_source, "/app/src/button.ts") is None
        assert offline_compiler.transform(session, button_source, "/app/node_modules/x/button.js") is None
        assert len(session) == 0

    def test_module_ids_are_normalized(self, offline_compiler, button_source):
        """Test that query strings, hashes and backslashes are dropped."""
        session = offline_compiler.start_build()
        offline_compiler.transform(session, button_source, "C:\\app\\src\\button.js?v=3#x")
        assert list(session.components_by_id) == ["C:/app/src/button.js"]

    def test_retransform_replaces_and_removes(self, offline_compiler, component_factory, triplet_names):
        """Test that a module that stops being a component leaves the build."""
        session = offline_compiler.start_build()
        offline_compiler.transform(session, component_factory("ui-a"), "/app/a.js")
        offline_compiler.transform(session, component_factory("ui-b"), "/app/b.js")
        offline_compiler.transform(session, component_factory("ui-a2"), "/app/a.js")
        assert [c.name for c in session.components_by_id.values()] == ["ui-a2", "ui-b"]

        offline_compiler.transform(session, "export const helper = 1;", "/app/a.js")
        html = offline_compiler.build_html("<body></body>", [], session=session)
        assert triplet_names(html) == ["ui-b"]

    def test_validation_warning_format(self, offline_compiler):
        """Test the aggregated warning for an invalid component."""
        session = offline_compiler.start_build()
        source = (
            "export const metadata = { name: 'ui-bad', version: 3 };\n"
            "export const style = 1;\n"
            "export const template = '';\n"
            "export const logic = () => {};\n"
        )
        analysis = offline_compiler.transform(session, source, "/app/src/bad.js")
        assert analysis.component is None
        assert session.warnings == [
            "[boredom-compiler] /app/src/bad.js\n"
            "  - `style` must resolve to a static string.\n"
            "  - `metadata.version` should be a string."
        ]

    def test_parse_failure_warning(self, offline_compiler):
        """Test that unparseable component-like modules are reported."""
        session = offline_compiler.start_build()
        offline_compiler.transform(session, "export const metadata = {", "/app/src/broken.js")
        assert len(session.warnings) == 1
        assert session.warnings[0].startswith(
            "[boredom-compiler] /app/src/broken.js\n  - Failed to parse module: "
        )

    def test_plain_modules_are_silent(self, offline_compiler):
        """Test that ordinary modules produce no warnings."""
        session = offline_compiler.start_build()
        offline_compiler.transform(session, "export default function main() {}", "/app/src/main.js")
        offline_compiler.transform(session, "export const style = 1;", "/app/src/theme.js")
        assert session.warnings == []

    def test_validation_can_be_disabled(self):
        """Test that validation warnings are optional."""
        compiler = ComponentCompiler(CompilerOptions(inline_runtime=False, validate_components=False))
        session = compiler.start_build()
        compiler.transform(session, "export const metadata = 1;\nexport const style = '';", "/app/x.js")
        assert session.warnings == []

    def test_custom_filters(self, component_factory):
        """Test include and exclude options."""
        compiler = ComponentCompiler(CompilerOptions(component_include=["/components/"], component_exclude=".test.js"))
        session = compiler.start_build()
        compiler.transform(session, component_factory("ui-a"), "/app/components/a.js")
        compiler.transform(session, component_factory("ui-b"), "/app/components/b.test.js")
        compiler.transform(session, component_factory("ui-c"), "/app/pages/c.js")
        assert list(session.components_by_id) == ["/app/components/a.js"]


class TestFinalize:
    """Tests for bundle finalization."""

    def test_script_chunks_are_pruned(self, compiler, project_dir, index_html, button_source):
        """Test that inlined chunks leave the bundle while other assets stay."""
        session = compiler.start_build(str(project_dir))
        compiler.transform(session, button_source, "/app/src/button.js")
        bundle = {
            "index.html": BundleAsset("index.html", index_html),
            "assets/main-1a2b.js": BundleAsset("assets/main-1a2b.js", "console.log(1);"),
            "boreDOM.js": BundleAsset("boreDOM.js", "runtime"),
            "assets/site.css": BundleAsset("assets/site.css", "body {}"),
        }
        result = compiler.generate_bundle(session, bundle)
        assert result is bundle
        assert sorted(bundle) == ["assets/site.css", "boreDOM.js", "index.html"]
        assert "<!-- Component: ui-button -->" in bundle["index.html"].source

    def test_every_html_asset_is_rewritten(self, offline_compiler, triplet_names, button_source):
        """Test builds with several entry documents."""
        session = offline_compiler.start_build()
        offline_compiler.transform(session, button_source, "/app/src/button.js")
        bundle = {
            "index.html": BundleAsset("index.html", "<body></body>"),
            "about/index.html": BundleAsset("about/index.html", "<body></body>"),
        }
        offline_compiler.finalize(session, bundle)
        assert all(triplet_names(asset.source) == ["ui-button"] for asset in bundle.values())

    def test_strict_dependencies(self, component_factory):
        """Test unknown dependency and cycle warnings."""
        compiler = ComponentCompiler(CompilerOptions(inline_runtime=False, strict_dependencies=True))
        session = compiler.start_build()
        compiler.transform(session, component_factory("ui-a", ["ui-b", "ui-zzz"]), "/app/a.js")
        compiler.transform(session, component_factory("ui-b", ["ui-a"]), "/app/b.js")
        compiler.build_html("<body></body>", [], session=session)
        assert session.warnings == [
            "[boredom-compiler] Component `ui-a` (/app/a.js) depends on unknown component `ui-zzz`.",
            "[boredom-compiler] Dependency cycle: ui-a -> ui-b -> ui-a.",
        ]

    def test_lenient_dependencies_by_default(self, offline_compiler, component_factory, triplet_names):
        """Test that cycles and unknown names still build without warnings."""
        session = offline_compiler.start_build()
        offline_compiler.transform(session, component_factory("ui-a", ["ui-b", "ui-zzz"]), "/app/a.js")
        offline_compiler.transform(session, component_factory("ui-b", ["ui-a"]), "/app/b.js")
        html = offline_compiler.build_html("<body></body>", [], session=session)
        assert triplet_names(html) == ["ui-b", "ui-a"]
        assert session.warnings == []


class TestOptionsFromConfig:
    """Tests for configuration driven builds."""

    def test_from_config(self, tmp_path):
        """Test that configuration values reach the compiler."""
        (tmp_path / "boredom.config.yaml").write_text(
            "build:\n"
            "  inline_runtime: false\n"
            "  optimize_styles: false\n"
            "  component_exclude: ['/\\.test\\.js$/']\n"
            "runtime:\n"
            "  filename: runtime.js\n",
            encoding="utf-8",
        )
        options = CompilerOptions.from_config(load_config(project_root=str(tmp_path)))
        assert options.inline_runtime is False
        assert options.optimize_styles is False
        assert options.runtime_filename == "runtime.js"

        compiler = ComponentCompiler(options)
        assert not compiler.module_filter.should_process("/app/a.test.js")
        assert compiler.module_filter.should_process("/app/a.js")
        assert compiler.inliner.renderer.optimize_styles is False
