"""
Pytest configuration and shared fixtures for boredom_compiler tests.

This module provides common test fixtures, sample component modules and
utilities used across the test suite.
"""

import re
import shutil
import tempfile
from pathlib import Path

import pytest

from boredom_compiler.compiler import ComponentCompiler, CompilerOptions
from boredom_compiler.frontend import parse_module
from boredom_compiler.analysis.bindings import collect_bindings
from boredom_compiler.analysis.evaluator import StaticEvaluator


# Sample component modules
BUTTON_SOURCE = """
export const metadata = {
  name: 'ui-button',
  version: '1.0.0',
  props: ['label'],
  events: ['press'],
};

export const style = `
  /* button styles */
  button {
    color: red;
  }
`;

export const template = '<button><slot></slot></button>';

export const logic = ({ on }) => {
  on('press', () => {});
};
"""

CARD_SOURCE = """
const base = { version: '2.0.0', dependencies: ['ui-button'] };

export const metadata = { ...base, name: 'ui-card' };
export const style = '.card { padding: 4px; }';
export const template = `<div class="card"><ui-button></ui-button></div>`;

export function logic({ state }) {
  return () => state;
}
"""

INDEX_HTML = """<!DOCTYPE html>
<html>
<head>
  <script src="./boreDOM.js" data-state="#initial"></script>
</head>
<body>
  <ui-card></ui-card>
  <script type="module" src="/src/main.js"></script>
</body>
</html>
"""

RUNTIME_SOURCE = "export const inflictBoreDOM = () => {};"


def make_component(name: str, dependencies=(), style: str = ".x { color: blue; }",
                   template: str = "<p>x</p>") -> str:
    """
    Build the source of a minimal valid component module.

    Args:
        name: metadata.name
        dependencies: Names listed in metadata.dependencies
        style: Style export
        template: Template export

    Returns:
        Module source
    """
    deps = ", ".join(repr(dep) for dep in dependencies)
    return (
        f"export const metadata = {{ name: {name!r}, dependencies: [{deps}] }};\n"
        f"export const style = {style!r};\n"
        f"export const template = {template!r};\n"
        f"export const logic = () => {{}};\n"
    )


# Test configuration
@pytest.fixture(scope="session")
def temp_test_dir():
    """Create temporary directory for test artifacts."""
    temp_dir = tempfile.mkdtemp(prefix="boredom_test_")
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def project_dir(tmp_path):
    """Create a project directory with an entry document and a runtime."""
    (tmp_path / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    (tmp_path / "boreDOM.js").write_text(RUNTIME_SOURCE, encoding="utf-8")
    components = tmp_path / "src" / "components"
    components.mkdir(parents=True)
    (components / "button.js").write_text(BUTTON_SOURCE, encoding="utf-8")
    (components / "card.js").write_text(CARD_SOURCE, encoding="utf-8")
    return tmp_path


# Source fixtures
@pytest.fixture
def button_source():
    return BUTTON_SOURCE


@pytest.fixture
def card_source():
    return CARD_SOURCE


@pytest.fixture
def index_html():
    return INDEX_HTML


# Component fixtures
@pytest.fixture
def compiler():
    """Create a ComponentCompiler with default options."""
    return ComponentCompiler()


@pytest.fixture
def offline_compiler():
    """Create a ComponentCompiler that does not inline the runtime."""
    return ComponentCompiler(CompilerOptions(inline_runtime=False))


@pytest.fixture
def fold():
    """
    Fold the initializer of `value` in a snippet of module source.

    Returns a function taking source text and returning the EvaluationResult.
    """
    def _fold(source: str, name: str = "value"):
        module = parse_module(source)
        bindings = collect_bindings(module)
        return StaticEvaluator(bindings).evaluate(bindings.get(name))
    return _fold


# Utility fixtures
@pytest.fixture
def component_factory():
    """Return the `make_component` source builder."""
    return make_component


@pytest.fixture
def triplet_names():
    """Return a function listing triplet component names in document order."""
    def _names(html: str) -> list:
        return re.findall(r"<!-- Component: (.*?) -->", html)
    return _names


# Pytest hooks for test collection and reporting
def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on the test path."""
    for item in items:
        path = Path(str(item.fspath))
        if "unit" in path.parts:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path.parts:
            item.add_marker(pytest.mark.integration)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests for individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests for complete workflows"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )
