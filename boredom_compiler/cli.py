"""
Command line entry point.

`boredom-build` compiles an HTML entry and the component modules found
under one or more paths into a single self-contained HTML file.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .compiler import BundleAsset, ComponentCompiler, CompilerOptions
from .utils.config import load_config
from .utils.exceptions import BoredomError
from .utils.logging import get_logger, setup_logging
from .utils.string_utils import normalize_module_id

logger = get_logger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the `boredom-build` argument parser."""
    ap = argparse.ArgumentParser(
        prog="boredom-build",
        description="Inline boreDOM component modules into a single HTML file.",
    )
    ap.add_argument("index_html", help="HTML entry document.")
    ap.add_argument(
        "component_paths",
        nargs="*",
        help="Component files or directories, searched recursively (default: the entry's directory).",
    )
    ap.add_argument("-o", "--output", default=None, help="Output file (default: dist/<entry name>).")
    ap.add_argument("--config", default=None, help="Configuration file (JSON or YAML).")
    ap.add_argument("--no-inline-runtime", action="store_true", help="Keep the external runtime script.")
    ap.add_argument("--no-validate", action="store_true", help="Do not report component validation issues.")
    ap.add_argument("--no-optimize-styles", action="store_true", help="Emit component styles verbatim.")
    ap.add_argument(
        "--strict-dependencies",
        action="store_true",
        help="Warn about unknown dependency names and dependency cycles.",
    )
    ap.add_argument("--fail-on-warnings", action="store_true", help="Exit with status 1 if any warning was emitted.")
    ap.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: from configuration).",
    )
    return ap


def iter_module_files(paths: Sequence[Path]) -> Iterator[Path]:
    """Yield files under the given paths, sorted within each directory tree."""
    for path in paths:
        if path.is_file():
            yield path
        elif path.is_dir():
            yield from sorted(candidate for candidate in path.rglob("*") if candidate.is_file())
        else:
            logger.warning(f"Component path {path} does not exist")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run `boredom-build`.

    Args:
        argv: Command line arguments without the program name

    Returns:
        Process exit status
    """
    args = build_arg_parser().parse_args(argv)

    index_path = Path(args.index_html).resolve()
    project_root = index_path.parent

    config = load_config(args.config, str(project_root))
    log_file = config.logging.log_file if config.logging.enable_file_logging else None
    setup_logging(args.log_level or config.logging.level, log_file)

    try:
        options = CompilerOptions.from_config(config)
    except BoredomError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    if args.no_inline_runtime:
        options.inline_runtime = False
    if args.no_validate:
        options.validate_components = False
    if args.no_optimize_styles:
        options.optimize_styles = False
    if args.strict_dependencies:
        options.strict_dependencies = True

    try:
        html = index_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read {index_path}: {e}")
        return 1

    compiler = ComponentCompiler(options)
    session = compiler.start_build(str(project_root))

    component_paths = [Path(path).resolve() for path in args.component_paths] or [project_root]
    for module_path in iter_module_files(component_paths):
        module_id = normalize_module_id(module_path.as_posix())
        if not compiler.module_filter.should_process(module_id):
            continue
        try:
            code = module_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            session.warn(f"Cannot read {module_path}: {e}")
            logger.warning(f"Cannot read {module_path}: {e}")
            continue
        compiler.transform(session, code, module_id)

    bundle = {index_path.name: BundleAsset(index_path.name, html)}
    compiler.finalize(session, bundle)

    output_path = Path(args.output) if args.output else project_root / "dist" / index_path.name
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(bundle[index_path.name].source, encoding="utf-8")
    except OSError as e:
        logger.error(f"Cannot write {output_path}: {e}")
        return 1

    logger.info(f"Wrote {output_path} ({len(session)} component(s), {len(session.warnings)} warning(s))")

    if args.fail_on_warnings and session.warnings:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
