from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .config import EngineOptions, load_options
from .data import MapValue
from .data_loader import load_data_file, merge_contexts, parse_assignment
from .engine import tokenize
from .errors import TempletError
from .fileio import read_template, write_output
from .template.nodes import format_ast_tree, render_ast
from .version import tool_version

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="templet",
        description="Render {$ value } / {% if %} / {% for %} templates",
        add_help=True,
    )
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Common arguments for render/tree
    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("template", help="template file, or - to read stdin")
        sp.add_argument(
            "--config",
            type=Path,
            help="options file (default: ./templet.yaml if present)",
        )
        sp.add_argument(
            "--lenient",
            action="store_true",
            help="relax terminator matching only: any endif/endfor closes the innermost open block",
        )

    sp_render = sub.add_parser("render", help="render a template to stdout or a file")
    add_common(sp_render)
    sp_render.add_argument(
        "-d", "--data",
        action="append",
        type=Path,
        default=[],
        metavar="FILE",
        help="YAML/JSON values file (repeatable, later files win)",
    )
    sp_render.add_argument(
        "-s", "--set",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="top-level string value (repeatable, overrides data files)",
    )
    sp_render.add_argument("-o", "--output", type=Path, help="write the result to a file")

    sp_tree = sub.add_parser("tree", help="print the parsed template structure")
    add_common(sp_tree)

    return p


def _setup_logging(verbose: bool) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root = logging.getLogger("templet")
    if not root.handlers:
        root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _options(ns: argparse.Namespace) -> EngineOptions:
    options = load_options(ns.config)
    if ns.lenient:
        options = replace(options, strict_terminators=False)
    return options


def _read_source(name: str, options: EngineOptions) -> str:
    if name == "-":
        return sys.stdin.read()
    return read_template(name, options.encoding)


def _context(ns: argparse.Namespace, options: EngineOptions) -> MapValue:
    contexts: List[MapValue] = [load_data_file(path, options.encoding) for path in ns.data]
    overrides = dict(parse_assignment(item) for item in ns.set)
    contexts.append(MapValue(overrides))
    return merge_contexts(*contexts)


def main(argv: Optional[List[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.verbose)

    try:
        options = _options(ns)
        ast = tokenize(_read_source(ns.template, options), options)

        if ns.cmd == "tree":
            tree = format_ast_tree(ast)
            sys.stdout.write(tree + "\n" if tree else "")
            return 0

        if ns.cmd == "render":
            text = render_ast(ast, _context(ns, options))
            logger.debug("Rendered %d characters", len(text))
            if ns.output is not None:
                write_output(ns.output, text, options.encoding)
            else:
                sys.stdout.write(text)
            return 0

    except TempletError as e:
        sys.stderr.write(f"{type(e).__name__}: {e}".rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
