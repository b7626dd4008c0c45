"""Interactive read-eval-print loop for exprlib.

Usage:
    exprlib                      # interactive, one expression per line
    exprlib -e "2 + 3 * 4"       # evaluate once and exit
    exprlib -c settings.yaml     # load an EvaluatorConfig from YAML
"""

from __future__ import annotations

import argparse
import logging
import sys

from exprlib.config import EvaluatorConfig, load_config
from exprlib.core.codegen import CodeGenerator
from exprlib.errors import ConfigError, ExprlibError
from exprlib.parser.parser import parse

logger = logging.getLogger(__name__)


def format_value(value: float) -> str:
    """Render integral results without a trailing ``.0``."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


def run_line(line: str, config: EvaluatorConfig | None = None) -> tuple[bool, list[str]]:
    """Evaluate one line of input.

    Returns:
        ``(ok, output_lines)``.  On success the single output line is the
        value.  Otherwise it is one line per diagnostic, or one line
        describing the runtime failure.
    """
    expr, diag = parse(line)
    if diag.has_errors():
        return False, [
            f"{d.kind.title}: {d.message} ({d.span.start if d.span else 0})"
            for d in diag.get_all()
        ]
    try:
        evaluator = CodeGenerator(config).generate(expr)
        return True, [format_value(evaluator())]
    except ExprlibError as e:
        return False, [f"error: {e}"]


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exprlib",
        description="Evaluate arithmetic expressions with let and if-then.",
    )
    parser.add_argument("-e", "--expression", help="evaluate EXPRESSION once and exit")
    parser.add_argument("-c", "--config", help="YAML file with evaluator settings")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else EvaluatorConfig()
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.expression is not None:
        ok, output = run_line(args.expression, config)
        print("\n".join(output))
        return 0 if ok else 1

    while True:
        try:
            line = input(config.prompt)
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        if not line.strip():
            continue
        _, output = run_line(line, config)
        print("\n".join(output))
        print()


if __name__ == "__main__":
    sys.exit(main())
