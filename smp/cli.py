"""Interactive command line for parsing and computing expressions."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TextIO

from pydantic import ValidationError
from yaml import YAMLError

from .core.config import get_settings
from .core.logging import get_logger, setup_logging
from .errors import SMPError
from .instance import SMP, create
from .providers import MapVariableValueProvider

logger = get_logger(__name__)

PROMPT = "Enter an expression: "


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smp",
        description="Read arithmetic expressions from standard input and print their results.",
    )
    parser.add_argument(
        "--print-rpn",
        action="store_true",
        help="Print the RPN token sequence of every expression.",
    )
    parser.add_argument(
        "--variables",
        type=Path,
        help="YAML file mapping variable names to values; enables variable resolution.",
    )
    parser.add_argument(
        "--log-level",
        help="Override the configured log level (e.g. DEBUG).",
    )
    return parser


def run(
    calculator: SMP,
    print_rpn: bool = False,
    resolve: bool = False,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> None:
    """
    Run the read-eval-print loop until ``exit`` or end of input.

    Args:
        calculator: Instance used to parse and compute
        print_rpn: Print the RPN tokens before each result
        resolve: Resolve variables through the provider instead of computing unresolved
        stdin: Stream to read expressions from
        stdout: Stream to write prompts and results to
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    while True:
        stdout.write(PROMPT)
        stdout.flush()

        line = stdin.readline()
        if not line:
            stdout.write("\n")
            return

        text = line.strip()
        if text.lower() == "exit":
            return

        try:
            expression = calculator.parse(text)

            if print_rpn:
                stdout.write(f"RPN: {expression}\n")

            if resolve:
                result = asyncio.run(expression.compute())
            else:
                result = expression.compute_unresolved()
        except SMPError as exc:
            logger.debug("Expression failed", exc_info=True)
            stdout.write(f"Error: {exc}\n\n")
            continue

        stdout.write(f"Result: {result}.\n\n")


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(get_settings(), level=args.log_level)

    provider = None
    if args.variables is not None:
        try:
            provider = MapVariableValueProvider.from_yaml(args.variables)
        except (OSError, YAMLError, ValidationError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    try:
        run(create(provider), print_rpn=args.print_rpn, resolve=provider is not None)
    except KeyboardInterrupt:  # pragma: no cover
        print(file=sys.stderr)
        return 130

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
