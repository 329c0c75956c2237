import argparse
import logging
import sys
from typing import Optional

from .driver import EXIT_USAGE, Lox
from .interpreter import DEFAULT_MAX_DEPTH


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lox", description="Run Lox scripts")
    parser.add_argument("script", nargs="?", help="script to run; starts a prompt if omitted")
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help="maximum call depth before a stack overflow error",
    )
    parser.add_argument(
        "--print-ast",
        action="store_true",
        help="print each parsed statement before running it",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log pipeline stages")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = make_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return EXIT_USAGE if exc.code else 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    lox = Lox(max_depth=args.max_depth, print_ast=args.print_ast)
    if args.script is None:
        return lox.run_prompt()
    return lox.run_file(args.script)


if __name__ == "__main__":
    sys.exit(main())
