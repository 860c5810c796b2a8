#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
whileai/__main__.py
===================

Command-line entry point.

Usage
-----
    python -m whileai <command> [options] <program-file>

Commands
--------
    analyze     Run the abstract interpreter and print the state at every
                program point
    parse       Parse a program and print it back (or as an S-expression)

Pipeline
--------

    .while source ──► parser ──► AST ──► AbstractInterpreter ──► invariant
                                            ▲                       │
                       --state file ────────┘          program_points ──► table
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import textwrap
from typing import Any, Dict, List, Optional, Sequence, TextIO

from whileai import __version__
from whileai.ast import to_sexp
from whileai.config import DEFAULT_REGISTRY, AnalysisConfig
from whileai.errors import ConfigurationError, ParseError, WhileAIError
from whileai.interpreter import AbstractInterpreter
from whileai.parser import parse_program, parse_state
from whileai.program_points import ProgramPoint, annotate, program_points
from whileai.state import State

__description__ = "Abstract interpretation of while-language programs."

logger = logging.getLogger("whileai")


# ═══════════════════════════════════════════════════════════════════════════
# TERMINAL COLORS
# ═══════════════════════════════════════════════════════════════════════════

class _Colors:
    """ANSI color codes, disabled when not writing to a TTY."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def _code(self, code: str) -> str:
        return code if self.enabled else ""

    @property
    def RESET(self) -> str:
        return self._code("\033[0m")

    @property
    def BOLD(self) -> str:
        return self._code("\033[1m")

    @property
    def DIM(self) -> str:
        return self._code("\033[2m")

    @property
    def RED(self) -> str:
        return self._code("\033[31m")

    @property
    def CYAN(self) -> str:
        return self._code("\033[36m")


def _get_colors(stream: TextIO) -> _Colors:
    """Get color codes appropriate for the given stream."""
    is_tty = hasattr(stream, "isatty") and stream.isatty()
    return _Colors(enabled=is_tty and os.environ.get("NO_COLOR") is None)


def _report(error: WhileAIError, stream: Optional[TextIO] = None) -> None:
    """GCC-style ``file:line:col: error[CODE]: message`` diagnostic."""
    stream = stream or sys.stderr
    c = _get_colors(stream)
    location = ""
    if isinstance(error, ParseError):
        location = f"{error.filename}:{error.line}:{error.column}: " if error.line else f"{error.filename}: "
    stream.write(
        f"{c.BOLD}{location}{c.RED}error[{error.code}]:{c.RESET}{c.BOLD} {error.message}{c.RESET}\n"
    )


# ═══════════════════════════════════════════════════════════════════════════
# INPUT / OUTPUT HELPERS
# ═══════════════════════════════════════════════════════════════════════════

def _load(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()


def _state_to_json(state: State) -> Optional[Dict[str, str]]:
    if state.is_unreachable:
        return None
    return {name: str(value) for name, value in state.items()}


def _print_table(rows: List[tuple], final: State, stream: TextIO) -> None:
    c = _get_colors(stream)
    width = max((len(point.label) for _, point, _ in rows), default=0)
    width = min(width, 60)
    for index, point, state in rows:
        label = point.label.ljust(width)
        shown = f"{c.DIM}{state}{c.RESET}" if state.is_unreachable else str(state)
        stream.write(f"{index:>4}  {c.CYAN}{label}{c.RESET}  {shown}\n")
    stream.write(f"{c.BOLD}final:{c.RESET} {final}\n")


# ═══════════════════════════════════════════════════════════════════════════
# COMMANDS
# ═══════════════════════════════════════════════════════════════════════════

def cmd_analyze(args: argparse.Namespace) -> int:
    """Handle the 'analyze' command."""
    config = AnalysisConfig(
        domain=args.domain,
        lower_bound=args.lower,
        upper_bound=args.upper,
        delay=args.delay,
        max_iterations=args.max_iterations,
    )
    filename = "<stdin>" if args.input == "-" else args.input
    program = parse_program(_load(args.input), filename)

    interpreter = AbstractInterpreter.from_config(config)
    bindings = parse_state(_load(args.state), args.state) if args.state else None
    result = interpreter.run(program, interpreter.initial_state(bindings))

    points: List[ProgramPoint] = program_points(program, config.delay)
    rows = [(i, point, state) for i, (point, state) in enumerate(annotate(points, result.invariant))]

    if args.json:
        payload: Dict[str, Any] = {
            "domain": config.domain,
            "points": [
                {
                    "index": i,
                    "kind": point.kind.value,
                    "label": point.label,
                    "state": _state_to_json(state),
                }
                for i, point, state in rows
            ],
            "final": _state_to_json(result.state),
        }
        json.dump(payload, sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
    else:
        _print_table(rows, result.state, sys.stdout)
    return 0


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle the 'parse' command."""
    filename = "<stdin>" if args.input == "-" else args.input
    program = parse_program(_load(args.input), filename)
    sys.stdout.write((to_sexp(program) if args.sexp else str(program)) + "\n")
    return 0


# ═══════════════════════════════════════════════════════════════════════════
# ARGUMENT PARSER
# ═══════════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the whileai CLI."""
    parser = argparse.ArgumentParser(
        prog="whileai",
        description=__description__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              %(prog)s analyze loop.while
              %(prog)s analyze loop.while --domain constant
              %(prog)s analyze loop.while --lower -10 --upper 10 --delay 2
              %(prog)s analyze loop.while --state init.state --json
              %(prog)s parse loop.while --sexp
        """),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v: info, -vv: debug)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="available commands",
        metavar="<command>",
    )

    # ── analyze ──────────────────────────────────────────────────────────

    p_analyze = subparsers.add_parser(
        "analyze",
        help="Compute the abstract state at every program point",
    )
    p_analyze.add_argument("input", help="Program file (use '-' for stdin)")
    p_analyze.add_argument(
        "-d", "--domain",
        choices=sorted(DEFAULT_REGISTRY.tags()),
        default="interval",
        help="Abstract domain (default: interval)",
    )
    p_analyze.add_argument("--lower", type=int, default=None, help="Interval clamp lower bound")
    p_analyze.add_argument("--upper", type=int, default=None, help="Interval clamp upper bound")
    p_analyze.add_argument(
        "--delay",
        type=int,
        default=0,
        help="Plain lub/glb steps before widening/narrowing (default: 0)",
    )
    p_analyze.add_argument(
        "--max-iterations",
        type=int,
        default=1000,
        help="Iteration cap per fixpoint phase (default: 1000)",
    )
    p_analyze.add_argument("-s", "--state", default=None, help="Initial-state file")
    p_analyze.add_argument("--json", action="store_true", help="Emit JSON instead of a table")
    p_analyze.set_defaults(func=cmd_analyze)

    # ── parse ────────────────────────────────────────────────────────────

    p_parse = subparsers.add_parser("parse", help="Parse a program and print it back")
    p_parse.add_argument("input", help="Program file (use '-' for stdin)")
    p_parse.add_argument("--sexp", action="store_true", help="Print as an S-expression")
    p_parse.set_defaults(func=cmd_parse)

    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the whileai CLI.

    Returns the exit code: 0 on success, 1 for parse or analysis errors,
    2 for configuration errors.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    _configure_logging(args.verbose)

    try:
        return args.func(args)
    except ConfigurationError as e:
        _report(e)
        return 2
    except WhileAIError as e:
        _report(e)
        return 1
    except OSError as e:
        sys.stderr.write(f"error: {e}\n")
        return 1
    except KeyboardInterrupt:
        sys.stderr.write("\nInterrupted.\n")
        return 130


if __name__ == "__main__":
    sys.exit(main())
