"""Command line interface for the Scientific Calculator plugin."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Callable, TextIO

from .core import (
    AngleUnit,
    CalculatorSession,
    EvaluationMode,
    Failure,
    SessionState,
    evaluate,
    format_number,
    list_conversions,
)

_MODES = [mode.value for mode in EvaluationMode]
_ANGLE_UNITS = [unit.value for unit in AngleUnit]

REPL_HELP = """\
Type an expression and press Enter to evaluate it.
Commands:
  :mode basic|advanced|metric   switch mode (clears the expression)
  :angle [degree|radian]        set or toggle the angle unit
  :back                         delete the last character
  :clear                        clear expression, result and error
  :ms / :mr / :mc               store, recall, clear memory
  :history                      show the history log
  :state                        show the full session state
  :help                         show this text
  :quit                         leave the calculator
"""


def _print(payload: dict[str, Any], out: TextIO | None = None) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False), file=out or sys.stdout)


def command_evaluate(args: argparse.Namespace) -> int:
    outcome = evaluate(args.expression, mode=args.mode, angle_unit=args.angle_unit)
    if isinstance(outcome, Failure):
        _print({"error": outcome.kind.value, "message": outcome.message})
        return 1
    _print({"result": format_number(outcome.value)})
    return 0


def command_conversions(args: argparse.Namespace) -> int:
    _print({"conversions": list_conversions()})
    return 0


def _show_history(session: CalculatorSession, out: TextIO) -> None:
    if not session.history:
        print("(history is empty)", file=out)
    for entry in session.history:
        print(entry, file=out)


def _start_input(session: CalculatorSession) -> None:
    # A finished calculation is replaced, not extended, by the next line.
    if session.state in (SessionState.HAS_RESULT, SessionState.HAS_ERROR):
        session.clear()


def _run_command(session: CalculatorSession, line: str, out: TextIO) -> bool:
    """Apply a ``:command`` line. Returns False when the REPL should stop."""

    name, _, argument = line[1:].strip().partition(" ")
    argument = argument.strip()
    simple: dict[str, Callable[[], Any]] = {
        "back": session.backspace,
        "clear": session.clear,
        "mc": session.clear_memory,
    }
    if name in ("quit", "exit", "q"):
        return False
    if name in simple:
        simple[name]()
    elif name == "mode":
        try:
            session.change_mode(argument)
        except ValueError as exc:
            print(f"error: {exc}", file=out)
            return True
        print(f"mode: {session.mode.value}", file=out)
    elif name == "angle":
        try:
            unit = session.set_angle_unit(argument) if argument else session.toggle_angle_unit()
        except ValueError as exc:
            print(f"error: {exc}", file=out)
            return True
        print(f"angle unit: {unit.value}", file=out)
    elif name == "ms":
        if not session.store_memory():
            print("nothing to store", file=out)
    elif name == "mr":
        if session.memory is not None:
            _start_input(session)
        if session.recall_memory():
            print(session.expression, file=out)
        else:
            print("memory is empty", file=out)
    elif name == "history":
        _show_history(session, out)
    elif name == "state":
        _print(session.snapshot(), out)
    elif name == "help":
        print(REPL_HELP, file=out, end="")
    else:
        print(f"unknown command ':{name}' (try :help)", file=out)
    return True


def run_repl(session: CalculatorSession, stdin: TextIO, out: TextIO) -> None:
    for raw_line in stdin:
        line = raw_line.rstrip("\n")
        if not line.strip():
            continue
        if line.lstrip().startswith(":"):
            if not _run_command(session, line.strip(), out):
                break
            continue
        _start_input(session)
        session.append(line)
        outcome = session.submit()
        if "result" in outcome:
            print(outcome["result"], file=out)
        else:
            print(session.error.label, file=out)


def command_repl(args: argparse.Namespace) -> int:
    session = CalculatorSession(args.mode, args.angle_unit)
    run_repl(session, sys.stdin, sys.stdout)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scientific Calculator CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    evaluate_parser = subparsers.add_parser("evaluate", help="Evaluate one expression")
    evaluate_parser.add_argument("expression", help="Expression, e.g. '2+3*4' or '10 m to km'")
    evaluate_parser.add_argument("--mode", default="basic", choices=_MODES, help="Evaluation mode")
    evaluate_parser.add_argument(
        "--angle-unit", dest="angle_unit", default="degree", choices=_ANGLE_UNITS, help="Angle unit for trig"
    )
    evaluate_parser.set_defaults(func=command_evaluate)

    conversions_parser = subparsers.add_parser("conversions", help="List supported unit conversions")
    conversions_parser.set_defaults(func=command_conversions)

    repl_parser = subparsers.add_parser("repl", help="Interactive calculator session")
    repl_parser.add_argument("--mode", default="basic", choices=_MODES, help="Starting mode")
    repl_parser.add_argument(
        "--angle-unit", dest="angle_unit", default="degree", choices=_ANGLE_UNITS, help="Starting angle unit"
    )
    repl_parser.set_defaults(func=command_repl)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
