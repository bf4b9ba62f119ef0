from __future__ import annotations

import sys
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .evaluator import Context
from .lexer_rd import LexError
from .parser_rd import ParseError, parse_source
from .runtime import CalqRuntimeError, SymbolTable, Unit, init_prelude
from .utils import (
    debug_py_trace_enabled,
    format_number,
    max_depth_from_env,
    resolve_angle_unit,
)

USAGE = "usage: calq [--angle-unit deg|rad] [--max-depth N] [SOURCE | PATH | -]"


@dataclass
class ReplState:
    """Session state a REPL keeps between lines."""

    angle_unit: Unit = field(default_factory=lambda: resolve_angle_unit(None))
    symbol_table: SymbolTable = field(default_factory=SymbolTable)
    max_depth: int = field(default_factory=max_depth_from_env)

    def reset(self) -> None:
        self.symbol_table = SymbolTable()


def run(
    src: str,
    angle_unit: Optional[Unit | str] = None,
    symbol_table: Optional[SymbolTable] = None,
    max_depth: Optional[int] = None,
) -> Optional[float]:
    init_prelude()

    if symbol_table is None:
        symbol_table = SymbolTable()

    statements = parse_source(src, symbol_table)
    context = Context(
        resolve_angle_unit(angle_unit),
        symbol_table,
        max_depth=max_depth if max_depth is not None else max_depth_from_env(),
    )
    return context.interpret(statements)


def repl_eval(text: str, state: ReplState) -> Optional[float]:
    """Evaluate one REPL submission against the persistent session state."""
    return run(text, angle_unit=state.angle_unit, symbol_table=state.symbol_table, max_depth=state.max_depth)


def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    try:
        is_file = candidate.is_file()
    except OSError:
        # Not usable as a path (e.g. name too long): treat it as source.
        is_file = False

    if is_file:
        return candidate.read_text(encoding="utf-8")

    return arg


def _parse_max_depth(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise SystemExit(f"--max-depth expects an integer, got {raw!r}") from None

    if value <= 0:
        raise SystemExit("--max-depth must be positive")
    return value


def report_error(exc: BaseException) -> None:
    print(f"Error: {exc}", file=sys.stderr)

    if debug_py_trace_enabled() and exc.__traceback__ is not None:
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")


def main(argv: Optional[List[str]] = None) -> int:
    angle_unit: Optional[str] = None
    max_depth: Optional[int] = None
    arg = None
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token in ("-h", "--help"):
            print(USAGE)
            return 0

        if token.startswith("--angle-unit="):
            angle_unit = token.split("=", 1)[1]
            continue

        if token == "--angle-unit":
            try:
                angle_unit = next(it)
            except StopIteration:
                raise SystemExit("--angle-unit flag requires deg or rad") from None
            continue

        if token.startswith("--max-depth="):
            max_depth = _parse_max_depth(token.split("=", 1)[1])
            continue

        if token == "--max-depth":
            try:
                max_depth = _parse_max_depth(next(it))
            except StopIteration:
                raise SystemExit("--max-depth flag requires a number") from None
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    try:
        unit = resolve_angle_unit(angle_unit)
        depth = max_depth if max_depth is not None else max_depth_from_env()
    except ValueError as exc:
        raise SystemExit(str(exc)) from None

    if arg is None and sys.stdin.isatty():
        from .repl import repl

        repl(ReplState(angle_unit=unit, max_depth=depth))
        return 0

    try:
        source = _load_source(arg)
    except (OSError, UnicodeDecodeError) as exc:
        report_error(exc)
        return 1

    try:
        result = run(source, angle_unit=unit, max_depth=depth)
    except (LexError, ParseError, CalqRuntimeError) as exc:
        report_error(exc)
        return 1

    if result is not None:
        print(format_number(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
