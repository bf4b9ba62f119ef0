"""Interactive REPL for calq, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer_rd import LexError
from .parser_rd import ParseError
from .repl_highlight import CalqHighlighter
from .runner import ReplState, repl_eval, report_error
from .runtime import CalqRuntimeError, SymbolTable, Unit, init_prelude
from .utils import debug_py_trace_enabled, format_number

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Forget all variables and functions", ""),
    "/unit": ("Show or set the angle unit", "[deg|rad]"),
    "/vars": ("List declared variables and functions", ""),
}


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _describe_symbols(symbols: SymbolTable) -> list[str]:
    lines = []

    for key in symbols.names():
        decl = symbols.get(key)
        children = decl.children if decl is not None else []

        if key.endswith("()") and len(children) == 3:
            params = ", ".join(str(p) for p in children[1].children)
            lines.append(f"{key[:-2]}({params})")
        else:
            lines.append(key)

    return lines


def _handle_slash(line: str, state: ReplState) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ["CALQ_DEBUG_PY_TRACE"] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop("CALQ_DEBUG_PY_TRACE", None)
        elif arg == "":
            # Toggle.
            if debug_py_trace_enabled():
                os.environ.pop("CALQ_DEBUG_PY_TRACE", None)
            else:
                os.environ["CALQ_DEBUG_PY_TRACE"] = "1"
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state_str = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state_str}")
        return True

    if cmd == "/reset":
        state.reset()
        print("Environment reset.")
        return True

    if cmd == "/unit":
        if arg:
            try:
                state.angle_unit = Unit.from_name(arg)
            except ValueError as exc:
                print(str(exc), file=sys.stderr)
                return True
        print(f"Angle unit: {state.angle_unit.short}")
        return True

    if cmd == "/vars":
        for entry in _describe_symbols(state.symbol_table):
            print(entry)
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def eval_line(text: str, state: ReplState) -> Optional[str]:
    """Evaluate one submission; returns the text to print, if any. Errors go to stderr."""
    text = _normalize(text)
    if not text.strip():
        return None

    if _handle_slash(text, state):
        return None

    try:
        result = repl_eval(text, state)
    except (ParseError, LexError, CalqRuntimeError) as exc:
        report_error(exc)
        return None

    if result is None:
        return None
    return format_number(result)


def repl(state: Optional[ReplState] = None) -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    init_prelude()
    if state is None:
        state = ReplState()

    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=CalqHighlighter(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
    )

    print(f"calq repl ({state.angle_unit.short}), Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        output = eval_line(text, state)
        if output is not None:
            print(output)
