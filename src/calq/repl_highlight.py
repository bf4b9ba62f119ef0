"""prompt_toolkit lexer for live calq syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as CalqLexer, LexError
from .runtime import Builtins, init_prelude
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "constant": "ansicyan",
    "number": "ansimagenta",
    "unit": "italic ansimagenta",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

# Token type → highlight group.
_TT_GROUP = {
    TT.NUMBER: "number",
    TT.DEG: "unit",
    TT.RAD: "unit",
    TT.IDENT: "identifier",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.POW: "operator",
    TT.ASSIGN: "operator",
    TT.WALRUS: "operator",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
    TT.COMMA: "punctuation",
    TT.SEMI: "punctuation",
}

_LAYOUT = {TT.NEWLINE, TT.EOF}


def _ident_group(tokens: list[Tok], idx: int) -> str:
    """Calls and builtin names read as functions, builtin constants as constants."""
    name = tokens[idx].value
    nxt = tokens[idx + 1] if idx + 1 < len(tokens) else None

    if nxt is not None and nxt.type == TT.LPAR:
        return "function"
    if name in Builtins.constants:
        return "constant"
    if name in Builtins.unary_functions or name in Builtins.binary_functions:
        return "function"
    return "identifier"


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    init_prelude()

    try:
        tokens = CalqLexer(text).tokenize()
    except LexError:
        return [("", text)]

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        if tok.type in _LAYOUT:
            continue
        tok_text = str(tok.value) if tok.value is not None else ""
        if not tok_text:
            continue

        # Find actual position of this token value in the line from pos onwards.
        idx = text.find(tok_text, pos)
        if idx < 0:
            continue

        # Unstyled gap before token.
        if idx > pos:
            result.append(("", text[pos:idx]))

        group = _TT_GROUP.get(tok.type, "")
        if tok.type == TT.IDENT:
            group = _ident_group(tokens, i)
        result.append((GROUP_STYLE.get(group, ""), tok_text))
        pos = idx + len(tok_text)

    # Trailing text: whitespace and/or a comment the lexer skipped.
    if pos < len(text):
        rest = text[pos:]
        hash_idx = rest.find("#")
        if hash_idx < 0:
            result.append(("", rest))
        else:
            if hash_idx > 0:
                result.append(("", rest[:hash_idx]))
            result.append((GROUP_STYLE["comment"], rest[hash_idx:]))

    return result if result else [("", text)]


class CalqHighlighter(Lexer):
    """prompt_toolkit Lexer that highlights calq source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights for all lines.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
