"""
Token Types for the calq parser

Shared between lexer and parser to avoid circular dependencies.
"""

from typing import Any
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types"""

    # Literals
    NUMBER = auto()
    IDENT = auto()

    # Unit suffixes
    DEG = auto()
    RAD = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    POW = auto()

    # Assignment
    ASSIGN = auto()  # =
    WALRUS = auto()  # :=

    # Punctuation
    LPAR = auto()
    RPAR = auto()
    COMMA = auto()
    SEMI = auto()

    # Special
    NEWLINE = auto()
    EOF = auto()


@dataclass
class Tok:
    """Token with position info"""

    type: TT
    value: Any
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
