"""calq: a small calculator language with angle-unit-aware evaluation."""

from .evaluator import Context, interpret
from .parser_rd import parse_source
from .runner import run
from .types import SymbolTable, Unit

__all__ = [
    "Context",
    "SymbolTable",
    "Unit",
    "interpret",
    "parse_source",
    "run",
]
