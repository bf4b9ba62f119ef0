from __future__ import annotations

from enum import Enum
from typing import Dict, Iterator, List, Optional

from lark import Tree

# ---------- Angle units ----------

class Unit(Enum):
    DEGREES = "degrees"
    RADIANS = "radians"

    @classmethod
    def from_name(cls, name: str) -> 'Unit':
        """Resolve user-facing spellings (deg, degrees, rad, radians)."""
        key = name.strip().lower()

        if key in ("deg", "degree", "degrees", "°"):
            return cls.DEGREES
        if key in ("rad", "radian", "radians"):
            return cls.RADIANS

        raise ValueError(f"Unknown angle unit '{name}' (expected deg or rad)")

    @property
    def short(self) -> str:
        return "deg" if self is Unit.DEGREES else "rad"

# ---------- Symbol table ----------

class SymbolTable:
    """Name -> declaration registry shared by every statement of a session.

    Function declarations live under ``"<name>()"`` so a variable and a
    function can share a base name.
    """

    def __init__(self) -> None:
        self.hashmap: Dict[str, Tree] = {}

    @staticmethod
    def fn_key(name: str) -> str:
        return f"{name}()"

    def insert(self, name: str, decl: Tree) -> None:
        self.hashmap[name] = decl

    def get(self, name: str) -> Optional[Tree]:
        return self.hashmap.get(name)

    def contains_var(self, name: str) -> bool:
        return name in self.hashmap

    def contains_fn(self, name: str) -> bool:
        return self.fn_key(name) in self.hashmap

    def names(self) -> List[str]:
        return sorted(self.hashmap)

    def clear(self) -> None:
        self.hashmap.clear()

    def __contains__(self, name: object) -> bool:
        return name in self.hashmap

    def __len__(self) -> int:
        return len(self.hashmap)

    def __iter__(self) -> Iterator[str]:
        return iter(self.hashmap)

# ---------- Exceptions ----------

class CalqRuntimeError(Exception):
    """Base class for every evaluation failure; ``str()`` is the user-facing message."""

class UndefinedVariable(CalqRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Undefined variable: '{name}'.")
        self.name = name

class UndefinedFunction(CalqRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Undefined function: '{name}'.")
        self.name = name

class ArgumentCountMismatch(CalqRuntimeError):
    def __init__(self, name: str, expected: int, actual: int):
        super().__init__(f"Expected {expected} arguments in function '{name}' but found {actual}.")
        self.name = name
        self.expected = expected
        self.actual = actual

class InvalidLiteral(CalqRuntimeError):
    def __init__(self, text: str):
        super().__init__(f"Invalid number literal: '{text}'.")
        self.text = text

class InvalidUnitSuffix(CalqRuntimeError):
    def __init__(self, suffix: str):
        super().__init__(f"Invalid unit: '{suffix}'.")
        self.suffix = suffix

class RecursionLimitExceeded(CalqRuntimeError):
    def __init__(self, limit: int):
        super().__init__(f"Maximum recursion depth of {limit} exceeded.")
        self.limit = limit
