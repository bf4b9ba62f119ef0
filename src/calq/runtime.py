from __future__ import annotations

import importlib
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .types import (
    Unit,
    SymbolTable,
    CalqRuntimeError, UndefinedVariable, UndefinedFunction, ArgumentCountMismatch,
    InvalidLiteral, InvalidUnitSuffix, RecursionLimitExceeded,
)

_PRELUDE_INITIALIZED = False

def init_prelude() -> None:
    """Load the prelude module (idempotent) so register_* hooks run."""
    global _PRELUDE_INITIALIZED

    if _PRELUDE_INITIALIZED:
        return

    importlib.import_module("calq.prelude")
    _PRELUDE_INITIALIZED = True

# ---------- Builtin registries ----------

@dataclass
class BuiltinFunction:
    fn: Callable[..., float]
    # 'in': arguments are angles, 'out': the result is an angle, None: unit independent
    angle: Optional[str] = None

class Builtins:
    constants: Dict[str, str] = {}
    unary_functions: Dict[str, BuiltinFunction] = {}
    binary_functions: Dict[str, BuiltinFunction] = {}

def register_constant(name: str, value: float) -> None:
    # Stored as text; the evaluator re-parses it as a literal.
    Builtins.constants[name] = repr(value)

def register_unary(name: str, *, angle: Optional[str] = None):
    def dec(fn: Callable[[float], float]):
        Builtins.unary_functions[name] = BuiltinFunction(fn=fn, angle=angle)
        return fn

    return dec

def register_binary(name: str, *, angle: Optional[str] = None):
    def dec(fn: Callable[[float, float], float]):
        Builtins.binary_functions[name] = BuiltinFunction(fn=fn, angle=angle)
        return fn

    return dec

# ---------- Lookup API ----------

def lookup_constant(name: str) -> Optional[str]:
    init_prelude()
    return Builtins.constants.get(name)

def call_unary(name: str, x: float, angle_unit: Unit) -> Optional[float]:
    init_prelude()
    builtin = Builtins.unary_functions.get(name)

    if builtin is None:
        return None

    if builtin.angle == 'in':
        x = _to_radians(x, angle_unit)

    result = _float_call(builtin.fn, x)

    if builtin.angle == 'out':
        result = _from_radians(result, angle_unit)

    return result

def call_binary(name: str, x: float, y: float, angle_unit: Unit) -> Optional[float]:
    init_prelude()
    builtin = Builtins.binary_functions.get(name)

    if builtin is None:
        return None

    if builtin.angle == 'in':
        x, y = _to_radians(x, angle_unit), _to_radians(y, angle_unit)

    result = _float_call(builtin.fn, x, y)

    if builtin.angle == 'out':
        result = _from_radians(result, angle_unit)

    return result

def _to_radians(x: float, angle_unit: Unit) -> float:
    return math.radians(x) if angle_unit is Unit.DEGREES else x

def _from_radians(x: float, angle_unit: Unit) -> float:
    return math.degrees(x) if angle_unit is Unit.DEGREES else x

def _float_call(fn: Callable[..., float], *args: float) -> float:
    """Call a math function with floating-point semantics: domain errors are nan, overflow is inf."""
    try:
        return float(fn(*args))
    except (ValueError, ZeroDivisionError):
        return math.nan
    except OverflowError:
        # Signed overflow is handled by the function itself; exp and gamma only overflow upward.
        return math.inf
