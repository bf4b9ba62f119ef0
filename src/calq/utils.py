from __future__ import annotations

import math
import os
from typing import Optional

from .types import Unit

DEFAULT_MAX_DEPTH = 150


def ieee_div(x: float, y: float) -> float:
    """Float division that yields inf/nan on a zero divisor instead of raising."""
    if y == 0.0:
        if x == 0.0 or math.isnan(x):
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)

    return x / y


def ieee_pow(x: float, y: float) -> float:
    """Floating-point power: nan on domain errors, signed inf on overflow, never complex."""
    try:
        return math.pow(x, y)
    except ValueError:
        if x == 0.0 and y < 0:
            # 0 ** negative: +inf, or -inf for -0.0 with an odd integer exponent
            odd = y.is_integer() and int(y) % 2 == 1
            return math.copysign(math.inf, x) if odd else math.inf
        return math.nan
    except OverflowError:
        odd = y.is_integer() and int(y) % 2 == 1
        return -math.inf if x < 0 and odd else math.inf


def format_number(value: float) -> str:
    if math.isnan(value):
        return "nan"

    if math.isinf(value):
        return "inf" if value > 0 else "-inf"

    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))

    return repr(value)


def debug_py_trace_enabled() -> bool:
    return os.environ.get("CALQ_DEBUG_PY_TRACE", "").lower() in ("1", "true", "yes", "on")


def angle_unit_from_env(default: Unit = Unit.RADIANS) -> Unit:
    raw = os.environ.get("CALQ_ANGLE_UNIT")
    if not raw:
        return default
    return Unit.from_name(raw)


def max_depth_from_env(default: int = DEFAULT_MAX_DEPTH) -> int:
    raw = os.environ.get("CALQ_MAX_DEPTH")
    if not raw:
        return default

    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"CALQ_MAX_DEPTH must be an integer, got {raw!r}") from None

    if value <= 0:
        raise ValueError(f"CALQ_MAX_DEPTH must be positive, got {value}")
    return value


def resolve_angle_unit(unit: Optional[Unit | str]) -> Unit:
    """Explicit setting wins over CALQ_ANGLE_UNIT, which wins over radians."""
    if unit is None:
        return angle_unit_from_env()
    if isinstance(unit, Unit):
        return unit
    return Unit.from_name(unit)
