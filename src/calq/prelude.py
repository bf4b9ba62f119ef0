"""Built-in constants and functions registered via calq.runtime."""

from __future__ import annotations

import math

from .runtime import register_binary, register_constant, register_unary
from .utils import ieee_div, ieee_pow

register_constant("pi", math.pi)
register_constant("π", math.pi)
register_constant("tau", math.tau)
register_constant("τ", math.tau)
register_constant("e", math.e)
register_constant("phi", (1 + math.sqrt(5)) / 2)
register_constant("ϕ", (1 + math.sqrt(5)) / 2)

# ---------------- Circular trig (argument is an angle) ----------------

register_unary("sin", angle='in')(math.sin)
register_unary("cos", angle='in')(math.cos)
register_unary("tan", angle='in')(math.tan)

@register_unary("sec", angle='in')
def sec(x: float) -> float:
    return ieee_div(1.0, math.cos(x))

@register_unary("csc", angle='in')
@register_unary("cosec", angle='in')
def csc(x: float) -> float:
    return ieee_div(1.0, math.sin(x))

@register_unary("cot", angle='in')
def cot(x: float) -> float:
    return ieee_div(math.cos(x), math.sin(x))

# ---------------- Inverse circular trig (result is an angle) ----------------

register_unary("asin", angle='out')(math.asin)
register_unary("acos", angle='out')(math.acos)
register_unary("atan", angle='out')(math.atan)

@register_unary("asec", angle='out')
def asec(x: float) -> float:
    return math.acos(ieee_div(1.0, x))

@register_unary("acsc", angle='out')
@register_unary("acosec", angle='out')
def acsc(x: float) -> float:
    return math.asin(ieee_div(1.0, x))

@register_unary("acot", angle='out')
def acot(x: float) -> float:
    # Principal value in (0, pi), continuous across zero.
    return math.pi / 2 - math.atan(x)

# ---------------- Hyperbolic ----------------

@register_unary("sinh")
def sinh(x: float) -> float:
    try:
        return math.sinh(x)
    except OverflowError:
        return math.copysign(math.inf, x)

@register_unary("cosh")
def cosh(x: float) -> float:
    try:
        return math.cosh(x)
    except OverflowError:
        return math.inf

register_unary("tanh")(math.tanh)
register_unary("asinh")(math.asinh)
register_unary("acosh")(math.acosh)
register_unary("atanh")(math.atanh)

@register_unary("sech")
def sech(x: float) -> float:
    return ieee_div(1.0, cosh(x))

@register_unary("csch")
@register_unary("cosech")
def csch(x: float) -> float:
    return ieee_div(1.0, sinh(x))

@register_unary("coth")
def coth(x: float) -> float:
    return ieee_div(1.0, math.tanh(x))

@register_unary("asech")
def asech(x: float) -> float:
    return math.acosh(ieee_div(1.0, x))

@register_unary("acsch")
@register_unary("acosech")
def acsch(x: float) -> float:
    return math.asinh(ieee_div(1.0, x))

@register_unary("acoth")
def acoth(x: float) -> float:
    return math.atanh(ieee_div(1.0, x))

# ---------------- General ----------------

register_unary("abs")(math.fabs)
register_unary("exp")(math.exp)
register_unary("sqrt")(math.sqrt)
register_unary("gamma")(math.gamma)
@register_unary("ln")
def ln(x: float) -> float:
    return -math.inf if x == 0.0 else math.log(x)

@register_unary("log")
def log10(x: float) -> float:
    return -math.inf if x == 0.0 else math.log10(x)

@register_unary("cbrt")
def cbrt(x: float) -> float:
    return math.copysign(abs(x) ** (1.0 / 3.0), x)

@register_unary("ceil")
def ceil(x: float) -> float:
    return x if not math.isfinite(x) else float(math.ceil(x))

@register_unary("floor")
def floor(x: float) -> float:
    return x if not math.isfinite(x) else float(math.floor(x))

@register_unary("trunc")
def trunc(x: float) -> float:
    return x if not math.isfinite(x) else float(math.trunc(x))

@register_unary("frac")
def frac(x: float) -> float:
    return x - trunc(x)

@register_unary("round")
def round_half_away(x: float) -> float:
    # Half away from zero, not Python's banker's rounding.
    if not math.isfinite(x):
        return x
    return math.copysign(math.floor(abs(x) + 0.5), x)

# ---------------- Binary ----------------

@register_binary("max")
def fmax(x: float, y: float) -> float:
    if math.isnan(x):
        return y
    return x if math.isnan(y) or x >= y else y

@register_binary("min")
def fmin(x: float, y: float) -> float:
    if math.isnan(x):
        return y
    return x if math.isnan(y) or x <= y else y

register_binary("hyp")(math.hypot)
register_binary("atan2", angle='out')(math.atan2)

@register_binary("log")
def log_base(x: float, base: float) -> float:
    return ieee_div(ln(x), ln(base))

@register_binary("root")
def root(x: float, n: float) -> float:
    return ieee_pow(x, ieee_div(1.0, n))
