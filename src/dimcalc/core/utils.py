"""
dimcalc.core.utils
==================

Numeric helpers shared by the dimension, unit and quantity modules.

- `rationalize` / `simplify_fraction` keep dimension exponents exact.
- `scale10` / `ilog10` move values across powers of ten without going
  through `10.0 ** n` for negative `n` (which is not exactly representable).
- `format_number` / `format_exponent` produce the plain-text forms used by
  `str(Unit)` and `str(Quantity)`.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Union

Number = Union[int, float]
Exponent = Union[int, Fraction]

# Largest power of ten that is an exact binary64 value.
_EXACT_POW10 = 22


def simplify_fraction(x: Exponent) -> Exponent:
    """Return ``x`` as an ``int`` when its denominator is 1, else the Fraction."""
    if isinstance(x, Fraction) and x.denominator == 1:
        return int(x.numerator)
    if isinstance(x, bool):
        return int(x)
    return x


def rationalize(
    value: Number,
    as_fraction: bool = False,
    max_denominator: int = 1_000_000,
) -> Exponent:
    """Convert ``value`` to an exact rational.

    Floats are accepted only if the best rational approximation with a
    denominator up to ``max_denominator`` converts back to the *same* float.
    That keeps ``2/3`` (the float) mapping to ``Fraction(2, 3)`` while
    rejecting values like ``math.pi`` or ``0.142857``.

    Raises
    ------
    TypeError
        For anything other than ``int`` or ``float``.
    ValueError
        For non-finite floats or values with no exact rational form.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"rationalize() expects int or float, got {type(value).__name__}")

    if isinstance(value, int):
        return Fraction(value, 1) if as_fraction else value

    if not math.isfinite(value):
        raise ValueError(f"Cannot rationalize non-finite value {value!r}")

    frac = Fraction(value).limit_denominator(max_denominator)
    if float(frac) != value:
        raise ValueError(f"Exponent {value!r} has no exact rational representation")

    return frac if as_fraction else simplify_fraction(frac)


def scale10(x: float, n: int) -> float:
    """Return ``x * 10**n`` computed with exact powers of ten where possible."""
    if n == 0 or x == 0.0:
        return x
    try:
        if n > 0:
            while n > _EXACT_POW10:
                x *= 10.0 ** _EXACT_POW10
                n -= _EXACT_POW10
            return x * 10.0 ** n
        n = -n
        while n > _EXACT_POW10:
            x /= 10.0 ** _EXACT_POW10
            n -= _EXACT_POW10
        return x / 10.0 ** n
    except OverflowError:
        return math.copysign(math.inf, x)


def ilog10(x: float) -> int:
    """Return ``floor(log10(|x|))`` for a finite, non-zero ``x``.

    ``math.log10`` can be off by one right below/above a power of ten, so the
    estimate is corrected against the actual rescaled value.
    """
    ax = abs(x)
    e = math.floor(math.log10(ax))
    m = scale10(ax, -e)
    if m >= 10.0:
        e += 1
    elif m < 1.0:
        e -= 1
    return e


def format_number(x: float) -> str:
    """Plain-text number with 15 significant digits, integers without '.0'."""
    if x == 0:
        return "0"
    return f"{x:.15g}"


def format_exponent(e: Exponent) -> str:
    e = simplify_fraction(e)
    if isinstance(e, Fraction):
        return f"({e.numerator}/{e.denominator})"
    return str(e)


__all__ = [
    "rationalize",
    "simplify_fraction",
    "scale10",
    "ilog10",
    "format_number",
    "format_exponent",
]
