"""
dimcalc.latex
=============

LaTeX rendering of quantities, units and expression trees.

Quantities render in one of three ways:

- with a `UnitHint`: the value re-expressed in the hint's unit, followed by
  the hint's label (``2.500 \\ km``);
- in scientific mode: ``mantissa \\times 10^{dec_exp}`` and the bare unit;
- otherwise: the decimal exponent is folded into the first unit factor as an
  SI prefix (clamped to milli..kilo) and the remaining value is printed with
  ``max_digits`` decimals.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from fractions import Fraction
from typing import List, Optional, Tuple

from dimcalc.core.dimensions import BASE_SYMBOLS, Dimension
from dimcalc.core.quantity import Quantity
from dimcalc.core.unit import Unit
from dimcalc.core.utils import format_number, ilog10, scale10
from dimcalc.errors import UnitMismatchError
from dimcalc.expr.tree import AttachUnit, Cons, Expr, FnCall, Ident, Literal, Op
from dimcalc.units.parser import name_to_latex, parse_unit_expr
from dimcalc.units.prefixes import prefix_abbreviation
from dimcalc.units.registry import UnitsRegistry

# Functions LaTeX knows by name; anything else goes through \operatorname.
_LATEX_FUNCTIONS = {
    "sin": r"\sin",
    "cos": r"\cos",
    "tan": r"\tan",
    "asin": r"\arcsin",
    "acos": r"\arccos",
    "atan": r"\arctan",
    "sinh": r"\sinh",
    "cosh": r"\cosh",
    "tanh": r"\tanh",
    "exp": r"\exp",
    "ln": r"\ln",
    "log": r"\log",
    "min": r"\min",
    "max": r"\max",
}

# Largest prefix folded into a displayed unit: milli..kilo.
_MAX_DISPLAY_PREFIX = 3

_THIN_SPACE = r"\,"


@dataclass(frozen=True)
class UnitHint:
    """Target unit for displaying a value, with its LaTeX label."""
    unit: Unit
    label: str

    @classmethod
    def parse(cls, text: str, registry: Optional[UnitsRegistry] = None) -> "UnitHint":
        unit, label = parse_unit_expr(text, registry)
        return cls(unit, label)


@dataclass(frozen=True)
class FormatArgs:
    unit_hint: Optional[UnitHint] = None
    max_digits: int = 3
    scientific_notation: bool = False

    def with_hint(self, hint: Optional[UnitHint]) -> "FormatArgs":
        return replace(self, unit_hint=hint)


# --- numbers ---

def _fixed(x: float, digits: int) -> str:
    out = f"{x:.{digits}f}"
    # "-0.000" reads as a sign error
    if out.startswith("-") and float(out) == 0:
        out = out[1:]
    return out


def _latex_number(x: float) -> str:
    """Short form of a literal: ``2``, ``9.8``, ``1 \\times 10^{20}``."""
    s = format_number(x)
    if "e" in s:
        m, e = s.split("e")
        return f"{m} \\times 10^{{{int(e)}}}"
    return s


def _latex_exponent(p) -> str:
    p = Fraction(p)
    if p.denominator == 1:
        return str(p.numerator)
    return f"{p.numerator}/{p.denominator}"


# --- units ---

def _factors(dim: Dimension, first_prefix: str = "") -> Tuple[List[str], List[str]]:
    """Numerator and denominator factors, the first factor carrying ``first_prefix``."""
    num: List[str] = []
    den: List[str] = []
    for sym, p in zip(BASE_SYMBOLS, dim):
        if p == 0:
            continue
        if first_prefix:
            sym = name_to_latex(first_prefix + sym)
            first_prefix = ""
        text = sym if abs(p) == 1 else f"{sym}^{{{_latex_exponent(abs(p))}}}"
        (num if p > 0 else den).append(text)
    return num, den


def _layout(num: List[str], den: List[str]) -> str:
    top = _THIN_SPACE.join(num)
    if not den:
        return top
    bottom = _THIN_SPACE.join(den)
    return f"\\frac{{{top or '1'}}}{{{bottom}}}"


def dim_to_latex(dim: Dimension) -> str:
    return _layout(*_factors(dim))


def unit_to_latex(unit: Unit) -> str:
    """LaTeX for a unit: base-unit factors, its scale as a prefix or power of ten."""
    if unit.is_dimensionless:
        if unit.dec_exp == 0 and unit.multiplier == 1.0:
            return ""
        return _scale_latex(unit)

    first = next(p for p in unit.dim if p != 0)
    prefix = prefix_abbreviation(unit.dec_exp) if unit.dec_exp else None
    if unit.multiplier == 1.0 and (unit.dec_exp == 0 or (prefix and first == 1)):
        return _layout(*_factors(unit.dim, prefix or ""))
    return f"{_scale_latex(unit)} \\ {dim_to_latex(unit.dim)}"


def _scale_latex(unit: Unit) -> str:
    parts = []
    if unit.multiplier != 1.0:
        parts.append(format_number(unit.multiplier))
    if unit.dec_exp:
        parts.append(f"10^{{{unit.dec_exp}}}")
    return r" \times ".join(parts)


# --- quantities ---

def quantity_to_latex(q: Quantity, args: FormatArgs = FormatArgs()) -> str:
    if args.unit_hint is not None:
        return _hinted_latex(q, args)

    digits = args.max_digits
    dec_exp = q.unit.dec_exp
    scaled = q.mantissa * q.unit.multiplier

    if q.is_dimensionless:
        if args.scientific_notation and dec_exp != 0:
            return f"{_fixed(scaled, digits)}\\times 10^{{{dec_exp}}}"
        return _fixed(q.value, digits)

    if args.scientific_notation and dec_exp != 0:
        return f"{_fixed(scaled, digits)}\\times 10^{{{dec_exp}}} \\ {dim_to_latex(q.dim)}"

    # Fold the decimal exponent into the first unit factor as a prefix.
    p = Fraction(next(x for x in q.dim if x != 0))
    d = int(Fraction(dec_exp) / p)
    d = max(-_MAX_DISPLAY_PREFIX, min(_MAX_DISPLAY_PREFIX, d))
    shift = d * p
    if shift.denominator == 1:
        number = scale10(scaled, dec_exp - int(shift))
    else:
        number = scaled * 10.0 ** (dec_exp - float(shift))
    prefix = prefix_abbreviation(d) if d else ""
    return f"{_fixed(number, digits)} \\ {_layout(*_factors(q.dim, prefix or ''))}"


def _hinted_latex(q: Quantity, args: FormatArgs) -> str:
    hint = args.unit_hint
    if hint.unit.dim != q.dim:
        raise UnitMismatchError(
            f"Unit hint '{hint.label}' does not match value with unit '{q.dim}'"
        )
    value = scale10(
        q.mantissa * q.unit.multiplier / hint.unit.multiplier,
        q.unit.dec_exp - hint.unit.dec_exp,
    )
    digits = args.max_digits
    if args.scientific_notation and value != 0 and math.isfinite(value):
        k = ilog10(value)
        if k != 0:
            return f"{_fixed(scale10(value, -k), digits)} \\times 10^{{{k}}} \\ {hint.label}".strip()
    return f"{_fixed(value, digits)} \\ {hint.label}".strip()


# --- expressions ---

def expr_to_latex(expr: Expr, args: FormatArgs = FormatArgs()) -> str:
    if isinstance(expr, Literal):
        q = expr.value
        if q.is_dimensionless and q.unit.multiplier == 1.0:
            return _latex_number(q.value)
        return quantity_to_latex(q, args.with_hint(None))
    elif isinstance(expr, Ident):
        return expr.name
    elif isinstance(expr, FnCall):
        inner = ", ".join(expr_to_latex(a, args) for a in expr.args)
        if expr.name == "abs":
            return f"\\left|{inner}\\right|"
        name = _LATEX_FUNCTIONS.get(expr.name, f"\\operatorname{{{expr.name}}}")
        return f"{name}({inner})"
    elif isinstance(expr, Cons):
        return _cons_to_latex(expr, args)
    else:
        raise TypeError(f"Invalid expression node: {expr!r}")


def _cons_to_latex(node: Cons, args: FormatArgs) -> str:
    parts = [expr_to_latex(e, args) for e in node.operands]
    op = node.op
    if isinstance(op, AttachUnit):
        return f"{parts[0]}\\ {op.label}"
    if op is Op.NEG:
        return f"-{parts[0]}"
    a, b = parts
    if op is Op.ADD:
        return f"({a} + {b})"
    elif op is Op.SUB:
        return f"({a} - {b})"
    elif op is Op.MUL:
        return f"{a} \\times {b}"
    elif op is Op.DIV:
        return f"\\frac{{{a}}}{{{b}}}"
    elif op is Op.POW:
        return f"{a}^{{{b}}}"
    else:
        raise TypeError(f"Invalid operator: {op!r}")


__all__ = [
    "FormatArgs",
    "UnitHint",
    "dim_to_latex",
    "unit_to_latex",
    "quantity_to_latex",
    "expr_to_latex",
]
