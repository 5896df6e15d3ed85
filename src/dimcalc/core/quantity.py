"""
dimcalc.core.quantity
=====================

Defines `Quantity`: a floating-point mantissa paired with a `Unit`.

The numeric value of a quantity is ``mantissa * unit.multiplier *
10**unit.dec_exp``. Keeping the power of ten separate from the mantissa lets
``5 kg + 4 g`` line the operands up on their decimal exponents instead of
multiplying everything out to base units first.

After `Quantity.normalize`:

- ``mantissa == 0`` or ``1 <= |mantissa| < 10``;
- the power-of-ten part of ``unit.multiplier`` lives in ``unit.dec_exp``;
- ``unit.multiplier`` is positive (its sign moved to the mantissa).

Every arithmetic operator returns a normalized quantity.

Dimension exponents are exact rationals while mantissas are floats, so
fractional powers (``(8 m)^(2/3)``) are exact in their dimension and only
approximately right in their value.
"""

from __future__ import annotations

import math
from math import isclose, isfinite

from dimcalc.core.dimensions import Dim
from dimcalc.core.unit import EMPTY, Unit
from dimcalc.core.utils import format_number, ilog10, rationalize, scale10
from dimcalc.errors import DomainError, UnitMismatchError

from typing import Union

Number = Union[int, float]


class Quantity:
    """
    A physical quantity.

    Attributes
    ----------
    mantissa : float
        Numeric coefficient; in ``[1, 10)`` magnitude once normalized.
    unit : Unit
        Dimension and scale of the quantity.
    """
    __slots__ = ["mantissa", "unit"]

    def __init__(self, mantissa: Number, unit: Unit = EMPTY):
        self.mantissa = float(mantissa)
        self.unit = unit

    @property
    def dim(self) -> Dim:
        return self.unit.dim

    @property
    def value(self) -> float:
        """Absolute magnitude in gram-based SI units."""
        return scale10(self.mantissa * self.unit.multiplier, self.unit.dec_exp)

    @property
    def is_dimensionless(self) -> bool:
        return self.unit.is_dimensionless

    # --- normalization ---
    def normalize(self) -> Quantity:
        if self.mantissa == 0.0:
            return self
        if not isfinite(self.mantissa):
            raise DomainError(f"Result is not a finite number ({self.mantissa})")

        mantissa = self.mantissa
        multiplier = self.unit.multiplier
        dec_exp = self.unit.dec_exp

        if multiplier < 0:
            mantissa, multiplier = -mantissa, -multiplier
        if multiplier != 1.0:
            k = ilog10(multiplier)
            multiplier = scale10(multiplier, -k)
            dec_exp += k

        k = ilog10(mantissa)
        mantissa = scale10(mantissa, -k)
        dec_exp += k

        return Quantity(mantissa, Unit(self.unit.dim, dec_exp, multiplier))

    def with_unit(self, unit: Unit) -> Quantity:
        """Attach ``unit``: relabels a plain number, composes with an existing unit."""
        return Quantity(self.mantissa, self.unit * unit).normalize()

    # --- comparisons ---
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.dim == other.dim and isclose(self.value, other.value, rel_tol=1e-12, abs_tol=0.0)

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return not self == other

    __hash__ = None  # type: ignore[assignment]

    # --- arithmetic ---
    def _check_compatible(self, other: Quantity, verb: str) -> None:
        if self.dim != other.dim:
            raise UnitMismatchError(
                f"Can't {verb} values with units '{self.dim}' and '{other.dim}'"
            )

    def _combine(self, other: Quantity, sign: float) -> Quantity:
        # The operand with the larger |dec_exp| is the alignment reference.
        if abs(other.unit.dec_exp) > abs(self.unit.dec_exp):
            ref = other
        else:
            ref = self

        def aligned(q: Quantity) -> float:
            return scale10(q.mantissa, q.unit.dec_exp - ref.unit.dec_exp) * (
                q.unit.multiplier / ref.unit.multiplier
            )

        num = aligned(self) + sign * aligned(other)
        dec_exp = ref.unit.dec_exp
        if num != 0.0 and isfinite(num) and abs(num) >= 10.0:
            carry = ilog10(num)
            num = scale10(num, -carry)
            dec_exp += carry

        return Quantity(num, Unit(self.dim, dec_exp, ref.unit.multiplier)).normalize()

    def __add__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        self._check_compatible(other, "add")
        return self._combine(other, 1.0)

    def __sub__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        self._check_compatible(other, "subtract")
        return self._combine(other, -1.0)

    def __neg__(self) -> Quantity:
        return Quantity(-self.mantissa, self.unit).normalize()

    def __mul__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        return Quantity(self.mantissa * other.mantissa, self.unit * other.unit).normalize()

    def __truediv__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        if other.mantissa == 0.0:
            raise DomainError("Division by zero")
        return Quantity(self.mantissa / other.mantissa, self.unit / other.unit).normalize()

    def __pow__(self, rhs: Quantity) -> Quantity:
        if not isinstance(rhs, Quantity):
            return NotImplemented
        if not (rhs.is_dimensionless or rhs.mantissa.is_integer()):
            raise DomainError(
                f"Exponent must be dimensionless or an integer, got '{rhs}'"
            )

        p = rhs.value
        if not isfinite(p):
            raise DomainError(f"Exponent {p} is not finite")

        if p.is_integer():
            return self._int_pow(int(p))

        if not rhs.is_dimensionless:
            raise DomainError(f"Fractional exponent '{rhs}' must be dimensionless")
        return self._frac_pow(p)

    def _int_pow(self, n: int) -> Quantity:
        unit = self.unit.pow(n)
        if self.mantissa == 0.0:
            if n < 0:
                raise DomainError("Zero raised to a negative power")
            return Quantity(0.0, unit)
        try:
            mantissa = self.mantissa ** n
        except OverflowError as e:
            raise DomainError(f"Overflow raising '{self}' to the power {n}") from e
        return Quantity(mantissa, unit).normalize()

    def _frac_pow(self, p: float) -> Quantity:
        try:
            exponent = rationalize(p, as_fraction=True)
        except ValueError as e:
            raise DomainError(str(e)) from e

        base = self.mantissa * self.unit.multiplier
        if base < 0:
            raise DomainError(f"Can't raise negative value '{self}' to fractional power {p}")
        dim = self.dim ** exponent
        if base == 0.0:
            if p < 0:
                raise DomainError("Zero raised to a negative power")
            return Quantity(0.0, Unit(dim))

        # Split the scaled decimal exponent into an integral part kept in
        # dec_exp and a fractional part folded back into the mantissa.
        shifted = self.unit.dec_exp * p
        whole = math.floor(shifted)
        try:
            mantissa = base ** p * 10.0 ** (shifted - whole)
        except OverflowError as e:
            raise DomainError(f"Overflow raising '{self}' to the power {p}") from e
        return Quantity(mantissa, Unit(dim, whole)).normalize()

    # --- display ---
    def __str__(self) -> str:
        num = format_number(self.value)
        dims = str(self.dim)
        return f"{num} {dims}" if dims else num

    def __repr__(self) -> str:
        return f"Quantity({self.mantissa!r}, {self.unit!r})"


__all__ = ["Quantity"]
