"""
dimcalc.core.unit
=================

`Unit`: a dimension vector plus a decimal exponent and a non power-of-ten
multiplier.

``Unit(LENGTH, 3)`` is the kilometre, ``Unit(TIME, 3, 3.6)`` the hour
(3.6 × 10³ s). Units are immutable; the algebra always builds new values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from math import isclose, isfinite

from dimcalc.core.dimensions import DIM_0, Dimension, dim_div, dim_mul, dim_pow
from dimcalc.core.utils import format_number, ilog10, scale10
from dimcalc.errors import DomainError


@dataclass(frozen=True, slots=True)
class Unit:
    """
    A physical unit.

    Attributes
    ----------
    dim : Dimension
        Exponents of (L, M, T, I, Θ, N, J). Mass is gram based.
    dec_exp : int
        Power-of-ten scale, e.g. 3 for kilo-, -2 for centi-.
    multiplier : float
        Remaining scale that is not a power of ten (60 s = 6 × 10¹ s).
    """

    dim: Dimension = field(default=DIM_0)
    dec_exp: int = 0
    multiplier: float = 1.0

    def __post_init__(self) -> None:
        if not isinstance(self.dim, Dimension):
            object.__setattr__(self, "dim", Dimension(self.dim))
        if not (isfinite(self.multiplier) and self.multiplier != 0):
            raise ValueError("multiplier must be a finite, non-zero number")
        if int(self.dec_exp) != self.dec_exp:
            raise ValueError("dec_exp must be an integer")
        object.__setattr__(self, "dec_exp", int(self.dec_exp))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Unit):
            return NotImplemented
        return (
            self.dim == other.dim
            and self.dec_exp == other.dec_exp
            and isclose(self.multiplier, other.multiplier, rel_tol=1e-12, abs_tol=0.0)
        )

    def __hash__(self) -> int:
        return hash((self.dim, self.dec_exp))

    # --- predicates ---
    @property
    def is_dimensionless(self) -> bool:
        return self.dim.is_dimensionless

    def is_compatible(self, other: "Unit") -> bool:
        """Same dimension vector, whatever the scale."""
        return self.dim == other.dim

    @property
    def scale(self) -> float:
        """Size of one of this unit in gram-based SI units."""
        return scale10(self.multiplier, self.dec_exp)

    # --- algebra ---
    def __mul__(self, other: "Unit") -> "Unit":
        if not isinstance(other, Unit):
            return NotImplemented
        return Unit(
            dim_mul(self.dim, other.dim),
            self.dec_exp + other.dec_exp,
            self.multiplier * other.multiplier,
        )

    def __truediv__(self, other: "Unit") -> "Unit":
        if not isinstance(other, Unit):
            return NotImplemented
        return Unit(
            dim_div(self.dim, other.dim),
            self.dec_exp - other.dec_exp,
            self.multiplier / other.multiplier,
        )

    def pow(self, n: int) -> "Unit":
        """Integer power of the unit.

        ``n == 0`` has no agreed meaning for a dimensioned unit (which scale
        and label would ``km^0`` carry?), so it raises `DomainError`. A
        dimensionless unit raised to 0 is the empty unit.
        """
        if isinstance(n, bool) or not isinstance(n, int):
            if isinstance(n, (float, Fraction)) and n == int(n):
                n = int(n)
            else:
                raise DomainError(
                    f"Units can only be raised to integer powers, got {n!r}"
                )
        if n == 0:
            if self.is_dimensionless:
                return EMPTY
            raise DomainError(f"Raising unit '{self}' to the power 0 is undefined")
        try:
            multiplier = self.multiplier ** n
        except OverflowError as e:
            raise DomainError(f"Unit scale overflow in '{self}'^{n}") from e
        return Unit(dim_pow(self.dim, n), self.dec_exp * n, multiplier)

    def __pow__(self, n: int) -> "Unit":
        return self.pow(n)

    def with_prefix(self, exponent: int) -> "Unit":
        return Unit(self.dim, self.dec_exp + exponent, self.multiplier)

    def normalized(self) -> "Unit":
        """Fold the power-of-ten part of the multiplier's magnitude into dec_exp."""
        if abs(self.multiplier) == 1.0:
            return self
        k = ilog10(self.multiplier)
        if k == 0:
            return self
        return Unit(self.dim, self.dec_exp + k, scale10(self.multiplier, -k))

    # --- construction ---
    @classmethod
    def parse(cls, token: str) -> "Unit":
        """Resolve a single unit token (``"km"``, ``"hours"``) with the default registry."""
        from dimcalc.units.registry import parse_unit

        return parse_unit(token)

    def __str__(self) -> str:
        parts = []
        scale = scale10(self.multiplier, self.dec_exp)
        if scale != 1.0:
            parts.append(format_number(scale))
        dims = str(self.dim)
        if dims:
            parts.append(dims)
        return " ".join(parts)

    def __repr__(self) -> str:
        return f"Unit({self.dim!r}, dec_exp={self.dec_exp}, multiplier={self.multiplier!r})"


EMPTY = Unit()

__all__ = ["Unit", "EMPTY"]
