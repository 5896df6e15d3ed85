# dimcalc.core.dimensions

from __future__ import annotations
from typing import Iterable, Union, Tuple, TypeAlias, Any
from fractions import Fraction
from dimcalc.core.utils import format_exponent, rationalize, simplify_fraction

Exp = Union[int, Fraction]

Dim: TypeAlias = "Dimension"
DimTuple = Tuple[Exp, Exp, Exp, Exp, Exp, Exp, Exp]
DimLike = Union["Dimension", DimTuple, Iterable[Exp]]

# Order of the base dimensions and the (gram based) symbols they print as.
BASE_NAMES = ("L", "M", "T", "I", "Θ", "N", "J")
BASE_SYMBOLS = ("m", "g", "s", "A", "K", "mol", "cd")
N_BASE = len(BASE_NAMES)


class Dimension(tuple):
    """
    Exponents of the seven SI base dimensions, in `BASE_NAMES` order.

    Integral exponents are stored as ``int``, the rest as exact ``Fraction``
    (``m^(2/3)`` after a fractional power). Being a tuple, a dimension is
    hashable and compares element-wise.

    ``*`` and ``/`` add and subtract exponents, ``**`` scales them.
    """

    __slots__ = ()

    def __new__(cls, data: DimLike = (0,) * N_BASE) -> "Dimension":
        if type(data) is cls:
            return data
        exps = tuple(simplify_fraction(x) for x in data)
        if len(exps) != N_BASE:
            raise ValueError(
                f"A dimension needs {N_BASE} exponents ({', '.join(BASE_NAMES)}), got {len(exps)}"
            )
        return tuple.__new__(cls, exps)

    def _zip(self, other: DimLike):
        return zip(self, Dimension(other), strict=True)

    def __mul__(self, other: DimLike) -> "Dimension":  # type: ignore[override]
        return Dimension(a + b for a, b in self._zip(other))

    def __truediv__(self, other: DimLike) -> "Dimension":
        return Dimension(a - b for a, b in self._zip(other))

    def __rtruediv__(self, other: DimLike) -> "Dimension":
        return Dimension(other) / self

    def __pow__(self, n: int | float | Fraction, modulo: Any | None = None) -> "Dimension":
        if modulo is not None:
            raise TypeError("pow() with a modulus is not defined for dimensions")
        if isinstance(n, bool) or not isinstance(n, (int, float, Fraction)):
            raise TypeError(f"Dimension exponent must be a real number, got {type(n).__name__}")
        # Floats must be exact rationals (0.5 is, math.pi is not).
        p = rationalize(n, as_fraction=True) if isinstance(n, float) else Fraction(n)
        return Dimension(e * p for e in self)

    # Tuple repetition and concatenation make no sense for exponent vectors.
    def __rmul__(self, other: Any) -> "Dimension":
        return NotImplemented

    def __add__(self, other: Any) -> "Dimension":
        return NotImplemented

    def __radd__(self, other: Any) -> "Dimension":
        return NotImplemented

    @property
    def is_dimensionless(self) -> bool:
        return not any(self)

    def as_tuple(self) -> DimTuple:
        return tuple(self)

    def largest_power(self) -> Exp:
        """Largest absolute exponent, 0 for a dimensionless vector."""
        return max(map(abs, self), default=0)

    def __str__(self) -> str:
        # "m g s^-2"; empty when dimensionless
        return " ".join(
            sym if e == 1 else f"{sym}^{format_exponent(e)}"
            for sym, e in zip(BASE_SYMBOLS, self)
            if e != 0
        )

    def __repr__(self) -> str:
        return "".join(
            f"[{name}^{format_exponent(e)}]" for name, e in zip(BASE_NAMES, self) if e != 0
        ) or "[1]"


def dim_mul(a: DimLike, b: DimLike) -> Dimension:
    return Dimension(a) * b

def dim_div(a: DimLike, b: DimLike) -> Dimension:
    return Dimension(a) / b

def dim_pow(a: DimLike, n: int | float | Fraction) -> Dimension:
    return Dimension(a) ** n


def _base(index: int) -> Dimension:
    return Dimension(int(i == index) for i in range(N_BASE))


DIM_0: Dim = Dimension()
LENGTH, MASS, TIME, CURRENT, TEMPERATURE, AMOUNT, LUMINOUS = (
    _base(i) for i in range(N_BASE)
)
