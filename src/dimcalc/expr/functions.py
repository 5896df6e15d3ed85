"""
dimcalc.expr.functions
======================

Registry of the named functions callable from expressions.

Each entry declares an argument-count range, the real-valued computation
and a unit policy:

- ``NO_UNIT``: every argument must be dimensionless; the result is
  dimensionless (trigonometric, hyperbolic, exponential and logarithmic
  functions).
- ``PRESERVE_UNIT``: every argument must share the first argument's
  dimension; the result keeps that dimension expressed in base units
  (``abs``, ``ceil``, ``floor``, ``round``, ``min``, ``max``).

Computations always run on absolute values (``mantissa * multiplier *
10**dec_exp``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Sequence

from dimcalc.core.quantity import Quantity
from dimcalc.core.unit import EMPTY, Unit
from dimcalc.errors import ArityError, DomainError, UnitMismatchError, UnknownFunctionError


class UnitPolicy(Enum):
    NO_UNIT = "no_unit"
    PRESERVE_UNIT = "preserve_unit"


@dataclass(frozen=True, slots=True)
class FunctionSpec:
    name: str
    min_args: int
    max_args: Optional[int]   # None: unbounded
    compute: Callable[..., float]
    policy: UnitPolicy

    def expected_arity(self) -> str:
        if self.max_args is None:
            return f"at least {self.min_args}"
        if self.min_args == self.max_args:
            return str(self.min_args)
        return f"{self.min_args} to {self.max_args}"

    def accepts(self, n: int) -> bool:
        return n >= self.min_args and (self.max_args is None or n <= self.max_args)

    def __call__(self, args: Sequence[Quantity]) -> Quantity:
        if not self.accepts(len(args)):
            raise ArityError(
                f"Function '{self.name}' expects {self.expected_arity()} "
                f"argument(s), got {len(args)}"
            )

        if self.policy is UnitPolicy.NO_UNIT:
            for a in args:
                if not a.is_dimensionless:
                    raise UnitMismatchError(
                        f"Function '{self.name}' expects dimensionless arguments, got '{a}'"
                    )
            unit = EMPTY
        else:
            dim = args[0].dim
            for a in args[1:]:
                if a.dim != dim:
                    raise UnitMismatchError(
                        f"Function '{self.name}' expects arguments with matching units, "
                        f"got '{args[0]}' and '{a}'"
                    )
            unit = Unit(dim)

        try:
            result = self.compute(*(a.value for a in args))
        except (ValueError, ZeroDivisionError) as e:
            raise DomainError(f"Math domain error in {self.name}(): {e}") from e
        except OverflowError as e:
            raise DomainError(f"Overflow in {self.name}()") from e

        result = float(result)
        if not math.isfinite(result):
            raise DomainError(f"{self.name}() result is not finite")
        return Quantity(result, unit).normalize()


def _log(x: float, base: float = 10.0) -> float:
    return math.log(x, base)


def _round(x: float) -> float:
    # halves go away from zero: round(2.5) == 3, round(-2.5) == -3
    return math.copysign(math.floor(abs(x) + 0.5), x)


def _spec(name, min_args, max_args, compute, policy=UnitPolicy.NO_UNIT) -> FunctionSpec:
    return FunctionSpec(name, min_args, max_args, compute, policy)


_P = UnitPolicy.PRESERVE_UNIT

FUNCTIONS: Mapping[str, FunctionSpec] = MappingProxyType({
    f.name: f
    for f in (
        _spec("sin", 1, 1, math.sin),
        _spec("cos", 1, 1, math.cos),
        _spec("tan", 1, 1, math.tan),
        _spec("asin", 1, 1, math.asin),
        _spec("acos", 1, 1, math.acos),
        _spec("atan", 1, 1, math.atan),
        _spec("atan2", 2, 2, math.atan2),
        _spec("sinh", 1, 1, math.sinh),
        _spec("cosh", 1, 1, math.cosh),
        _spec("tanh", 1, 1, math.tanh),
        _spec("exp", 1, 1, math.exp),
        _spec("ln", 1, 1, math.log),
        _spec("log", 1, 2, _log),
        _spec("log2", 1, 1, math.log2),
        _spec("abs", 1, 1, abs, _P),
        _spec("ceil", 1, 1, math.ceil, _P),
        _spec("floor", 1, 1, math.floor, _P),
        _spec("round", 1, 1, _round, _P),
        _spec("min", 1, None, min, _P),
        _spec("max", 1, None, max, _P),
    )
})


def lookup(name: str) -> FunctionSpec:
    try:
        return FUNCTIONS[name]
    except KeyError:
        raise UnknownFunctionError(name) from None


def call_function(name: str, args: Sequence[Quantity]) -> Quantity:
    """Apply the registered function ``name`` to evaluated arguments."""
    return lookup(name)(args)


__all__ = ["UnitPolicy", "FunctionSpec", "FUNCTIONS", "lookup", "call_function"]
