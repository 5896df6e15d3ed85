"""
dimcalc.scope
=============

A single flat variable scope: an ordered mapping from identifier to
`Quantity`. The evaluator only reads it; the statement driver binds new
names between evaluations.
"""

from __future__ import annotations

import math
from typing import Dict, Iterator, Mapping

from dimcalc.core.quantity import Quantity

CONSTANTS: Mapping[str, float] = {
    r"\pi": math.pi,
    "e": math.e,
}


class Scope(Mapping[str, Quantity]):
    def __init__(self, bindings: Mapping[str, Quantity] | None = None) -> None:
        self._vars: Dict[str, Quantity] = dict(bindings or {})

    @classmethod
    def with_constants(cls) -> "Scope":
        """A scope seeded with ``\\pi`` and ``e``."""
        return cls({name: Quantity(v).normalize() for name, v in CONSTANTS.items()})

    def bind(self, name: str, value: Quantity) -> None:
        """Bind ``name``; an existing binding is replaced."""
        # Re-inserting keeps the mapping ordered by most recent binding.
        self._vars.pop(name, None)
        self._vars[name] = value

    def copy(self) -> "Scope":
        return Scope(self._vars)

    def __getitem__(self, name: str) -> Quantity:
        return self._vars[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v}" for k, v in self._vars.items())
        return f"Scope({inner})"


__all__ = ["Scope", "CONSTANTS"]
