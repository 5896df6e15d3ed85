"""
dimcalc.expr.tree
=================

Closed set of expression-tree node types.

``Expr`` is the union of `Literal`, `Ident`, `FnCall` and `Cons`. A `Cons`
node applies an operator to its operands; the operator is an `Op` member or
an `AttachUnit` carrying the unit to attach and its display label.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Tuple, Union

from dimcalc.core.quantity import Quantity
from dimcalc.core.unit import Unit


class Op(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"
    NEG = "neg"

    @property
    def arity(self) -> int:
        return 1 if self is Op.NEG else 2


@dataclass(frozen=True, slots=True)
class AttachUnit:
    """Postfix operator giving the operand a unit; ``label`` is display only."""
    unit: Unit
    label: str

    @property
    def arity(self) -> int:
        return 1


Operator = Union[Op, AttachUnit]


@dataclass(frozen=True, slots=True)
class Literal:
    value: Quantity


@dataclass(frozen=True, slots=True)
class Ident:
    name: str


@dataclass(frozen=True, slots=True)
class FnCall:
    name: str
    args: Tuple["Expr", ...] = ()


@dataclass(frozen=True, slots=True)
class Cons:
    op: Operator
    operands: Tuple["Expr", ...]


Expr = Union[Literal, Ident, FnCall, Cons]


def literal(x: float) -> Literal:
    return Literal(Quantity(x).normalize())


def rename_idents(expr: Expr, aliases: Mapping[str, str]) -> Expr:
    """Copy of ``expr`` with every identifier found in ``aliases`` renamed."""
    if isinstance(expr, Ident):
        return Ident(aliases.get(expr.name, expr.name))
    if isinstance(expr, FnCall):
        return FnCall(expr.name, tuple(rename_idents(a, aliases) for a in expr.args))
    if isinstance(expr, Cons):
        return Cons(expr.op, tuple(rename_idents(a, aliases) for a in expr.operands))
    return expr


__all__ = [
    "Op",
    "AttachUnit",
    "Operator",
    "Literal",
    "Ident",
    "FnCall",
    "Cons",
    "Expr",
    "literal",
    "rename_idents",
]
