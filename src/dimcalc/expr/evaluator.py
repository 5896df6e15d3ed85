"""
dimcalc.expr.evaluator
======================

`evaluate(expr, scope)` walks an expression tree and returns a normalized
`Quantity`. The walk is side-effect free: the scope is only read, and any
error aborts the whole evaluation.
"""

from __future__ import annotations

from typing import Mapping

from dimcalc.core.quantity import Quantity
from dimcalc.errors import ArityError, UndefinedSymbolError, UnitParseError
from dimcalc.expr.functions import call_function
from dimcalc.expr.tree import AttachUnit, Cons, Expr, FnCall, Ident, Literal, Op
from dimcalc.units.registry import parse_unit


def evaluate(expr: Expr, scope: Mapping[str, Quantity]) -> Quantity:
    if isinstance(expr, Literal):
        return expr.value.normalize()
    elif isinstance(expr, Ident):
        return _resolve(expr.name, scope)
    elif isinstance(expr, FnCall):
        args = [evaluate(a, scope) for a in expr.args]
        return call_function(expr.name, args)
    elif isinstance(expr, Cons):
        return _apply(expr, scope)
    else:
        raise TypeError(f"Invalid expression node: {expr!r}")


def _resolve(name: str, scope: Mapping[str, Quantity]) -> Quantity:
    value = scope.get(name)
    if value is not None:
        return value
    # Bare unit names evaluate to one of that unit.
    try:
        unit = parse_unit(name)
    except UnitParseError as e:
        raise UndefinedSymbolError(name) from e
    return Quantity(1.0, unit)


def _apply(node: Cons, scope: Mapping[str, Quantity]) -> Quantity:
    op = node.op
    if len(node.operands) != op.arity:
        raise ArityError(
            f"Operator {_op_name(op)} expects {op.arity} operand(s), got {len(node.operands)}"
        )
    vals = [evaluate(e, scope) for e in node.operands]

    if isinstance(op, AttachUnit):
        return vals[0].with_unit(op.unit)
    elif op is Op.NEG:
        return -vals[0]

    a, b = vals
    if op is Op.ADD:
        return a + b
    elif op is Op.SUB:
        return a - b
    elif op is Op.MUL:
        return a * b
    elif op is Op.DIV:
        return a / b
    elif op is Op.POW:
        return a ** b
    else:
        raise TypeError(f"Invalid operator: {op!r}")


def _op_name(op) -> str:
    if isinstance(op, AttachUnit):
        return f"unit '{op.label}'"
    return f"'{op.value}'"


__all__ = ["evaluate"]
