from dimcalc.expr.evaluator import evaluate
from dimcalc.expr.parser import parse_expression
from dimcalc.expr.tree import AttachUnit, Cons, Expr, FnCall, Ident, Literal, Op

__all__ = [
    "AttachUnit",
    "Cons",
    "Expr",
    "FnCall",
    "Ident",
    "Literal",
    "Op",
    "evaluate",
    "parse_expression",
]
