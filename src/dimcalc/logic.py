"""
dimcalc.logic
=============

Boolean expressions over named propositions and LaTeX truth tables.

Operators, loosest first: ``equals``, ``implies``, ``or``, ``and``, and the
prefix ``not``. Parentheses group.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Mapping, Sequence, Tuple, Union

from dimcalc.errors import CalcError, ParseError, UndefinedSymbolError

logger = logging.getLogger(__name__)


class BoolOp(Enum):
    NOT = "not"
    AND = "and"
    OR = "or"
    IMPLIES = "implies"
    EQUALS = "equals"

    @property
    def latex(self) -> str:
        return _OP_LATEX[self]


_OP_LATEX = {
    BoolOp.NOT: r"\neg",
    BoolOp.AND: r"\land",
    BoolOp.OR: r"\lor",
    BoolOp.IMPLIES: r"\implies",
    BoolOp.EQUALS: r"\iff",
}

_INFIX_BP = {
    BoolOp.EQUALS: (0, 1),
    BoolOp.IMPLIES: (2, 3),
    BoolOp.OR: (4, 5),
    BoolOp.AND: (6, 7),
}
_NOT_BP = 9


@dataclass(frozen=True, slots=True)
class Prop:
    name: str


@dataclass(frozen=True, slots=True)
class Paren:
    inner: "BoolExpr"


@dataclass(frozen=True, slots=True)
class BoolCons:
    op: BoolOp
    operands: Tuple["BoolExpr", ...]


BoolExpr = Union[Prop, Paren, BoolCons]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _tokenize(text: str) -> List[Tuple[str, int]]:
    tokens = []
    i, n = 0, len(text)
    while i < n:
        c = text[i]
        if c.isspace():
            i += 1
        elif c in "()":
            tokens.append((c, i))
            i += 1
        elif c.isalnum() or c in "_\\":
            start = i
            i += 1
            while i < n and (text[i].isalnum() or text[i] == "_"):
                i += 1
            tokens.append((text[start:i], start))
        else:
            raise ParseError(f"Unexpected character {c!r} in boolean expression", i)
    return tokens


class _BoolParser:
    def __init__(self, text: str):
        self.tokens = _tokenize(text)
        self.pos = 0
        self.end = len(text)

    def _peek(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None, self.end

    def parse(self) -> BoolExpr:
        expr = self._expr(0)
        tok, col = self._peek()
        if tok is not None:
            raise ParseError(f"Unexpected '{tok}'", col)
        return expr

    def _expr(self, min_bp: int) -> BoolExpr:
        tok, col = self._peek()
        self.pos += 1
        if tok is None:
            raise ParseError("Expected a proposition, got end of input", col)
        if tok == "(":
            lhs: BoolExpr = Paren(self._expr(0))
            close, col = self._peek()
            if close != ")":
                raise ParseError("Expected ')'", col)
            self.pos += 1
        elif tok == BoolOp.NOT.value:
            lhs = BoolCons(BoolOp.NOT, (self._expr(_NOT_BP),))
        elif tok == ")" or tok in {op.value for op in _INFIX_BP}:
            raise ParseError(f"Expected a proposition, got '{tok}'", col)
        else:
            lhs = Prop(tok)

        while True:
            tok, col = self._peek()
            if tok is None or tok == ")":
                break
            try:
                op = BoolOp(tok)
            except ValueError:
                raise ParseError(f"Expected an operator, got '{tok}'", col) from None
            if op not in _INFIX_BP:
                raise ParseError(f"'{tok}' is not a binary operator", col)
            l_bp, r_bp = _INFIX_BP[op]
            if l_bp < min_bp:
                break
            self.pos += 1
            lhs = BoolCons(op, (lhs, self._expr(r_bp)))
        return lhs


def parse_bool_expr(text: str) -> BoolExpr:
    return _BoolParser(text).parse()


# ---------------------------------------------------------------------------
# Evaluation & rendering
# ---------------------------------------------------------------------------

def evaluate_bool(expr: BoolExpr, env: Mapping[str, bool]) -> bool:
    if isinstance(expr, Prop):
        try:
            return env[expr.name]
        except KeyError:
            raise UndefinedSymbolError(expr.name) from None
    elif isinstance(expr, Paren):
        return evaluate_bool(expr.inner, env)
    elif isinstance(expr, BoolCons):
        vals = [evaluate_bool(e, env) for e in expr.operands]
        if expr.op is BoolOp.NOT:
            return not vals[0]
        a, b = vals
        if expr.op is BoolOp.AND:
            return a and b
        elif expr.op is BoolOp.OR:
            return a or b
        elif expr.op is BoolOp.IMPLIES:
            return (not a) or b
        elif expr.op is BoolOp.EQUALS:
            return a == b
    raise TypeError(f"Invalid boolean expression: {expr!r}")


def bool_to_latex(expr: BoolExpr) -> str:
    if isinstance(expr, Prop):
        return expr.name
    elif isinstance(expr, Paren):
        return f"({bool_to_latex(expr.inner)})"
    elif isinstance(expr, BoolCons):
        if expr.op is BoolOp.NOT:
            return f"{expr.op.latex} {bool_to_latex(expr.operands[0])}"
        a, b = (bool_to_latex(e) for e in expr.operands)
        return f"{a} {expr.op.latex} {b}"
    raise TypeError(f"Invalid boolean expression: {expr!r}")


def generate_ttable(args: Sequence[str], exprs: Sequence[BoolExpr]) -> str:
    """LaTeX truth table over every assignment of ``args``.

    Rows run from all-false to all-true with the first argument as the most
    significant bit. Columns list the arguments, then each expression; a cell
    whose expression fails holds the error text.
    """
    columns = [f"${a}$" for a in args] + [f"${bool_to_latex(e)}$" for e in exprs]
    lines = [
        r"\begin{center}",
        r"\begin{tabular}{" + "|c" * len(columns) + "|}",
        r"\hline",
        " & ".join(columns) + r" \\",
        r"\hline",
    ]

    for values in itertools.product((False, True), repeat=len(args)):
        env = dict(zip(args, values))
        cells = ["T" if v else "F" for v in values]
        for e in exprs:
            try:
                cells.append("T" if evaluate_bool(e, env) else "F")
            except CalcError as err:
                logger.debug("truth table cell failed: %s", err)
                cells.append(str(err))
        lines.append(" & ".join(cells) + r" \\")
        lines.append(r"\hline")

    lines += [r"\end{tabular}", r"\end{center}"]
    return "\n".join(lines) + "\n"


__all__ = [
    "BoolOp",
    "Prop",
    "Paren",
    "BoolCons",
    "BoolExpr",
    "parse_bool_expr",
    "evaluate_bool",
    "bool_to_latex",
    "generate_ttable",
]
