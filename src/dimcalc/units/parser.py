"""
dimcalc.units.parser
====================

Unit expressions such as ``kg*m/s^2``, ``km h^-1`` or ``m/(s*s)``.

Text compiles to a *plan*, a nested tuple that names units but does not
resolve them. Plans are cached by text and evaluated against whichever
registry the caller passes, so the cache never holds registry state.
"""

import re
from functools import lru_cache
from typing import List, Optional, Tuple, Union

from typing import TYPE_CHECKING

from dimcalc.errors import UnitParseError

if TYPE_CHECKING:
    from dimcalc.core.unit import Unit
    from dimcalc.units.registry import UnitsRegistry

# --- Plan node types ------------------------------------------------
# ("name", <str>, None)
# ("pow", <plan>, <int>)
# ("mul", <plan>, <plan>)
# ("div", <plan>, <plan>)
Plan = Tuple[str, Union[str, "Plan"], Union[int, "Plan", None]]

# Characters that render differently in math mode.
_LATEX_CHARS = {
    "Ω": r"\Omega ",
    "µ": r"\mu ",
    "μ": r"\mu ",
}

_DISALLOWED = frozenset('~!@#$%&|=,:;?<>\'"`\\[]{}.')

_TOKEN_RE = re.compile(
    r"\s*(?:(?P<op>\*\*|[*/^()])|(?P<int>[+-]?\d+)|(?P<name>[^\W\d_]\w*))"
)

Token = Tuple[Optional[str], Optional[str], int]


def _lex(text: str) -> List[Token]:
    tokens: List[Token] = []
    pos, end = 0, len(text.rstrip())
    while pos < end:
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            raise UnitParseError(text, f"unexpected input at {pos}: {text[pos:pos + 10].strip()!r}")
        kind = m.lastgroup
        tokens.append((kind, m.group(kind), m.start(kind)))
        pos = m.end()
    return tokens


class _UnitExprParser:
    """
    Recursive descent over the tokens of one unit expression::

        expr     := term (['*' | '/'] term)*
        term     := factor [('^' | '**') exponent]
        factor   := NAME | '(' expr ')'
        exponent := INT | '(' INT ')'

    Terms written side by side multiply (``kg m s^-2``). Exponents are
    signed integers only.
    """

    def __init__(self, text: str):
        self.text = text
        self.tokens = _lex(text)
        self.pos = 0

    def parse(self) -> Plan:
        plan = self._expr()
        if self.pos < len(self.tokens):
            _, value, col = self.tokens[self.pos]
            raise self._error(f"unexpected {value!r} at {col}")
        return plan

    # ---- token helpers ----
    def _peek(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None, None, len(self.text)

    def _at(self, kind: str, *values: str) -> bool:
        tok_kind, value, _ = self._peek()
        return tok_kind == kind and (not values or value in values)

    def _take(self, kind: str, value: Optional[str] = None) -> str:
        tok_kind, tok_value, col = self._peek()
        if tok_kind != kind or (value is not None and tok_value != value):
            got = "end of input" if tok_kind is None else repr(tok_value)
            raise self._error(f"expected {value or kind!r} at {col}, got {got}")
        self.pos += 1
        return tok_value

    def _error(self, reason: str) -> UnitParseError:
        return UnitParseError(self.text, reason)

    # ---- grammar ----
    def _expr(self) -> Plan:
        plan = self._term()
        while True:
            if self._at("op", "*", "/"):
                kind = "mul" if self._take("op") == "*" else "div"
                plan = (kind, plan, self._term())
            elif self._at("name") or self._at("op", "("):
                plan = ("mul", plan, self._term())
            else:
                return plan

    def _term(self) -> Plan:
        base = self._factor()
        if self._at("op", "^", "**"):
            self.pos += 1
            return ("pow", base, self._exponent())
        return base

    def _factor(self) -> Plan:
        if self._at("name"):
            return ("name", self._take("name"), None)
        if self._at("op", "("):
            self.pos += 1
            inner = self._expr()
            self._take("op", ")")
            return inner
        kind, value, col = self._peek()
        got = "end of input" if kind is None else repr(value)
        raise self._error(f"expected unit name or '(' at {col}, got {got}")

    def _exponent(self) -> int:
        if self._at("op", "("):
            self.pos += 1
            n = int(self._take("int"))
            self._take("op", ")")
            return n
        return int(self._take("int"))


# ---------------- Evaluation & display ----------------
def eval_plan(plan: Plan, reg: "UnitsRegistry") -> "Unit":
    kind, a, b = plan
    if kind == "name":
        return reg.parse(a)
    elif kind == "pow":
        return eval_plan(a, reg).pow(b)
    elif kind == "mul":
        return eval_plan(a, reg) * eval_plan(b, reg)
    elif kind == "div":
        return eval_plan(a, reg) / eval_plan(b, reg)
    else:
        raise RuntimeError(f"Invalid plan node: {plan!r}")


def name_to_latex(name: str) -> str:
    return "".join(_LATEX_CHARS.get(c, c) for c in name).strip()


def plan_to_latex(plan: Plan) -> str:
    """Display label for a unit expression: ``a \\ b``, ``\\frac{a}{b}``, ``a^{n}``."""
    kind, a, b = plan
    if kind == "name":
        return name_to_latex(a)
    elif kind == "pow":
        return f"{plan_to_latex(a)}^{{{b}}}"
    elif kind == "mul":
        return f"{plan_to_latex(a)} \\ {plan_to_latex(b)}"
    elif kind == "div":
        return f"\\frac{{{plan_to_latex(a)}}}{{{plan_to_latex(b)}}}"
    else:
        raise RuntimeError(f"Invalid plan node: {plan!r}")


# ---------------- Public API ----------------
@lru_cache(maxsize=4096)
def compile_unit_expr(expr: str) -> Plan:
    if any(c in _DISALLOWED for c in expr):
        raise UnitParseError(
            expr,
            "only *, /, ^, **, parentheses, unit names, and signed integer exponents are allowed",
        )
    return _UnitExprParser(expr).parse()


def extract_unit_expr(expr: str, reg: "UnitsRegistry") -> "Unit":
    """Resolve a unit expression like ``'kg*m/(ns^2)'`` or ``'kg m s^-2'`` in ``reg``.

    Raises `UnitParseError` for malformed text or unknown names.
    """
    return eval_plan(compile_unit_expr(expr), reg)


def parse_unit_expr(expr: str, reg: "UnitsRegistry | None" = None) -> "Tuple[Unit, str]":
    """Parse ``expr`` into its `Unit` and LaTeX label."""
    if reg is None:
        from dimcalc.units.registry import DEFAULT_REGISTRY

        reg = DEFAULT_REGISTRY
    plan = compile_unit_expr(expr)
    return eval_plan(plan, reg), plan_to_latex(plan)


__all__ = [
    "Plan",
    "compile_unit_expr",
    "eval_plan",
    "extract_unit_expr",
    "name_to_latex",
    "parse_unit_expr",
    "plan_to_latex",
]
