"""
dimcalc.expr.parser
===================

Text -> expression tree, by precedence climbing.

Binding powers (left, right)::

    + -        (1, 2)
    * /        (3, 4)
    prefix -   (_, 5)
    unit       (6, _)   postfix: ``5 kg``, ``9.8 m/s^2``
    ^          (8, 7)   right associative

A unit expression written after a value attaches a unit. Inside it names
juxtapose (``kg m s^-2``), ``^`` takes a signed integer, and ``*`` / ``/``
continue the unit only when written without a space before them, so
``2 m * 3 m`` multiplies two quantities while ``2 m*s`` is two metre-seconds.
Unit expressions are resolved here, once; the tree carries the finished
`Unit` and its LaTeX label.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from dimcalc.core.quantity import Quantity
from dimcalc.errors import ParseError
from dimcalc.expr.tree import AttachUnit, Cons, Expr, FnCall, Ident, Literal, Op
from dimcalc.units.parser import Plan, eval_plan, plan_to_latex
from dimcalc.units.registry import DEFAULT_REGISTRY, UnitsRegistry

NUMBER, NAME, SYMBOL, END = "number", "name", "symbol", "end"

_SYMBOLS = "+-*/^(),"

_INFIX_BP = {
    "+": (1, 2, Op.ADD),
    "-": (1, 2, Op.SUB),
    "*": (3, 4, Op.MUL),
    "/": (3, 4, Op.DIV),
    "^": (8, 7, Op.POW),
}
_PREFIX_NEG_BP = 5
_UNIT_BP = 6


@dataclass(frozen=True, slots=True)
class Token:
    kind: str
    text: str
    column: int
    space_before: bool


def _is_name_char(c: str) -> bool:
    return c.isalnum() or c == "_"


def tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    i, n = 0, len(text)
    space = False
    while i < n:
        c = text[i]
        if c.isspace():
            space = True
            i += 1
            continue

        start = i
        if c.isdigit() or (c == "." and i + 1 < n and text[i + 1].isdigit()):
            while i < n and text[i].isdigit():
                i += 1
            if i < n and text[i] == ".":
                i += 1
                while i < n and text[i].isdigit():
                    i += 1
            # exponent only when digits follow: "2e-3" but not "2 em"
            if i < n and text[i] in "eE":
                j = i + 1
                if j < n and text[j] in "+-":
                    j += 1
                if j < n and text[j].isdigit():
                    i = j
                    while i < n and text[i].isdigit():
                        i += 1
            tokens.append(Token(NUMBER, text[start:i], start, space))
        elif c.isalpha() or c == "_" or (c == "\\" and i + 1 < n and text[i + 1].isalpha()):
            i += 1
            while i < n and _is_name_char(text[i]):
                i += 1
            tokens.append(Token(NAME, text[start:i], start, space))
        elif text.startswith("**", i):
            i += 2
            tokens.append(Token(SYMBOL, "^", start, space))
        elif c in _SYMBOLS:
            i += 1
            tokens.append(Token(SYMBOL, c, start, space))
        else:
            raise ParseError(f"Unexpected character {c!r}", start)
        space = False
    tokens.append(Token(END, "", n, space))
    return tokens


class ExprParser:
    """Precedence-climbing parser over a token list."""

    def __init__(self, text: str, registry: UnitsRegistry = DEFAULT_REGISTRY):
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0
        self.registry = registry

    # ---- token helpers ----
    def _peek(self, offset: int = 0) -> Token:
        return self.tokens[min(self.pos + offset, len(self.tokens) - 1)]

    def _next(self) -> Token:
        tok = self._peek()
        self.pos += 1
        return tok

    def _expect(self, text: str) -> Token:
        tok = self._peek()
        if tok.kind != SYMBOL or tok.text != text:
            raise ParseError(f"Expected '{text}', got {self._describe(tok)}", tok.column)
        return self._next()

    @staticmethod
    def _describe(tok: Token) -> str:
        return "end of input" if tok.kind == END else f"'{tok.text}'"

    def _is_symbol(self, tok: Token, text: str) -> bool:
        return tok.kind == SYMBOL and tok.text == text

    def _starts_unit(self, offset: int = 0) -> bool:
        tok = self._peek(offset)
        if tok.kind != NAME or tok.text.startswith("\\"):
            return False
        after = self._peek(offset + 1)
        # name( is a function call
        return not (self._is_symbol(after, "(") and not after.space_before)

    # ---- grammar ----
    def parse(self) -> Expr:
        expr = self.parse_expr(0)
        tok = self._peek()
        if tok.kind != END:
            raise ParseError(f"Unexpected {self._describe(tok)}", tok.column)
        return expr

    def parse_expr(self, min_bp: int) -> Expr:
        lhs = self._parse_prefix()

        while True:
            tok = self._peek()
            if tok.kind == END:
                break

            if self._starts_unit():
                if _UNIT_BP < min_bp:
                    break
                unit_plan = self._parse_unit_plan()
                unit = eval_plan(unit_plan, self.registry)
                lhs = Cons(AttachUnit(unit, plan_to_latex(unit_plan)), (lhs,))
                continue

            if tok.kind != SYMBOL or tok.text not in _INFIX_BP:
                break
            l_bp, r_bp, op = _INFIX_BP[tok.text]
            if l_bp < min_bp:
                break
            self._next()
            rhs = self.parse_expr(r_bp)
            lhs = Cons(op, (lhs, rhs))

        return lhs

    def _parse_prefix(self) -> Expr:
        tok = self._next()
        if tok.kind == NUMBER:
            try:
                return Literal(Quantity(float(tok.text)).normalize())
            except ValueError as e:
                raise ParseError(f"Invalid number '{tok.text}'", tok.column) from e
        if tok.kind == NAME:
            if self._is_symbol(self._peek(), "(") and not self._peek().space_before:
                return self._parse_call(tok.text)
            return Ident(tok.text)
        if self._is_symbol(tok, "("):
            inner = self.parse_expr(0)
            self._expect(")")
            return inner
        if self._is_symbol(tok, "-"):
            operand = self.parse_expr(_PREFIX_NEG_BP)
            return Cons(Op.NEG, (operand,))
        if self._is_symbol(tok, "+"):
            return self.parse_expr(_PREFIX_NEG_BP)
        raise ParseError(f"Expected a value, got {self._describe(tok)}", tok.column)

    def _parse_call(self, name: str) -> Expr:
        self._expect("(")
        args: List[Expr] = []
        if not self._is_symbol(self._peek(), ")"):
            while True:
                args.append(self.parse_expr(0))
                if self._is_symbol(self._peek(), ","):
                    self._next()
                    continue
                break
        self._expect(")")
        return FnCall(name, tuple(args))

    # ---- unit expressions ----
    def _parse_unit_plan(self) -> Plan:
        plan = self._parse_unit_term()
        while True:
            tok = self._peek()
            if self._starts_unit():
                plan = ("mul", plan, self._parse_unit_term())
            elif (
                tok.kind == SYMBOL
                and tok.text in "*/"
                and not tok.space_before
                and self._starts_unit(1)
            ):
                self._next()
                kind = "mul" if tok.text == "*" else "div"
                plan = (kind, plan, self._parse_unit_term())
            else:
                return plan

    def _parse_unit_term(self) -> Plan:
        name = self._next()
        plan: Plan = ("name", name.text, None)
        if self._is_symbol(self._peek(), "^"):
            self._next()
            plan = ("pow", plan, self._parse_unit_exponent())
        return plan

    def _parse_unit_exponent(self) -> int:
        if self._is_symbol(self._peek(), "("):
            self._next()
            n = self._parse_signed_int()
            self._expect(")")
            return n
        return self._parse_signed_int()

    def _parse_signed_int(self) -> int:
        sign = 1
        tok = self._peek()
        if tok.kind == SYMBOL and tok.text in "+-":
            self._next()
            sign = -1 if tok.text == "-" else 1
        tok = self._next()
        if tok.kind != NUMBER or not tok.text.isdigit():
            raise ParseError(
                f"Unit exponent must be an integer, got {self._describe(tok)}", tok.column
            )
        return sign * int(tok.text)


def parse_expression(text: str, registry: Optional[UnitsRegistry] = None) -> Expr:
    """Parse ``text`` into an expression tree.

    Raises `ParseError` for malformed text and `UnitParseError` for unknown
    units written after a value.
    """
    if registry is None:
        registry = DEFAULT_REGISTRY
    return ExprParser(text, registry).parse()


__all__ = ["Token", "tokenize", "ExprParser", "parse_expression"]
