"""
dimcalc.statement
=================

The statement language and the driver that executes it.

One statement per line; blank lines and lines starting with ``#`` are
skipped::

    x = 5 kg                  declare
    x * 2 = ?                 print
    x * 2 = ? g               print in grams
    y = x / 2 = ? g           declare and print
    alias th \\theta          rename an identifier in later statements
    digits 4                  decimals shown for results
    scientific                toggle scientific notation
    ---                       line gap
    '''\\section{Raw}'''       raw LaTeX (may span lines)
    ttable [p, q] [p and q, p implies q]

Errors carry the 1-based source line. A failing statement stops execution
and binds nothing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple, Union

from dimcalc.config import Settings
from dimcalc.errors import CalcError, ParseError
from dimcalc.expr.evaluator import evaluate
from dimcalc.expr.parser import parse_expression
from dimcalc.expr.tree import Expr, rename_idents
from dimcalc.latex import FormatArgs, UnitHint, expr_to_latex, quantity_to_latex
from dimcalc.logic import BoolExpr, generate_ttable, parse_bool_expr
from dimcalc.scope import Scope

logger = logging.getLogger(__name__)

DOCUMENT_HEADER = "\\documentclass{article}\n\\usepackage{amsmath}\n\\begin{document}\n"
DOCUMENT_FOOTER = "\\end{document}\n"
RAW_FENCE = "'''"

_NAME = r"\\?[A-Za-z_][A-Za-z0-9_]*"
_DEC_PRINT_RE = re.compile(rf"^({_NAME})\s*=\s*([^=]+?)\s*=\s*\?\s*(.*)$")
_PRINT_RE = re.compile(r"^([^=]+?)\s*=\s*\?\s*(.*)$")
_VAR_DEC_RE = re.compile(rf"^({_NAME})\s*=\s*([^=]+)$")
_ALIAS_RE = re.compile(rf"^alias\s+({_NAME})\s+(\S.*)$")
_DIGITS_RE = re.compile(r"^digits\s+(\S+)$")
_TTABLE_RE = re.compile(r"^ttable\s*\[([^\]]*)\]\s*\[([^\]]*)\]$")


# --- Statement types ---------------------------------------------------------

@dataclass(frozen=True)
class VarDec:
    name: str
    expr: Expr


@dataclass(frozen=True)
class PrintExpr:
    expr: Expr
    unit_hint: Optional[UnitHint] = None


@dataclass(frozen=True)
class DecPrintExpr:
    name: str
    expr: Expr
    unit_hint: Optional[UnitHint] = None


@dataclass(frozen=True)
class Alias:
    name: str
    latex: str


@dataclass(frozen=True)
class DigitSet:
    digits: int


@dataclass(frozen=True)
class SetScientific:
    pass


@dataclass(frozen=True)
class LineGap:
    pass


@dataclass(frozen=True)
class TTable:
    args: Tuple[str, ...]
    exprs: Tuple[BoolExpr, ...]


@dataclass(frozen=True)
class RawLaTeX:
    text: str


Statement = Union[
    VarDec, PrintExpr, DecPrintExpr, Alias, DigitSet, SetScientific, LineGap, TTable, RawLaTeX
]


# --- Parsing -----------------------------------------------------------------

def _hint(text: str) -> Optional[UnitHint]:
    text = text.strip()
    return UnitHint.parse(text) if text else None


def parse_statement(line: str) -> Statement:
    """Parse one (already stripped, non-empty) source line."""
    if line == "---":
        return LineGap()
    if line == "scientific":
        return SetScientific()

    m = _DIGITS_RE.match(line)
    if m:
        if not m.group(1).isdigit():
            raise ParseError(f"digits expects a non-negative integer, got '{m.group(1)}'")
        return DigitSet(int(m.group(1)))

    m = _ALIAS_RE.match(line)
    if m:
        return Alias(m.group(1), m.group(2).strip())

    if line.startswith("ttable"):
        m = _TTABLE_RE.match(line)
        if not m:
            raise ParseError("ttable expects '[args] [expressions]'")
        args = tuple(a.strip() for a in m.group(1).split(",") if a.strip())
        exprs = tuple(parse_bool_expr(e) for e in m.group(2).split(",") if e.strip())
        if not args:
            raise ParseError("ttable needs at least one argument")
        return TTable(args, exprs)

    m = _DEC_PRINT_RE.match(line)
    if m:
        return DecPrintExpr(m.group(1), parse_expression(m.group(2)), _hint(m.group(3)))

    m = _PRINT_RE.match(line)
    if m:
        return PrintExpr(parse_expression(m.group(1)), _hint(m.group(2)))

    m = _VAR_DEC_RE.match(line)
    if m:
        return VarDec(m.group(1), parse_expression(m.group(2)))

    raise ParseError(f"Unrecognized statement '{line}'")


def parse_block(source: str) -> List[Tuple[int, Statement]]:
    """Parse a whole source text into ``(line_number, statement)`` pairs."""
    statements: List[Tuple[int, Statement]] = []
    lines = source.splitlines()
    i = 0
    while i < len(lines):
        lineno = i + 1
        line = lines[i].strip()
        i += 1
        if not line or line.startswith("#"):
            continue

        if line.startswith(RAW_FENCE):
            body = line[len(RAW_FENCE):]
            chunks = []
            while RAW_FENCE not in body:
                chunks.append(body)
                if i >= len(lines):
                    raise ParseError("Unterminated raw LaTeX block").add_line(lineno)
                body = lines[i]
                i += 1
            head, _, rest = body.partition(RAW_FENCE)
            if rest.strip():
                raise ParseError("Unexpected text after raw LaTeX block").add_line(i)
            chunks.append(head)
            statements.append((lineno, RawLaTeX("\n".join(chunks))))
            continue

        try:
            statements.append((lineno, parse_statement(line)))
        except CalcError as e:
            raise e.add_line(lineno)
    return statements


# --- Execution ---------------------------------------------------------------

class State:
    """Executes parsed statements against one flat scope, collecting LaTeX."""

    def __init__(self, source: str, settings: Optional[Settings] = None) -> None:
        settings = settings or Settings()
        self.scope = Scope.with_constants()
        self.statements = parse_block(source)
        self.format_args = FormatArgs(
            max_digits=settings.max_digits,
            scientific_notation=settings.scientific_notation,
        )
        self.aliases: Dict[str, str] = {"pi": r"\pi"}
        self.output: List[str] = []

    def resolve_alias(self, name: str) -> str:
        return self.aliases.get(name, name)

    def exec(self) -> str:
        """Run every statement and return the complete LaTeX document."""
        self.output = [DOCUMENT_HEADER]
        for lineno, stmt in self.statements:
            logger.debug("line %d: %s", lineno, stmt)
            try:
                self._exec_one(stmt)
            except CalcError as e:
                raise e.add_line(lineno)
        self.output.append(DOCUMENT_FOOTER)
        return "".join(self.output)

    def _exec_one(self, stmt: Statement) -> None:
        if isinstance(stmt, LineGap):
            self.output.append("\\\\\n")
        elif isinstance(stmt, DigitSet):
            self.format_args = replace(self.format_args, max_digits=stmt.digits)
        elif isinstance(stmt, SetScientific):
            self.format_args = replace(
                self.format_args, scientific_notation=not self.format_args.scientific_notation
            )
        elif isinstance(stmt, Alias):
            self.aliases[stmt.name] = stmt.latex
        elif isinstance(stmt, RawLaTeX):
            self.output.append(stmt.text + "\n")
        elif isinstance(stmt, VarDec):
            name = self.resolve_alias(stmt.name)
            expr = rename_idents(stmt.expr, self.aliases)
            shown = expr_to_latex(expr, self.format_args)
            value = evaluate(expr, self.scope)
            self.output.append(f"${name} = {shown}$\\\\\n")
            self.scope.bind(name, value)
        elif isinstance(stmt, PrintExpr):
            expr = rename_idents(stmt.expr, self.aliases)
            value = evaluate(expr, self.scope)
            shown = expr_to_latex(expr, self.format_args)
            result = quantity_to_latex(value, self.format_args.with_hint(stmt.unit_hint))
            self.output.append(f"${shown} = {result}$\\\\\n")
        elif isinstance(stmt, DecPrintExpr):
            name = self.resolve_alias(stmt.name)
            expr = rename_idents(stmt.expr, self.aliases)
            value = evaluate(expr, self.scope)
            shown = expr_to_latex(expr, self.format_args)
            result = quantity_to_latex(value, self.format_args.with_hint(stmt.unit_hint))
            self.output.append(f"${name} = {shown} = {result}$\\\\\n")
            self.scope.bind(name, value)
        elif isinstance(stmt, TTable):
            self.output.append(generate_ttable(stmt.args, stmt.exprs))
        else:
            raise TypeError(f"Invalid statement: {stmt!r}")


def render_document(source: str, settings: Optional[Settings] = None) -> str:
    """Parse and execute ``source``, returning the LaTeX document."""
    state = State(source, settings)
    document = state.exec()
    logger.info("Rendered %d statement(s)", len(state.statements))
    return document


__all__ = [
    "VarDec",
    "PrintExpr",
    "DecPrintExpr",
    "Alias",
    "DigitSet",
    "SetScientific",
    "LineGap",
    "TTable",
    "RawLaTeX",
    "Statement",
    "parse_statement",
    "parse_block",
    "State",
    "render_document",
    "DOCUMENT_HEADER",
    "DOCUMENT_FOOTER",
]
