"""
dimcalc.errors
==============

Exception taxonomy shared by the unit algebra, the evaluator and the
statement driver.

Every error derives from `CalcError`. The concrete classes also derive from
the closest builtin exception (`ValueError`, `TypeError`, `LookupError`) so
code that only knows about builtins still catches them sensibly.
"""

from __future__ import annotations

from typing import Optional


class CalcError(Exception):
    """Base class for every calculator error.

    The statement driver attaches the 1-based source line with `add_line`;
    the core never sets it.
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.line: Optional[int] = None

    def add_line(self, line: int) -> "CalcError":
        self.line = line
        return self

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"Line {self.line}: {self.message}"


class UnitParseError(CalcError, ValueError):
    """A unit token (or unit expression) that cannot be resolved."""

    def __init__(self, token: str, reason: str = "") -> None:
        msg = f"Unknown unit '{token}'"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.token = token


class UnitMismatchError(CalcError, TypeError):
    """Operands whose dimension vectors differ where they must agree."""


class ArityError(CalcError, TypeError):
    """A function call or operator node with the wrong number of operands."""


class UnknownFunctionError(CalcError, LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown function '{name}'")
        self.name = name


class UndefinedSymbolError(CalcError, LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Undefined symbol '{name}'")
        self.name = name


class DomainError(CalcError, ValueError):
    """Mathematically undefined operations (bad exponents, x/0, log(-1), ...)."""


class ParseError(CalcError, ValueError):
    """Malformed source text."""

    def __init__(self, message: str, column: Optional[int] = None) -> None:
        if column is not None:
            message = f"{message} (column {column + 1})"
        super().__init__(message)
        self.column = column


__all__ = [
    "CalcError",
    "UnitParseError",
    "UnitMismatchError",
    "ArityError",
    "UnknownFunctionError",
    "UndefinedSymbolError",
    "DomainError",
    "ParseError",
]
