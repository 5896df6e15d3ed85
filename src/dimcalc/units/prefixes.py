# dimcalc.units.prefixes

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple


@dataclass(frozen=True, slots=True)
class Prefix:
    name: str
    symbol: str
    exponent: int


PREFIXES: Tuple[Prefix, ...] = (
    Prefix("yotta", "Y", 24),
    Prefix("zetta", "Z", 21),
    Prefix("exa",   "E", 18),
    Prefix("peta",  "P", 15),
    Prefix("tera",  "T", 12),
    Prefix("giga",  "G", 9),
    Prefix("mega",  "M", 6),
    Prefix("kilo",  "k", 3),
    Prefix("hecto", "h", 2),
    Prefix("deca",  "da", 1),
    Prefix("deci",  "d", -1),
    Prefix("centi", "c", -2),
    Prefix("milli", "m", -3),
    Prefix("micro", "µ", -6),
    Prefix("nano",  "n", -9),
    Prefix("pico",  "p", -12),
    Prefix("femto", "f", -15),
    Prefix("atto",  "a", -18),
    Prefix("zepto", "z", -21),
    Prefix("yocto", "y", -24),
)

# Alternate spellings: Greek mu (U+03BC) next to the micro sign (U+00B5),
# ASCII 'u', and 'deka'.
_EXTRA_TOKENS = {
    "μ": -6,
    "u": -6,
    "deka": 1,
}


def _build_tables() -> tuple[Mapping[str, int], Mapping[int, str]]:
    to_exp: dict[str, int] = {}
    to_abbrev: dict[int, str] = {}
    for p in PREFIXES:
        to_exp[p.name] = p.exponent
        to_exp[p.symbol] = p.exponent
        to_abbrev[p.exponent] = p.symbol
    to_exp.update(_EXTRA_TOKENS)
    return MappingProxyType(to_exp), MappingProxyType(to_abbrev)


# token -> power of ten, and power of ten -> abbreviation
PREFIX_EXPONENTS, PREFIX_ABBREVIATIONS = _build_tables()

# Longest first so "deca" wins over "d" and "da" over "d".
PREFIX_TOKENS_DESC: Tuple[str, ...] = tuple(
    sorted(PREFIX_EXPONENTS, key=lambda t: (-len(t), t))
)


def prefix_abbreviation(exponent: int) -> str | None:
    """Abbreviation for a power of ten, ``None`` when no SI prefix has it."""
    return PREFIX_ABBREVIATIONS.get(exponent)


__all__ = [
    "Prefix",
    "PREFIXES",
    "PREFIX_EXPONENTS",
    "PREFIX_ABBREVIATIONS",
    "PREFIX_TOKENS_DESC",
    "prefix_abbreviation",
]
