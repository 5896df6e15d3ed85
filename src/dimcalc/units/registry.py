"""
dimcalc.units.registry
======================

The unit table and the token resolver built on it.

- Tables are built once at import time and exposed as read-only mappings.
- Derived units are defined with the unit algebra in dependency order, so a
  lookup never re-parses a unit string.
- Mass is gram based: ``kg`` is the ``k`` prefix applied to ``g``.
- Tokens resolve by exact lookup (symbols, names, plurals) and then by SI
  prefix stripping, longest prefix first.
"""
from __future__ import annotations

import unicodedata
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from dimcalc.core.dimensions import (
    AMOUNT,
    CURRENT,
    DIM_0,
    LENGTH,
    LUMINOUS,
    MASS,
    TEMPERATURE,
    TIME,
)
from dimcalc.core.unit import Unit
from dimcalc.errors import UnitParseError
from dimcalc.units.prefixes import PREFIX_EXPONENTS, PREFIX_TOKENS_DESC

# Names that start with a prefix abbreviation or name ("h"-our, "da"-y,
# "mole", "pa"-scal, ...) but must never be split.
_NEVER_STRIP: FrozenSet[str] = frozenset({
    "ampere", "amperes", "amp", "amps",
    "hour", "hours",
    "day", "days",
    "mole", "moles",
    "pascal", "pascals",
    "coulomb", "coulombs",
    "tesla", "teslas",
    "farad", "farads",
    "katal", "katals",
})


def normalize_symbol(s: str) -> str:
    """Normalize a user-provided unit token (strip, Unicode NFC)."""
    if not s:
        return s
    return unicodedata.normalize("NFC", s.strip())


# ---------------------------------------------------------------------------
# Units registry
# ---------------------------------------------------------------------------
class UnitsRegistry:
    """Read-only lookup from unit tokens to `Unit` values with SI prefix synthesis.

    `get` also accepts compound expressions (``"kg*m/s^2"``), delegating to
    `dimcalc.units.parser`.
    """

    def __init__(
        self,
        units: Mapping[str, Unit],
        aliases: Mapping[str, str] | None = None,
        non_prefixable: Iterable[str] = (),
    ) -> None:
        aliases = dict(aliases or {})
        for alias, canonical in aliases.items():
            if canonical not in units:
                raise ValueError(f"Alias '{alias}' points to unknown unit '{canonical}'")
            if alias in units:
                raise ValueError(f"Alias '{alias}' shadows a unit symbol")
        self._units: Mapping[str, Unit] = MappingProxyType(dict(units))
        self._aliases: Mapping[str, str] = MappingProxyType(aliases)
        # Non-prefixable applies to a symbol and every alias of it.
        blocked = {normalize_symbol(s) for s in non_prefixable}
        blocked |= {a for a, c in aliases.items() if c in blocked}
        self._non_prefixable: FrozenSet[str] = frozenset(blocked)

    def __contains__(self, symbol: str) -> bool:
        return self.has(symbol)

    def is_non_prefixable(self, symbol: str) -> bool:
        return normalize_symbol(symbol) in self._non_prefixable

    # -------------------------- public API ---------------------------------
    def has(self, symbol: str) -> bool:
        try:
            self.get(symbol)
            return True
        except UnitParseError:
            return False

    def get(self, symbol: str) -> Unit:
        """Lookup a unit by token or compound expression.

        Raises `UnitParseError` if unknown.
        """
        if any(op in symbol for op in ('*', '/', '^', '(')) or len(symbol.split()) > 1:
            from dimcalc.units.parser import extract_unit_expr

            return extract_unit_expr(symbol, self)
        return self.parse(symbol)

    def parse(self, token: str) -> Unit:
        """Resolve a single unit token, possibly SI-prefixed."""
        sym = normalize_symbol(token)
        if not sym:
            raise UnitParseError(token, "empty unit")

        u = self.lookup(sym)
        if u is not None:
            return u

        if sym not in _NEVER_STRIP:
            synthesized = self._try_synthesize_prefixed(sym)
            if synthesized is not None:
                return synthesized

        raise UnitParseError(token)

    def lookup(self, symbol: str) -> Optional[Unit]:
        """Exact (alias-aware) lookup, no prefix handling."""
        target = self._aliases.get(symbol, symbol)
        return self._units.get(target)

    def all(self) -> Mapping[str, Unit]:
        return self._units

    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    # ------------------------- internals -----------------------------------
    def _split_prefixes(self, symbol: str) -> Iterable[Tuple[str, str]]:
        for p in PREFIX_TOKENS_DESC:
            if symbol.startswith(p) and len(symbol) > len(p):
                yield p, symbol[len(p):]

    def _try_synthesize_prefixed(self, sym: str) -> Optional[Unit]:
        for prefix, base_sym in self._split_prefixes(sym):
            if base_sym in self._non_prefixable:
                continue
            base = self.lookup(base_sym)
            if base is None:
                continue
            return base.with_prefix(PREFIX_EXPONENTS[prefix])
        return None


# ---------------------------------------------------------------------------
# Bootstrap the default table
# ---------------------------------------------------------------------------

def _bootstrap_default_registry() -> UnitsRegistry:
    units: Dict[str, Unit] = {}

    # Base SI units (gram based)
    m = units["m"] = Unit(LENGTH)
    g = units["g"] = Unit(MASS)
    s = units["s"] = Unit(TIME)
    A = units["A"] = Unit(CURRENT)
    units["K"] = Unit(TEMPERATURE)
    mol = units["mol"] = Unit(AMOUNT)
    cd = units["cd"] = Unit(LUMINOUS)

    # Named, dimensionless
    units["rad"] = Unit(DIM_0)
    units["sr"] = Unit(DIM_0)

    # Derived units, each from units already defined above
    kg = g.with_prefix(3)
    Hz = units["Hz"] = s ** -1
    units["Bq"] = Hz
    N = units["N"] = kg * m / s ** 2
    J = units["J"] = N * m
    units["Pa"] = N / m ** 2
    W = units["W"] = J / s
    C = units["C"] = A * s
    V = units["V"] = W / A
    units["F"] = C / V
    units["Ω"] = V / A
    units["S"] = A / V
    Wb = units["Wb"] = V * s
    units["T"] = Wb / m ** 2
    units["H"] = Wb / A
    lm = units["lm"] = cd
    units["lx"] = lm / m ** 2
    units["Gy"] = J / kg
    units["Sv"] = J / kg
    units["kat"] = mol / s
    units["L"] = (m ** 3).with_prefix(-3)

    # Non-decimal units: multiplier in [1, 10) plus dec_exp
    units["min"] = Unit(TIME, 1, 6.0)
    units["h"] = Unit(TIME, 3, 3.6)
    units["d"] = Unit(TIME, 4, 8.64)
    units["wk"] = Unit(TIME, 5, 6.048)
    units["yr"] = Unit(TIME, 7, 3.1556952)      # Gregorian mean year
    units["amu"] = Unit(MASS, -24, 1.66053906660)

    aliases = {
        # base
        "meter": "m", "meters": "m", "metre": "m", "metres": "m",
        "gram": "g", "grams": "g", "gm": "g",
        "sec": "s", "second": "s", "seconds": "s",
        "amp": "A", "amps": "A", "ampere": "A", "amperes": "A",
        "kelvin": "K",
        "mole": "mol", "moles": "mol", "mols": "mol",
        "candela": "cd",
        # derived
        "hertz": "Hz",
        "becquerel": "Bq",
        "newton": "N", "newtons": "N",
        "joule": "J", "joules": "J",
        "pascal": "Pa", "pascals": "Pa",
        "watt": "W", "watts": "W",
        "coulomb": "C", "coulombs": "C",
        "volt": "V", "volts": "V",
        "farad": "F", "farads": "F",
        "ohm": "Ω", "ohms": "Ω", "Ohm": "Ω",
        "siemens": "S",
        "weber": "Wb", "webers": "Wb",
        "tesla": "T", "teslas": "T",
        "henry": "H", "henries": "H", "henrys": "H",
        "lumen": "lm", "lumens": "lm",
        "lux": "lx",
        "gray": "Gy", "grays": "Gy",
        "sievert": "Sv", "sieverts": "Sv",
        "katal": "kat", "katals": "kat",
        "l": "L", "liter": "L", "liters": "L", "litre": "L", "litres": "L",
        "radian": "rad", "radians": "rad",
        "steradian": "sr", "steradians": "sr",
        # non-decimal
        "minute": "min", "minutes": "min",
        "hr": "h", "hour": "h", "hours": "h",
        "day": "d", "days": "d",
        "week": "wk", "weeks": "wk",
        "year": "yr", "years": "yr",
        "u": "amu", "Da": "amu", "dalton": "amu", "daltons": "amu",
    }

    non_prefixable = ["min", "h", "d", "wk", "yr", "amu"]

    return UnitsRegistry(units, aliases, non_prefixable)


# Public, shared default registry
DEFAULT_REGISTRY: UnitsRegistry = _bootstrap_default_registry()


def parse_unit(token: str) -> Unit:
    """Resolve ``token`` against the default registry."""
    return DEFAULT_REGISTRY.parse(token)


__all__ = [
    "UnitsRegistry",
    "DEFAULT_REGISTRY",
    "normalize_symbol",
    "parse_unit",
]
