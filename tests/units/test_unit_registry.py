# Tests for dimcalc.units.registry: exact lookup, aliases, SI-prefix
# synthesis and the never-split / non-prefixable rules. Most tests use a
# fresh registry from the bootstrap helper.

import pytest

from dimcalc.core.dimensions import (
    AMOUNT,
    CURRENT,
    DIM_0,
    LENGTH,
    LUMINOUS,
    MASS,
    TEMPERATURE,
    TIME,
    dim_pow,
)
from dimcalc.core.unit import Unit
from dimcalc.errors import UnitParseError

import dimcalc.units.registry as regmod
from dimcalc.units.registry import UnitsRegistry, normalize_symbol, parse_unit

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def reg():
    """Fresh, fully-bootstrapped UnitsRegistry."""
    return regmod._bootstrap_default_registry()


FORCE = (1, 1, -2, 0, 0, 0, 0)

# ---------------------------------------------------------------------------
# Base and derived units
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("sym,dim", [
    ("m", LENGTH),
    ("g", MASS),
    ("s", TIME),
    ("A", CURRENT),
    ("K", TEMPERATURE),
    ("mol", AMOUNT),
    ("cd", LUMINOUS),
])
def test_base_units(reg, sym, dim):
    assert reg.parse(sym) == Unit(dim)

def test_mass_is_gram_based(reg):
    assert reg.parse("kg") == Unit(MASS, 3)

@pytest.mark.parametrize("sym,dim,dec_exp", [
    ("N", FORCE, 3),
    ("J", (2, 1, -2, 0, 0, 0, 0), 3),
    ("W", (2, 1, -3, 0, 0, 0, 0), 3),
    ("Pa", (-1, 1, -2, 0, 0, 0, 0), 3),
    ("Hz", (0, 0, -1, 0, 0, 0, 0), 0),
    ("C", (0, 0, 1, 1, 0, 0, 0), 0),
    ("V", (2, 1, -3, -1, 0, 0, 0), 3),
    ("Ω", (2, 1, -3, -2, 0, 0, 0), 3),
    ("kat", (0, 0, -1, 0, 0, 1, 0), 0),
    ("L", dim_pow(LENGTH, 3), -3),
])
def test_derived_units(reg, sym, dim, dec_exp):
    u = reg.parse(sym)
    assert u.dim == dim
    assert u.dec_exp == dec_exp
    assert u.multiplier == pytest.approx(1.0)

@pytest.mark.parametrize("sym", ["rad", "sr"])
def test_dimensionless_named_units(reg, sym):
    assert reg.parse(sym).is_dimensionless

@pytest.mark.parametrize("sym,dec_exp,multiplier", [
    ("min", 1, 6.0),
    ("h", 3, 3.6),
    ("d", 4, 8.64),
    ("wk", 5, 6.048),
])
def test_non_decimal_units(reg, sym, dec_exp, multiplier):
    u = reg.parse(sym)
    assert u.dim == TIME
    assert u.dec_exp == dec_exp
    assert u.multiplier == pytest.approx(multiplier)

def test_non_decimal_multipliers_are_normalized(reg):
    for u in reg.all().values():
        assert 1.0 <= u.multiplier < 10.0

# ---------------------------------------------------------------------------
# Aliases
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("alias,canonical", [
    ("meters", "m"),
    ("grams", "g"),
    ("seconds", "s"),
    ("hour", "h"),
    ("hours", "h"),
    ("newton", "N"),
    ("ohm", "Ω"),
    ("litre", "L"),
    ("years", "yr"),
])
def test_aliases(reg, alias, canonical):
    assert reg.parse(alias) == reg.parse(canonical)
    assert reg.aliases()[alias] == canonical

def test_alias_to_unknown_unit_rejected():
    with pytest.raises(ValueError):
        UnitsRegistry({"m": Unit(LENGTH)}, {"meter": "metre"})

def test_alias_shadowing_unit_rejected():
    with pytest.raises(ValueError):
        UnitsRegistry({"m": Unit(LENGTH), "s": Unit(TIME)}, {"s": "m"})

def test_tables_are_read_only(reg):
    with pytest.raises(TypeError):
        reg.all()["x"] = Unit(DIM_0)  # type: ignore[index]
    with pytest.raises(TypeError):
        reg.aliases()["x"] = "m"  # type: ignore[index]

# ---------------------------------------------------------------------------
# Prefix synthesis
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("token,base,exp", [
    ("km", "m", 3),
    ("mm", "m", -3),
    ("µm", "m", -6),
    ("μm", "m", -6),
    ("um", "m", -6),
    ("ns", "s", -9),
    ("dam", "m", 1),
    ("kN", "N", 3),
    ("MHz", "Hz", 6),
    ("mL", "L", -3),
    ("kilometers", "m", 3),
    ("centinewton", "N", -2),
    ("milliseconds", "s", -3),
    ("dekameter", "m", 1),
])
def test_prefixed_tokens(reg, token, base, exp):
    assert reg.parse(token) == reg.parse(base).with_prefix(exp)

def test_prefixed_tokens_are_not_cached_into_table(reg):
    reg.parse("km")
    assert "km" not in reg.all()

@pytest.mark.parametrize("token", ["hour", "hours", "day", "mole", "pascal", "katal"])
def test_never_split_words(reg, token):
    u = reg.parse(token)
    assert u == reg.lookup(token)

@pytest.mark.parametrize("token", ["kh", "mmin", "kyr", "khours", "mamu"])
def test_non_prefixable_units(reg, token):
    with pytest.raises(UnitParseError):
        reg.parse(token)

def test_is_non_prefixable_covers_aliases(reg):
    assert reg.is_non_prefixable("h")
    assert reg.is_non_prefixable("hours")
    assert not reg.is_non_prefixable("m")

def test_exact_symbol_wins_over_prefix(reg):
    # candela, not centi-day
    assert reg.parse("cd") == Unit(LUMINOUS)
    assert reg.parse("Pa").dim == (-1, 1, -2, 0, 0, 0, 0)

# ---------------------------------------------------------------------------
# Errors, normalization, compound lookups
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("token", ["ft", "kfoo", "k", "", "   "])
def test_unknown_tokens(reg, token):
    with pytest.raises(UnitParseError):
        reg.parse(token)

def test_unknown_token_error_names_the_token(reg):
    with pytest.raises(UnitParseError) as ei:
        reg.parse("furlong")
    assert ei.value.token == "furlong"
    assert "furlong" in str(ei.value)

def test_normalize_symbol():
    assert normalize_symbol("  km ") == "km"
    assert normalize_symbol("") == ""
    # combining sequence collapses to the precomposed form
    assert normalize_symbol("Å") == "Å"

def test_get_accepts_compound_expressions(reg):
    assert reg.get("kg*m/s^2") == reg.parse("N")
    assert reg.get("km h^-1") == reg.parse("km") / reg.parse("h")

def test_has_and_contains(reg):
    assert reg.has("km")
    assert "m/s" in reg
    assert not reg.has("parsec")

def test_parse_unit_uses_default_registry():
    assert parse_unit("km") == Unit(LENGTH, 3)
    assert regmod.DEFAULT_REGISTRY.parse("g") == Unit(MASS)
