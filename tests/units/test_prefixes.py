import pytest

from dimcalc.units.prefixes import (
    PREFIX_ABBREVIATIONS,
    PREFIX_EXPONENTS,
    PREFIX_TOKENS_DESC,
    PREFIXES,
    prefix_abbreviation,
)


def test_twenty_si_prefixes():
    assert len(PREFIXES) == 20
    assert {p.exponent for p in PREFIXES} == set(PREFIX_ABBREVIATIONS)

@pytest.mark.parametrize("token,exp", [
    ("k", 3), ("kilo", 3), ("da", 1), ("deca", 1), ("deka", 1),
    ("µ", -6), ("μ", -6), ("u", -6), ("micro", -6), ("Y", 24), ("y", -24),
])
def test_exponents(token, exp):
    assert PREFIX_EXPONENTS[token] == exp

@pytest.mark.parametrize("exp,abbrev", [(3, "k"), (-6, "µ"), (1, "da"), (-2, "c"), (4, None), (0, None)])
def test_prefix_abbreviation(exp, abbrev):
    assert prefix_abbreviation(exp) == abbrev

def test_longest_tokens_first():
    lengths = [len(t) for t in PREFIX_TOKENS_DESC]
    assert lengths == sorted(lengths, reverse=True)
    assert PREFIX_TOKENS_DESC.index("da") < PREFIX_TOKENS_DESC.index("d")

def test_tables_read_only():
    with pytest.raises(TypeError):
        PREFIX_EXPONENTS["x"] = 1  # type: ignore[index]
