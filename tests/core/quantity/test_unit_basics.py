import math

import pytest

from dimcalc.core.dimensions import DIM_0, LENGTH, MASS, TIME
from dimcalc.core.unit import EMPTY, Unit


def test_defaults_are_the_empty_unit():
    u = Unit()
    assert u == EMPTY
    assert u.dim == DIM_0
    assert u.dec_exp == 0
    assert u.multiplier == 1.0
    assert u.is_dimensionless

def test_plain_tuple_dimension_is_coerced():
    u = Unit((1, 0, 0, 0, 0, 0, 0), 3)
    assert u.dim == LENGTH
    assert u == Unit(LENGTH, 3)

@pytest.mark.parametrize("mult", [0.0, math.inf, math.nan])
def test_invalid_multiplier_rejected(mult):
    with pytest.raises(ValueError):
        Unit(LENGTH, 0, mult)

def test_non_integer_dec_exp_rejected():
    with pytest.raises(ValueError):
        Unit(LENGTH, 1.5)

def test_frozen():
    u = Unit(LENGTH)
    with pytest.raises(AttributeError):
        u.dec_exp = 3  # type: ignore[misc]

def test_dimensionless_unit_may_carry_scale():
    u = Unit(DIM_0, 2, 5.0)
    assert u.is_dimensionless
    assert u.scale == pytest.approx(500.0)

def test_compatibility_ignores_scale():
    assert Unit(LENGTH, 3).is_compatible(Unit(LENGTH, -2, 2.54))
    assert not Unit(LENGTH).is_compatible(Unit(TIME))

def test_equality_tolerates_multiplier_drift():
    a = Unit(TIME, 3, 3.6)
    b = Unit(TIME, 3, 3.6 * (1 + 1e-14))
    assert a == b
    assert hash(a) == hash(b)

def test_equality_distinguishes_scale():
    assert Unit(LENGTH, 3) != Unit(LENGTH, 0)
    assert Unit(TIME, 1, 6.0) != Unit(TIME, 1, 1.0)
    assert Unit(LENGTH) != Unit(MASS)

def test_normalized_folds_power_of_ten():
    assert Unit(TIME, 0, 3600.0).normalized() == Unit(TIME, 3, 3.6)
    assert Unit(LENGTH, 0, 0.0254).normalized() == Unit(LENGTH, -2, 2.54)
    assert Unit(LENGTH, 3).normalized() == Unit(LENGTH, 3)

def test_parse_classmethod_uses_default_registry():
    assert Unit.parse("km") == Unit(LENGTH, 3)

@pytest.mark.parametrize("unit,text", [
    (EMPTY, ""),
    (Unit(LENGTH), "m"),
    (Unit(LENGTH, 3), "1000 m"),
    (Unit(TIME, 3, 3.6), "3600 s"),
])
def test_str(unit, text):
    assert str(unit) == text
