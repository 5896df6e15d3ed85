import pytest

from dimcalc.core.dimensions import LENGTH, MASS
from dimcalc.core.quantity import Quantity
from dimcalc.core.unit import EMPTY, Unit


@pytest.mark.parametrize("quantity,text", [
    (Quantity(5004, Unit(MASS)), "5004 g"),
    (Quantity(1.5, Unit((1, 1, -2, 0, 0, 0, 0), 3)), "1500 m g s^-2"),
    (Quantity(3), "3"),
    (Quantity(2.5, Unit(LENGTH, -3)), "0.0025 m"),
    (Quantity(1, Unit(MASS)), "1 g"),
])
def test_str(quantity, text):
    assert str(quantity) == text

def test_str_uses_fifteen_significant_digits():
    assert str(Quantity(1 / 3)) == "0.333333333333333"

def test_repr_shows_mantissa_and_unit():
    r = repr(Quantity(2, Unit(LENGTH, 3)))
    assert r.startswith("Quantity(2.0, Unit(")
    assert "dec_exp=3" in r

def test_default_unit_is_empty():
    assert Quantity(7).unit is EMPTY
