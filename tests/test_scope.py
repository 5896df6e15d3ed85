import math

import pytest

from dimcalc.core.dimensions import LENGTH
from dimcalc.core.quantity import Quantity
from dimcalc.core.unit import Unit
from dimcalc.scope import CONSTANTS, Scope


def test_constants():
    s = Scope.with_constants()
    assert set(s) == set(CONSTANTS) == {r"\pi", "e"}
    assert s[r"\pi"].value == pytest.approx(math.pi)
    assert s["e"].is_dimensionless

def test_bind_and_rebind():
    s = Scope()
    s.bind("x", Quantity(1))
    s.bind("y", Quantity(2))
    s.bind("x", Quantity(3, Unit(LENGTH)))
    assert len(s) == 2
    assert list(s) == ["y", "x"]
    assert s["x"].dim == LENGTH

def test_missing_name():
    assert Scope().get("x") is None
    with pytest.raises(KeyError):
        Scope()["x"]

def test_copy_is_independent():
    s = Scope.with_constants()
    c = s.copy()
    c.bind("x", Quantity(1))
    assert "x" in c and "x" not in s

def test_repr():
    s = Scope()
    s.bind("x", Quantity(2, Unit(LENGTH)))
    assert repr(s) == "Scope(x=2 m)"
