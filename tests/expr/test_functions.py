import math

import pytest

from dimcalc.core.dimensions import DIM_0, LENGTH, TIME
from dimcalc.core.quantity import Quantity
from dimcalc.core.unit import Unit
from dimcalc.errors import ArityError, DomainError, UnitMismatchError, UnknownFunctionError
from dimcalc.expr.functions import FUNCTIONS, UnitPolicy, call_function, lookup


def num(x):
    return Quantity(x).normalize()


def length(x, dec_exp=0):
    return Quantity(x, Unit(LENGTH, dec_exp)).normalize()


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        FUNCTIONS["sqrt"] = FUNCTIONS["abs"]  # type: ignore[index]

@pytest.mark.parametrize("name", [
    "sin", "cos", "tan", "asin", "acos", "atan", "atan2", "sinh", "cosh", "tanh",
    "exp", "ln", "log", "log2",
])
def test_transcendental_functions_take_no_units(name):
    assert FUNCTIONS[name].policy is UnitPolicy.NO_UNIT

@pytest.mark.parametrize("name", ["abs", "ceil", "floor", "round", "min", "max"])
def test_unit_preserving_functions(name):
    assert FUNCTIONS[name].policy is UnitPolicy.PRESERVE_UNIT

def test_lookup_unknown():
    with pytest.raises(UnknownFunctionError) as ei:
        lookup("sqrt")
    assert ei.value.name == "sqrt"

@pytest.mark.parametrize("name,expected", [
    ("sin", "1"),
    ("atan2", "2"),
    ("log", "1 to 2"),
    ("max", "at least 1"),
])
def test_expected_arity(name, expected):
    assert FUNCTIONS[name].expected_arity() == expected

def test_accepts():
    log = FUNCTIONS["log"]
    assert not log.accepts(0)
    assert log.accepts(1) and log.accepts(2)
    assert not log.accepts(3)
    assert FUNCTIONS["min"].accepts(10)

@pytest.mark.parametrize("name,args,expected", [
    ("sin", [math.pi / 2], 1.0),
    ("atan2", [1, 1], math.pi / 4),
    ("exp", [0], 1.0),
    ("ln", [math.e], 1.0),
    ("log", [1000], 3.0),
    ("log", [8, 2], 3.0),
    ("log2", [1024], 10.0),
    ("tanh", [0], 0.0),
])
def test_values(name, args, expected):
    r = call_function(name, [num(a) for a in args])
    assert r.dim == DIM_0
    assert r.value == pytest.approx(expected)

def test_preserve_unit_results_are_in_base_units():
    r = call_function("abs", [length(-2.5, 3)])
    assert r.dim == LENGTH
    assert r.value == pytest.approx(2500.0)
    assert r.unit.multiplier == pytest.approx(1.0)

@pytest.mark.parametrize("name,x,expected", [
    ("ceil", 2.1, 3.0),
    ("floor", 2.7, 2.0),
    ("round", 1234.56, 1235.0),
])
def test_rounding(name, x, expected):
    assert call_function(name, [length(x)]).value == pytest.approx(expected)

@pytest.mark.regression
@pytest.mark.parametrize("x,expected", [
    (0.5, 1.0),
    (1.5, 2.0),
    (2.5, 3.0),
    (-2.5, -3.0),
    (-0.4, -0.0),
    (2.4999, 2.0),
])
def test_round_halves_away_from_zero(x, expected):
    assert call_function("round", [num(x)]).value == pytest.approx(expected)

@pytest.mark.regression
@pytest.mark.parametrize("text,expected", [
    ("round(0.5)", 1.0),
    ("round(2.5)", 3.0),
    ("round(-2.5)", -3.0),
    ("round(2.5 m)", 3.0),
])
def test_round_in_expressions(calc, text, expected):
    assert calc(text).value == pytest.approx(expected)

def test_min_max_compare_across_prefixes():
    args = [length(1), length(250, -2), length(3, -3)]
    assert call_function("max", args).value == pytest.approx(2.5)
    assert call_function("min", args).value == pytest.approx(0.003)

def test_arity_error():
    with pytest.raises(ArityError):
        call_function("sin", [])
    with pytest.raises(ArityError):
        call_function("log", [num(1), num(2), num(3)])
    with pytest.raises(ArityError):
        call_function("max", [])

def test_dimensioned_argument_rejected():
    with pytest.raises(UnitMismatchError):
        call_function("exp", [length(1)])

def test_mixed_dimensions_rejected():
    with pytest.raises(UnitMismatchError):
        call_function("max", [length(1), Quantity(1, Unit(TIME))])

@pytest.mark.parametrize("name,args", [
    ("ln", [0]),
    ("ln", [-1]),
    ("asin", [2]),
    ("log", [10, 1]),
    ("exp", [1000]),
])
def test_domain_errors(name, args):
    with pytest.raises(DomainError):
        call_function(name, [num(a) for a in args])
