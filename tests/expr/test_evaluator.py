import math

import pytest

from dimcalc.core.dimensions import DIM_0, LENGTH, MASS, dim_pow
from dimcalc.core.quantity import Quantity
from dimcalc.core.unit import Unit
from dimcalc.errors import (
    ArityError,
    DomainError,
    UndefinedSymbolError,
    UnitMismatchError,
    UnknownFunctionError,
)
from dimcalc.expr.evaluator import evaluate
from dimcalc.expr.tree import Cons, Ident, Op, literal


@pytest.mark.parametrize("text,expected", [
    ("1 g", "1 g"),
    ("5 kg + 4 g", "5004 g"),
    ("5 kilograms + 4 grams", "5004 g"),
    ("5 grams - 4 grams", "1 g"),
    ("2 newton - 0.5 newton", "1500 m g s^-2"),
    ("1.5 N", "1500 m g s^-2"),
    ("2 kN - 1 centinewton", "1999990 m g s^-2"),
    ("9 m / 3 meters", "3"),
    ("2 m * 3 meters", "6 m^2"),
    ("1 - 2 - 3", "-4"),
    ("2^3^2", "512"),
    ("-2^2", "-4"),
    ("2^-1", "0.5"),
    ("(1 + 2) * 3", "9"),
])
def test_scenarios(calc, text, expected):
    assert str(calc(text)) == expected

def test_speed_in_base_units(calc):
    v = calc("90 km/h")
    assert v.dim == (1, 0, -1, 0, 0, 0, 0)
    assert v.value == pytest.approx(25.0)

def test_power_of_ten_exponent_stays_separate(calc):
    q = calc("3 Gm * 2 Gm")
    assert q.mantissa == pytest.approx(6.0)
    assert q.unit.dec_exp == 18

def test_constants(calc):
    assert calc(r"2 * \pi").value == pytest.approx(2 * math.pi)
    assert calc("e").value == pytest.approx(math.e)

def test_bare_unit_name_is_one_of_that_unit(calc):
    km = calc("km")
    assert km.dim == LENGTH
    assert km.value == pytest.approx(1000.0)

def test_variables_from_scope(scope, calc):
    scope.bind("x", Quantity(5, Unit(MASS, 3)).normalize())
    assert calc("x * 2").value == pytest.approx(10000.0)
    assert calc("x kg").dim == dim_pow(MASS, 2)

def test_scope_is_only_read(scope, calc):
    before = dict(scope)
    calc(r"\pi * 2 m")
    assert dict(scope) == before

def test_undefined_symbol(calc):
    with pytest.raises(UndefinedSymbolError) as ei:
        calc("x + 1")
    assert ei.value.name == "x"

def test_unit_mismatch(calc):
    with pytest.raises(UnitMismatchError):
        calc("1 m + 1 s")

def test_division_by_zero(calc):
    with pytest.raises(DomainError):
        calc("1 / 0")

def test_exponent_with_dimension(calc):
    with pytest.raises(DomainError):
        calc("2 ^ (1.5 m)")

def test_zero_power_of_unit(calc):
    with pytest.raises(DomainError):
        calc("(2 m)^0")

def test_fractional_power(calc):
    q = calc("(16 m^2)^0.5")
    assert q.dim == LENGTH
    assert q.value == pytest.approx(4.0)

def test_functions(calc):
    assert calc("sin(0)").value == 0.0
    assert calc("cos(0)").dim == DIM_0
    assert calc("log(100)").value == pytest.approx(2.0)
    assert calc("abs(-3 m)").value == pytest.approx(3.0)
    assert calc("max(1 m, 250 cm)").value == pytest.approx(2.5)

def test_function_errors(calc):
    with pytest.raises(UnknownFunctionError):
        calc("foo(1)")
    with pytest.raises(ArityError):
        calc("atan2(1)")
    with pytest.raises(UnitMismatchError):
        calc("sin(2 m)")
    with pytest.raises(DomainError):
        calc("ln(-1)")

def test_operator_arity_checked(scope):
    with pytest.raises(ArityError):
        evaluate(Cons(Op.ADD, (literal(1),)), scope)
    with pytest.raises(ArityError):
        evaluate(Cons(Op.NEG, (literal(1), literal(2))), scope)

def test_invalid_node(scope):
    with pytest.raises(TypeError):
        evaluate("1 + 1", scope)  # type: ignore[arg-type]

def test_ident_tree(scope):
    assert evaluate(Ident("e"), scope).value == pytest.approx(math.e)
