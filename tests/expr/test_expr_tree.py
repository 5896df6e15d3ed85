from dimcalc.core.dimensions import LENGTH
from dimcalc.core.unit import Unit
from dimcalc.expr.tree import AttachUnit, Cons, FnCall, Ident, Op, literal, rename_idents


def test_operator_arity():
    assert Op.NEG.arity == 1
    assert all(op.arity == 2 for op in Op if op is not Op.NEG)
    assert AttachUnit(Unit(LENGTH), "m").arity == 1

def test_rename_idents_walks_the_tree():
    tree = Cons(Op.MUL, (literal(2), FnCall("sin", (Ident("th"), Ident("y")))))
    renamed = rename_idents(tree, {"th": r"\theta"})
    assert renamed == Cons(Op.MUL, (literal(2), FnCall("sin", (Ident(r"\theta"), Ident("y")))))

def test_rename_idents_leaves_function_names():
    assert rename_idents(FnCall("pi", ()), {"pi": r"\pi"}) == FnCall("pi", ())

def test_rename_without_matches_is_equal():
    tree = Cons(AttachUnit(Unit(LENGTH), "m"), (Ident("x"),))
    assert rename_idents(tree, {}) == tree
