import pytest
import sympy as sp

from tensor_calc.errors import ComputationError
from tensor_calc.symbolic import (ONE, ZERO, Add, Constant, Divide, Function, Multiply, One,
                                  Power, Subtract, Variable, Zero, parse, sympify_text)

x = Variable("x")
y = Variable("y")


# ---------------- parse ----------------

@pytest.mark.parametrize("text, expected", [
    ("", ZERO),
    ("   ", ZERO),
    ("0", ZERO),
    ("1", ONE),
    ("0.0", Constant(0.0)),
    ("2.5", Constant(2.5)),
    ("-1", Constant(-1.0)),
    ("1e3", Constant(1000.0)),
    ("theta", Variable("theta")),
    ("  r ", Variable("r")),
    ("r^2", Power(Variable("r"), Constant(2.0))),
    ("sin(theta)", Function("sin", (Variable("theta"),))),
    ("f(x, y^2)", Function("f", (x, Power(y, Constant(2.0))))),
    ("f()", Function("f", ())),
])
def test_parse_recognized_forms(text, expected):
    assert parse(text) == expected


@pytest.mark.parametrize("text", [
    "r^2 * sin(theta)^2",
    "-(1 - 2*M/r)",
    "sin(cos(x))",
    "a(t)^2",
    "x^y",
    "1_000",
])
def test_parse_falls_back_to_opaque_variable(text):
    assert parse(text) == Variable(text)


def test_parse_sentinels_are_singletons_by_value():
    assert parse("0") == Zero()
    assert parse("1") == One()
    assert parse("0") != Constant(0.0)


# ---------------- format ----------------

@pytest.mark.parametrize("expr, text", [
    (Constant(2.0), "2"),
    (Constant(-3.0), "-3"),
    (Constant(0.5), "0.5"),
    (Add(x, y), "(x + y)"),
    (Subtract(ZERO, x), "(0 - x)"),
    (Multiply(Constant(2.0), Power(x, Constant(1.0))), "(2 * x^1)"),
    (Divide(ONE, Power(x, Constant(2.0))), "(1 / x^2)"),
    (Power(Add(x, y), Constant(2.0)), "(x + y)^2"),
    (Function("f", (x, y)), "f(x, y)"),
    (Function("f", ()), "f()"),
])
def test_format(expr, text):
    assert expr.format() == text
    assert str(expr) == text


def test_leaves_survive_text_round_trip():
    for expr in [ZERO, ONE, Constant(2.5), x, Power(x, Constant(3.0)), Function("sin", (x,))]:
        assert parse(str(expr)) == expr


# ---------------- simplify ----------------

@pytest.mark.parametrize("expr, expected", [
    (Add(Constant(2.0), Constant(3.0)), Constant(5.0)),
    (Add(x, ZERO), x),
    (Add(ZERO, x), x),
    (Subtract(x, ZERO), x),
    (Subtract(Constant(5.0), Constant(3.0)), Constant(2.0)),
    (Multiply(x, ZERO), ZERO),
    (Multiply(ZERO, x), ZERO),
    (Multiply(x, ONE), x),
    (Multiply(ONE, x), x),
    (Multiply(Constant(2.0), Constant(4.0)), Constant(8.0)),
    (Divide(x, ONE), x),
    (Divide(ZERO, x), ZERO),
    (Divide(Constant(1.0), Constant(4.0)), Constant(0.25)),
    (Power(x, ZERO), ONE),
    (Power(x, ONE), x),
    (Power(ZERO, x), ZERO),
    (Power(ONE, x), ONE),
    (Power(ZERO, ZERO), ONE),
    (Power(Constant(2.0), Constant(3.0)), Constant(8.0)),
    (Function("sin", (Add(x, ZERO),)), Function("sin", (x,))),
])
def test_simplify_identities(expr, expected):
    assert expr.simplify() == expected


def test_simplify_keeps_division_by_constant_zero_symbolic():
    expr = Divide(Constant(1.0), Constant(0.0))
    assert expr.simplify() == expr


def test_simplify_keeps_undefined_constant_power():
    expr = Power(Constant(-8.0), Constant(1.0 / 3.0))
    assert expr.simplify() == expr


def test_simplify_keeps_zero_minus_x():
    assert Subtract(ZERO, x).simplify() == Subtract(ZERO, x)


def test_simplify_is_a_single_pass():
    # the folded Constant(0.0) is not the Zero sentinel, so x * 0.0 stays
    expr = Multiply(Add(Constant(2.0), Constant(-2.0)), x)
    assert expr.simplify() == Multiply(Constant(0.0), x)
    assert not expr.simplify().is_zero()


def test_simplify_does_not_cancel_symbolically():
    assert Subtract(x, x).simplify() == Subtract(x, x)
    assert not Subtract(x, x).simplify().is_zero()


@pytest.mark.parametrize("expr", [
    Add(Add(x, ZERO), Multiply(ONE, y)),
    Multiply(Add(Constant(2.0), Constant(-2.0)), x),
    Subtract(ZERO, Divide(Multiply(x, ONE), Power(y, ONE))),
    Power(Power(x, Constant(2.0)), Constant(3.0)),
    Divide(Subtract(Multiply(ZERO, x), Multiply(ONE, ONE)), Power(x, Constant(2.0))),
    Function("f", (Add(ZERO, x), Multiply(y, ZERO))),
    Power(Divide(ZERO, Constant(0.0)), Constant(2.0)),
    Add(Constant(1.0), Multiply(Constant(2.0), Constant(0.5))),
])
def test_simplify_is_idempotent(expr):
    once = expr.simplify()
    assert once.simplify() == once


# ---------------- derivative ----------------

def test_variable_derivative():
    assert x.derivative("x") == ONE
    assert x.derivative("y") == ZERO


def test_constant_and_sentinel_derivatives_are_zero():
    for expr in [Constant(4.0), ZERO, ONE]:
        assert expr.derivative("x") == ZERO


def test_sum_and_difference_are_linear():
    assert Add(x, y).derivative("x").simplify() == ONE
    assert Subtract(y, x).derivative("x").simplify() == Subtract(ZERO, ONE)


def test_product_rule():
    assert Multiply(x, y).derivative("x").simplify() == y


def test_quotient_rule():
    derivative = Divide(ONE, x).derivative("x").simplify()
    assert str(derivative) == "((0 - 1) / x^2)"


def test_power_rule_with_constant_exponent():
    assert str(parse("x^3").derivative("x").simplify()) == "(3 * x^2)"


def test_sentinel_exponent_differentiates_to_zero():
    # only Constant exponents take the power rule
    assert Power(x, ONE).derivative("x") == ZERO
    assert Power(x, ZERO).derivative("x").simplify().is_zero()


def test_power_with_variable_exponent_differentiates_to_zero():
    assert Power(x, y).derivative("x") == ZERO
    assert Power(Constant(2.0), x).derivative("x") == ZERO


def test_sin_and_cos_chain_rule():
    assert str(Function("sin", (x,)).derivative("x").simplify()) == "cos(x)"
    assert str(Function("cos", (x,)).derivative("x").simplify()) == "(0 - sin(x))"
    nested = Function("sin", (Power(x, Constant(2.0)),))
    assert str(nested.derivative("x").simplify()) == "(cos(x^2) * (2 * x^1))"


def test_other_functions_are_locally_constant():
    assert Function("exp", (x,)).derivative("x") == ZERO
    assert Function("sin", (x, y)).derivative("x") == ZERO


def test_opaque_variable_differentiates_to_zero():
    assert parse("r^2 * sin(theta)^2").derivative("r") == ZERO


def test_derivative_does_not_mutate_input():
    expr = Multiply(x, Power(x, Constant(2.0)))
    before = str(expr)
    expr.derivative("x").simplify()
    assert str(expr) == before


# ---------------- is_zero ----------------

def test_is_zero():
    assert ZERO.is_zero()
    assert Constant(0.0).is_zero()
    assert Constant(-0.0).is_zero()
    assert not ONE.is_zero()
    assert not Variable("0 * x").is_zero()


# ---------------- sympy bridge ----------------

def test_to_sympy():
    theta = sp.Symbol("theta")
    assert parse("sin(theta)").to_sympy() == sp.sin(theta)
    assert Divide(ONE, Variable("a")).to_sympy() == 1 / sp.Symbol("a")
    assert Function("g", (x,)).to_sympy() == sp.Function("g")(sp.Symbol("x"))
    assert Constant(0.5).to_sympy() == sp.Float(0.5)


def test_to_latex():
    assert parse("r^2").to_latex() == "r^{2}"


def test_sympify_text_reads_opaque_terms():
    r, M = sp.symbols("r M")
    assert sympify_text("-(1 - 2*M/r)") == -(1 - 2 * M / r)
    assert sympify_text(parse("r^2 * sin(theta)^2")) == r**2 * sp.sin(sp.Symbol("theta"))**2


def test_sympify_text_keeps_single_letters_as_symbols():
    assert sympify_text("Q^2") == sp.Symbol("Q")**2


def test_sympify_text_reads_rendered_stage_output():
    r = sp.Symbol("r")
    assert sp.simplify(sympify_text("(0.5 * ((1 / r^2) * (2 * r^1)))") - 1 / r) == 0


def test_sympify_text_rejects_bad_syntax():
    with pytest.raises(ComputationError):
        sympify_text("(r +")


def test_sympify_text_name_used_bare_and_called():
    a, t = sp.symbols("a t")
    assert sympify_text("(a * a(t))") == a * sp.Function("a")(t)


def test_parse_rejects_non_ascii_digits():
    assert parse("١") == Variable("١")
    assert parse("２.5") == Variable("２.5")


def test_opaque_variable_to_sympy_reads_structure():
    r, M = sp.symbols("r M")
    assert parse("-(1 - 2*M/r)").to_sympy() == 2 * M / r - 1
    assert Variable("theta").to_sympy() == sp.Symbol("theta")
