"""
Expression algebra used by the curvature pipeline.

A deliberately small computer-algebra system: an immutable expression tree
over variables, constants, the four arithmetic operators, powers and named
functions, plus the ``Zero``/``One`` sentinels that make identity
simplification a type check.

Operations:
  parse       - total text -> Expression reader (unparseable text becomes an opaque Variable)
  simplify    - one bottom-up pass of constant folding and identity rules
  derivative  - symbolic partial derivative with respect to a variable name
  is_zero     - exact check for Zero / Constant(0.0), no cancellation detection
  format      - fully parenthesized infix rendering (also ``str(expr)``)
  to_sympy    - bridge into sympy for LaTeX export and numeric evaluation
  sympify_text - read rendered text (opaque terms included) with sympy's parser
"""
import math
import re
from dataclasses import dataclass
from tokenize import TokenError
from typing import ClassVar, Optional, Tuple, Union

import sympy as sp
from sympy.parsing.sympy_parser import convert_xor, parse_expr, standard_transformations

from .errors import ComputationError

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_POWER = re.compile(r"([A-Za-z_][A-Za-z0-9_]*)\^(\d+)")
_FUNCTION = re.compile(r"([A-Za-z_][A-Za-z0-9_]*)\(([^()]*)\)")
# Bare names (not followed by "(") for sympify_text.
_SYMBOL_NAME = re.compile(r"\b([A-Za-z_][A-Za-z0-9_]*)\b(?!\s*\()")
_CALLED_NAME = re.compile(r"\b([A-Za-z_][A-Za-z0-9_]*)\s*\(")
_TRANSFORMATIONS = standard_transformations + (convert_xor,)

# Function names with a sympy counterpart; everything else becomes an undefined sympy Function.
_SYMPY_FUNCTIONS = {
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "exp": sp.exp,
    "log": sp.log,
    "sqrt": sp.sqrt,
}


class Expression:
    """
    Base class of the expression tree.

    Nodes are frozen dataclasses: structural equality and hashing come for
    free and every transform returns a new tree.
    """

    def simplify(self) -> 'Expression':
        return self

    def derivative(self, var: str) -> 'Expression':
        raise NotImplementedError

    def is_zero(self) -> bool:
        return False

    def format(self) -> str:
        raise NotImplementedError

    def to_sympy(self) -> sp.Expr:
        raise NotImplementedError

    def to_latex(self) -> str:
        """
        Render the expression as LaTeX through sympy.
        """
        return sp.latex(self.to_sympy())

    def __str__(self) -> str:
        return self.format()


# ---------------- Leaves ----------------

@dataclass(frozen=True)
class Zero(Expression):
    """Additive identity sentinel."""

    def derivative(self, var: str) -> Expression:
        return ZERO

    def is_zero(self) -> bool:
        return True

    def format(self) -> str:
        return "0"

    def to_sympy(self) -> sp.Expr:
        return sp.Integer(0)


@dataclass(frozen=True)
class One(Expression):
    """Multiplicative identity sentinel."""

    def derivative(self, var: str) -> Expression:
        return ZERO

    def format(self) -> str:
        return "1"

    def to_sympy(self) -> sp.Expr:
        return sp.Integer(1)


ZERO = Zero()
ONE = One()


@dataclass(frozen=True)
class Variable(Expression):
    name: str

    def derivative(self, var: str) -> Expression:
        return ONE if self.name == var else ZERO

    def format(self) -> str:
        return self.name

    def to_sympy(self) -> sp.Expr:
        if _IDENTIFIER.fullmatch(self.name):
            return sp.Symbol(self.name)
        # opaque text from the parser fallback
        return sympify_text(self.name)


@dataclass(frozen=True)
class Constant(Expression):
    value: float

    def __post_init__(self):
        object.__setattr__(self, "value", float(self.value))

    def derivative(self, var: str) -> Expression:
        return ZERO

    def is_zero(self) -> bool:
        return self.value == 0.0

    def format(self) -> str:
        if _is_integral(self.value):
            return str(int(self.value))
        return repr(self.value)

    def to_sympy(self) -> sp.Expr:
        if _is_integral(self.value):
            return sp.Integer(int(self.value))
        return sp.Float(self.value)


def _is_integral(value: float) -> bool:
    return math.isfinite(value) and value.is_integer()


# ---------------- Binary operators ----------------

@dataclass(frozen=True)
class BinaryOperation(Expression):
    left: Expression
    right: Expression
    operator: ClassVar[str] = "?"

    def format(self) -> str:
        return f"({self.left.format()} {self.operator} {self.right.format()})"


@dataclass(frozen=True)
class Add(BinaryOperation):
    operator: ClassVar[str] = "+"

    def simplify(self) -> Expression:
        left = self.left.simplify()
        right = self.right.simplify()
        if isinstance(left, Zero):
            return right
        if isinstance(right, Zero):
            return left
        if isinstance(left, Constant) and isinstance(right, Constant):
            return Constant(left.value + right.value)
        return Add(left, right)

    def derivative(self, var: str) -> Expression:
        return Add(self.left.derivative(var), self.right.derivative(var))

    def to_sympy(self) -> sp.Expr:
        return self.left.to_sympy() + self.right.to_sympy()


@dataclass(frozen=True)
class Subtract(BinaryOperation):
    operator: ClassVar[str] = "-"

    def simplify(self) -> Expression:
        left = self.left.simplify()
        right = self.right.simplify()
        if isinstance(right, Zero):
            return left
        if isinstance(left, Constant) and isinstance(right, Constant):
            return Constant(left.value - right.value)
        # 0 - x stays a Subtract: there is no Negate node
        return Subtract(left, right)

    def derivative(self, var: str) -> Expression:
        return Subtract(self.left.derivative(var), self.right.derivative(var))

    def to_sympy(self) -> sp.Expr:
        return self.left.to_sympy() - self.right.to_sympy()


@dataclass(frozen=True)
class Multiply(BinaryOperation):
    operator: ClassVar[str] = "*"

    def simplify(self) -> Expression:
        left = self.left.simplify()
        right = self.right.simplify()
        if isinstance(left, Zero) or isinstance(right, Zero):
            return ZERO
        if isinstance(left, One):
            return right
        if isinstance(right, One):
            return left
        if isinstance(left, Constant) and isinstance(right, Constant):
            return Constant(left.value * right.value)
        return Multiply(left, right)

    def derivative(self, var: str) -> Expression:
        # (fg)' = f'g + fg'
        return Add(
            Multiply(self.left.derivative(var), self.right),
            Multiply(self.left, self.right.derivative(var)),
        )

    def to_sympy(self) -> sp.Expr:
        return self.left.to_sympy() * self.right.to_sympy()


@dataclass(frozen=True)
class Divide(BinaryOperation):
    operator: ClassVar[str] = "/"

    def simplify(self) -> Expression:
        left = self.left.simplify()
        right = self.right.simplify()
        if isinstance(left, Zero):
            return ZERO
        if isinstance(right, One):
            return left
        if isinstance(left, Constant) and isinstance(right, Constant) and right.value != 0.0:
            return Constant(left.value / right.value)
        return Divide(left, right)

    def derivative(self, var: str) -> Expression:
        # (f/g)' = (f'g - fg') / g^2
        return Divide(
            Subtract(
                Multiply(self.left.derivative(var), self.right),
                Multiply(self.left, self.right.derivative(var)),
            ),
            Power(self.right, Constant(2.0)),
        )

    def to_sympy(self) -> sp.Expr:
        return self.left.to_sympy() / self.right.to_sympy()


@dataclass(frozen=True)
class Power(BinaryOperation):
    operator: ClassVar[str] = "^"

    @property
    def base(self) -> Expression:
        return self.left

    @property
    def exponent(self) -> Expression:
        return self.right

    def format(self) -> str:
        return f"{self.left.format()}^{self.right.format()}"

    def simplify(self) -> Expression:
        base = self.left.simplify()
        exponent = self.right.simplify()
        if isinstance(exponent, Zero):
            return ONE
        if isinstance(exponent, One):
            return base
        if isinstance(base, Zero):
            return ZERO
        if isinstance(base, One):
            return ONE
        if isinstance(base, Constant) and isinstance(exponent, Constant):
            folded = _fold_power(base.value, exponent.value)
            if folded is not None:
                return Constant(folded)
        return Power(base, exponent)

    def derivative(self, var: str) -> Expression:
        if not isinstance(self.right, Constant):
            # No logarithmic differentiation; sentinel exponents are not Constants either.
            return ZERO
        n = self.right.value
        # (f^n)' = n * f^(n-1) * f'
        return Multiply(
            Multiply(Constant(n), Power(self.left, Constant(n - 1.0))),
            self.left.derivative(var),
        )

    def to_sympy(self) -> sp.Expr:
        return self.left.to_sympy() ** self.right.to_sympy()


def _fold_power(base: float, exponent: float) -> Optional[float]:
    try:
        value = math.pow(base, exponent)
    except (ValueError, OverflowError):
        return None
    return value if math.isfinite(value) else None


# ---------------- Functions ----------------

@dataclass(frozen=True)
class Function(Expression):
    name: str
    args: Tuple[Expression, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))

    def simplify(self) -> Expression:
        return Function(self.name, tuple(arg.simplify() for arg in self.args))

    def derivative(self, var: str) -> Expression:
        if len(self.args) == 1:
            inner = self.args[0].derivative(var)
            if self.name == "sin":
                return Multiply(Function("cos", self.args), inner)
            if self.name == "cos":
                return Multiply(Subtract(ZERO, Function("sin", self.args)), inner)
        # Unknown functions are treated as locally constant.
        return ZERO

    def format(self) -> str:
        return f"{self.name}({', '.join(arg.format() for arg in self.args)})"

    def to_sympy(self) -> sp.Expr:
        if not self.args:
            return sp.Symbol(self.format())
        func = _SYMPY_FUNCTIONS.get(self.name) or sp.Function(self.name)
        return func(*(arg.to_sympy() for arg in self.args))


# ---------------- Parsing ----------------

def _parse_float(text: str) -> Optional[float]:
    if "_" in text or not text.isascii():
        return None
    try:
        return float(text)
    except ValueError:
        return None


def parse(text: str) -> Expression:
    """
    Read an expression from text. Never fails.

    Recognized forms, in order: empty text (Zero), "0" / "1" (sentinels),
    float literals, identifiers, ``name^digits`` and ``name(arg, ...)`` with a
    single unnested argument group. Anything else, sums and products
    included, is kept verbatim as an opaque Variable.
    """
    text = text.strip()
    if not text or text == "0":
        return ZERO
    if text == "1":
        return ONE

    value = _parse_float(text)
    if value is not None:
        return Constant(value)

    if _IDENTIFIER.fullmatch(text):
        return Variable(text)

    match = _POWER.fullmatch(text)
    if match:
        return Power(Variable(match.group(1)), Constant(float(match.group(2))))

    match = _FUNCTION.fullmatch(text)
    if match:
        name, inner = match.groups()
        args = tuple(parse(arg) for arg in inner.split(",")) if inner.strip() else ()
        return Function(name, args)

    return Variable(text)


def sympify_text(expr: Union[Expression, str]) -> sp.Expr:
    """
    Read an Expression or stored component text with sympy's own parser.

    Unlike ``parse`` this understands full infix syntax, so opaque terms and
    rendered stage output become real sympy expressions. Every bare name is a
    Symbol (never a sympy object such as ``Q`` or ``S``) unless the same name
    is also called, as in ``a * a(t)``, in which case it stays a function.

    Raises:
        ComputationError: the text is not valid infix syntax.
    """
    text = expr if isinstance(expr, str) else expr.format()
    called = set(_CALLED_NAME.findall(text))
    names = {name: sp.Symbol(name) for name in _SYMBOL_NAME.findall(text) if name not in called}
    try:
        return parse_expr(text, local_dict=names, transformations=_TRANSFORMATIONS)
    except (SyntaxError, TypeError, TokenError, sp.SympifyError) as exc:
        raise ComputationError(f"Cannot read '{text}' with sympy: {exc}") from exc


__all__ = [
    "Expression", "Zero", "One", "ZERO", "ONE", "Variable", "Constant",
    "BinaryOperation", "Add", "Subtract", "Multiply", "Divide", "Power",
    "Function", "parse", "sympify_text",
]

# End of symbolic.py
