from __future__ import annotations

from enum import Enum
from typing import Any, Optional

import sympy as sp

from .config import MarkingOptions
from .monomial import SemiMonomial, Term
from .variables import VariableSet


class OpClass(Enum):
    """How the marker treats an operator application."""

    ADDITIVE = "additive"
    MULTIPLICATIVE = "multiplicative"
    POWER = "power"
    DIVISION = "division"
    SQRT = "sqrt"
    LINEAR_UNARY = "linear_unary"
    OPAQUE = "opaque"


_OPERATOR_CLASSES = {
    sp.Add: OpClass.ADDITIVE,
    sp.Mul: OpClass.MULTIPLICATIVE,
    sp.Pow: OpClass.POWER,
}


def classify(expr: sp.Expr, options: Optional[MarkingOptions] = None) -> OpClass:
    """Return the `OpClass` of a non-leaf SymPy node.

    SymPy spells ``1/b`` as ``Pow(b, -1)`` and ``sqrt(b)`` as
    ``Pow(b, 1/2)``; those two exponents select the division and square-root
    classes.
    """
    opt = options or MarkingOptions()
    kind = _OPERATOR_CLASSES.get(expr.func)
    if kind is OpClass.POWER:
        exp = expr.args[1]
        if exp == -1:
            return OpClass.DIVISION
        if exp == sp.S.Half:
            return OpClass.SQRT
        return kind
    if kind is not None:
        return kind
    if len(expr.args) == 1 and opt.is_linear_unary(expr.func):
        return OpClass.LINEAR_UNARY
    return OpClass.OPAQUE


def mark_vars(expr: Any, vars: VariableSet, options: Optional[MarkingOptions] = None) -> Any:
    """Rewrite `expr` into a tree of `Term` nodes over `SemiMonomial` leaves.

    Designated variables become ``SemiMonomial(var, 1)``, other leaves and
    opaque subexpressions become ``SemiMonomial(1, expr)``. Variables inside
    an opaque subexpression are left untouched, so its coefficient still
    "has vars" and the term ends up in the residual.
    """
    opt = options or MarkingOptions()
    expr = sp.sympify(expr)

    if expr in vars:
        return SemiMonomial(expr, sp.S.One)
    if not expr.args:
        return SemiMonomial(sp.S.One, expr)

    kind = classify(expr, opt)
    if kind is OpClass.POWER:
        base, exp = expr.args
        return Term("^", (mark_vars(base, vars, opt), mark_vars(exp, vars, opt)))
    if kind is OpClass.DIVISION:
        return Term("/", (SemiMonomial(sp.S.One, sp.S.One), mark_vars(expr.base, vars, opt)))
    if kind is OpClass.SQRT:
        return Term("^", (mark_vars(expr.base, vars, opt), SemiMonomial(sp.S.One, sp.S.Half)))
    if kind is OpClass.ADDITIVE:
        return Term("+", tuple(mark_vars(a, vars, opt) for a in expr.args))
    if kind is OpClass.MULTIPLICATIVE:
        return Term("*", tuple(mark_vars(a, vars, opt) for a in expr.args))
    if kind is OpClass.LINEAR_UNARY:
        return Term(expr.func, (mark_vars(expr.args[0], vars, opt),))
    return SemiMonomial(sp.S.One, expr)


def has_vars(expr: Any, vars: VariableSet) -> bool:
    """Return True if `expr` contains any of the designated variables."""
    expr = sp.sympify(expr)
    if expr in vars:
        return True
    return any(has_vars(arg, vars) for arg in expr.args)
