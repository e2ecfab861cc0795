"""Exponent bookkeeping for monomials.

A monomial built from designated variables is described by its *degree
map*: a dict ``{variable: exponent}``. SymPy has no dedicated division
node; ``x/y`` is ``Mul(x, Pow(y, -1))``, so the numerator/denominator split
falls out of the `Mul` and `Pow` cases below.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

import sympy as sp


def degree_map(expr, vars=None) -> Dict[sp.Expr, sp.Expr]:
    """Return the exponent of every variable-like factor of `expr`.

    - numbers have an empty map,
    - a member of `vars` is a single factor of degree 1, even when it is
      itself a power (such as ``sqrt(z)``),
    - a `Mul` merges the maps of its factors by summation,
    - a `Pow` scales the map of its base by the exponent,
    - anything else is a single factor of degree 1.
    """
    expr = sp.sympify(expr)
    if expr.is_Number:
        return {}
    if vars is not None and expr in vars:
        return {expr: sp.S.One}
    if expr.is_Mul:
        out: Dict[sp.Expr, sp.Expr] = {}
        for factor in expr.args:
            for var, deg in degree_map(factor, vars).items():
                out[var] = out.get(var, sp.S.Zero) + deg
        return out
    if expr.is_Pow:
        base, exp = expr.args
        return {var: deg * exp for var, deg in degree_map(base, vars).items()}
    return {expr: sp.S.One}


def total_degree(expr, vars=None) -> sp.Expr:
    """Sum of the exponents in `degree_map(expr, vars)` (0 for numbers)."""
    degrees = degree_map(expr, vars)
    if not degrees:
        return sp.S.Zero
    return sum(degrees.values(), sp.S.Zero)


def integral_value(num) -> Optional[int]:
    """Return a SymPy number as a Python int if it is integral, else None.

    Integral floats count: ``Float(2.0)`` gives ``2``. SymPy does not
    compare ``Float(2.0)`` equal to ``2``, so floats are tested through
    `float.is_integer`.
    """
    num = sp.sympify(num)
    if not num.is_Number or not num.is_finite:
        return None
    if num.is_Integer:
        return int(num)
    if num.is_Float and float(num).is_integer():
        return int(num)
    return None


def natural_degree(deg) -> Optional[int]:
    """Return `deg` as a Python int if it is a non-negative integer, else None."""
    n = integral_value(deg)
    if n is None or n < 0:
        return None
    return n


def monomial_from_degrees(degrees: Mapping[sp.Expr, sp.Expr]) -> sp.Expr:
    """Rebuild the canonical product of powers described by `degrees`."""
    return sp.Mul(*[var ** deg for var, deg in degrees.items()])
