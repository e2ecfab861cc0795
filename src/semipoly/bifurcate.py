from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

import sympy as sp

from .config import MarkingOptions
from .degrees import degree_map, monomial_from_degrees, natural_degree
from .log_config import logger
from .marking import has_vars
from .monomial import all_terms, is_semimonomial, isop, unwrap
from .rewrite import mark_and_exponentiate
from .variables import VariableSet


def semipolyform_terms(expr: Any, vars: VariableSet, options: Optional[MarkingOptions] = None) -> List[Any]:
    """Mark and normalize `expr`, then return its flat list of additive terms."""
    expr = mark_and_exponentiate(expr, vars, options)
    if isop(expr, "+"):
        return list(all_terms(expr))
    if is_semimonomial(expr) and expr.is_real() and expr.real() == 0:
        return []
    return [expr]


def is_bounded_monomial(m: Any, vars: VariableSet, degree_bound, consts: bool = True) -> bool:
    """Return True if `m` is a monomial term of total degree <= `degree_bound`.

    Constant terms (monomial ``1``) qualify only when `consts` is True.
    In every case the coefficient must be free of the designated variables,
    and the monomial must be a plain product of non-negative integer powers
    of designated variables. SymPy may merge products of non-symbol
    variables into something else (``sqrt(z)**2`` is ``z``); such terms
    are rejected.
    """
    if not is_semimonomial(m):
        return False
    degrees = degree_map(m.p, vars)
    if not degrees:
        return consts and not has_vars(m.coeff, vars)
    if any(var not in vars for var in degrees):
        return False

    naturals = {}
    for var, deg in degrees.items():
        n = natural_degree(deg)
        if n is None:
            return False
        naturals[var] = n
    if sum(naturals.values()) > degree_bound:
        return False
    if monomial_from_degrees(naturals) != m.p:
        return False
    return not has_vars(m.coeff, vars)


def cautious_sum(terms: Sequence[Any]) -> sp.Expr:
    """Sum the unwrapped terms; an empty list sums to 0."""
    if not terms:
        return sp.S.Zero
    return sp.Add(*[unwrap(t) for t in terms])


def bifurcate_terms(
    terms: Sequence[Any],
    vars: VariableSet,
    degree,
    consts: bool = True,
) -> Tuple[Dict[sp.Expr, sp.Expr], sp.Expr]:
    """Split `terms` into a monomial -> coefficient dict and a residual."""
    monomials = []
    nonlinear = []
    for t in terms:
        if is_bounded_monomial(t, vars, degree, consts=consts):
            monomials.append(t)
        else:
            nonlinear.append(t)

    coeffs: Dict[sp.Expr, sp.Expr] = {}
    for m in monomials:
        if m.p in coeffs:
            coeffs[m.p] += m.coeff
        else:
            coeffs[m.p] = m.coeff

    logger.debug(
        "bifurcated %d terms: %d monomials, %d residual terms",
        len(terms),
        len(monomials),
        len(nonlinear),
    )
    if not nonlinear:
        return coeffs, sp.S.Zero
    return coeffs, cautious_sum(nonlinear)
