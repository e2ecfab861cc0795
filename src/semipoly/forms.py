"""Public entry points: semi-polynomial, linear and quadratic forms.

All builders share one primitive: mark the expression, normalize it,
flatten it into terms and bifurcate the terms into a monomial dictionary
and a residual. The linear and quadratic builders then re-index the
dictionary keys against the caller's variable order.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

import sympy as sp

from .bifurcate import bifurcate_terms, semipolyform_terms
from .config import MarkingOptions
from .degrees import total_degree
from .log_config import logger
from .variables import VariableSet, init_semipoly_vars


def _as_expr_list(exprs: Any) -> List[sp.Expr]:
    if isinstance(exprs, sp.MatrixBase):
        return [sp.sympify(e) for e in exprs]
    if isinstance(exprs, (sp.Basic, str)) or not hasattr(exprs, "__iter__"):
        raise ValueError("exprs must be a sequence (or matrix) of expressions")
    return [sp.sympify(e) for e in exprs]


def _column(values: Sequence[sp.Expr]) -> sp.Matrix:
    return sp.Matrix(len(values), 1, list(values))


def semipolynomial_form(
    expr: Any,
    vars: Any,
    degree,
    *,
    consts: bool = True,
    options: Optional[MarkingOptions] = None,
) -> Tuple[Dict[sp.Expr, sp.Expr], sp.Expr]:
    """Decompose `expr` into monomials in `vars` up to `degree`.

    Parameters
    ----------
    expr:
        A SymPy expression (anything `sympify` accepts).
    vars:
        The designated variables; must not contain duplicates.
    degree:
        Maximal total degree of the returned monomials. Use ``sympy.oo``
        for no bound.
    consts:
        If True the dictionary holds the constant term under the key ``1``;
        otherwise the constant term goes to the residual.
    options:
        Marker configuration; defaults to `MarkingOptions()`.

    Returns
    -------
    (dict, residual)
        ``sum(c * m for m, c in dict.items()) + residual == expr``.
    """
    if degree < 0:
        logger.warning("Degree for semi-polynomial form should be >= 0; got %s", degree)
        return {}, expr
    vs = init_semipoly_vars(vars)
    terms = semipolyform_terms(sp.sympify(expr), vs, options)
    return bifurcate_terms(terms, vs, degree, consts=consts)


def semipolynomial_forms(
    exprs: Any,
    vars: Any,
    degree,
    *,
    consts: bool = True,
    options: Optional[MarkingOptions] = None,
) -> Tuple[List[Dict[sp.Expr, sp.Expr]], List[sp.Expr]]:
    """Vectorized `semipolynomial_form`: one (dict, residual) pair per input."""
    exprs = _as_expr_list(exprs)
    if degree < 0:
        logger.warning("Degree for semi-polynomial form should be >= 0; got %s", degree)
        return [{} for _ in exprs], list(exprs)
    vs = init_semipoly_vars(vars)
    dicts: List[Dict[sp.Expr, sp.Expr]] = []
    residuals: List[sp.Expr] = []
    for e in exprs:
        d, nl = bifurcate_terms(semipolyform_terms(e, vs, options), vs, degree, consts=consts)
        dicts.append(d)
        residuals.append(nl)
    return dicts, residuals


def polynomial_coeffs(
    expr: Any,
    vars: Any,
    *,
    options: Optional[MarkingOptions] = None,
) -> Tuple[Dict[sp.Expr, sp.Expr], sp.Expr]:
    """Coefficients of `expr` as a polynomial in `vars` (no degree bound)."""
    return semipolynomial_form(expr, vars, sp.oo, consts=True, options=options)


def quadratic_pair_index(p: int, q: int) -> int:
    """0-based column of the monomial ``vars[p] * vars[q]`` in a quadratic form.

    The unordered pair is sorted so that ``p <= q``; the square
    ``vars[q]**2`` uses ``p == q``. For n variables the indices cover
    ``range(n*(n+1)//2)``.
    """
    if p < 0 or q < 0:
        raise ValueError(f"variable indices must be nonnegative; got {(p, q)}")
    p, q = min(p, q), max(p, q)
    return q * (q + 1) // 2 + p


def quadratic_pair_from_index(j: int) -> Tuple[int, int]:
    """Inverse of `quadratic_pair_index`: return ``(p, q)`` with ``p <= q``."""
    if j < 0:
        raise ValueError(f"column index must be nonnegative; got {j}")
    q = (math.isqrt(8 * j + 1) - 1) // 2
    p = j - q * (q + 1) // 2
    return p, q


def semilinear_form(
    exprs: Any,
    vars: Any,
    *,
    options: Optional[MarkingOptions] = None,
) -> Tuple[sp.SparseMatrix, sp.Matrix]:
    """Return ``(A, c)`` with ``A * Matrix(vars) + c == Matrix(exprs)``.

    `A` is an m×n `SparseMatrix` (m expressions, n variables) and `c` the
    m×1 residual column.
    """
    exprs = _as_expr_list(exprs)
    vs = init_semipoly_vars(vars)
    ds, nls = semipolynomial_forms(exprs, vs, 1, consts=False, options=options)

    idxmap = vs.index_map()
    entries: Dict[Tuple[int, int], sp.Expr] = {}
    for i, d in enumerate(ds):
        for k, v in d.items():
            entries[(i, idxmap[k])] = v

    return sp.SparseMatrix(len(exprs), len(vs), entries), _column(nls)


def semiquadratic_form(
    exprs: Any,
    vars: Any,
    *,
    options: Optional[MarkingOptions] = None,
) -> Tuple[sp.SparseMatrix, sp.SparseMatrix, sp.Matrix, sp.Matrix]:
    """Return ``(A, B, v2, c)`` with ``A * vars + B * v2 + c == exprs``.

    1. `A`: m×n sparse matrix of linear coefficients,
    2. `B`: m×(n(n+1)/2) sparse matrix of quadratic coefficients,
    3. `v2`: column of length n(n+1)/2 holding the degree-2 monomial at
       every populated column (see `quadratic_pair_index`) and 0 elsewhere,
    4. `c`: m×1 residual column.

    Raises
    ------
    RuntimeError
        If a monomial of unexpected shape survives the degree-2 bifurcation.
    """
    exprs = _as_expr_list(exprs)
    vs = init_semipoly_vars(vars)
    ds, nls = semipolynomial_forms(exprs, vs, 2, consts=False, options=options)

    idxmap = vs.index_map()
    m, n = len(exprs), len(vs)
    n2 = n * (n + 1) // 2

    linear: Dict[Tuple[int, int], sp.Expr] = {}
    quadratic: Dict[Tuple[int, int], sp.Expr] = {}
    v2 = sp.zeros(n2, 1)

    for i, d in enumerate(ds):
        for k, v in d.items():
            deg = total_degree(k, vs)
            if deg == 1:
                linear[(i, idxmap[k])] = v
            elif deg == 2:
                if k.is_Pow:
                    base, exp = k.args
                    if exp != 2:
                        raise RuntimeError(f"degree-2 power {k} does not have exponent 2")
                    q = idxmap[base]
                    j = quadratic_pair_index(q, q)
                elif k.is_Mul and len(k.args) == 2:
                    a, b = k.args
                    j = quadratic_pair_index(idxmap[a], idxmap[b])
                else:
                    raise RuntimeError(f"malformed degree-2 monomial {k}")
                quadratic[(i, j)] = v
                v2[j, 0] = k
            else:
                raise RuntimeError(f"monomial {k} of degree {deg} in a quadratic form")

    return (
        sp.SparseMatrix(m, n, linear),
        sp.SparseMatrix(m, n2, quadratic),
        v2,
        _column(nls),
    )
