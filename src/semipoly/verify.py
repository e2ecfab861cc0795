"""Checks that a decomposition adds back up to its input.

The symbolic helpers return differences that should expand to zero. The
numeric check samples random real points and compares both sides with
NumPy, which also covers residuals that SymPy cannot simplify to zero.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

import numpy as np
import sympy as sp


def reconstruct(coeffs: Mapping[sp.Expr, sp.Expr], residual: Any) -> sp.Expr:
    """Return ``sum(c * m for m, c in coeffs.items()) + residual``."""
    total = sp.Add(*[sp.sympify(c) * sp.sympify(m) for m, c in coeffs.items()])
    return total + sp.sympify(residual)


def linear_form_residual(exprs: Sequence[Any], vars: Sequence[Any], A: sp.MatrixBase, c: sp.MatrixBase) -> sp.Matrix:
    """Return ``A * vars + c - exprs`` expanded; zero for a correct linear form."""
    x = sp.Matrix(list(vars))
    e = sp.Matrix([sp.sympify(v) for v in exprs])
    return (sp.Matrix(A) * x + sp.Matrix(c) - e).expand()


def quadratic_form_residual(
    exprs: Sequence[Any],
    vars: Sequence[Any],
    A: sp.MatrixBase,
    B: sp.MatrixBase,
    v2: sp.MatrixBase,
    c: sp.MatrixBase,
) -> sp.Matrix:
    """Return ``A * vars + B * v2 + c - exprs`` expanded."""
    x = sp.Matrix(list(vars))
    e = sp.Matrix([sp.sympify(v) for v in exprs])
    return (sp.Matrix(A) * x + sp.Matrix(B) * sp.Matrix(v2) + sp.Matrix(c) - e).expand()


def check_reconstruction(
    expr: Any,
    coeffs: Mapping[sp.Expr, sp.Expr],
    residual: Any,
    *,
    samples: int = 8,
    seed: int = 0,
    low: float = 0.5,
    high: float = 2.0,
    rtol: float = 1e-9,
    atol: float = 1e-9,
    subs: Optional[Dict[sp.Symbol, float]] = None,
) -> Dict[str, Any]:
    """Numerically compare `expr` with the reconstruction of its form.

    Every free symbol not fixed by `subs` is drawn uniformly from
    ``[low, high)``; positive samples keep roots and logarithms real.

    Returns
    -------
    dict with keys:
      - 'max_error': largest absolute difference over the samples
      - 'ok': True if every sample is within ``atol + rtol * |expr|``
      - 'samples': number of points evaluated
    """
    lhs = sp.sympify(expr)
    rhs = reconstruct(coeffs, residual)
    if subs:
        lhs = lhs.subs(subs)
        rhs = rhs.subs(subs)

    symbols = sorted(lhs.free_symbols | rhs.free_symbols, key=lambda s: str(s))
    f_lhs = sp.lambdify(symbols, lhs, modules="numpy")
    f_rhs = sp.lambdify(symbols, rhs, modules="numpy")

    rng = np.random.default_rng(seed)
    max_error = 0.0
    ok = True
    for _ in range(int(samples)):
        point = rng.uniform(low, high, size=len(symbols))
        a = complex(f_lhs(*point))
        b = complex(f_rhs(*point))
        err = abs(a - b)
        max_error = max(max_error, float(err))
        if err > atol + rtol * abs(a):
            ok = False

    return {"max_error": max_error, "ok": ok, "samples": int(samples)}
