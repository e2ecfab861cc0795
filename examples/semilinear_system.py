"""Split a small nonlinear system into its linear part and a residual.

Run:
    python examples/semilinear_system.py
"""

from __future__ import annotations

import logging

import sympy as sp

from semipoly import linear_form_residual, semilinear_form
from semipoly.log_config import setup_logging


def main() -> None:
    setup_logging(logging.DEBUG)
    x, y, a = sp.symbols("x y a")
    exprs = [a * x + 2 * y + sp.sin(x), 3 * x - y**2, x * y + 1]

    A, c = semilinear_form(exprs, [x, y])

    print("A =")
    sp.pprint(A)
    print("\nresidual c =")
    sp.pprint(c)

    # A*[x, y] + c reproduces the input exactly.
    print("\nA*v + c - exprs =", list(linear_form_residual(exprs, [x, y], A, c)))


if __name__ == "__main__":
    main()
