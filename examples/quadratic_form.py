"""Quadratic decomposition A*v + B*v2 + c of a polynomial system.

Run:
    python examples/quadratic_form.py
"""

from __future__ import annotations

import sympy as sp

from semipoly import quadratic_pair_from_index, semipolynomial_form, semiquadratic_form


def main() -> None:
    x, y, z, k = sp.symbols("x y z k")
    vars = [x, y, z]
    exprs = [k * x**2 + 2 * x * y - z, y * z + sp.exp(z) + 4, (x + z) ** 2]

    A, B, v2, c = semiquadratic_form(exprs, vars)

    print("Linear part A =")
    sp.pprint(A)
    print("\nQuadratic part B =")
    sp.pprint(B)

    print("\nColumns of B:")
    for j, mono in enumerate(v2):
        p, q = quadratic_pair_from_index(j)
        print(f"  {j}: {vars[p]}*{vars[q]} -> {mono}")

    print("\nResidual c =", list(c))

    coeffs, residual = semipolynomial_form(exprs[1], vars, 2)
    print("\nsemi-polynomial form of", exprs[1], ":", coeffs, "+", residual)


if __name__ == "__main__":
    main()
