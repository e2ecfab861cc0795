"""Top-level package API for semipoly.

This package splits a SymPy expression into its *semi-polynomial form*: a
dictionary mapping bounded-degree monomials in a set of designated
variables to coefficient expressions, plus a residual holding every term
that is not such a monomial times a variable-free coefficient.

Public API:
- semipolynomial_form, semipolynomial_forms, polynomial_coeffs
- semilinear_form, semiquadratic_form
- quadratic_pair_index, quadratic_pair_from_index
- MarkingOptions, VariableSet
- Verification helpers (reconstruct, check_reconstruction, ...)
"""

from .config import DEFAULT_LINEAR_UNARY_OPS, MarkingOptions
from .variables import VariableSet, init_semipoly_vars
from .monomial import SemiMonomial, Term
from .degrees import degree_map, total_degree
from .forms import (
    semipolynomial_form,
    semipolynomial_forms,
    polynomial_coeffs,
    semilinear_form,
    semiquadratic_form,
    quadratic_pair_index,
    quadratic_pair_from_index,
)
from .verify import (
    reconstruct,
    check_reconstruction,
    linear_form_residual,
    quadratic_form_residual,
)

__all__ = [
    "DEFAULT_LINEAR_UNARY_OPS",
    "MarkingOptions",
    "VariableSet",
    "init_semipoly_vars",
    "SemiMonomial",
    "Term",
    "degree_map",
    "total_degree",
    "semipolynomial_form",
    "semipolynomial_forms",
    "polynomial_coeffs",
    "semilinear_form",
    "semiquadratic_form",
    "quadratic_pair_index",
    "quadratic_pair_from_index",
    "reconstruct",
    "check_reconstruction",
    "linear_form_residual",
    "quadratic_form_residual",
]
