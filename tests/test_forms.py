import logging

import pytest
import sympy as sp

import semipoly.forms as forms
from semipoly import (
    check_reconstruction,
    linear_form_residual,
    polynomial_coeffs,
    quadratic_form_residual,
    quadratic_pair_from_index,
    quadratic_pair_index,
    reconstruct,
    semilinear_form,
    semipolynomial_form,
    semipolynomial_forms,
    semiquadratic_form,
    total_degree,
)

x, y, a, b, c = sp.symbols("x y a b c")
z = sp.Symbol("z")

EXAMPLE = 3 * x**2 + 2 * x * y + y + 5 + sp.sin(x)


def test_semipolynomial_form_example():
    coeffs, residual = semipolynomial_form(EXAMPLE, [x, y], 2)
    assert coeffs == {x**2: 3, x * y: 2, y: 1, 1: 5}
    assert residual == sp.sin(x)


def test_degree_bound_moves_high_terms_to_residual():
    coeffs, residual = semipolynomial_form(EXAMPLE, [x, y], 1)
    assert coeffs == {y: 1, 1: 5}
    assert sp.expand(residual - (3 * x**2 + 2 * x * y + sp.sin(x))) == 0

    coeffs, residual = semipolynomial_form(EXAMPLE, [x, y], 0)
    assert coeffs == {1: 5}
    assert sp.expand(residual - (EXAMPLE - 5)) == 0


def test_consts_flag():
    coeffs, residual = semipolynomial_form(EXAMPLE, [x, y], 2, consts=False)
    assert 1 not in coeffs
    assert sp.expand(residual - (5 + sp.sin(x))) == 0


def test_negative_degree_is_a_logged_no_op(caplog):
    with caplog.at_level(logging.WARNING, logger="semipoly"):
        coeffs, residual = semipolynomial_form(EXAMPLE, [x, y], -1)
    assert coeffs == {}
    assert residual is EXAMPLE
    assert "Degree for semi-polynomial form" in caplog.text


def test_duplicate_variables_are_rejected():
    with pytest.raises(ValueError, match="unique"):
        semipolynomial_form(x + y, [x, y, x], 1)


def test_zero_expression():
    assert semipolynomial_form(0, [x], 2) == ({}, 0)


def test_plain_polynomial_is_recovered_exactly():
    coeffs, residual = polynomial_coeffs(a * x**3 + b * x + c, [x])
    assert coeffs == {x**3: a, x: b, 1: c}
    assert residual == 0


def test_integral_float_exponents_are_polynomial():
    coeffs, residual = semipolynomial_form(x**2.0 + (y + 1) ** 2.0, [x, y], 2)
    assert coeffs == {x**2: 1, y**2: 1, y: 2, 1: 1}
    assert residual == 0

    coeffs, residual = semipolynomial_form(x**2.5 + 3 * x, [x], 3)
    assert coeffs == {x: 3}
    assert residual == x**2.5


def test_high_power_of_a_sum_has_one_key_per_degree():
    coeffs, residual = polynomial_coeffs((x + 1) ** 20, [x])
    assert len(coeffs) == 21
    assert coeffs[x**10] == sp.binomial(20, 10)
    assert coeffs[1] == 1
    assert residual == 0


def test_non_symbol_variable_products_go_to_the_residual():
    w = sp.sqrt(z)
    coeffs, residual = semipolynomial_form((w + 1) ** 2, [w], 1, consts=False)
    assert coeffs == {w: 2}
    assert residual == z + 1

    A, c = semilinear_form([(w + 1) ** 2], [w])
    assert A == sp.Matrix([[2]])
    assert c == sp.Matrix([z + 1])


def test_opaque_coefficients_and_quotients():
    coeffs, residual = semipolynomial_form(sp.sin(a) * x + x / a, [x], 1)
    assert sp.simplify(coeffs[x] - (sp.sin(a) + 1 / a)) == 0
    assert residual == 0

    coeffs, residual = semipolynomial_form(x / y + sp.sqrt(x) + x * sp.exp(x), [x, y], 2)
    assert coeffs == {}
    assert sp.expand(residual - (x / y + sp.sqrt(x) + x * sp.exp(x))) == 0


def test_whitelisted_unary_operator_lands_in_residual():
    coeffs, residual = semipolynomial_form(sp.re(z) + z, [z], 1)
    assert coeffs == {z: 1}
    assert residual == sp.re(z)


def test_vectorized_form():
    ds, nls = semipolynomial_forms([x + 1, y**2], [x, y], 2)
    assert ds == [{x: 1, 1: 1}, {y**2: 1}]
    assert nls == [0, 0]

    ds, nls = semipolynomial_forms([x + 1, y**2], [x, y], -1)
    assert ds == [{}, {}]
    assert nls == [x + 1, y**2]


@pytest.mark.parametrize(
    "expr",
    [
        EXAMPLE,
        (x + sp.sin(y)) ** 2 * (a + x),
        (x + y + 1) ** 3 - x * y / (1 + x),
        sp.sqrt(x) * y + x / y + sp.log(x + a) * x**2,
        (x - a) * (y + b) * (x + y),
    ],
)
@pytest.mark.parametrize("degree", [0, 1, 2, 3])
def test_reconstruction_law(expr, degree):
    coeffs, residual = semipolynomial_form(expr, [x, y], degree)
    assert all(total_degree(k) <= degree for k in coeffs)
    assert sp.expand(reconstruct(coeffs, residual) - expr) == 0
    assert check_reconstruction(expr, coeffs, residual)["ok"]


def test_semilinear_form_example():
    A, c = semilinear_form([x + 2 * y, 3 * x], [x, y])
    assert A == sp.Matrix([[1, 2], [3, 0]])
    assert c == sp.Matrix([0, 0])


def test_semilinear_form_identity():
    exprs = [a * x + x * y + 1, sp.sin(x), (a + x) * (b - y)]
    A, c = semilinear_form(exprs, [x, y])
    assert isinstance(A, sp.SparseMatrix)
    assert A.shape == (3, 2)
    assert A[0, 0] == a
    assert sp.expand(c[0] - (x * y + 1)) == 0
    assert c[1] == sp.sin(x)
    assert linear_form_residual(exprs, [x, y], A, c) == sp.zeros(3, 1)


def test_semilinear_form_requires_a_sequence():
    with pytest.raises(ValueError):
        semilinear_form(x + y, [x, y])


def test_semiquadratic_form():
    exprs = [x**2 + 2 * x * y + 3 * y + 4, y**2 - x]
    A, B, v2, c = semiquadratic_form(exprs, [x, y])

    assert A == sp.Matrix([[0, 3], [-1, 0]])
    assert B == sp.Matrix([[1, 2, 0], [0, 0, 1]])
    assert v2 == sp.Matrix([x**2, x * y, y**2])
    assert c == sp.Matrix([4, 0])
    assert quadratic_form_residual(exprs, [x, y], A, B, v2, c) == sp.zeros(2, 1)


def test_semiquadratic_form_fills_unused_columns_with_zero():
    A, B, v2, c = semiquadratic_form([a * x * y + x**3], [x, y])
    assert A == sp.zeros(1, 2)
    assert B == sp.Matrix([[0, a, 0]])
    assert v2 == sp.Matrix([0, x * y, 0])
    assert c == sp.Matrix([x**3])


def test_semiquadratic_form_rejects_unexpected_degree(monkeypatch):
    monkeypatch.setattr(forms, "semipolynomial_forms", lambda *args, **kw: ([{x**3: 1}], [0]))
    with pytest.raises(RuntimeError, match="degree 3"):
        semiquadratic_form([x**3], [x, y])


def test_semiquadratic_form_rejects_malformed_keys(monkeypatch):
    odd_power = sp.Pow(x * y, 1, evaluate=False)
    monkeypatch.setattr(forms, "semipolynomial_forms", lambda *args, **kw: ([{odd_power: 1}], [0]))
    with pytest.raises(RuntimeError, match="exponent 2"):
        semiquadratic_form([x * y], [x, y])

    three_factors = x * sp.sqrt(y) * sp.sqrt(z)
    monkeypatch.setattr(forms, "semipolynomial_forms", lambda *args, **kw: ([{three_factors: 1}], [0]))
    with pytest.raises(RuntimeError, match="malformed"):
        semiquadratic_form([three_factors], [x, y, z])


@pytest.mark.parametrize("n", range(7))
def test_quadratic_pair_index_is_a_bijection(n):
    seen = set()
    for q in range(n):
        for p in range(q + 1):
            j = quadratic_pair_index(p, q)
            assert quadratic_pair_index(q, p) == j
            assert quadratic_pair_from_index(j) == (p, q)
            seen.add(j)
    assert seen == set(range(n * (n + 1) // 2))


def test_quadratic_pair_index_matches_one_based_layout():
    # squares sit at q(q+1)/2, cross terms at q(q-1)/2 + p (1-based, p < q)
    for q in range(1, 6):
        assert quadratic_pair_index(q - 1, q - 1) == q * (q + 1) // 2 - 1
        for p in range(1, q):
            assert quadratic_pair_index(p - 1, q - 1) == q * (q - 1) // 2 + p - 1


def test_quadratic_pair_index_rejects_negative_input():
    with pytest.raises(ValueError):
        quadratic_pair_index(-1, 0)
    with pytest.raises(ValueError):
        quadratic_pair_from_index(-1)
