"""Normalization of marked trees.

After marking, `SemiMonomial` leaves are combined across ``*``, ``/`` and
``^`` and products are distributed over sums. The rules are applied
bottom-up; at every node the rule list is restarted from the top each time
a rule fires, until none applies. No fraction simplification is attempted.
"""

from __future__ import annotations

import itertools
import operator
from functools import reduce
from typing import Any, Callable, Dict, List, Optional, Sequence

import sympy as sp

from .config import MarkingOptions
from .marking import mark_vars
from .monomial import SemiMonomial, Term, all_terms, is_semimonomial, isop
from .variables import VariableSet

# A rule returns the rewritten node, or None when it does not match.
Rule = Callable[[Any], Optional[Any]]


def _real_exponent(x: Any) -> Optional[sp.Expr]:
    if is_semimonomial(x) and x.is_real():
        return x.real()
    return None


def expand_product(factors: Sequence[Any]) -> Any:
    """Distribute a product over every summand of its sum-valued factors."""
    choices = [all_terms(f) for f in factors]
    products = [reduce(operator.mul, combo) for combo in itertools.product(*choices)]
    if len(products) == 1:
        return products[0]
    return Term("+", tuple(products))


def collect_like_terms(x: Any) -> Any:
    """Merge the `SemiMonomial` summands of `x` that share a monomial.

    Coefficients of equal monomials are added. Other summands are kept
    as they are, after the merged monomials.
    """
    merged: Dict[sp.Expr, SemiMonomial] = {}
    others: List[Any] = []
    for t in all_terms(x):
        if not is_semimonomial(t):
            others.append(t)
        elif t.p in merged:
            merged[t.p] = SemiMonomial(t.p, merged[t.p].coeff + t.coeff)
        else:
            merged[t.p] = t
    terms = tuple(merged.values()) + tuple(others)
    if len(terms) == 1:
        return terms[0]
    return Term("+", terms)


def expand_power(base: Term, n: int) -> Any:
    """Multinomial expansion of ``base ** n`` for a non-negative integer n.

    Like terms are merged after every multiplication, so the work grows
    with the number of distinct monomials rather than ``len(base) ** n``.
    """
    if n == 0:
        return SemiMonomial(sp.S.One, sp.S.One)
    out = base
    for _ in range(n - 1):
        out = collect_like_terms(expand_product((out, base)))
    return out


def pow_of_semimonomial(x: Any) -> Optional[Any]:
    if not isop(x, "^"):
        return None
    base, exp = x.args
    n = _real_exponent(exp)
    if is_semimonomial(base) and n is not None:
        return base ** n
    return None


def pow_of_sum(x: Any) -> Optional[Any]:
    if not isop(x, "^"):
        return None
    base, exp = x.args
    n = _real_exponent(exp)
    if isop(base, "+") and n is not None and n.is_Integer and n >= 0:
        return expand_power(base, int(n))
    return None


def product_of_semimonomials(x: Any) -> Optional[Any]:
    if isop(x, "*") and all(is_semimonomial(a) for a in x.args):
        return reduce(operator.mul, x.args)
    return None


def product_with_sum(x: Any) -> Optional[Any]:
    if isop(x, "*") and any(isop(a, "+") for a in x.args):
        return expand_product(x.args)
    return None


def quotient_of_semimonomials(x: Any) -> Optional[Any]:
    if isop(x, "/"):
        num, den = x.args
        if is_semimonomial(num) and is_semimonomial(den):
            return num / den
    return None


RULES: Sequence[Rule] = (
    pow_of_semimonomial,
    pow_of_sum,
    product_of_semimonomials,
    product_with_sum,
    quotient_of_semimonomials,
)


def restarted_chain(rules: Sequence[Rule]) -> Callable[[Any], Any]:
    """Apply the first matching rule, then start over, until nothing matches."""

    def apply(x: Any) -> Any:
        while True:
            for rule in rules:
                y = rule(x)
                if y is not None:
                    x = y
                    break
            else:
                return x

    return apply


def postwalk(x: Any, rewrite: Callable[[Any], Any]) -> Any:
    """Rewrite children first, then the rebuilt node itself."""
    if isinstance(x, Term):
        x = Term(x.op, tuple(postwalk(a, rewrite) for a in x.args))
    return rewrite(x)


def mark_and_exponentiate(expr: Any, vars: VariableSet, options: Optional[MarkingOptions] = None) -> Any:
    """Mark `expr` and normalize the marked tree."""
    marked = mark_vars(expr, vars, options)
    return postwalk(marked, restarted_chain(RULES))
