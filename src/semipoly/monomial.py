"""Value types of the marked expression tree.

`SemiMonomial` is a ``coefficient * monomial`` pair: `p` is built only from
designated variables, `coeff` is any SymPy expression. `Term` is an
unevaluated operator application over marked values. SymPy's own `Add` and
`Mul` cannot hold these objects, so marked trees are made of `Term` nodes
until `unwrap` turns them back into SymPy expressions.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple

import sympy as sp

from .degrees import degree_map, integral_value, monomial_from_degrees


def _is_number(x: Any) -> bool:
    if isinstance(x, sp.Basic):
        return bool(x.is_Number)
    return isinstance(x, numbers.Number)


@dataclass(frozen=True)
class Term:
    """An unevaluated operator application.

    `op` is one of ``"+"``, ``"*"``, ``"^"``, ``"/"`` or a SymPy function
    class (for whitelisted one-argument operators).
    """

    op: Any
    args: Tuple[Any, ...]

    def __mul__(self, other: Any) -> Any:
        if isinstance(other, SemiMonomial):
            return NotImplemented
        return Term("*", _factors(self) + _factors(other))

    def to_expr(self) -> sp.Expr:
        """Rebuild a SymPy expression, unwrapping every argument."""
        args = [unwrap(a) for a in self.args]
        build = _BUILDERS.get(self.op) if isinstance(self.op, str) else None
        if build is None:
            return self.op(*args)
        return build(*args)


@dataclass(frozen=True)
class SemiMonomial:
    """A tagged ``coeff * p`` term.

    Attributes
    ----------
    p:
        The monomial: ``1`` or a product/power of designated variables.
    coeff:
        The coefficient expression.
    """

    p: sp.Expr
    coeff: sp.Expr

    def __post_init__(self) -> None:
        object.__setattr__(self, "p", sp.sympify(self.p))
        object.__setattr__(self, "coeff", sp.sympify(self.coeff))

    # Addition never merges monomials; like terms are collected later.
    def __add__(self, other: Any) -> Term:
        if isinstance(other, SemiMonomial):
            return Term("+", (self, other))
        if isop(other, "+"):
            return Term("+", other.args + (self,))
        return Term("+", (self, other))

    __radd__ = __add__

    def __mul__(self, other: Any) -> Any:
        if isinstance(other, SemiMonomial):
            return SemiMonomial(self.p * other.p, self.coeff * other.coeff)
        if _is_number(other):
            return SemiMonomial(self.p, self.coeff * other)
        if isop(other, "+"):
            return Term("+", tuple(self * t for t in all_terms(other)))
        if isop(other, "*"):
            return Term("*", other.args + (self,))
        return Term("*", (other, self))

    __rmul__ = __mul__

    def __truediv__(self, other: Any) -> "SemiMonomial":
        if not isinstance(other, SemiMonomial):
            return NotImplemented
        return SemiMonomial(self.p / other.p, self.coeff / other.coeff)

    def __pow__(self, exp: Any) -> "SemiMonomial":
        return SemiMonomial(self.p ** exp, self.coeff ** exp)

    def is_real(self) -> bool:
        """True if this is just a real number (monomial 1, numeric coefficient)."""
        return self.p == 1 and bool(self.coeff.is_Number) and bool(self.coeff.is_real)

    def real(self) -> sp.Expr:
        """The real value of a term for which `is_real()` holds."""
        n = integral_value(self.coeff)
        if n is None:
            return self.coeff
        return sp.Integer(n)

    def to_expr(self) -> sp.Expr:
        """Return ``coeff * p`` as a plain SymPy expression.

        Positive and negative exponents are split into a numerator and a
        denominator product. Monomials whose structure does not match their
        degree map (e.g. ``sqrt(x**2)``) are multiplied in as they are.
        """
        degrees = degree_map(self.p)
        if not all(d.is_Number for d in degrees.values()):
            return self.coeff * self.p
        if monomial_from_degrees(degrees) != self.p:
            return self.coeff * self.p
        num = []
        den = []
        for var, deg in degrees.items():
            n = integral_value(deg)
            if n is not None:
                deg = sp.Integer(n)
            if deg > 0:
                num.append(var ** deg)
            else:
                den.append(var ** -deg)
        return self.coeff * sp.Mul(*num) / sp.Mul(*den)


_BUILDERS: Dict[str, Callable[..., sp.Expr]] = {
    "+": lambda *args: sp.Add(*args),
    "*": lambda *args: sp.Mul(*args),
    "^": lambda base, exp: sp.Pow(base, exp),
    "/": lambda num, den: num / den,
}


def isop(x: Any, op: Any) -> bool:
    return isinstance(x, Term) and x.op == op


def is_semimonomial(x: Any) -> bool:
    return isinstance(x, SemiMonomial)


def _factors(x: Any) -> Tuple[Any, ...]:
    return x.args if isop(x, "*") else (x,)


def all_terms(x: Any) -> Tuple[Any, ...]:
    """Flatten nested sums into their additive leaves."""
    if isop(x, "+"):
        out: Tuple[Any, ...] = ()
        for arg in x.args:
            out += all_terms(arg)
        return out
    return (x,)


def unwrap(x: Any) -> sp.Expr:
    """Turn a marked value back into a plain SymPy expression."""
    if isinstance(x, (SemiMonomial, Term)):
        return x.to_expr()
    return sp.sympify(x)
