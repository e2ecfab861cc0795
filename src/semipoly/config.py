"""Configuration for the variable-marking pass.

The marker only propagates variable tags through a small, closed set of
operators. Which one-argument functions count as "linear in their argument"
is not registered globally; it is carried by an explicit, immutable
`MarkingOptions` value that every public entry point accepts.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import FrozenSet

import sympy as sp


DEFAULT_LINEAR_UNARY_OPS: FrozenSet[type] = frozenset(
    {
        sp.conjugate,
        sp.re,
        sp.im,
        sp.UnevaluatedExpr,
    }
)


@dataclass(frozen=True)
class MarkingOptions:
    """Tunable knobs for the marker.

    Parameters
    ----------
    linear_unary_ops:
        SymPy function classes whose one-argument applications are walked
        into (the argument is marked, the operator is kept). Anything not
        listed here is treated as an opaque coefficient.
    """

    linear_unary_ops: FrozenSet[type] = DEFAULT_LINEAR_UNARY_OPS

    def is_linear_unary(self, op) -> bool:
        return op in self.linear_unary_ops

    def with_linear_unary(self, *ops: type) -> "MarkingOptions":
        """Return a copy whose whitelist also contains `ops`."""
        return replace(self, linear_unary_ops=self.linear_unary_ops | frozenset(ops))
