from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Any, Dict, FrozenSet, Iterator, Tuple

import sympy as sp


@dataclass(frozen=True)
class VariableSet:
    """An ordered, duplicate-free collection of designated variables.

    Parameters
    ----------
    symbols:
        The designated variables, in the caller's order. Column positions of
        the matrix-producing builders follow this order.
    """

    symbols: Tuple[sp.Expr, ...]

    def __post_init__(self) -> None:
        if len(set(self.symbols)) != len(self.symbols):
            seen = set()
            dups = []
            for s in self.symbols:
                if s in seen and s not in dups:
                    dups.append(s)
                seen.add(s)
            raise ValueError(
                "variables passed to semi-polynomial form must be unique; "
                f"duplicated: {', '.join(str(d) for d in dups)}"
            )

    @cached_property
    def members(self) -> FrozenSet[sp.Expr]:
        return frozenset(self.symbols)

    def __contains__(self, expr: Any) -> bool:
        return expr in self.members

    def __iter__(self) -> Iterator[sp.Expr]:
        return iter(self.symbols)

    def __len__(self) -> int:
        return len(self.symbols)

    def index_map(self) -> Dict[sp.Expr, int]:
        """Map each variable to its 0-based column index."""
        return {v: i for i, v in enumerate(self.symbols)}


def init_semipoly_vars(vars: Any) -> VariableSet:
    """Build a `VariableSet` from a variable, a sequence or a SymPy matrix.

    Raises
    ------
    ValueError
        If the same variable is given twice.
    """
    if isinstance(vars, VariableSet):
        return vars
    if isinstance(vars, sp.Basic) and not isinstance(vars, sp.MatrixBase):
        return VariableSet((vars,))
    return VariableSet(tuple(sp.sympify(v) for v in vars))
