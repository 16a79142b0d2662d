"""SAT oracle: accumulate constraints over hashable literals, solve incrementally.

The encoder only talks to the two-call contract below (``add_constraint`` and
``solve``); ``PySatOracle`` is the python-sat backed implementation. Any other
object with the same two methods can be swapped in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Hashable, List, Optional, Protocol, Tuple, Union

from pysat.card import CardEnc, EncType
from pysat.formula import IDPool
from pysat.solvers import Solver

DEFAULT_SOLVER = "glucose4"


# --------------------- Constraint expressions ---------------------
@dataclass(frozen=True)
class ExactlyOne:
    literals: Tuple[Hashable, ...]


@dataclass(frozen=True)
class AllTrue:
    literals: Tuple[Hashable, ...]


@dataclass(frozen=True)
class NoneTrue:
    literals: Tuple[Hashable, ...]


@dataclass(frozen=True)
class ImpliesNot:
    """``condition`` true forces ``consequent`` false."""

    condition: Hashable
    consequent: Hashable


Constraint = Union[ExactlyOne, AllTrue, NoneTrue, ImpliesNot]


class Model:
    """Complete truth assignment over the literals an oracle has seen."""

    def __init__(self, values: Dict[Hashable, bool]):
        self._values = dict(values)

    def value(self, literal: Hashable) -> bool:
        return self._values.get(literal, False)

    def true_literals(self) -> FrozenSet[Hashable]:
        return frozenset(lit for lit, val in self._values.items() if val)

    def __len__(self) -> int:
        return len(self._values)


class Oracle(Protocol):
    def add_constraint(self, constraint: Constraint) -> None: ...

    def solve(self) -> Optional[Model]: ...


# --------------------- python-sat backend ---------------------
def _enc_for_atmost(m: int) -> int:
    # Pairwise is clause-heavy but auxiliary-free for small groups.
    if m <= 8:
        return EncType.pairwise
    return EncType.seqcounter


class PySatOracle:
    """Incremental oracle on top of a ``pysat.solvers.Solver``.

    Literals are mapped to variable ids through an ``IDPool``; cardinality
    auxiliaries are allocated from the same pool and never reported back.
    """

    def __init__(self, solver_name: str = DEFAULT_SOLVER):
        self.solver_name = solver_name
        self.pool = IDPool()
        self.solver = Solver(name=solver_name)
        self.literals: Dict[Hashable, int] = {}
        self.n_clauses = 0

    def __enter__(self) -> "PySatOracle":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self.solver is not None:
            self.solver.delete()
            self.solver = None

    def var(self, literal: Hashable) -> int:
        vid = self.literals.get(literal)
        if vid is None:
            vid = self.pool.id(literal)
            self.literals[literal] = vid
        return vid

    def _add_clauses(self, clauses: List[List[int]]) -> None:
        for clause in clauses:
            self.solver.add_clause(clause)
        self.n_clauses += len(clauses)

    def add_constraint(self, constraint: Constraint) -> None:
        if isinstance(constraint, ExactlyOne):
            ids = [self.var(lit) for lit in constraint.literals]
            clauses: List[List[int]] = [list(ids)]
            if len(ids) > 1:
                clauses += CardEnc.atmost(
                    lits=ids, bound=1, vpool=self.pool, encoding=_enc_for_atmost(len(ids))
                ).clauses
            self._add_clauses(clauses)
        elif isinstance(constraint, AllTrue):
            self._add_clauses([[self.var(lit)] for lit in constraint.literals])
        elif isinstance(constraint, NoneTrue):
            self._add_clauses([[-self.var(lit)] for lit in constraint.literals])
        elif isinstance(constraint, ImpliesNot):
            self._add_clauses([[-self.var(constraint.condition), -self.var(constraint.consequent)]])
        else:
            raise TypeError(f"Unsupported constraint: {constraint!r}")

    def solve(self) -> Optional[Model]:
        if self.solver is None:
            raise RuntimeError("Oracle already closed")
        if not self.solver.solve():
            return None
        assignment = self.solver.get_model() or []
        positive = {abs(v) for v in assignment if v > 0}
        return Model({lit: vid in positive for lit, vid in self.literals.items()})
