"""Find several edge-disjoint Secret Santa assignments and pick one at random.

Each solve yields one assignment; every edge of it is then forbidden, so the
next solve must find an assignment sharing no edge with any earlier one. The
loop stops at ``max_attempts`` or on the first unsatisfiable answer.
"""

from __future__ import annotations

import random
from typing import FrozenSet, List, Sequence

from encode_santa_rules import encode_roster, exclude_pairs
from oracle import DEFAULT_SOLVER, Oracle, PySatOracle
from pairs import Pair
from roster import Roster, validate_roster

DEFAULT_MAX_ATTEMPTS = 100

Assignment = FrozenSet[Pair[str]]


class UnsatisfiableError(RuntimeError):
    """No assignment satisfies the roster's rules."""


def extract_assignment(model) -> Assignment:
    return frozenset(lit for lit in model.true_literals() if isinstance(lit, Pair))


def diversify(oracle: Oracle, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> List[Assignment]:
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    solutions: List[Assignment] = []
    for _ in range(max_attempts):
        model = oracle.solve()
        if model is None:
            break
        pairs = extract_assignment(model)
        # Forbid every edge, not only this exact assignment, so that the
        # candidates are pairwise edge-disjoint.
        exclude_pairs(sorted(pairs), oracle)
        solutions.append(pairs)
        if not pairs:
            break
    return solutions


def choose_assignment(candidates: Sequence[Assignment], rng: random.Random | None = None) -> Assignment:
    if not candidates:
        raise ValueError("No candidate assignments to choose from")
    rng = rng or random.Random()
    return candidates[rng.randrange(len(candidates))]


def solve_roster(
    roster: Roster,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    solver_name: str = DEFAULT_SOLVER,
) -> List[Assignment]:
    """Validate, encode and diversify ``roster`` in one solver session."""

    validate_roster(roster)
    with PySatOracle(solver_name) as oracle:
        encode_roster(roster, oracle)
        solutions = diversify(oracle, max_attempts=max_attempts)
    if not solutions:
        raise UnsatisfiableError("No secret santa solutions found!")
    return solutions
