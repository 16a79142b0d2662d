"""Directed giver → receiver pairs.

A ``Pair`` is both the SAT literal ("this edge is in the assignment") and the
plain record stored in the history of past draws. Equality and hashing use the
two fields jointly, so ``Pair("A", "B") != Pair("B", "A")``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Hashable, Iterable, Iterator, List, Sequence, TypeVar

T = TypeVar("T", bound=Hashable)


@dataclass(frozen=True, order=True)
class Pair(Generic[T]):
    giver: T
    receiver: T

    def __str__(self) -> str:
        return f"{self.giver} -> {self.receiver}"


def swapped(pair: Pair[T]) -> Pair[T]:
    return Pair(pair.receiver, pair.giver)


def swap_all(pairs: Iterable[Pair[T]]) -> Iterator[Pair[T]]:
    for pair in pairs:
        yield swapped(pair)


def cross_pairs(members: Sequence[T]) -> List[Pair[T]]:
    """Ordered pairs ``(members[x], members[y])`` for every ``x <= y``.

    Self-pairs are included; callers wanting both directions pass the result
    through a symmetric exclusion.
    """

    out: List[Pair[T]] = []
    for x in range(len(members)):
        for y in range(x, len(members)):
            out.append(Pair(members[x], members[y]))
    return out


def pairs_by_giver(pairs: Iterable[Pair[T]]) -> List[Pair[T]]:
    return sorted(pairs, key=lambda p: (str(p.giver), str(p.receiver)))
