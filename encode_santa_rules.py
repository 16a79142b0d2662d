"""Secret Santa rule encoder.

Hard constraints:

* every participant gives exactly once and receives exactly once
* nobody gives to themselves
* no two-person loops (A → B together with B → A); longer cycles are fine

Roster rules on top:

* whitelist pairs must be present
* blacklist pairs must be absent
* blacklist sets: nobody in a set gives to anyone else in the same set, in
  either direction
* history entries flagged ``exclude_pairs`` forbid last rounds' pairs again

The encoder never checks for conflicts; an impossible rule set only shows up
as an unsatisfiable solve.
"""

from __future__ import annotations

from typing import Hashable, Iterable, Sequence

from oracle import AllTrue, ExactlyOne, ImpliesNot, NoneTrue, Oracle
from pairs import Pair, cross_pairs, swap_all
from roster import Roster


def encode_bijection(universe: Sequence[Hashable], oracle: Oracle) -> None:
    # Each person is someone's giver.
    for p in universe:
        oracle.add_constraint(ExactlyOne(tuple(Pair(p, x) for x in universe)))
    # Each person is someone's receiver.
    for p in universe:
        oracle.add_constraint(ExactlyOne(tuple(Pair(x, p) for x in universe)))


def encode_no_self(universe: Sequence[Hashable], oracle: Oracle) -> None:
    oracle.add_constraint(NoneTrue(tuple(Pair(p, p) for p in universe)))


def encode_no_reciprocity(universe: Sequence[Hashable], oracle: Oracle) -> None:
    n = len(universe)
    for p in range(n):
        for j in range(p + 1, n):
            oracle.add_constraint(ImpliesNot(
                condition=Pair(universe[p], universe[j]),
                consequent=Pair(universe[j], universe[p]),
            ))


def encode_secret_santa_rules(universe: Sequence[Hashable], oracle: Oracle) -> None:
    encode_bijection(universe, oracle)
    encode_no_self(universe, oracle)
    encode_no_reciprocity(universe, oracle)


def include_pairs(pairs: Iterable[Pair], oracle: Oracle) -> None:
    oracle.add_constraint(AllTrue(tuple(pairs)))


def exclude_pairs(pairs: Iterable[Pair], oracle: Oracle) -> None:
    oracle.add_constraint(NoneTrue(tuple(pairs)))


def exclude_pairs_symmetric(pairs: Iterable[Pair], oracle: Oracle) -> None:
    pairs = list(pairs)
    exclude_pairs(pairs, oracle)
    exclude_pairs(swap_all(pairs), oracle)


def exclude_group(members: Sequence[Hashable], oracle: Oracle) -> None:
    exclude_pairs_symmetric(cross_pairs(members), oracle)


def encode_roster(roster: Roster, oracle: Oracle) -> None:
    """Encode structural rules plus every rule carried by ``roster``.

    The roster must already be validated; unknown names would silently become
    fresh, unconstrained literals.
    """

    encode_secret_santa_rules(roster.names, oracle)
    for group in roster.blacklist_sets:
        exclude_group(group, oracle)
    exclude_pairs(roster.blacklist, oracle)
    include_pairs(roster.whitelist, oracle)
    for entry in roster.history:
        if not entry.exclude_pairs:
            continue
        exclude_pairs(entry.pairs, oracle)
