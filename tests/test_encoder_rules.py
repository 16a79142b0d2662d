from __future__ import annotations

import itertools

from encode_santa_rules import (
    encode_bijection,
    encode_no_reciprocity,
    encode_no_self,
    encode_roster,
    encode_secret_santa_rules,
    exclude_group,
    exclude_pairs,
    exclude_pairs_symmetric,
    include_pairs,
)
from oracle import AllTrue, ExactlyOne, ImpliesNot, NoneTrue, PySatOracle
from pairs import Pair
from tests.utils import RecordingOracle, make_roster


def test_bijection_adds_two_exactly_one_per_person() -> None:
    oracle = RecordingOracle()
    encode_bijection(["A", "B", "C"], oracle)
    exactly = oracle.of_type(ExactlyOne)
    assert len(exactly) == 6
    assert exactly[0].literals == (Pair("A", "A"), Pair("A", "B"), Pair("A", "C"))
    assert exactly[3].literals == (Pair("A", "A"), Pair("B", "A"), Pair("C", "A"))


def test_no_self_forbids_diagonal() -> None:
    oracle = RecordingOracle()
    encode_no_self(["A", "B"], oracle)
    assert oracle.constraints == [NoneTrue((Pair("A", "A"), Pair("B", "B")))]


def test_no_reciprocity_covers_each_unordered_pair_once() -> None:
    oracle = RecordingOracle()
    encode_no_reciprocity(["A", "B", "C"], oracle)
    assert oracle.constraints == [
        ImpliesNot(Pair("A", "B"), Pair("B", "A")),
        ImpliesNot(Pair("A", "C"), Pair("C", "A")),
        ImpliesNot(Pair("B", "C"), Pair("C", "B")),
    ]


def test_symmetric_exclusion_adds_both_directions() -> None:
    oracle = RecordingOracle()
    exclude_pairs_symmetric([Pair("A", "B")], oracle)
    assert oracle.constraints == [NoneTrue((Pair("A", "B"),)), NoneTrue((Pair("B", "A"),))]


def test_group_exclusion_blocks_every_member_pair() -> None:
    oracle = RecordingOracle()
    exclude_group(["A", "B", "C"], oracle)
    forbidden = {lit for c in oracle.of_type(NoneTrue) for lit in c.literals}
    assert forbidden == {Pair(g, r) for g, r in itertools.product("ABC", repeat=2)}


def test_roster_rules_are_all_encoded() -> None:
    roster = make_roster(
        ["A", "B", "C", "D"],
        whitelist=[("B", "C")],
        blacklist=[("D", "A")],
        blacklist_sets=[["A", "B"]],
        history=[(2023, True, [("C", "D")]), (2022, False, [("A", "C")])],
    )
    oracle = RecordingOracle()
    encode_roster(roster, oracle)
    forbidden = {lit for c in oracle.of_type(NoneTrue) for lit in c.literals}
    required = {lit for c in oracle.of_type(AllTrue) for lit in c.literals}
    assert required == {Pair("B", "C")}
    assert {Pair("A", "B"), Pair("B", "A"), Pair("D", "A"), Pair("C", "D")} <= forbidden
    # Unflagged history is informational only.
    assert Pair("A", "C") not in forbidden


def _all_models(oracle: PySatOracle):
    """Enumerate every satisfying assignment by blocking each exact model."""

    found = []
    while True:
        model = oracle.solve()
        if model is None:
            return found
        pairs = frozenset(lit for lit in model.true_literals() if isinstance(lit, Pair))
        found.append(pairs)
        oracle.solver.add_clause([-oracle.var(p) for p in pairs])


def test_three_people_only_allow_the_two_cycles() -> None:
    with PySatOracle() as oracle:
        encode_secret_santa_rules(["A", "B", "C"], oracle)
        models = set(_all_models(oracle))
    assert models == {
        frozenset({Pair("A", "B"), Pair("B", "C"), Pair("C", "A")}),
        frozenset({Pair("A", "C"), Pair("C", "B"), Pair("B", "A")}),
    }


def test_four_people_allow_only_four_cycles() -> None:
    # Two 2-cycles would satisfy the bijection but are reciprocal.
    with PySatOracle() as oracle:
        encode_secret_santa_rules(["A", "B", "C", "D"], oracle)
        models = _all_models(oracle)
    assert len(models) == 6
    for pairs in models:
        assert all(Pair(p.receiver, p.giver) not in pairs for p in pairs)


def test_two_people_are_unsatisfiable() -> None:
    with PySatOracle() as oracle:
        encode_secret_santa_rules(["A", "B"], oracle)
        assert oracle.solve() is None


def test_include_and_exclude_pin_literals() -> None:
    with PySatOracle() as oracle:
        encode_secret_santa_rules(["A", "B", "C"], oracle)
        include_pairs([Pair("B", "C")], oracle)
        model = oracle.solve()
        assert model is not None and model.value(Pair("B", "C"))
        exclude_pairs([Pair("A", "B")], oracle)
        assert oracle.solve() is None


def test_large_groups_allocate_counter_auxiliaries() -> None:
    universe = [f"P{i}" for i in range(9)]
    with PySatOracle() as oracle:
        encode_secret_santa_rules(universe, oracle)
        assert len(oracle.literals) == 81
        assert oracle.pool.top > 81
        model = oracle.solve()
    assert model is not None
    assert all(lit.giver != lit.receiver for lit in model.true_literals())
    assert len(model.true_literals()) == 9
