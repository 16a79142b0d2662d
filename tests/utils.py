"""Roster builders and assignment checks shared by the tests."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Tuple

from oracle import Constraint
from pairs import Pair
from roster import Roster, roster_from_dict


def pair_dicts(pairs: Iterable[Tuple[str, str]]) -> List[Dict[str, str]]:
    return [{"giver": g, "receiver": r} for g, r in pairs]


def roster_dict(
    names: Sequence[str],
    *,
    whitelist: Iterable[Tuple[str, str]] = (),
    blacklist: Iterable[Tuple[str, str]] = (),
    blacklist_sets: Iterable[Sequence[str]] = (),
    history: Iterable[Tuple[int, bool, Iterable[Tuple[str, str]]]] = (),
) -> dict:
    """Build the JSON-shaped roster used by ``roster_from_dict``."""

    return {
        "people": [{"name": n, "email": f"{n.lower()}@example.com"} for n in names],
        "whitelist": pair_dicts(whitelist),
        "blacklist": pair_dicts(blacklist),
        "blacklist_sets": [list(group) for group in blacklist_sets],
        "history": [
            {"year": year, "exclude_pairs": flag, "pairs": pair_dicts(pairs)}
            for year, flag, pairs in history
        ],
    }


def make_roster(names: Sequence[str], **rules) -> Roster:
    return roster_from_dict(roster_dict(names, **rules))


def write_roster(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def edges(*pairs: Tuple[str, str]) -> frozenset:
    return frozenset(Pair(g, r) for g, r in pairs)


class RecordingOracle:
    """Oracle stand-in that only remembers what was added."""

    def __init__(self):
        self.constraints: List[Constraint] = []

    def add_constraint(self, constraint: Constraint) -> None:
        self.constraints.append(constraint)

    def solve(self):
        raise AssertionError("RecordingOracle cannot solve")

    def of_type(self, kind) -> List[Constraint]:
        return [c for c in self.constraints if isinstance(c, kind)]
