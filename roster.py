"""Roster input: participants plus whitelist/blacklist/group/history rules.

The on-disk format is JSON::

    {
      "people": [{"name": "John", "email": "john@email.com"}, ...],
      "whitelist": [{"giver": "Sean", "receiver": "Shane"}],
      "blacklist": [{"giver": "Sean", "receiver": "Shane"}],
      "blacklist_sets": [["John", "Sean"]],
      "history": [
        {"year": 2024, "exclude_pairs": true,
         "pairs": [{"giver": "John", "receiver": "Shane"}, ...]}
      ]
    }

Every list except ``people`` may be omitted. Each history entry must carry an
integer ``year`` and a boolean ``exclude_pairs``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from pairs import Pair


class ConfigurationError(ValueError):
    """A roster references unknown people or is otherwise unusable."""


@dataclass(frozen=True)
class Person:
    name: str
    email: str


@dataclass(frozen=True)
class HistoryEntry:
    year: int
    exclude_pairs: bool
    pairs: Tuple[Pair[str], ...] = ()


@dataclass(frozen=True)
class Roster:
    people: Tuple[Person, ...]
    whitelist: Tuple[Pair[str], ...] = ()
    blacklist: Tuple[Pair[str], ...] = ()
    blacklist_sets: Tuple[Tuple[str, ...], ...] = ()
    history: Tuple[HistoryEntry, ...] = ()

    @property
    def names(self) -> List[str]:
        return [p.name for p in self.people]

    def person(self, name: str) -> Person:
        for p in self.people:
            if p.name == name:
                return p
        raise ConfigurationError(f"Person named '{name}' not found in people set.")


# -------------------- Parsing --------------------
def _pair_from_dict(raw: dict, where: str) -> Pair[str]:
    try:
        return Pair(str(raw["giver"]), str(raw["receiver"]))
    except (KeyError, TypeError) as exc:
        raise ConfigurationError(f"Malformed pair in '{where}': {raw!r}") from exc


def _pairs(raw: Iterable, where: str) -> Tuple[Pair[str], ...]:
    return tuple(_pair_from_dict(item, where) for item in raw or [])


def roster_from_dict(data: dict) -> Roster:
    if not isinstance(data, dict):
        raise ConfigurationError("Roster must be a JSON object")
    people: List[Person] = []
    for raw in data.get("people") or []:
        try:
            people.append(Person(name=str(raw["name"]), email=str(raw.get("email", ""))))
        except (KeyError, TypeError, AttributeError) as exc:
            raise ConfigurationError(f"Malformed person entry: {raw!r}") from exc

    history: List[HistoryEntry] = []
    for raw in data.get("history") or []:
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Malformed history entry: {raw!r}")
        year = raw.get("year")
        # bool is an int subclass; reject it along with strings and floats.
        if isinstance(year, bool) or not isinstance(year, int):
            raise ConfigurationError(f"History entry without a valid integer year: {raw!r}")
        flag = raw.get("exclude_pairs")
        if not isinstance(flag, bool):
            raise ConfigurationError(f"History {year} needs 'exclude_pairs' set to true or false: {raw!r}")
        history.append(HistoryEntry(
            year=year,
            exclude_pairs=flag,
            pairs=_pairs(raw.get("pairs"), f"history {year}"),
        ))

    return Roster(
        people=tuple(people),
        whitelist=_pairs(data.get("whitelist"), "whitelist"),
        blacklist=_pairs(data.get("blacklist"), "blacklist"),
        blacklist_sets=tuple(tuple(str(n) for n in group) for group in data.get("blacklist_sets") or []),
        history=tuple(history),
    )


def load_roster(path: Path) -> Roster:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Failed parsing {path}: {exc}") from exc
    return roster_from_dict(data)


def _pair_to_dict(pair: Pair[str]) -> Dict[str, str]:
    return {"giver": pair.giver, "receiver": pair.receiver}


def roster_to_dict(roster: Roster) -> dict:
    return {
        "people": [{"name": p.name, "email": p.email} for p in roster.people],
        "whitelist": [_pair_to_dict(p) for p in roster.whitelist],
        "blacklist": [_pair_to_dict(p) for p in roster.blacklist],
        "blacklist_sets": [list(group) for group in roster.blacklist_sets],
        "history": [
            {
                "year": entry.year,
                "exclude_pairs": entry.exclude_pairs,
                "pairs": [_pair_to_dict(p) for p in entry.pairs],
            }
            for entry in roster.history
        ],
    }


def default_roster() -> Roster:
    """Sample input printed by ``--write-default``."""

    john = Person("John", "john@email.com")
    sean = Person("Sean", "sean@email.com")
    shane = Person("Shane", "shane@email.com")
    return Roster(
        people=(john, sean, shane),
        whitelist=(Pair(sean.name, shane.name),),
        blacklist=(Pair(sean.name, shane.name),),
        blacklist_sets=((john.name, sean.name),),
        history=(
            HistoryEntry(
                year=2024,
                exclude_pairs=True,
                pairs=(
                    Pair(john.name, shane.name),
                    Pair(sean.name, john.name),
                    Pair(shane.name, sean.name),
                ),
            ),
        ),
    )


# -------------------- Validation --------------------
def _check_name(name: str, known: set, where: str) -> None:
    if name not in known:
        raise ConfigurationError(f"'{name}' present in {where} but not found in people set.")


def validate_roster(roster: Roster) -> Roster:
    """Confirm every name used by a rule is a participant.

    Returns the roster unchanged so the call can be chained; validating an
    already valid roster is a no-op.
    """

    if not roster.people:
        raise ConfigurationError("Roster has no people.")
    known: set = set()
    for p in roster.people:
        if p.name in known:
            raise ConfigurationError(f"Duplicate person named '{p.name}'.")
        known.add(p.name)

    for pair in roster.whitelist:
        _check_name(pair.giver, known, "whitelist")
        _check_name(pair.receiver, known, "whitelist")
    for pair in roster.blacklist:
        _check_name(pair.giver, known, "blacklist")
        _check_name(pair.receiver, known, "blacklist")
    for group in roster.blacklist_sets:
        for name in group:
            _check_name(name, known, "blacklist_sets")
    for entry in roster.history:
        for pair in entry.pairs:
            _check_name(pair.giver, known, f"history {entry.year} (giver)")
            _check_name(pair.receiver, known, f"history {entry.year} (receiver)")
    return roster


def sorted_history(roster: Roster) -> Tuple[HistoryEntry, ...]:
    """History newest first; only affects display order."""

    return tuple(sorted(roster.history, key=lambda entry: entry.year, reverse=True))
