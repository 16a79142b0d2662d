"""Compose one notification per giver for the chosen assignment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from pairs import Pair, pairs_by_giver
from roster import ConfigurationError, Roster, sorted_history

SUBJECT_TEMPLATE = "Secret Santa {giver}: Keep it secret! Keep it safe!"
FOOTER = """
* * *
Brought to you by secret-santa[1].

[1]: https://github.com/shanecelis/secret-santa
"""


@dataclass
class Message:
    subject: str
    body: str
    email: str


def givers_for(receiver: str, roster: Roster) -> List[str]:
    """Past givers to ``receiver`` as ``"Name (year)"``, newest year first."""

    return [
        f"{p.giver} ({entry.year})"
        for entry in sorted_history(roster)
        for p in entry.pairs
        if p.receiver == receiver
    ]


def receivers_for(giver: str, roster: Roster) -> List[str]:
    return [
        f"{p.receiver} ({entry.year})"
        for entry in sorted_history(roster)
        for p in entry.pairs
        if p.giver == giver
    ]


def join_names(items: List[str]) -> str:
    if len(items) == 1:
        return items[0]
    return ", ".join(items[:-1]) + f", and {items[-1]}"


def compose_message(
    pair: Pair[str],
    roster: Roster,
    *,
    subject_template: str = SUBJECT_TEMPLATE,
    footer: str = FOOTER,
) -> Message:
    giver, receiver = pair.giver, pair.receiver
    lines = [f"{giver}, you are the Secret Santa for {receiver}."]

    receivers = receivers_for(giver, roster)
    if receivers:
        lines += ["", f"You were Secret Santa for {join_names(receivers)}."]

    givers = givers_for(giver, roster)
    if givers:
        lines += ["", f"You had these Secret Santas in Christmases past: {join_names(givers)}."]

    body = "\n".join(lines) + "\n" + footer
    try:
        person = roster.person(giver)
    except ConfigurationError as exc:
        raise ConfigurationError(f"Failed to find email address for '{giver}'") from exc
    return Message(
        subject=subject_template.format(giver=giver, receiver=receiver),
        body=body,
        email=f"{giver} <{person.email}>",
    )


def compose_messages(pairs: Iterable[Pair[str]], roster: Roster, **kwargs) -> List[Message]:
    """Compose every message up front so no mail goes out if one fails."""

    return [compose_message(pair, roster, **kwargs) for pair in pairs_by_giver(pairs)]
