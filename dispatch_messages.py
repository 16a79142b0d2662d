"""Hand composed messages to an external mail command.

For every message the command is run as::

    <exec tokens...> -s "<subject>" "Name <email>"

with the body on stdin, e.g. ``--exec mail`` or ``--exec "mutt -F muttrc"``.
"""

from __future__ import annotations

import shlex
import subprocess
import sys
from typing import Iterable, List, TextIO

from compose_messages import Message


class DispatchError(RuntimeError):
    def __init__(self, message: str, returncode: int):
        super().__init__(message)
        self.returncode = returncode


def build_command(exec_cmd: str, msg: Message) -> List[str]:
    tokens = shlex.split(exec_cmd)
    if not tokens:
        raise ValueError("Empty mail command")
    return tokens + ["-s", msg.subject, msg.email]


def dispatch(
    messages: Iterable[Message],
    exec_cmd: str,
    *,
    dry_run: bool = False,
    out: TextIO | None = None,
) -> int:
    """Send each message; returns how many commands were run (or echoed)."""

    out = out or sys.stdout
    count = 0
    for msg in messages:
        cmd = build_command(exec_cmd, msg)
        if dry_run:
            out.write(msg.body)
            if not msg.body.endswith("\n"):
                out.write("\n")
            out.write(shlex.join(cmd) + "\n")
        else:
            proc = subprocess.run(cmd, input=msg.body, text=True, check=False)
            if proc.returncode != 0:
                raise DispatchError(
                    f"Mail command failed for {msg.email} (exit {proc.returncode})",
                    proc.returncode,
                )
        count += 1
    return count
