#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Secret Santa draw.

Reads a roster (people plus whitelist/blacklist/blacklist_sets/history rules),
finds up to ``MAX_ATTEMPTS`` edge-disjoint assignments with a SAT solver,
picks one at random and composes one message per giver. With ``--exec`` each
message is piped into a mail command; ``--dry-run`` echoes instead.

The organizer never needs to see the result: without ``--dry-run`` the pairs
are only printed inside the messages handed to the mail command.

Rules:

* nobody is their own Secret Santa
* everyone gives exactly once and receives exactly once
* if X gives to Y then Y does not give to X (longer cycles are fine)
* optional: people in the same blacklist set never give to each other
* optional: pairs from flagged history years are not repeated
"""

from __future__ import annotations

import argparse
import copy
import json
import random
import sys
from pathlib import Path

from compose_messages import FOOTER, SUBJECT_TEMPLATE, compose_messages
from dispatch_messages import DispatchError, dispatch
from oracle import DEFAULT_SOLVER
from pairs import pairs_by_giver
from roster import ConfigurationError, default_roster, load_roster, roster_to_dict, validate_roster
from solve_santa import DEFAULT_MAX_ATTEMPTS, UnsatisfiableError, choose_assignment, solve_roster
from visualize_assignment import assignment_cycles, assignment_problems, plot_assignment

SCRIPT_DIR = Path(__file__).resolve().parent

# =============== CONFIG ====================
DEFAULT_CONFIG = {
    # Upper bound on solver calls while collecting edge-disjoint candidates.
    "MAX_ATTEMPTS": DEFAULT_MAX_ATTEMPTS,
    # Any backend name accepted by pysat.solvers.Solver.
    "SOLVER": DEFAULT_SOLVER,
    "SUBJECT_TEMPLATE": SUBJECT_TEMPLATE,
    "FOOTER": FOOTER,
}


def build_config(overrides: dict | None = None) -> dict:
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if overrides:
        unknown = sorted(set(overrides) - set(DEFAULT_CONFIG))
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        cfg.update(copy.deepcopy(overrides))
    if int(cfg["MAX_ATTEMPTS"]) < 1:
        raise ValueError("MAX_ATTEMPTS must be >= 1")
    return cfg


def resolve_data_path(path: Path) -> Path:
    """Locate a file relative to CWD, falling back to the script directory.

    The fallback only applies when running from a source checkout (a
    ``pyproject.toml`` next to this script); an installed console script never
    looks inside site-packages.
    """

    if path.exists():
        return path
    if not path.is_absolute() and (SCRIPT_DIR / "pyproject.toml").exists():
        alt = SCRIPT_DIR / path
        if alt.exists():
            return alt
    return path

# =====================================================================

def parse_args(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Find a Secret Santa assignment without peeking")
    ap.add_argument("input", nargs="?", type=Path, metavar="FILE", help="Roster JSON file")
    ap.add_argument("--write-default", action="store_true",
                    help="Print a sample roster and exit")
    ap.add_argument("--exec", dest="exec_cmd",
                    help='Mail command: cat $body | $exec -s "$subject" "First <name@email.com>"')
    ap.add_argument("-n", "--dry-run", action="store_true",
                    help="Print the pairs and echo the mail command instead of running it")
    ap.add_argument("--seed", type=int, help="Seed for the random choice among candidates")
    ap.add_argument("--config", type=Path, help="Optional JSON file with CONFIG overrides")
    ap.add_argument("--plot", type=Path, help="Write a PNG of the assignment (dry run only)")
    args = ap.parse_args(argv)
    if not args.write_default and args.input is None:
        ap.error("the following arguments are required: FILE")
    if args.plot and not args.dry_run:
        ap.error("--plot reveals the assignment; combine it with --dry-run")
    return args


def run(args: argparse.Namespace) -> None:
    if args.write_default:
        print(json.dumps(roster_to_dict(default_roster()), indent=2))
        return

    overrides: dict | None = None
    if args.config:
        cfg_path = resolve_data_path(Path(args.config))
        try:
            overrides = json.loads(cfg_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Failed parsing config {args.config}: {exc}") from exc
    try:
        cfg = build_config(overrides)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid config: {exc}") from exc

    roster_path = resolve_data_path(args.input)
    if not roster_path.exists():
        raise ConfigurationError(f"Roster file not found: {args.input}")
    roster = validate_roster(load_roster(roster_path))

    solutions = solve_roster(roster, max_attempts=int(cfg["MAX_ATTEMPTS"]), solver_name=cfg["SOLVER"])
    print(f"Found {len(solutions)} independent solutions. Choosing one.")

    chosen = choose_assignment(solutions, random.Random(args.seed))
    problems = assignment_problems(chosen, roster.names)
    if problems:
        raise RuntimeError("Solver returned an invalid assignment: " + "; ".join(problems))

    if args.dry_run:
        for pair in pairs_by_giver(chosen):
            print(pair)
        lengths = ", ".join(str(len(c)) for c in assignment_cycles(chosen))
        print(f"[info] Cycle lengths: {lengths}")
        if args.plot:
            print(f"Wrote plot → {plot_assignment(chosen, args.plot)}")

    # Compose everything before sending anything.
    msgs = compose_messages(chosen, roster, subject_template=cfg["SUBJECT_TEMPLATE"], footer=cfg["FOOTER"])
    if args.exec_cmd:
        sent = dispatch(msgs, args.exec_cmd, dry_run=args.dry_run)
        if not args.dry_run:
            print(f"Sent {sent} messages via {args.exec_cmd}")
    elif not args.dry_run:
        print("[warn] No --exec command given; nothing was sent.", file=sys.stderr)


def main(argv=None) -> None:
    args = parse_args(argv)
    try:
        run(args)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(1)
    except UnsatisfiableError as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)
    except DispatchError as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
