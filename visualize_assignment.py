"""Inspect a chosen assignment: giving cycles, invariant checks and a plot.

The plot reveals who gives to whom, so the CLI only offers it on dry runs.
"""
from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import networkx as nx

from pairs import Pair


def build_graph(assignment: Iterable[Pair[str]]) -> nx.DiGraph:
    graph = nx.DiGraph()
    for pair in assignment:
        graph.add_edge(pair.giver, pair.receiver)
    return graph


def _rotate(cycle: List[str]) -> List[str]:
    start = cycle.index(min(cycle))
    return cycle[start:] + cycle[:start]


def assignment_cycles(assignment: Iterable[Pair[str]]) -> List[List[str]]:
    """Giving cycles, each rotated to start at its smallest name.

    Longest cycles first; ties broken by the leading name.
    """

    cycles = [_rotate(list(c)) for c in nx.simple_cycles(build_graph(assignment))]
    cycles.sort(key=lambda c: (-len(c), c[0]))
    return cycles


def assignment_problems(assignment: Iterable[Pair[str]], names: Sequence[str]) -> List[str]:
    """List every broken structural rule; empty means the assignment is valid."""

    pairs = set(assignment)
    problems: List[str] = []
    gives = Counter(p.giver for p in pairs)
    gets = Counter(p.receiver for p in pairs)
    for name in names:
        if gives[name] != 1:
            problems.append(f"{name} gives {gives[name]} times")
        if gets[name] != 1:
            problems.append(f"{name} receives {gets[name]} times")
    known = set(names)
    for p in sorted(pairs):
        if p.giver not in known or p.receiver not in known:
            problems.append(f"{p} references an unknown person")
        if p.giver == p.receiver:
            problems.append(f"{p.giver} gives to themselves")
        elif p.giver < p.receiver and Pair(p.receiver, p.giver) in pairs:
            problems.append(f"{p.giver} and {p.receiver} give to each other")
    return problems


def _cycle_palette(cycles: List[List[str]]) -> Dict[str, str]:
    cmap = plt.get_cmap("tab10", max(3, len(cycles)))
    palette: Dict[str, str] = {}
    for idx, cycle in enumerate(cycles):
        for name in cycle:
            palette[name] = matplotlib.colors.rgb2hex(cmap(idx % cmap.N))
    return palette


def plot_assignment(assignment: Iterable[Pair[str]], out_path: Path, *, dpi: int = 150) -> Path:
    pairs = list(assignment)
    graph = build_graph(pairs)
    cycles = assignment_cycles(pairs)
    palette = _cycle_palette(cycles)

    fig, ax = plt.subplots(figsize=(9, 7))
    if len(graph.nodes) == 1:
        positions = {next(iter(graph.nodes)): (0.0, 0.0)}
    else:
        positions = nx.circular_layout(graph)
    nx.draw_networkx_nodes(
        graph,
        positions,
        node_color=[palette.get(n, "#cccccc") for n in graph.nodes],
        node_size=1100,
        alpha=0.92,
        ax=ax,
    )
    nx.draw_networkx_labels(graph, positions, font_size=8, ax=ax)
    nx.draw_networkx_edges(graph, positions, ax=ax, arrows=True, arrowsize=15,
                           edge_color="#555555", connectionstyle="arc3,rad=0.1")
    lengths = ", ".join(str(len(c)) for c in cycles)
    ax.set_title(f"Secret Santa assignment (cycle lengths: {lengths})")
    ax.set_axis_off()
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(out_path, dpi=dpi)
    plt.close(fig)
    return out_path
