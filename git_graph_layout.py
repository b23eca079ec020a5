# git_graph_layout.py

import logging
from typing import Optional, Sequence

from git_graph_config import DEFAULT_CONFIG, GraphConfig
from git_graph_data import Commit, CommitGraph, GraphNode
from git_graph_edges import derive_edges, derive_legend, first_branch_label


def _smallest_free(active: set[int], start: int = 0) -> int:
    column = start
    while column in active:
        column += 1
    return column


def assign_lanes_with_rows(commits: Sequence[Commit]) -> tuple[dict[str, int], list[frozenset[int]]]:
    """
    Assigns a column (lane) to every commit and records the occupied columns per row.

    `commits` must be in reverse-topological order (children before parents, newest
    first), which is what `git log --topo-order` produces. The order is trusted, not
    checked: a parent listed before its child gets a lane of its own instead of joining
    the child's.

    A lane runs from a commit down to its primary parent. When a commit is reached,
    every lane heading for it converges there: the commit takes the smallest of those
    columns and the others are released. A commit with no lane heading for it is a
    branch tip and takes the smallest free column. A merge commit reserves a lane for
    each secondary parent that has none yet, so the parent is not mistaken for a tip
    later on. A root commit ends its lane.

    The column chosen for row i depends only on rows 0..i, so appending older commits
    never moves the lanes of commits already shown.

    Returns (column by hash, frozen set of active columns for each row).
    """
    column_of: dict[str, int] = {}
    # parent hash -> columns of the lanes currently heading for it
    pending: dict[str, list[int]] = {}
    active: set[int] = set()
    rows: list[frozenset[int]] = []

    for commit in commits:
        incoming = pending.pop(commit.hash, [])

        if incoming:
            column = min(incoming)
            for other in incoming:
                if other != column:
                    active.discard(other)
        else:
            column = _smallest_free(active)

        column_of[commit.hash] = column
        active.add(column)

        if commit.parents:
            pending.setdefault(commit.parents[0], []).append(column)

        for parent in commit.parents[1:]:
            if parent == commit.parents[0] or parent in pending or parent in column_of:
                continue
            # Reserved even when the parent lies beyond the loaded window: the column stays
            # empty (no edge, no stub) but does not shift once the next page arrives.
            reserved = _smallest_free(active, column + 1)
            active.add(reserved)
            pending[parent] = [reserved]

        rows.append(frozenset(active))

        if commit.is_root:
            active.discard(column)

    return column_of, rows


def assign_lanes(commits: Sequence[Commit]) -> dict[str, int]:
    """Returns the column assigned to every commit hash."""
    column_of, _ = assign_lanes_with_rows(commits)
    return column_of


def project(row: int, column: int, config: GraphConfig = DEFAULT_CONFIG) -> tuple[float, float]:
    """Maps a (row, column) cell to the x, y center of the commit dot."""
    x = config.left_margin + column * config.column_width
    y = (row + 0.5) * config.row_height
    return float(x), float(y)


def build_nodes(
    commits: Sequence[Commit], lanes: dict[str, int], config: GraphConfig = DEFAULT_CONFIG
) -> list[GraphNode]:
    nodes = []
    for row, commit in enumerate(commits):
        column = lanes[commit.hash]
        x, y = project(row, column, config)
        nodes.append(
            GraphNode(
                commit=commit,
                row=row,
                column=column,
                x=x,
                y=y,
                color=config.color_for_column(column),
                branch_label=first_branch_label(commit.refs),
            )
        )
    return nodes


def build_commit_graph(
    commits: Sequence[Commit], current_branch: Optional[str] = None, config: Optional[GraphConfig] = None
) -> CommitGraph:
    """
    Runs the whole layout pipeline: lanes, positions, edges and legend.

    Pure function of its arguments; callers re-run it whenever the loaded commit
    list changes (initial load, "load more", search, refresh).
    """
    config = config or DEFAULT_CONFIG
    if not commits:
        return CommitGraph()

    lanes = assign_lanes(commits)
    nodes = build_nodes(commits, lanes, config)
    edges = derive_edges(nodes)
    legend = derive_legend(nodes, current_branch, config)
    column_count = max(node.column for node in nodes) + 1

    logging.debug(
        "Graph layout: %d commits, %d edges, %d lanes, %d legend entries",
        len(nodes),
        len(edges),
        column_count,
        len(legend),
    )
    return CommitGraph(
        nodes=tuple(nodes),
        edges=tuple(edges),
        legend=tuple(legend),
        column_count=column_count,
        node_by_hash={node.hash: node for node in nodes},
    )
