# git_graph_data.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Commit:
    """A commit as delivered by the log collaborator.

    `parents` is ordered: the first entry is the primary ancestor.
    `refs` holds the raw decoration labels, e.g. ['HEAD -> main', 'origin/main', 'tag: v1.0'].
    """

    hash: str
    parents: tuple[str, ...] = ()
    refs: tuple[str, ...] = ()
    message: str = ""
    author_name: str = ""
    author_email: str = ""
    date: str = ""

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    @property
    def is_root(self) -> bool:
        return not self.parents

    def __repr__(self) -> str:
        return (
            f"Commit(hash='{self.short_hash}', "
            f"parents={[p[:7] for p in self.parents]}, "
            f"refs={list(self.refs)}, "
            f"message='{self.message[:20]}')"
        )


@dataclass(frozen=True)
class GraphNode:
    """A commit with its lane, position and color."""

    commit: Commit
    row: int
    column: int
    x: float
    y: float
    color: str
    branch_label: Optional[str] = None

    @property
    def hash(self) -> str:
        return self.commit.hash


class EdgeKind(Enum):
    STRAIGHT = "straight"
    FORK = "fork"
    MERGE = "merge"
    TRUNCATED = "truncated"  # parent lies beyond the loaded window


@dataclass(frozen=True)
class Edge:
    """One ancestry line from a node down to one of its parents.

    `to_node` is None only for TRUNCATED edges.
    """

    from_node: GraphNode
    to_node: Optional[GraphNode]
    parent_hash: str
    kind: EdgeKind
    color_hint: str
    is_primary: bool = True


@dataclass(frozen=True)
class LegendEntry:
    label: str
    color: str


@dataclass(frozen=True)
class CommitGraph:
    """Result of one layout run over the loaded commit list."""

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[Edge, ...] = ()
    legend: tuple[LegendEntry, ...] = ()
    column_count: int = 0
    node_by_hash: dict = field(default_factory=dict, compare=False, repr=False)

    def node(self, commit_hash: str) -> Optional[GraphNode]:
        return self.node_by_hash.get(commit_hash)

    def __len__(self) -> int:
        return len(self.nodes)
