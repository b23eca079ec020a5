# git_graph_edges.py

from typing import Iterable, Optional, Sequence

from git_graph_config import DEFAULT_CONFIG, GraphConfig
from git_graph_data import Edge, EdgeKind, GraphNode, LegendEntry

# Order matters: "HEAD -> " must go before the refs/ prefixes it may wrap.
_REF_PREFIXES = ("HEAD -> ", "tag: ", "refs/heads/", "refs/tags/", "refs/remotes/")


def normalize_ref_label(ref: str) -> Optional[str]:
    """
    Turns a raw decoration into the name shown to the user.

    'HEAD -> main' -> 'main', 'tag: v1.0' -> 'v1.0', 'refs/remotes/origin/dev' -> 'origin/dev'.
    Symbolic HEADs ('HEAD', 'origin/HEAD') are position markers, not names, and give None.
    """
    label = ref.strip()
    for prefix in _REF_PREFIXES:
        if label.startswith(prefix):
            label = label[len(prefix) :]
    if not label or label == "HEAD" or label.endswith("/HEAD"):
        return None
    return label


def first_branch_label(refs: Iterable[str]) -> Optional[str]:
    for ref in refs:
        label = normalize_ref_label(ref)
        if label:
            return label
    return None


def truncate_label(label: str, max_chars: int) -> str:
    if len(label) <= max_chars:
        return label
    return label[: max(max_chars - 2, 1)] + ".."


def _classify(node: GraphNode, parent: GraphNode, is_primary: bool) -> EdgeKind:
    if parent.column == node.column:
        return EdgeKind.STRAIGHT
    # Secondary parents are merged-in history converging into this node.
    if not is_primary:
        return EdgeKind.MERGE
    if parent.column > node.column:
        return EdgeKind.FORK
    return EdgeKind.MERGE


def derive_edges(nodes: Sequence[GraphNode]) -> list[Edge]:
    """
    Builds one edge per parent link of every node.

    The first parent keeps the node's own color; later parents take the parent's color
    and are drawn lighter. A primary parent missing from the loaded window yields a
    single TRUNCATED stub in the node's lane. Missing secondary parents yield nothing.
    """
    by_hash = {node.hash: node for node in nodes}
    edges = []

    for node in nodes:
        for index, parent_hash in enumerate(node.commit.parents):
            is_primary = index == 0
            parent = by_hash.get(parent_hash)

            if parent is None:
                if is_primary:
                    edges.append(
                        Edge(
                            from_node=node,
                            to_node=None,
                            parent_hash=parent_hash,
                            kind=EdgeKind.TRUNCATED,
                            color_hint=node.color,
                        )
                    )
                continue

            edges.append(
                Edge(
                    from_node=node,
                    to_node=parent,
                    parent_hash=parent_hash,
                    kind=_classify(node, parent, is_primary),
                    color_hint=node.color if is_primary else parent.color,
                    is_primary=is_primary,
                )
            )

    return edges


def _color_for_label(nodes: Sequence[GraphNode], label: str, config: GraphConfig) -> str:
    for node in nodes:
        if any(normalize_ref_label(ref) == label for ref in node.commit.refs):
            return node.color
    return config.palette[0]


def derive_legend(
    nodes: Sequence[GraphNode], current_branch: Optional[str] = None, config: GraphConfig = DEFAULT_CONFIG
) -> list[LegendEntry]:
    """
    Collects the branch names for the legend, in first-seen row order.

    At most `config.legend_cap` names are collected. The checked-out branch is put in
    front when it is not among them, even if that makes the legend one entry longer.
    """
    legend: list[LegendEntry] = []
    seen: set[str] = set()

    for node in nodes:
        if len(legend) >= config.legend_cap:
            break
        label = node.branch_label
        if not label or label in seen:
            continue
        seen.add(label)
        legend.append(LegendEntry(label=label, color=node.color))

    if current_branch and current_branch not in seen:
        legend.insert(0, LegendEntry(label=current_branch, color=_color_for_label(nodes, current_branch, config)))

    return legend
