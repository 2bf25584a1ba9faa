"""
Branch path building for condition nodes.

Each outgoing edge of a condition node belongs to a branch, keyed by its
label. A branch collects the actions reachable from it; nested condition
nodes are not flattened but attached as sub-paths, recursively.

Recursion is guarded by an immutable ``visited`` set per call frame, so
sibling branches never see each other's guard state.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List

from ..graph.models import Edge, Node, index_nodes, outgoing_edges
from .classifier import is_condition

DEFAULT_BRANCH = "default"


@dataclass
class ActionRef:
    node_id: str
    node_type: str
    order: int = 0
    parallel: bool = True
    depends_on: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodeId": self.node_id,
            "nodeType": self.node_type,
            "order": self.order,
            "parallel": self.parallel,
            "dependsOn": list(self.depends_on),
        }


@dataclass
class SubPath:
    node_id: str
    node_type: str
    paths: List["ExecutionPath"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodeId": self.node_id,
            "nodeType": self.node_type,
            "paths": [p.to_dict() for p in self.paths],
        }


@dataclass
class ExecutionPath:
    condition: str
    execution_mode: str = "parallel"
    actions: List[ActionRef] = field(default_factory=list)
    sub_paths: List[SubPath] = field(default_factory=list)
    max_concurrency: int = -1
    failure_handling: str = "continue"

    def action_ids(self) -> List[str]:
        return [a.node_id for a in self.actions]

    def add_action(self, ref: ActionRef) -> None:
        # a node is listed once per branch
        if ref.node_id not in self.action_ids():
            self.actions.append(ref)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "condition": self.condition,
            "executionMode": self.execution_mode,
            "actions": [a.to_dict() for a in self.actions],
            "subPaths": [s.to_dict() for s in self.sub_paths],
        }


def branch_label(edge: Edge) -> str:
    """Branch key of an edge: its label, then ``data.condition``, then 'default'."""
    return edge.label or (edge.data or {}).get("condition") or DEFAULT_BRANCH


def _action_ref(target: Node, edge: Edge, predecessor: str) -> ActionRef:
    data = edge.data or {}
    return ActionRef(
        node_id=target.id,
        node_type=target.type,
        order=data.get("order") or 0,
        parallel=data.get("parallel") is not False,
        depends_on=[predecessor],
    )


def find_subsequent_nodes(
    node_id: str,
    nodes: List[Node],
    edges: List[Edge],
    visited: FrozenSet[str] = frozenset(),
) -> List[ActionRef]:
    """
    Breadth-first forward closure from ``node_id``.

    Collects every non-condition node reachable without crossing a condition
    node; each one depends on the node it was discovered from.
    """
    by_id = index_nodes(nodes)
    processed = set(visited)
    collected = set()
    queue = deque([node_id])
    subsequent: List[ActionRef] = []

    while queue:
        current = queue.popleft()
        if current in processed:
            continue
        processed.add(current)

        for edge in outgoing_edges(edges, current):
            target = by_id.get(edge.target)
            if target is None or is_condition(target):
                continue
            if target.id in processed or target.id in collected:
                continue
            collected.add(target.id)
            subsequent.append(_action_ref(target, edge, current))
            queue.append(target.id)

    return subsequent


def build_execution_paths(
    condition_node: Node,
    nodes: List[Node],
    edges: List[Edge],
    visited: FrozenSet[str] = frozenset(),
) -> Dict[str, ExecutionPath]:
    """
    Build the execution paths of ``condition_node`` keyed by branch label.

    Returns an empty mapping when the condition was already visited higher up
    the recursion (a back-edge).
    """
    if condition_node.id in visited:
        return {}
    frame_visited = visited | {condition_node.id}

    by_id = index_nodes(nodes)
    paths: Dict[str, ExecutionPath] = {}

    for edge in outgoing_edges(edges, condition_node.id):
        label = branch_label(edge)
        data = edge.data or {}
        if label not in paths:
            paths[label] = ExecutionPath(
                condition=label,
                execution_mode=data.get("executionMode") or "parallel",
                max_concurrency=data.get("maxConcurrency") or -1,
                failure_handling=data.get("failureHandling") or "continue",
            )
        path = paths[label]

        target = by_id.get(edge.target)
        if target is None:
            continue

        if is_condition(target):
            nested = build_execution_paths(target, nodes, edges, frame_visited)
            path.sub_paths.append(SubPath(
                node_id=target.id,
                node_type=target.type,
                paths=list(nested.values()),
            ))
            continue

        path.add_action(_action_ref(target, edge, condition_node.id))
        for ref in find_subsequent_nodes(target.id, nodes, edges, frame_visited):
            path.add_action(ref)

    return paths
