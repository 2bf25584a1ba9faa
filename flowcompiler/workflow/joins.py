""" Detect join points: nodes where branches of different conditions reconverge. """

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from ..graph.models import Edge, Node, index_nodes, incoming_edges
from .classifier import is_condition
from .paths import branch_label

DEFAULT_JOIN_TYPE = "waitForAll"
DEFAULT_JOIN_TIMEOUT = 300000
DEFAULT_ON_TIMEOUT = "continue"


@dataclass
class IncomingBranch:
    source_node_id: str
    condition: str
    parent_condition: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sourceNodeId": self.source_node_id,
            "condition": self.condition,
            "parentCondition": self.parent_condition,
        }


@dataclass
class JoinPoint:
    node_id: str
    type: str = DEFAULT_JOIN_TYPE
    incoming_branches: List[IncomingBranch] = field(default_factory=list)
    timeout: int = DEFAULT_JOIN_TIMEOUT
    on_timeout: str = DEFAULT_ON_TIMEOUT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodeId": self.node_id,
            "type": self.type,
            "incomingBranches": [b.to_dict() for b in self.incoming_branches],
            "settings": {"timeout": self.timeout, "onTimeout": self.on_timeout},
        }


def find_parent_condition(
    node_id: str,
    nodes_by_id: Dict[str, Node],
    edges: List[Edge],
    seen: Optional[Set[str]] = None,
) -> Optional[str]:
    """
    Walk backwards from ``node_id`` and return the id of the nearest
    condition ancestor, or None.

    ``seen`` is shared by the whole walk, so every node is expanded at most
    once. A node met again was either fully explored without finding a
    condition or sits on a cycle; both count as "no parent condition".
    """
    if seen is None:
        seen = set()
    if node_id not in nodes_by_id or node_id in seen:
        return None
    seen.add(node_id)

    for edge in incoming_edges(edges, node_id):
        source = nodes_by_id.get(edge.source)
        if source is None:
            continue
        if is_condition(source):
            return source.id
        parent = find_parent_condition(source.id, nodes_by_id, edges, seen)
        if parent is not None:
            return parent
    return None


def identify_join_points(nodes: List[Node], edges: List[Edge]) -> List[JoinPoint]:
    by_id = index_nodes(nodes)

    indegree: Dict[str, int] = {}
    for edge in edges:
        indegree[edge.target] = indegree.get(edge.target, 0) + 1

    join_points: List[JoinPoint] = []
    for node_id, count in indegree.items():
        if count < 2:
            continue

        branches = [
            IncomingBranch(
                source_node_id=edge.source,
                condition=branch_label(edge),
                parent_condition=find_parent_condition(edge.source, by_id, edges),
            )
            for edge in incoming_edges(edges, node_id)
        ]
        parents = {b.parent_condition for b in branches if b.parent_condition}
        if len(parents) < 2:
            continue

        data = by_id[node_id].data if node_id in by_id else {}
        join_points.append(JoinPoint(
            node_id=node_id,
            type=data.get("joinType") or DEFAULT_JOIN_TYPE,
            incoming_branches=branches,
            timeout=data.get("joinTimeout") or DEFAULT_JOIN_TIMEOUT,
            on_timeout=data.get("onJoinTimeout") or DEFAULT_ON_TIMEOUT,
        ))

    return join_points
