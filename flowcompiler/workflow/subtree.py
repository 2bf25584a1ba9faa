""" Breadth-first extraction of the subgraph reachable from a node (copy/paste of a branch). """

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..graph.models import Edge, Node, index_nodes, outgoing_edges


@dataclass
class Subtree:
    sub_nodes: List[Node] = field(default_factory=list)
    sub_edges: List[Edge] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subNodes": [n.to_dict() for n in self.sub_nodes],
            "subEdges": [e.to_dict() for e in self.sub_edges],
        }


def extract_subtree(start_id: str, nodes: List[Node], edges: List[Edge]) -> Subtree:
    """
    Collect every node reachable from ``start_id`` along outgoing edges, and
    every edge leaving a visited node, in traversal order.

    A start id that is not a node still has its outgoing edges scanned.
    """
    by_id = index_nodes(nodes)
    visited = set()
    queue = deque([start_id])
    result = Subtree()

    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        visited.add(current)

        node = by_id.get(current)
        if node is not None:
            result.sub_nodes.append(node)

        for edge in outgoing_edges(edges, current):
            result.sub_edges.append(edge)
            if edge.target not in visited:
                queue.append(edge.target)

    return result
