""" Data models for the editor graph (nodes, edges, roles). """

from dataclasses import dataclass, field
from enum import Enum
from logging import getLogger
from typing import Any, Dict, List, Mapping, Optional

logger = getLogger(__name__)


class Role(str, Enum):
    """Semantic category of a node, derived from its declared type."""
    TRIGGER = "trigger"
    ACTION = "action"
    CONDITION = "condition"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Node:
    id: str
    type: str
    position: Dict[str, float] = field(default_factory=lambda: {"x": 0, "y": 0})
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Node":
        return cls(
            id=str(raw["id"]),
            type=raw.get("type") or "default",
            position=dict(raw.get("position") or {"x": 0, "y": 0}),
            data=dict(raw.get("data") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "position": dict(self.position),
            "data": dict(self.data),
        }


@dataclass(frozen=True)
class Edge:
    id: str
    source: str
    target: str
    label: Optional[str] = None
    type: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Edge":
        source = str(raw["source"])
        target = str(raw["target"])
        return cls(
            id=str(raw.get("id") or f"e{source}-{target}"),
            source=source,
            target=target,
            label=raw.get("label"),
            type=raw.get("type"),
            data=dict(raw.get("data") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.id, "source": self.source, "target": self.target}
        if self.label is not None:
            out["label"] = self.label
        if self.type is not None:
            out["type"] = self.type
        if self.data:
            out["data"] = dict(self.data)
        return out


@dataclass
class FlowGraph:
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


def index_nodes(nodes: List[Node]) -> Dict[str, Node]:
    """Map node id -> node. The first node wins on duplicate ids."""
    index: Dict[str, Node] = {}
    for node in nodes:
        index.setdefault(node.id, node)
    return index


def outgoing_edges(edges: List[Edge], node_id: str) -> List[Edge]:
    return [e for e in edges if e.source == node_id]


def incoming_edges(edges: List[Edge], node_id: str) -> List[Edge]:
    return [e for e in edges if e.target == node_id]


def drop_dangling_edges(nodes: List[Node], edges: List[Edge]) -> List[Edge]:
    """
    Return the edges whose source and target both reference existing nodes.
    Every dropped edge is logged as a warning; the input list is left untouched.
    """
    node_ids = {node.id for node in nodes}
    valid: List[Edge] = []
    for edge in edges:
        if edge.source not in node_ids or edge.target not in node_ids:
            logger.warning(
                f"Dropping edge {edge.id}: references unknown node ({edge.source} -> {edge.target})"
            )
            continue
        valid.append(edge)
    return valid
