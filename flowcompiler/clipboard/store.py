"""
Graph State Store: last-known node/edge snapshot plus the copied subgraph.

One instance is owned by the editing session and handed to whatever needs
copy/paste. Every setter overwrites the previous value wholesale; readers
may observe a snapshot that lags the latest edit.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from logging import getLogger
from typing import Any, Dict, List

from ..graph.models import Edge, Node
from ..workflow.subtree import extract_subtree

logger = getLogger(__name__)


@dataclass(frozen=True)
class ClipboardSnapshot:
    copied_nodes: List[Node] = field(default_factory=list)
    copied_edges: List[Edge] = field(default_factory=list)
    is_copy: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "copiedNodes": [n.to_dict() for n in self.copied_nodes],
            "copiedEdges": [e.to_dict() for e in self.copied_edges],
            "isCopy": self.is_copy,
        }


class GraphStateStore:
    """Holds the editor's graph snapshot and clipboard. Last writer wins."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._clipboard = ClipboardSnapshot()
        self._nodes: List[Node] = []
        self._edges: List[Edge] = []

    # ── Clipboard ──

    @property
    def clipboard(self) -> ClipboardSnapshot:
        return self._clipboard

    def set_copied(self, nodes: List[Node], edges: List[Edge]) -> None:
        """Replace the clipboard with ``nodes``/``edges`` and flag it as a copy."""
        snapshot = ClipboardSnapshot(list(nodes), list(edges), True)
        with self._lock:
            self._clipboard = snapshot
        logger.debug(f"Copied {len(snapshot.copied_nodes)} nodes and {len(snapshot.copied_edges)} edges")

    def reset_clipboard(self) -> None:
        with self._lock:
            self._clipboard = ClipboardSnapshot()

    def copy_branch(self, node_id: str) -> ClipboardSnapshot:
        """Copy ``node_id`` and everything downstream of it from the current snapshot."""
        with self._lock:
            nodes, edges = self._nodes, self._edges
        subtree = extract_subtree(node_id, nodes, edges)
        self.set_copied(subtree.sub_nodes, subtree.sub_edges)
        return self._clipboard

    # ── Graph snapshot ──

    @property
    def nodes_state(self) -> List[Node]:
        return list(self._nodes)

    @property
    def edges_state(self) -> List[Edge]:
        return list(self._edges)

    def set_nodes_state(self, nodes: List[Node]) -> None:
        with self._lock:
            self._nodes = list(nodes)

    def set_edges_state(self, edges: List[Edge]) -> None:
        with self._lock:
            self._edges = list(edges)
