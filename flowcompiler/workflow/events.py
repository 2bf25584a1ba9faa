"""
Editor event handlers.

Every structural edit (node added or deleted, edge connected or deleted)
recompiles the whole graph. The event is stamped into the metadata so the
resulting document carries an ``audit`` block, and the optional
GraphStateStore is brought up to date with the post-edit graph.
"""

from datetime import datetime, timezone
from logging import getLogger
from typing import Any, Callable, Dict, List, Optional

from ..clipboard.store import GraphStateStore
from ..graph.models import Edge, Node
from ..graph.schema import coerce_metadata
from .compiler import CompileResult, generate_flow_document

logger = getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _recompile(
    nodes: List[Node],
    edges: List[Edge],
    metadata: Optional[Any],
    store: Optional[GraphStateStore],
    now: Callable[[], str],
    **audit: Any,
) -> CompileResult:
    meta = coerce_metadata(metadata).model_dump(by_alias=True)
    meta.update(audit)
    meta["lastModified"] = now()
    if store is not None:
        store.set_nodes_state(nodes)
        store.set_edges_state(edges)
    logger.info(f"Recompiling workflow after {audit.get('lastAction')}")
    return generate_flow_document(nodes, edges, meta)


def on_node_add(
    new_node: Node,
    existing_nodes: List[Node],
    existing_edges: List[Edge],
    metadata: Optional[Any] = None,
    store: Optional[GraphStateStore] = None,
    now: Callable[[], str] = _now,
) -> CompileResult:
    nodes = [*existing_nodes, new_node]
    return _recompile(nodes, list(existing_edges), metadata, store, now, lastAction="node_added")


def on_node_delete(
    deleted_nodes: List[Node],
    remaining_nodes: List[Node],
    updated_edges: List[Edge],
    metadata: Optional[Any] = None,
    store: Optional[GraphStateStore] = None,
    now: Callable[[], str] = _now,
) -> CompileResult:
    return _recompile(
        list(remaining_nodes), list(updated_edges), metadata, store, now,
        lastAction="node_deleted",
        deletedNodes=[n.id for n in deleted_nodes],
    )


def on_edge_connect(
    new_edge: Edge,
    existing_nodes: List[Node],
    updated_edges: List[Edge],
    metadata: Optional[Any] = None,
    store: Optional[GraphStateStore] = None,
    now: Callable[[], str] = _now,
) -> CompileResult:
    return _recompile(
        list(existing_nodes), list(updated_edges), metadata, store, now,
        lastAction="edge_connected",
        lastConnection={"source": new_edge.source, "target": new_edge.target},
    )


def on_edge_delete(
    deleted_edges: List[Edge],
    existing_nodes: List[Node],
    remaining_edges: List[Edge],
    metadata: Optional[Any] = None,
    store: Optional[GraphStateStore] = None,
    now: Callable[[], str] = _now,
) -> CompileResult:
    return _recompile(
        list(existing_nodes), list(remaining_edges), metadata, store, now,
        lastAction="edge_deleted",
        deletedEdges=[e.id for e in deleted_edges],
    )


EVENT_HANDLERS: Dict[str, Any] = {
    "node_added": on_node_add,
    "node_deleted": on_node_delete,
    "edge_connected": on_edge_connect,
    "edge_deleted": on_edge_delete,
}
