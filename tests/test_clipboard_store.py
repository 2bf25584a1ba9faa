"""Tests for the clipboard / graph state store."""

from flowcompiler.clipboard.store import ClipboardSnapshot, GraphStateStore
from flowcompiler.graph.models import Edge, Node


def _graph():
    nodes = [Node("a", "triggerNode"), Node("b", "ifNode"), Node("c", "actionNode"), Node("d", "actionNode")]
    edges = [Edge("ab", "a", "b"), Edge("bc", "b", "c", label="true"), Edge("bd", "b", "d", label="false")]
    return nodes, edges


def test_new_store_is_empty():
    """A fresh store has an empty, non-copy clipboard."""
    store = GraphStateStore()

    assert store.clipboard == ClipboardSnapshot()
    assert store.clipboard.is_copy is False
    assert store.nodes_state == []
    assert store.edges_state == []


def test_set_copied_overwrites_wholesale():
    """Each copy replaces the previous clipboard instead of merging."""
    nodes, edges = _graph()
    store = GraphStateStore()

    store.set_copied(nodes[:2], edges[:1])
    store.set_copied(nodes[2:], [])

    assert [n.id for n in store.clipboard.copied_nodes] == ["c", "d"]
    assert store.clipboard.copied_edges == []
    assert store.clipboard.is_copy is True


def test_reset_clipboard():
    """Resetting clears the copied graph and the copy flag."""
    nodes, edges = _graph()
    store = GraphStateStore()
    store.set_copied(nodes, edges)

    store.reset_clipboard()

    assert store.clipboard.to_dict() == {"copiedNodes": [], "copiedEdges": [], "isCopy": False}


def test_snapshot_is_isolated_from_caller_lists():
    """Later edits to the caller's lists do not leak into the store."""
    nodes, edges = _graph()
    store = GraphStateStore()

    store.set_nodes_state(nodes)
    store.set_edges_state(edges)
    nodes.append(Node("x", "actionNode"))
    edges.clear()

    assert [n.id for n in store.nodes_state] == ["a", "b", "c", "d"]
    assert len(store.edges_state) == 3


def test_copy_branch_uses_current_snapshot():
    """Copying a branch stores the node and everything downstream of it."""
    nodes, edges = _graph()
    store = GraphStateStore()
    store.set_nodes_state(nodes)
    store.set_edges_state(edges)

    snapshot = store.copy_branch("b")

    assert [n.id for n in snapshot.copied_nodes] == ["b", "c", "d"]
    assert [e.id for e in snapshot.copied_edges] == ["bc", "bd"]
    assert snapshot.is_copy is True
    assert store.clipboard == snapshot


def test_stores_are_independent():
    """Two editor sessions never share clipboard state."""
    nodes, edges = _graph()
    first, second = GraphStateStore(), GraphStateStore()

    first.set_copied(nodes, edges)

    assert second.clipboard.is_copy is False
