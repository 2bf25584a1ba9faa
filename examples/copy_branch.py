""" Example: copy a condition branch and its downstream subtree to the clipboard. """
from pathlib import Path

from flowcompiler.clipboard.store import GraphStateStore
from flowcompiler.graph.loader import load_flow_file


def main():
    graph = load_flow_file(Path(__file__).parent / "flows" / "order_approval.yaml")

    store = GraphStateStore()
    store.set_nodes_state(graph.nodes)
    store.set_edges_state(graph.edges)

    snapshot = store.copy_branch("manager_check")
    print("Copied nodes:", [n.id for n in snapshot.copied_nodes])
    print("Copied edges:", [e.id for e in snapshot.copied_edges])

    store.reset_clipboard()
    print("Clipboard after reset:", store.clipboard.to_dict())


if __name__ == "__main__":
    main()
