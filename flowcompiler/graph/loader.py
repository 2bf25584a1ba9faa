""" Load and validate an editor flow export (YAML or JSON). """

from pathlib import Path
from typing import Union

import yaml

from .models import Edge, FlowGraph, Node
from .schema import validate_flow


def load_flow(text: str) -> FlowGraph:
    """
    Load a FlowGraph from a YAML string. JSON exports parse the same way.
    """
    data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError("Flow export must be a mapping with 'nodes' and 'edges'")

    spec, _ = validate_flow(data)

    nodes = [
        Node(id=node.id, type=node.type, position=dict(node.position), data=dict(node.data))
        for node in spec.nodes
    ]

    edges = []
    for edge in spec.edges:
        edges.append(Edge(
            id=edge.id or f"e{edge.source}-{edge.target}",
            source=edge.source,
            target=edge.target,
            label=edge.label,
            type=edge.type,
            data=dict(edge.data),
        ))

    metadata = spec.metadata.model_dump(by_alias=True)
    return FlowGraph(nodes=nodes, edges=edges, metadata=metadata)


def load_flow_file(path: Union[str, Path]) -> FlowGraph:
    return load_flow(Path(path).read_text(encoding="utf-8"))
