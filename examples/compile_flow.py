""" Example: compile an editor flow export into a workflow document. """
import json
import logging
import sys
from pathlib import Path

from flowcompiler.graph.loader import load_flow_file
from flowcompiler.workflow.compiler import generate_flow_document


def main():
    logging.basicConfig(level=logging.INFO)
    flow_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).parent / "flows" / "order_approval.yaml"
    graph = load_flow_file(flow_path)
    result = generate_flow_document(graph.nodes, graph.edges, graph.metadata)
    print(json.dumps(result.document, indent=2))
    if not result.valid:
        print("Validation errors:", result.errors)


if __name__ == '__main__':
    main()
