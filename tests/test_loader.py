"""Tests for loading editor flow exports (YAML / JSON)."""

import json

import pytest

from flowcompiler.graph.loader import load_flow, load_flow_file
from flowcompiler.graph.schema import WorkflowMetadata, coerce_metadata


def test_load_flow_from_valid_yaml():
    """Test loading a flow export written in YAML."""
    yaml_text = """
metadata:
  name: approvals
  executionMode: parallel

nodes:
  - id: start
    type: triggerNode
    position: { x: 10, y: 20 }
    data: { label: Start }
  - id: check
    type: ifNode
    data: { condition: amount, operator: greaterThan, value: 10 }
  - id: notify
    type: emailAction

edges:
  - { id: e1, source: start, target: check }
  - { from: check, to: notify, label: "true" }
"""

    graph = load_flow(yaml_text)

    assert [n.id for n in graph.nodes] == ["start", "check", "notify"]
    assert graph.nodes[0].position == {"x": 10, "y": 20}
    assert graph.nodes[1].data["operator"] == "greaterThan"
    assert graph.nodes[2].position == {"x": 0, "y": 0}
    assert graph.edges[0].id == "e1"
    assert graph.edges[1].id == "echeck-notify"
    assert graph.edges[1].source == "check"
    assert graph.edges[1].target == "notify"
    assert graph.edges[1].label == "true"
    assert graph.metadata["name"] == "approvals"
    assert graph.metadata["executionMode"] == "parallel"


def test_load_flow_accepts_json_export():
    """JSON exports from the editor load through the same path."""
    raw = {
        "nodes": [{"id": "a", "type": "actionNode", "position": {"x": 0, "y": 0}, "data": {}}],
        "edges": [],
    }

    graph = load_flow(json.dumps(raw))

    assert len(graph.nodes) == 1
    assert graph.edges == []
    assert graph.metadata["name"] == "Untitled Workflow"


def test_load_flow_rejects_unknown_top_level_keys():
    """Unexpected top-level keys fail validation."""
    yaml_text = """
nodes: []
edges: []
layout: dagre
"""

    with pytest.raises(ValueError, match="Flow validation error"):
        load_flow(yaml_text)


def test_load_flow_rejects_edge_without_target():
    """Edges must name both endpoints."""
    yaml_text = """
nodes:
  - { id: a, type: actionNode }
edges:
  - { source: a }
"""

    with pytest.raises(ValueError, match="Flow validation error"):
        load_flow(yaml_text)


def test_load_flow_rejects_non_mapping():
    """A YAML list is not a flow export."""
    with pytest.raises(ValueError, match="must be a mapping"):
        load_flow("- a\n- b\n")


def test_load_flow_file(tmp_path):
    """Flows can be loaded straight from disk."""
    path = tmp_path / "flow.yaml"
    path.write_text("nodes:\n  - { id: a, type: actionNode }\nedges: []\n", encoding="utf-8")

    graph = load_flow_file(path)

    assert graph.nodes[0].id == "a"


def test_metadata_defaults_and_extras():
    """Metadata defaults match the editor's and unknown keys are kept."""
    meta = coerce_metadata({"name": "wf", "lastAction": "node_added"})

    assert meta.name == "wf"
    assert meta.execution_mode == "sequential"
    assert meta.timeout == 300000
    assert meta.retry_policy == {"enabled": True, "maxRetries": 3, "backoffStrategy": "exponential"}
    assert meta.error_handling == "stopOnError"
    assert meta.viewport == {"x": 0, "y": 0, "zoom": 1}
    assert meta.extras() == {"lastAction": "node_added"}
    assert coerce_metadata(None).extras() == {}
    assert coerce_metadata(meta) is meta
    assert isinstance(coerce_metadata({}), WorkflowMetadata)
