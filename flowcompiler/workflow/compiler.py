""" Compile an editor graph into an executable workflow document, and validate it. """

import copy
import json
from dataclasses import dataclass, field
from logging import getLogger
from typing import Any, Dict, List, Optional

from ..graph.models import Edge, Node, Role, drop_dangling_edges, incoming_edges
from ..graph.schema import WorkflowMetadata, coerce_metadata
from .classifier import DEFAULT_RETRY_POLICY, classify, extract_settings
from .groups import generate_execution_groups
from .joins import identify_join_points
from .paths import ExecutionPath, build_execution_paths

logger = getLogger(__name__)

MANUAL_TRIGGER: Dict[str, Any] = {
    "id": "default-trigger",
    "type": "manual",
    "name": "Manual Trigger",
    "settings": {"triggerType": "manual"},
    "enabled": True,
}


@dataclass
class CompileResult:
    document: Dict[str, Any]
    errors: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


def _dependencies(edges: List[Edge], node_id: str) -> List[str]:
    return sorted({e.source for e in incoming_edges(edges, node_id)})


def _is_enabled(node: Node) -> bool:
    return node.data.get("enabled") is not False


def _compile_trigger(node: Node) -> Dict[str, Any]:
    return {
        "id": node.id,
        "type": node.type,
        "name": node.data.get("name") or f"Trigger {node.id}",
        "settings": extract_settings(node),
        "enabled": _is_enabled(node),
    }


def _compile_action(node: Node, edges: List[Edge]) -> Dict[str, Any]:
    settings = extract_settings(node)
    parameters = settings.get("parameters")
    if parameters is None:
        parameters = settings.get("customData") or {}
    return {
        "id": node.id,
        "type": node.type,
        "name": node.data.get("name") or f"Action {node.id}",
        "description": settings.get("label") or "",
        "parameters": parameters,
        "dependencies": _dependencies(edges, node.id),
        "retryPolicy": settings.get("retryPolicy") or dict(DEFAULT_RETRY_POLICY),
        "enabled": _is_enabled(node),
        "position": node.position,
    }


def _compile_condition(node: Node, paths: List[ExecutionPath], edges: List[Edge]) -> Dict[str, Any]:
    settings = extract_settings(node)
    data = node.data
    return {
        "id": node.id,
        "type": node.type,
        "expression": settings["condition"],
        "operator": settings["operator"],
        "value": settings["value"],
        "routing": {
            "type": data.get("routingType") or "if-else",
            "defaultBranch": data.get("defaultBranch") or "false",
            "paths": [p.to_dict() for p in paths],
            "parallelExecution": {
                "enabled": data.get("parallelExecution") is not False,
                "maxConcurrency": data.get("maxConcurrency") or -1,
                "failureHandling": data.get("failureHandling") or "continue",
            },
        },
        "dependencies": _dependencies(edges, node.id),
        "flowControl": {
            "joinType": data.get("joinType") or "waitForAll",
            "timeoutMs": data.get("timeoutMs") or 300000,
            "onTimeout": data.get("onTimeout") or "fail",
        },
    }


def _connection(edge: Edge) -> Dict[str, Any]:
    return {
        "id": edge.id,
        "source": edge.source,
        "target": edge.target,
        "label": edge.label or "",
        "type": edge.type or "default",
        "conditions": (edge.data or {}).get("conditions"),
    }


def compile_workflow(
    nodes: List[Node],
    edges: List[Edge],
    metadata: Optional[Any] = None,
) -> Dict[str, Any]:
    """
    Compile the editor graph into a workflow document.

    Dangling edges are dropped first. The inputs are not modified and the
    result depends only on the graph and the metadata.
    """
    meta: WorkflowMetadata = coerce_metadata(metadata)
    edges = drop_dangling_edges(nodes, edges)
    roles = {node.id: classify(node) for node in nodes}
    targets = {edge.target for edge in edges}

    triggers = [
        _compile_trigger(node) for node in nodes
        if roles[node.id] is Role.TRIGGER and node.id not in targets
    ]

    actions = [
        _compile_action(node, edges) for node in nodes
        if roles[node.id] not in (Role.TRIGGER, Role.CONDITION)
    ]

    condition_paths: Dict[str, List[ExecutionPath]] = {}
    conditions = []
    for node in nodes:
        if roles[node.id] is not Role.CONDITION:
            continue
        paths = list(build_execution_paths(node, nodes, edges).values())
        condition_paths[node.id] = paths
        conditions.append(_compile_condition(node, paths, edges))

    document: Dict[str, Any] = {
        "name": meta.name,
        "description": meta.description,
        "active": meta.active,
        "triggers": triggers or [dict(MANUAL_TRIGGER)],
        "actions": actions,
        "settings": {
            "execution": {
                "mode": meta.execution_mode,
                "timeout": meta.timeout,
                "retryPolicy": dict(meta.retry_policy),
            },
            "conditions": conditions,
            "executionFlow": {
                "executionGroups": [g.to_dict() for g in generate_execution_groups(condition_paths)],
                "joinPoints": [j.to_dict() for j in identify_join_points(nodes, edges)],
                "errorHandling": {
                    "strategy": meta.error_handling,
                    "maxRetries": meta.max_retries,
                    "retryDelay": meta.retry_delay,
                },
            },
            "connections": [_connection(edge) for edge in edges],
            "ui": {
                "layout": "flowchart",
                "nodes": [
                    {"id": n.id, "position": n.position, "type": n.type, "data": n.data}
                    for n in nodes
                ],
                "viewport": dict(meta.viewport),
            },
        },
    }

    audit = meta.extras()
    if audit:
        document["audit"] = audit
    return copy.deepcopy(document)


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def collect_validation_errors(document: Any) -> List[str]:
    """
    Return human-readable problems with a compiled document. Never raises,
    even on documents that do not have the expected shape.
    """
    if not isinstance(document, dict):
        return ["Workflow document must be a mapping"]

    errors: List[str] = []
    if not document.get("name"):
        errors.append("Workflow name is required")

    triggers = _as_list(document.get("triggers"))
    if not triggers:
        errors.append("At least one trigger is required")
    for index, trigger in enumerate(triggers):
        trigger = trigger if isinstance(trigger, dict) else {}
        if not trigger.get("id"):
            errors.append(f"Trigger {index} missing ID")
        if not trigger.get("type"):
            errors.append(f"Trigger {index} missing type")

    for index, action in enumerate(_as_list(document.get("actions"))):
        action = action if isinstance(action, dict) else {}
        if not action.get("id"):
            errors.append(f"Action {index} missing ID")
        if not action.get("type"):
            errors.append(f"Action {index} missing type")

    settings = document.get("settings")
    connections = settings.get("connections") if isinstance(settings, dict) else None
    for index, connection in enumerate(_as_list(connections)):
        connection = connection if isinstance(connection, dict) else {}
        if not connection.get("source") or not connection.get("target"):
            errors.append(f"Connection {index} missing source or target")

    return errors


def validate_workflow_document(document: Any, errors: Optional[List[str]] = None) -> bool:
    """
    Check a compiled document. Problems are appended to ``errors`` when a
    list is supplied; the return value tells whether the document is valid.
    """
    found = collect_validation_errors(document)
    if errors is not None:
        errors.extend(found)
    if found:
        logger.warning(f"Workflow validation errors: {found}")
    else:
        logger.debug("Workflow document validation passed")
    return not found


def generate_flow_document(
    nodes: List[Node],
    edges: List[Edge],
    metadata: Optional[Any] = None,
) -> CompileResult:
    """Compile and validate in one step; the document is returned even when invalid."""
    document = compile_workflow(nodes, edges, metadata)
    logger.debug(f"Generated workflow document: {json.dumps(document, indent=2, default=str)}")
    errors: List[str] = []
    validate_workflow_document(document, errors)
    return CompileResult(document=document, errors=errors)
