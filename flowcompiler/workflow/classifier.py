""" Map editor node types to semantic roles and role-specific settings. """

from typing import Any, Dict, Union

from ..graph.models import Node, Role

_ROLE_MAP: Dict[str, Role] = {
    "triggerNode": Role.TRIGGER,
    "emailTrigger": Role.TRIGGER,
    "webhookTrigger": Role.TRIGGER,
    "scheduleTrigger": Role.TRIGGER,
    "actionNode": Role.ACTION,
    "emailAction": Role.ACTION,
    "httpAction": Role.ACTION,
    "databaseAction": Role.ACTION,
    "conditionalNode": Role.CONDITION,
    "ifNode": Role.CONDITION,
    "switchNode": Role.CONDITION,
    "colorNode": Role.CUSTOM,
    "textNode": Role.CUSTOM,
}

DEFAULT_RETRY_POLICY = {"maxRetries": 3, "delay": 1000}


def role_for_type(node_type: str) -> Role:
    """Total mapping from a node type string to its role; unknown types are custom."""
    return _ROLE_MAP.get(node_type, Role.CUSTOM)


def classify(node: Union[Node, str]) -> Role:
    node_type = node if isinstance(node, str) else node.type
    return role_for_type(node_type)


def is_condition(node: Node) -> bool:
    return classify(node) is Role.CONDITION


def extract_settings(node: Node) -> Dict[str, Any]:
    """
    Pull the role-appropriate settings out of ``node.data``, filling defaults.
    """
    data = node.data or {}
    settings: Dict[str, Any] = {
        "position": node.position,
        "label": data.get("label") or f"{node.type} node",
    }

    role = classify(node)
    if role is Role.TRIGGER:
        settings.update({
            "triggerType": data.get("triggerType") or "manual",
            "conditions": data.get("conditions") or [],
            "schedule": data.get("schedule"),
        })
    elif role is Role.CONDITION:
        settings.update({
            "condition": data.get("condition") or "",
            "operator": data.get("operator") or "equals",
            "value": data.get("value") or "",
            "branches": data.get("branches") or ["true", "false"],
        })
    elif role is Role.ACTION:
        settings.update({
            "actionType": data.get("actionType") or "custom",
            "parameters": data.get("parameters") or {},
            "retryPolicy": data.get("retryPolicy") or dict(DEFAULT_RETRY_POLICY),
        })
    elif node.type == "colorNode":
        settings.update({
            "color": data.get("color") or "#ff0000",
            "customProperties": data.get("customProperties") or {},
        })
    else:
        settings["customData"] = dict(data)

    return settings
