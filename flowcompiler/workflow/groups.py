""" Flatten condition branch paths into independently schedulable execution groups. """

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .paths import ActionRef, ExecutionPath


@dataclass
class ExecutionGroup:
    id: str
    type: str  # parallel | sequential
    condition_id: str
    branch: str
    actions: List[ActionRef] = field(default_factory=list)
    settings: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "condition": {"nodeId": self.condition_id, "branch": self.branch},
            "actions": [a.to_dict() for a in self.actions],
        }
        if self.settings is not None:
            out["settings"] = dict(self.settings)
        return out


def _parallel_group(group_id: str, condition_id: str, path: ExecutionPath) -> ExecutionGroup:
    actions = [
        ActionRef(
            node_id=a.node_id,
            node_type=a.node_type,
            order=a.order,
            parallel=True,
            depends_on=list(a.depends_on),
        )
        for a in path.actions
    ]
    return ExecutionGroup(
        id=group_id,
        type="parallel",
        condition_id=condition_id,
        branch=path.condition,
        actions=actions,
        settings={
            "maxConcurrency": path.max_concurrency,
            "failureHandling": path.failure_handling,
        },
    )


def _sequential_group(group_id: str, condition_id: str, path: ExecutionPath) -> ExecutionGroup:
    actions = []
    for index, a in enumerate(path.actions):
        actions.append(ActionRef(
            node_id=a.node_id,
            node_type=a.node_type,
            order=index,
            parallel=False,
            depends_on=[path.actions[index - 1].node_id] if index > 0 else [],
        ))
    return ExecutionGroup(
        id=group_id,
        type="sequential",
        condition_id=condition_id,
        branch=path.condition,
        actions=actions,
    )


def generate_execution_groups(condition_paths: Mapping[str, List[ExecutionPath]]) -> List[ExecutionGroup]:
    """
    Emit one group per non-empty branch of every condition.

    ``condition_paths`` maps a condition node id to its ordered branch paths.
    A parallel branch with more than one action becomes a parallel group
    keeping the recorded dependencies; any other non-empty branch becomes a
    strict sequential chain in path order.
    """
    groups: List[ExecutionGroup] = []
    for condition_id, paths in condition_paths.items():
        for index, path in enumerate(paths):
            group_id = f"{condition_id}-{path.condition}-{index}"
            if path.execution_mode == "parallel" and len(path.actions) > 1:
                groups.append(_parallel_group(group_id, condition_id, path))
            elif path.actions:
                groups.append(_sequential_group(group_id, condition_id, path))
    return groups
