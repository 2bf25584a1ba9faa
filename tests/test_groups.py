"""Tests for execution group generation."""

from flowcompiler.workflow.groups import generate_execution_groups
from flowcompiler.workflow.paths import ActionRef, ExecutionPath


def _path(label, mode, *ids, **kwargs):
    actions = [ActionRef(node_id=i, node_type="actionNode", depends_on=["cond"]) for i in ids]
    return ExecutionPath(condition=label, execution_mode=mode, actions=actions, **kwargs)


def test_parallel_branch_with_several_actions():
    """A parallel branch with more than one action becomes a parallel group."""
    paths = {"cond": [_path("true", "parallel", "a", "b", max_concurrency=2, failure_handling="retry")]}

    groups = generate_execution_groups(paths)

    assert len(groups) == 1
    group = groups[0].to_dict()
    assert group["id"] == "cond-true-0"
    assert group["type"] == "parallel"
    assert group["condition"] == {"nodeId": "cond", "branch": "true"}
    assert [a["nodeId"] for a in group["actions"]] == ["a", "b"]
    assert all(a["parallel"] for a in group["actions"])
    assert group["actions"][1]["dependsOn"] == ["cond"]
    assert group["settings"] == {"maxConcurrency": 2, "failureHandling": "retry"}


def test_sequential_branch_rebuilds_a_strict_chain():
    """Sequential groups ignore recorded dependencies and chain in order."""
    paths = {"cond": [_path("false", "sequential", "a", "b", "c")]}

    group = generate_execution_groups(paths)[0].to_dict()

    assert group["type"] == "sequential"
    assert "settings" not in group
    assert [(a["nodeId"], a["order"], a["dependsOn"]) for a in group["actions"]] == [
        ("a", 0, []),
        ("b", 1, ["a"]),
        ("c", 2, ["b"]),
    ]
    assert not any(a["parallel"] for a in group["actions"])


def test_single_action_parallel_branch_is_sequential():
    """One action is never a parallel group."""
    group = generate_execution_groups({"cond": [_path("true", "parallel", "only")]})[0]

    assert group.type == "sequential"
    assert group.actions[0].depends_on == []


def test_empty_branches_emit_nothing_and_ids_use_branch_index():
    """Empty branches are skipped but still count towards the branch index."""
    paths = {
        "c1": [_path("true", "parallel"), _path("false", "parallel", "x")],
        "c2": [_path("default", "sequential", "y")],
    }

    groups = generate_execution_groups(paths)

    assert [g.id for g in groups] == ["c1-false-1", "c2-default-0"]


def test_generation_does_not_mutate_paths():
    """Paths are read, not rewritten."""
    path = _path("false", "sequential", "a", "b")

    generate_execution_groups({"cond": [path]})

    assert [a.depends_on for a in path.actions] == [["cond"], ["cond"]]
    assert [a.order for a in path.actions] == [0, 0]
