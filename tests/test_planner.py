import asyncio

from canvasflow.engine import WorkflowExecutor
from canvasflow.models import ExecutionStatus, WorkflowEdge
from canvasflow.planner import (
    ALREADY_OPTIMIZED,
    create_workflow_from_intent,
    optimize_workflow,
    suggest_connections,
)

from tests.helpers import edge, node


def test_intent_draft_is_runnable():
    draft = create_workflow_from_intent("a castle at dawn")
    assert draft.description == "Workflow: a castle at dawn"
    assert [n.type for n in draft.nodes] == ["text", "image"]
    assert draft.nodes[0].data["prompt"] == "a castle at dawn"
    assert [(e.source, e.target) for e in draft.edges] == [("node1", "node2")]

    run = asyncio.run(WorkflowExecutor(draft.nodes, draft.edges).execute())
    assert run.status == ExecutionStatus.COMPLETED
    assert run.results["node2"]["metadata"]["inputs"] == ["node1"]


def test_suggest_connections_from_declared_targets():
    a = node("a")
    a.connections = ["b", "c", "missing", "a"]
    b = node("b")
    b.connections = ["c"]
    c = node("c")
    suggestions = suggest_connections([a, b, c], [edge("a", "b")])
    assert [(e.source, e.target) for e in suggestions] == [("a", "c"), ("b", "c")]
    assert all(e.type == "data-flow" for e in suggestions)


def test_suggest_connections_nothing_declared():
    assert suggest_connections([node("a"), node("b")]) == []


def test_optimize_drops_duplicate_and_dangling_edges():
    nodes = [node("a"), node("b")]
    edges = [
        edge("a", "b"),
        WorkflowEdge(id="dup", source="a", target="b"),
        WorkflowEdge(id="stray", source="a", target="zzz"),
    ]
    kept_nodes, kept_edges, notes = optimize_workflow(nodes, edges)
    assert kept_nodes == nodes
    assert [e.id for e in kept_edges] == ["a->b"]
    assert len(notes) == 2
    assert "dup" in notes[0]
    assert "stray" in notes[1]


def test_optimize_clean_workflow():
    _, kept_edges, notes = optimize_workflow([node("a"), node("b")], [edge("a", "b")])
    assert len(kept_edges) == 1
    assert notes == [ALREADY_OPTIMIZED]
