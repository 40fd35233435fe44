import pytest

from canvasflow.errors import (
    CycleOrDisconnectedGraphError,
    DanglingEdgeError,
    DuplicateNodeError,
    GraphStructureError,
    ReservedNodeIdError,
)
from canvasflow.scheduler import descendants, predecessors, topological_order

from tests.helpers import chain, edge, node


def _assert_precedence(order, edges):
    position = {node_id: i for i, node_id in enumerate(order)}
    for e in edges:
        assert position[e.source] < position[e.target], f"{e.source} must run before {e.target}"


def test_linear_chain_order():
    nodes, edges = chain("A", "B", "C")
    assert topological_order(nodes, edges) == ["A", "B", "C"]


def test_diamond_places_join_last():
    nodes = [node(i) for i in "ABCD"]
    edges = [edge("A", "B"), edge("A", "C"), edge("B", "D"), edge("C", "D")]
    order = topological_order(nodes, edges)
    assert order[0] == "A"
    assert order[-1] == "D"
    assert order in (["A", "B", "C", "D"], ["A", "C", "B", "D"])


def test_disconnected_acyclic_graph_contains_every_node_once():
    nodes = [node(i) for i in ("a", "b", "c", "x", "y")]
    edges = [edge("a", "b"), edge("b", "c"), edge("y", "x")]
    order = topological_order(nodes, edges)
    assert sorted(order) == ["a", "b", "c", "x", "y"]
    assert len(order) == len(set(order))
    _assert_precedence(order, edges)


def test_edges_listed_out_of_order():
    nodes = [node(i) for i in ("img", "txt", "vid", "aud")]
    edges = [edge("vid", "aud"), edge("img", "vid"), edge("txt", "img")]
    order = topological_order(nodes, edges)
    assert order == ["txt", "img", "vid", "aud"]


def test_isolated_node():
    assert topological_order([node("solo")], []) == ["solo"]


def test_empty_graph():
    assert topological_order([], []) == []


def test_cycle_rejected():
    nodes = [node(i) for i in "ABC"]
    edges = [edge("A", "B"), edge("B", "C"), edge("C", "A")]
    with pytest.raises(CycleOrDisconnectedGraphError) as exc:
        topological_order(nodes, edges)
    assert exc.value.scheduled == 0
    assert exc.value.total == 3
    assert "cycles" in str(exc.value)


def test_self_loop_rejected_but_rest_counted():
    nodes = [node("A"), node("B")]
    with pytest.raises(CycleOrDisconnectedGraphError) as exc:
        topological_order(nodes, [edge("A", "B"), edge("B", "B")])
    assert exc.value.scheduled == 1


def test_duplicate_node_id():
    with pytest.raises(DuplicateNodeError):
        topological_order([node("A"), node("A")], [])


def test_dangling_edge():
    with pytest.raises(DanglingEdgeError) as exc:
        topological_order([node("A")], [edge("A", "ghost")])
    assert exc.value.missing == "ghost"
    assert isinstance(exc.value, GraphStructureError)


def test_predecessors_and_descendants():
    edges = [edge("A", "B"), edge("A", "C"), edge("B", "D"), edge("C", "D"), edge("A", "B")]
    assert predecessors("D", edges) == ["B", "C"]
    assert predecessors("B", edges) == ["A"]
    assert predecessors("A", edges) == []
    assert descendants("A", edges) == {"B", "C", "D"}
    assert descendants("C", edges) == {"D"}
    assert descendants("D", edges) == set()


def test_reserved_workflow_id_rejected():
    with pytest.raises(ReservedNodeIdError) as exc:
        topological_order([node("workflow"), node("A")], [edge("workflow", "A")])
    assert exc.value.node_id == "workflow"
