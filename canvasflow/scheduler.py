# canvasflow/scheduler.py
from collections import deque
from typing import Dict, Iterable, List, Sequence, Set

from .errors import (
    CycleOrDisconnectedGraphError,
    DanglingEdgeError,
    DuplicateNodeError,
    ReservedNodeIdError,
)
from .models import WORKFLOW_KEY, WorkflowEdge, WorkflowNode


def validate_graph(nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge]) -> None:
    """Reject reserved or duplicate node ids and edges pointing at nodes that do not exist."""
    seen: Set[str] = set()
    for node in nodes:
        if node.id == WORKFLOW_KEY:
            raise ReservedNodeIdError(node.id)
        if node.id in seen:
            raise DuplicateNodeError(node.id)
        seen.add(node.id)
    for edge in edges:
        for end in (edge.source, edge.target):
            if end not in seen:
                raise DanglingEdgeError(edge.id, end)


def topological_order(nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge]) -> List[str]:
    """
    Kahn's algorithm. Every edge source comes strictly before its target.
    Nodes that become ready together keep their insertion order, but callers
    should only rely on precedence.
    """
    validate_graph(nodes, edges)

    adjacency: Dict[str, List[str]] = {node.id: [] for node in nodes}
    in_degree: Dict[str, int] = {node.id: 0 for node in nodes}
    for edge in edges:
        adjacency[edge.source].append(edge.target)
        in_degree[edge.target] += 1

    queue = deque(node_id for node_id, degree in in_degree.items() if degree == 0)
    order: List[str] = []
    while queue:
        current = queue.popleft()
        order.append(current)
        for neighbor in adjacency[current]:
            in_degree[neighbor] -= 1
            if in_degree[neighbor] == 0:
                queue.append(neighbor)

    if len(order) < len(nodes):
        raise CycleOrDisconnectedGraphError(scheduled=len(order), total=len(nodes))
    return order


def predecessors(node_id: str, edges: Iterable[WorkflowEdge]) -> List[str]:
    """Sources of the edges feeding node_id, in edge order, without duplicates."""
    result: List[str] = []
    for edge in edges:
        if edge.target == node_id and edge.source not in result:
            result.append(edge.source)
    return result


def descendants(node_id: str, edges: Iterable[WorkflowEdge]) -> Set[str]:
    """Every node reachable from node_id (node_id itself excluded)."""
    adjacency: Dict[str, List[str]] = {}
    for edge in edges:
        adjacency.setdefault(edge.source, []).append(edge.target)

    found: Set[str] = set()
    stack = list(adjacency.get(node_id, []))
    while stack:
        current = stack.pop()
        if current in found:
            continue
        found.add(current)
        stack.extend(adjacency.get(current, []))
    found.discard(node_id)
    return found
