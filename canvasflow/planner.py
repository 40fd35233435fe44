# canvasflow/planner.py
from typing import List, Sequence, Tuple

from pydantic import BaseModel

from .models import NodeType, Position, WorkflowEdge, WorkflowNode

DATA_FLOW = "data-flow"
ALREADY_OPTIMIZED = "Workflow is already optimized"


class WorkflowDraft(BaseModel):
    nodes: List[WorkflowNode]
    edges: List[WorkflowEdge]
    description: str


def create_workflow_from_intent(intent: str) -> WorkflowDraft:
    """
    Turn a free-text request into a starter workflow: a text node holding the
    request, feeding an image node.
    """
    text = WorkflowNode(
        id="node1",
        type=NodeType.TEXT.value,
        data={"prompt": intent},
        position=Position(x=100, y=100),
        connections=["node2"],
    )
    image = WorkflowNode(
        id="node2",
        type=NodeType.IMAGE.value,
        data={"prompt": "Generate image based on text"},
        position=Position(x=300, y=100),
    )
    edge = WorkflowEdge(id="edge1", source=text.id, target=image.id, type=DATA_FLOW)
    return WorkflowDraft(nodes=[text, image], edges=[edge], description=f"Workflow: {intent}")


def suggest_connections(
    nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge] = ()
) -> List[WorkflowEdge]:
    # a node's `connections` list names its intended targets
    known = {node.id for node in nodes}
    existing = {(edge.source, edge.target) for edge in edges}
    taken = {edge.id for edge in edges}
    suggestions: List[WorkflowEdge] = []
    for node in nodes:
        for target in node.connections:
            if target not in known or target == node.id or (node.id, target) in existing:
                continue
            edge_id = f"edge_{node.id}_{target}"
            while edge_id in taken:
                edge_id += "_"
            taken.add(edge_id)
            existing.add((node.id, target))
            suggestions.append(WorkflowEdge(id=edge_id, source=node.id, target=target, type=DATA_FLOW))
    return suggestions


def optimize_workflow(
    nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge]
) -> Tuple[List[WorkflowNode], List[WorkflowEdge], List[str]]:
    """Drop edges that point at missing nodes or repeat an existing source/target pair."""
    known = {node.id for node in nodes}
    seen = set()
    kept: List[WorkflowEdge] = []
    optimizations: List[str] = []
    for edge in edges:
        missing = [end for end in (edge.source, edge.target) if end not in known]
        if missing:
            optimizations.append(f"Removed edge {edge.id}: unknown node {missing[0]}")
            continue
        pair = (edge.source, edge.target)
        if pair in seen:
            optimizations.append(f"Removed duplicate edge {edge.id} ({edge.source} -> {edge.target})")
            continue
        seen.add(pair)
        kept.append(edge)
    return list(nodes), kept, optimizations or [ALREADY_OPTIMIZED]
