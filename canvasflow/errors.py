# canvasflow/errors.py


class WorkflowError(Exception):
    """Base class for workflow engine errors."""


class GraphStructureError(WorkflowError):
    """The graph cannot be scheduled. Raised before any node runs."""


class CycleOrDisconnectedGraphError(GraphStructureError):
    def __init__(self, scheduled: int, total: int):
        self.scheduled = scheduled
        self.total = total
        super().__init__("Workflow contains cycles or disconnected nodes")


class DuplicateNodeError(GraphStructureError):
    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Duplicate node id: {node_id}")


class DanglingEdgeError(GraphStructureError):
    def __init__(self, edge_id: str, missing: str):
        self.edge_id = edge_id
        self.missing = missing
        super().__init__(f"Edge {edge_id} references unknown node: {missing}")


class UnknownNodeTypeError(WorkflowError):
    def __init__(self, node_type: str):
        self.node_type = node_type
        super().__init__(f"Unknown node type: {node_type}")


class ReservedNodeIdError(GraphStructureError):
    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node id is reserved: {node_id}")
