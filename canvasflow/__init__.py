# canvasflow/__init__.py
from .engine import ExecutionCallbacks, WorkflowEngine, WorkflowExecutor
from .errors import (
    CycleOrDisconnectedGraphError,
    DanglingEdgeError,
    DuplicateNodeError,
    GraphStructureError,
    ReservedNodeIdError,
    UnknownNodeTypeError,
    WorkflowError,
)
from .handlers import HandlerRegistry, default_registry
from .models import (
    ErrorPolicy,
    ExecutionStatus,
    NodeType,
    WorkflowEdge,
    WorkflowExecution,
    WorkflowNode,
)
from .scheduler import topological_order

__all__ = [
    "CycleOrDisconnectedGraphError",
    "DanglingEdgeError",
    "DuplicateNodeError",
    "ErrorPolicy",
    "ExecutionCallbacks",
    "ExecutionStatus",
    "GraphStructureError",
    "HandlerRegistry",
    "ReservedNodeIdError",
    "NodeType",
    "UnknownNodeTypeError",
    "WorkflowEdge",
    "WorkflowEngine",
    "WorkflowError",
    "WorkflowExecution",
    "WorkflowExecutor",
    "WorkflowNode",
    "default_registry",
    "topological_order",
]
