# canvasflow/models.py
import uuid
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

# errors/on_error key for failures that belong to the run rather than a node;
# never valid as a node id
WORKFLOW_KEY = "workflow"


class NodeType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    CODE = "code"
    MODEL = "model"
    TEXT = "text"


class ExecutionStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ErrorPolicy(str, Enum):
    # stop-all: first node failure fails the whole run
    STOP_ALL = "stop-all"
    # descendants of a failed node are skipped, everything else still runs
    CONTINUE_INDEPENDENT_BRANCHES = "continue-independent-branches"


class Position(BaseModel):
    x: float = 0
    y: float = 0


class WorkflowNode(BaseModel):
    id: str
    # kept as a plain string so unregistered tags reach the dispatcher
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)
    position: Position = Field(default_factory=Position)
    connections: List[str] = Field(default_factory=list)


class WorkflowEdge(BaseModel):
    id: str
    source: str
    target: str
    type: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


class WorkflowExecution(BaseModel):
    id: str = Field(default_factory=lambda: f"workflow_{uuid.uuid4().hex[:12]}")
    nodes: List[WorkflowNode]
    edges: List[WorkflowEdge]
    status: ExecutionStatus = ExecutionStatus.PENDING
    current_step: int = 0
    # node id -> handler result / error message
    results: Dict[str, Any] = Field(default_factory=dict)
    errors: Dict[str, str] = Field(default_factory=dict)
    # structural failure message; never mirrored into `errors`
    error: Optional[str] = None
    skipped: List[str] = Field(default_factory=list)
    logs: List[str] = Field(default_factory=list)
