# canvasflow/main.py
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .config import configure_logging, get_settings
from .engine import WorkflowEngine
from .errors import GraphStructureError
from .models import ErrorPolicy, WorkflowEdge, WorkflowNode
from .planner import create_workflow_from_intent, optimize_workflow, suggest_connections
from .scheduler import validate_graph

app = FastAPI(title="Canvas Workflow Engine")

engine = WorkflowEngine()


class CreateWorkflowPayload(BaseModel):
    nodes: List[WorkflowNode]
    edges: List[WorkflowEdge] = []
    error_policy: ErrorPolicy = Field(default_factory=lambda: get_settings().error_policy)


@app.post("/workflow/create")
async def create_workflow(payload: CreateWorkflowPayload):
    # reject dangling edges / duplicate ids up front; cycles surface at run time
    try:
        validate_graph(payload.nodes, payload.edges)
    except GraphStructureError as e:
        raise HTTPException(status_code=400, detail=str(e))
    workflow_id = engine.create_workflow(payload.nodes, payload.edges, payload.error_policy)
    return {"workflow_id": workflow_id}


class RunPayload(BaseModel):
    workflow_id: str
    run_in_background: Optional[bool] = False


@app.post("/workflow/run")
async def run_workflow(payload: RunPayload):
    try:
        run_id = await engine.run_workflow(payload.workflow_id, run_in_background=payload.run_in_background)
    except KeyError:
        raise HTTPException(status_code=404, detail="workflow not found")
    run = engine.get_run(run_id)
    return {"run_id": run_id, **run.model_dump(mode="json", exclude={"nodes", "edges"})}


@app.get("/workflow/status/{run_id}")
async def get_run_status(run_id: str):
    try:
        run = engine.get_run(run_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="run not found")
    return {"run_id": run_id, **run.model_dump(mode="json")}


@app.post("/workflow/cancel/{run_id}")
async def cancel_run(run_id: str):
    try:
        run = engine.cancel_run(run_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="run not found")
    return {"run_id": run_id, "status": run.status.value, "errors": run.errors}


@app.get("/handlers")
async def list_handlers():
    return {"handlers": engine.registry.types()}


class IntentPayload(BaseModel):
    intent: str


@app.post("/workflow/from-intent")
async def workflow_from_intent(payload: IntentPayload):
    return create_workflow_from_intent(payload.intent).model_dump(mode="json")


class GraphPayload(BaseModel):
    nodes: List[WorkflowNode]
    edges: List[WorkflowEdge] = []


@app.post("/workflow/suggest-connections")
async def workflow_suggest_connections(payload: GraphPayload):
    edges = suggest_connections(payload.nodes, payload.edges)
    return {"edges": [e.model_dump(mode="json") for e in edges]}


@app.post("/workflow/optimize")
async def workflow_optimize(payload: GraphPayload):
    nodes, edges, optimizations = optimize_workflow(payload.nodes, payload.edges)
    return {
        "nodes": [n.model_dump(mode="json") for n in nodes],
        "edges": [e.model_dump(mode="json") for e in edges],
        "optimizations": optimizations,
    }


if __name__ == "__main__":
    configure_logging()
    settings = get_settings()
    uvicorn.run("canvasflow.main:app", host=settings.host, port=settings.port, reload=True)
