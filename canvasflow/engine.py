# canvasflow/engine.py
import asyncio
import inspect
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Union

from pydantic import BaseModel

from .errors import GraphStructureError
from .handlers import HandlerRegistry, default_registry
from .models import (
    WORKFLOW_KEY,
    ErrorPolicy,
    ExecutionStatus,
    WorkflowEdge,
    WorkflowExecution,
    WorkflowNode,
)
from .scheduler import descendants, predecessors, topological_order

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Execution cancelled"


class ExecutionCallbacks(BaseModel):
    """Optional hooks; each may be a plain function or a coroutine function."""

    on_progress: Optional[Callable[[int, int, str], Any]] = None
    on_complete: Optional[Callable[[Dict[str, Any]], Any]] = None
    on_error: Optional[Callable[[str, str], Any]] = None


async def _notify(callback: Optional[Callable], *args) -> None:
    if callback is None:
        return
    res = callback(*args)
    if inspect.isawaitable(res):
        await res


def _error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class WorkflowExecutor:
    """
    Runs one workflow graph sequentially in topological order.

    Each node's handler receives the results of its direct predecessors keyed
    by predecessor id. Node failures are recorded on the execution record and
    never raised out of execute(); the error policy decides whether the run
    stops at the first failure (default) or keeps running the branches that
    do not depend on the failed node.
    """

    def __init__(
        self,
        nodes: Sequence[Union[WorkflowNode, dict]],
        edges: Sequence[Union[WorkflowEdge, dict]],
        callbacks: Optional[ExecutionCallbacks] = None,
        registry: Optional[HandlerRegistry] = None,
        error_policy: Union[ErrorPolicy, str] = ErrorPolicy.STOP_ALL,
    ):
        self.nodes: List[WorkflowNode] = [WorkflowNode.model_validate(n) for n in nodes]
        self.edges: List[WorkflowEdge] = [WorkflowEdge.model_validate(e) for e in edges]
        self.callbacks = callbacks or ExecutionCallbacks()
        self.registry = registry if registry is not None else default_registry()
        self.error_policy = ErrorPolicy(error_policy)
        self._cancelled = False
        self._execution = self._new_record()

    def _new_record(self) -> WorkflowExecution:
        return WorkflowExecution(
            nodes=[n.model_copy(deep=True) for n in self.nodes],
            edges=[e.model_copy(deep=True) for e in self.edges],
        )

    def _log(self, message: str, *args) -> None:
        self._execution.logs.append(message % args if args else message)
        logger.info("[%s] " + message, self._execution.id, *args)

    async def _call_handler(self, node: WorkflowNode, inputs: Dict[str, Any]) -> Any:
        """Look up the node's handler and call it (sync or async)."""
        handler = self.registry.get(node.type)
        res = handler(node, inputs)
        if inspect.isawaitable(res):
            res = await res
        return res

    def _collect_inputs(self, node_id: str) -> Dict[str, Any]:
        results = self._execution.results
        return {src: results[src] for src in predecessors(node_id, self.edges) if src in results}

    async def execute(self) -> WorkflowExecution:
        self._execution = self._new_record()

        if self._cancelled:
            self._mark_cancelled()
            return self.get_status()

        try:
            return await self._run()
        except Exception as e:
            # only callbacks can get here; handler errors are recorded per node
            logger.exception("[%s] run crashed", self._execution.id)
            self.abort(_error_message(e))
            return self.get_status()

    async def _run(self) -> WorkflowExecution:
        run = self._execution
        try:
            order = topological_order(self.nodes, self.edges)
        except GraphStructureError as e:
            run.status = ExecutionStatus.FAILED
            run.error = str(e)
            self._log("structural error: %s", e)
            await _notify(self.callbacks.on_error, str(e), WORKFLOW_KEY)
            return self.get_status()

        run.status = ExecutionStatus.RUNNING
        self._log("running %d node(s): %s", len(order), ", ".join(order))
        nodes_by_id = {node.id: node for node in self.nodes}
        total = len(order)
        blocked: Set[str] = set()

        for step, node_id in enumerate(order, start=1):
            if self._cancelled:
                self._log("cancelled before %s", node_id)
                return self.get_status()

            run.current_step = step
            if node_id in blocked:
                run.skipped.append(node_id)
                self._log("%s skipped: upstream failure", node_id)
                continue

            await _notify(self.callbacks.on_progress, step, total, node_id)
            node = nodes_by_id[node_id]
            inputs = self._collect_inputs(node_id)
            self._log("running %s (%s) with inputs from %s", node_id, node.type, sorted(inputs))

            try:
                result = await self._call_handler(node, inputs)
            except Exception as e:
                message = _error_message(e)
                run.errors[node_id] = message
                self._log("%s failed: %s", node_id, message)
                await _notify(self.callbacks.on_error, message, node_id)
                if self._should_stop_on_error(node_id):
                    run.status = ExecutionStatus.FAILED
                    return self.get_status()
                blocked.update(descendants(node_id, self.edges))
                continue

            run.results[node_id] = result
            self._log("%s done", node_id)

        if self._cancelled:
            return self.get_status()

        if run.errors:
            run.status = ExecutionStatus.FAILED
            self._log("finished with %d failed node(s)", len(run.errors))
            return self.get_status()

        run.status = ExecutionStatus.COMPLETED
        self._log("completed")
        await _notify(self.callbacks.on_complete, dict(run.results))
        return self.get_status()

    def _should_stop_on_error(self, node_id: str) -> bool:
        return self.error_policy is ErrorPolicy.STOP_ALL

    def _mark_cancelled(self) -> None:
        self._execution.status = ExecutionStatus.FAILED
        self._execution.errors[WORKFLOW_KEY] = CANCELLED_MESSAGE

    def get_status(self) -> WorkflowExecution:
        """Snapshot of the current record; changes to it do not reach the executor."""
        return self._execution.model_copy(deep=True)

    def cancel(self) -> None:
        """
        Cooperative cancel. A handler already in flight finishes and its
        result is kept; no further node is started.
        """
        self._cancelled = True
        self._mark_cancelled()
        self._log("cancel requested")

    def abort(self, message: str) -> None:
        """Fail the run for a reason outside any node (e.g. a crashing callback)."""
        self._execution.status = ExecutionStatus.FAILED
        self._execution.error = message
        self._log("aborted: %s", message)


class WorkflowEngine:
    """In-memory store of workflow definitions and their runs."""

    def __init__(self, registry: Optional[HandlerRegistry] = None):
        self.registry = registry if registry is not None else default_registry()
        self.workflows: Dict[str, Dict[str, Any]] = {}
        self.runs: Dict[str, WorkflowExecutor] = {}
        self._tasks: Set[asyncio.Task] = set()

    def create_workflow(
        self,
        nodes: Sequence[Union[WorkflowNode, dict]],
        edges: Sequence[Union[WorkflowEdge, dict]],
        error_policy: Union[ErrorPolicy, str] = ErrorPolicy.STOP_ALL,
    ) -> str:
        workflow_id = str(uuid.uuid4())
        self.workflows[workflow_id] = {
            "nodes": [WorkflowNode.model_validate(n) for n in nodes],
            "edges": [WorkflowEdge.model_validate(e) for e in edges],
            "error_policy": ErrorPolicy(error_policy),
        }
        return workflow_id

    async def run_workflow(
        self,
        workflow_id: str,
        callbacks: Optional[ExecutionCallbacks] = None,
        run_in_background: bool = False,
    ) -> str:
        if workflow_id not in self.workflows:
            raise KeyError("workflow not found")

        spec = self.workflows[workflow_id]
        executor = WorkflowExecutor(
            spec["nodes"],
            spec["edges"],
            callbacks=callbacks,
            registry=self.registry,
            error_policy=spec["error_policy"],
        )
        run_id = str(uuid.uuid4())
        self.runs[run_id] = executor

        if run_in_background:
            task = asyncio.create_task(executor.execute())
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        else:
            await executor.execute()

        return run_id

    def get_run(self, run_id: str) -> WorkflowExecution:
        if run_id not in self.runs:
            raise KeyError("run not found")
        return self.runs[run_id].get_status()

    def cancel_run(self, run_id: str) -> WorkflowExecution:
        if run_id not in self.runs:
            raise KeyError("run not found")
        executor = self.runs[run_id]
        executor.cancel()
        return executor.get_status()


__all__ = [
    "CANCELLED_MESSAGE",
    "ExecutionCallbacks",
    "WORKFLOW_KEY",
    "WorkflowEngine",
    "WorkflowExecutor",
]
