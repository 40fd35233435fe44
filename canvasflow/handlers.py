# canvasflow/handlers.py
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Union

from .errors import UnknownNodeTypeError
from .generators import mock
from .models import NodeType, WorkflowNode

# (node, inputs keyed by predecessor id) -> result, sync or async
Handler = Callable[[WorkflowNode, Mapping[str, Any]], Union[Any, Awaitable[Any]]]


def _type_key(node_type: Union[str, NodeType]) -> str:
    return node_type.value if isinstance(node_type, NodeType) else str(node_type)


class HandlerRegistry:
    def __init__(self, handlers: Mapping[str, Handler] = None):
        self._handlers: Dict[str, Handler] = {}
        for node_type, fn in (handlers or {}).items():
            self.register(node_type, fn)

    def register(self, node_type: Union[str, NodeType], fn: Handler) -> Handler:
        key = _type_key(node_type).strip()
        if not key:
            raise ValueError("node_type must not be empty")
        self._handlers[key] = fn
        return fn

    def handler(self, node_type: Union[str, NodeType]):
        def decorator(fn: Handler) -> Handler:
            return self.register(node_type, fn)
        return decorator

    def get(self, node_type: Union[str, NodeType]) -> Handler:
        key = _type_key(node_type)
        try:
            return self._handlers[key]
        except KeyError:
            raise UnknownNodeTypeError(key) from None

    def types(self) -> List[str]:
        return sorted(self._handlers)

    def __contains__(self, node_type) -> bool:
        return _type_key(node_type) in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


def default_registry() -> HandlerRegistry:
    """Registry wired to the mock generation backends."""
    registry = HandlerRegistry()
    for node_type, fn in mock.MOCK_HANDLERS.items():
        registry.register(node_type, fn)
    return registry
