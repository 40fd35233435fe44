# canvasflow/generators/mock.py
import asyncio
from typing import Any, Callable, Dict, Mapping

from ..models import NodeType, WorkflowNode

# Stand-in generation backends. Real backends plug into a HandlerRegistry
# with the same (node, inputs) -> result contract.

MOCK_HANDLERS: Dict[str, Callable] = {}

LATENCY = 0.01


def register_mock(node_type: NodeType):
    def decorator(fn):
        MOCK_HANDLERS[node_type.value] = fn
        return fn
    return decorator


def _metadata(node: WorkflowNode, inputs: Mapping[str, Any]) -> Dict[str, Any]:
    meta: Dict[str, Any] = {"node_id": node.id, "inputs": sorted(inputs)}
    prompt = node.data.get("prompt")
    if prompt is not None:
        meta["prompt"] = prompt
    return meta


async def _media(node: WorkflowNode, inputs: Mapping[str, Any], kind: NodeType) -> Dict[str, Any]:
    await asyncio.sleep(LATENCY)
    return {"type": kind.value, "url": f"mock-{kind.value}-url", "metadata": _metadata(node, inputs)}


@register_mock(NodeType.IMAGE)
async def generate_image(node: WorkflowNode, inputs: Mapping[str, Any]) -> Dict[str, Any]:
    return await _media(node, inputs, NodeType.IMAGE)


@register_mock(NodeType.VIDEO)
async def generate_video(node: WorkflowNode, inputs: Mapping[str, Any]) -> Dict[str, Any]:
    return await _media(node, inputs, NodeType.VIDEO)


@register_mock(NodeType.AUDIO)
async def generate_audio(node: WorkflowNode, inputs: Mapping[str, Any]) -> Dict[str, Any]:
    return await _media(node, inputs, NodeType.AUDIO)


@register_mock(NodeType.MODEL)
async def generate_model(node: WorkflowNode, inputs: Mapping[str, Any]) -> Dict[str, Any]:
    """3-D model generation."""
    return await _media(node, inputs, NodeType.MODEL)


@register_mock(NodeType.CODE)
async def run_code(node: WorkflowNode, inputs: Mapping[str, Any]) -> Dict[str, Any]:
    await asyncio.sleep(LATENCY)
    return {"type": NodeType.CODE.value, "result": "mock-code-result", "metadata": _metadata(node, inputs)}


@register_mock(NodeType.TEXT)
async def generate_text(node: WorkflowNode, inputs: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Text node. Echoes data['prompt'] as content when set so downstream
    nodes can see what they were fed.
    """
    await asyncio.sleep(LATENCY)
    content = node.data.get("prompt") or "mock-text-content"
    return {"type": NodeType.TEXT.value, "content": content, "metadata": _metadata(node, inputs)}
