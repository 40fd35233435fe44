from canvasflow.models import WorkflowEdge, WorkflowNode


def node(node_id, node_type="text", **data):
    return WorkflowNode(id=node_id, type=node_type, data=data)


def edge(source, target):
    return WorkflowEdge(id=f"{source}->{target}", source=source, target=target)


def chain(*ids):
    return [node(i) for i in ids], [edge(a, b) for a, b in zip(ids, ids[1:])]
