"""Render workflow graphs in the n8n workflow import format."""

import json
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from composer.config import Settings, get_settings
from composer.workflow.graph import WorkflowGraph
from composer.workflow.models import NodeSummary, WorkflowNode

CONNECTION_TYPE = "main"
EXECUTION_ORDER = "v1"


@dataclass(frozen=True)
class DocumentMeta:
    """Workflow-level fields of the document."""
    name: str
    timezone: str = "UTC"


def node_id(workflow_name: str, node_name: str) -> str:
    """Stable node id, identical for identical workflow and node names."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"n8n-workflow:{workflow_name}/{node_name}"))


def render_node(node: WorkflowNode, workflow_name: str) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "parameters": node.parameters,
        "id": node_id(workflow_name, node.name),
        "name": node.name,
        "type": node.type_id,
        "typeVersion": node.type_version,
        "position": list(node.position),
    }
    if node.notes:
        data["notes"] = node.notes
        data["notesInFlow"] = True
    return data


def render_connections(graph: WorkflowGraph) -> Dict[str, Any]:
    """Connections keyed by source node name, targets in creation order."""
    connections: Dict[str, Any] = {}

    for index, node in enumerate(graph.nodes):
        outgoing = sorted(graph.outgoing(index), key=lambda c: (c.output_index, c.target))
        if not outgoing:
            continue

        outputs: List[List[Dict[str, Any]]] = [[] for _ in range(max(c.output_index for c in outgoing) + 1)]
        for connection in outgoing:
            outputs[connection.output_index].append({
                "node": graph.node(connection.target).name,
                "type": CONNECTION_TYPE,
                "index": connection.input_index,
            })
        connections[node.name] = {CONNECTION_TYPE: outputs}

    return connections


def render(graph: WorkflowGraph, meta: DocumentMeta) -> Dict[str, Any]:
    """Workflow document as a plain dictionary."""
    return {
        "name": meta.name,
        "nodes": [render_node(node, meta.name) for node in graph.nodes],
        "connections": render_connections(graph),
        "active": False,
        "settings": {
            "executionOrder": EXECUTION_ORDER,
            "timezone": meta.timezone,
        },
    }


def serialize(graph: WorkflowGraph, meta: DocumentMeta, settings: Optional[Settings] = None) -> str:
    """Workflow document as JSON text."""
    settings = settings or get_settings()
    return json.dumps(render(graph, meta), indent=settings.json_indent, ensure_ascii=False)


def summarize(graph: WorkflowGraph) -> List[NodeSummary]:
    return [NodeSummary(name=node.name, type=node.type_id, summary=node.summary) for node in graph.nodes]


def download_filename(name: str) -> str:
    """File name for a workflow, e.g. "Support Triage" -> "support-triage.json"."""
    return "-".join(name.split()).lower() + ".json"
