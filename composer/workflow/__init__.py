"""Workflow data model and graph."""

from composer.workflow.models import (
    Clause,
    ClauseKind,
    Connection,
    GeneratedWorkflow,
    GenerationRequest,
    NodeSummary,
    ResolvedIntent,
    WorkflowNode,
)
from composer.workflow.graph import WorkflowGraph

__all__ = [
    "Clause",
    "ClauseKind",
    "Connection",
    "GeneratedWorkflow",
    "GenerationRequest",
    "NodeSummary",
    "ResolvedIntent",
    "WorkflowNode",
    "WorkflowGraph",
]
