"""Workflow Composer - turn plain-language automation requests into n8n workflows."""

__version__ = "1.0.0"

from composer.errors import (
    EmptyPromptError,
    GenerationError,
    InvalidNameError,
    InvalidTimezoneError,
    UnresolvedTriggerError,
)
from composer.generator import WorkflowGenerator, explain, generate_workflow
from composer.workflow import GeneratedWorkflow, GenerationRequest

__all__ = [
    "EmptyPromptError",
    "GeneratedWorkflow",
    "GenerationError",
    "GenerationRequest",
    "InvalidNameError",
    "InvalidTimezoneError",
    "UnresolvedTriggerError",
    "WorkflowGenerator",
    "explain",
    "generate_workflow",
]
