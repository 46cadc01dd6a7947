"""Data model shared by the generation pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from composer.catalog import NodeTypeDescriptor


class GenerationRequest(BaseModel):
    """Generate workflow request."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    workflow_name: str = Field(alias="workflowName")
    prompt: str
    timezone: str = "UTC"
    include_notes: bool = Field(default=True, alias="includeNotes")


class ClauseKind(Enum):
    """Role of a clause in the prompt."""
    TRIGGER = "trigger"
    ACTION = "action"


@dataclass(frozen=True)
class Clause:
    """One natural-language segment of the prompt."""
    text: str
    order: int
    kind: ClauseKind = ClauseKind.ACTION
    group: int = 0
    synthesized: bool = False

    @property
    def is_trigger(self) -> bool:
        return self.kind is ClauseKind.TRIGGER


@dataclass(frozen=True)
class ResolvedIntent:
    """A clause mapped to the node type that implements it."""
    kind: ClauseKind
    descriptor: NodeTypeDescriptor
    extracted_label: str
    clause: Clause


@dataclass
class WorkflowNode:
    """Node of a generated workflow graph."""
    name: str
    type_id: str
    type_version: Union[int, float]
    position: Tuple[int, int]
    parameters: Dict[str, Any] = field(default_factory=dict)
    notes: Optional[str] = None
    summary: str = ""
    kind: ClauseKind = ClauseKind.ACTION


@dataclass(frozen=True)
class Connection:
    """Directed edge between two nodes, addressed by arena index."""
    source: int
    target: int
    output_index: int = 0
    input_index: int = 0


@dataclass(frozen=True)
class NodeSummary:
    """Lightweight description of a node for list views."""
    name: str
    type: str
    summary: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.type, "summary": self.summary}


@dataclass(frozen=True)
class GeneratedWorkflow:
    """Result of one generation request."""
    document: str
    node_summaries: Tuple[NodeSummary, ...]
    filename: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        return {
            "document": self.document,
            "nodeSummaries": [s.to_dict() for s in self.node_summaries],
            "filename": self.filename,
        }
