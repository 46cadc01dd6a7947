"""Build a workflow graph from resolved intents."""

from typing import Any, Dict, Iterable, List, Optional, Sequence

import structlog

from composer.config import Settings, get_settings
from composer.generator.extractors import extract_parameters, merge_parameters
from composer.workflow.graph import WorkflowGraph
from composer.workflow.models import ResolvedIntent, WorkflowNode

logger = structlog.get_logger(__name__)


class _BlankDict(dict):
    """format_map helper rendering unknown fields as empty strings."""

    def __missing__(self, key):
        return ""


def unique_name(label: str, taken: Iterable[str]) -> str:
    """Label, or the label with the first free " 2", " 3", ... suffix."""
    taken = set(taken)
    if label not in taken:
        return label
    counter = 2
    while f"{label} {counter}" in taken:
        counter += 1
    return f"{label} {counter}"


def format_note(text: str) -> Optional[str]:
    note = text.strip()
    if not note:
        return None
    return note[0].upper() + note[1:]


def render_summary(template: str, parameters: Dict[str, Any]) -> str:
    if not template:
        return ""
    return template.format_map(_BlankDict(parameters))


def plan_steps(intents: Sequence[ResolvedIntent]) -> List[List[int]]:
    """Group intent indices into execution steps.

    The trigger is step 0. Each action is its own step unless it belongs to a
    run of destination actions split from the same comma item by a bare "and";
    such a run shares one step and fans out from the previous step.
    """
    steps: List[List[int]] = [[0]] if intents else []

    for index in range(1, len(intents)):
        intent = intents[index]
        current = steps[-1]
        last = intents[current[-1]]
        if (
            len(steps) > 1
            and intent.descriptor.destination
            and last.clause.group == intent.clause.group
            and all(intents[member].descriptor.destination for member in current)
        ):
            current.append(index)
        else:
            steps.append([index])

    return steps


class GraphBuilder:
    """Turns resolved intents into a validated WorkflowGraph."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def position(self, step: int, row: int) -> tuple:
        s = self.settings
        return (
            s.layout_origin_x + step * s.layout_step_x,
            s.layout_origin_y + row * s.layout_branch_step_y,
        )

    def create_node(self, intent: ResolvedIntent, name: str, position: tuple, include_notes: bool) -> WorkflowNode:
        descriptor = intent.descriptor
        parameters = merge_parameters(
            descriptor.parameters(),
            extract_parameters(descriptor, intent.clause.text),
        )

        return WorkflowNode(
            name=name,
            type_id=descriptor.type_id,
            type_version=descriptor.type_version,
            position=position,
            parameters=parameters,
            notes=format_note(intent.clause.text) if include_notes else None,
            summary=render_summary(descriptor.summary, parameters),
            kind=intent.kind,
        )

    def build(self, intents: Sequence[ResolvedIntent], include_notes: bool = False,
              name: str = "workflow") -> WorkflowGraph:
        """Create nodes in clause order and wire them step by step."""
        graph = WorkflowGraph(name)
        steps = plan_steps(intents)
        names: List[str] = []
        node_index: Dict[int, int] = {}

        for step_number, members in enumerate(steps):
            for row, intent_index in enumerate(members):
                intent = intents[intent_index]
                node_name = unique_name(intent.extracted_label, names)
                names.append(node_name)
                node = self.create_node(intent, node_name, self.position(step_number, row), include_notes)
                node_index[intent_index] = graph.add_node(node)

        for previous, members in zip(steps, steps[1:]):
            anchor = node_index[previous[0]]
            for intent_index in members:
                graph.connect(anchor, node_index[intent_index])

        graph.validate()
        logger.info(
            "graph_built",
            name=name,
            nodes=len(graph),
            connections=len(graph.connections),
            branches=sum(1 for members in steps if len(members) > 1),
        )
        return graph
