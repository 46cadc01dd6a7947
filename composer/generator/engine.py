"""Single entry point turning a generation request into a workflow document."""

from typing import Any, List, Mapping, Optional, Union

import structlog

from composer.catalog import NodeCatalog, get_catalog
from composer.config import Settings, get_settings
from composer.errors import InvalidNameError, InvalidTimezoneError
from composer.generator.builder import GraphBuilder
from composer.generator.classifier import IntentClassifier
from composer.generator.segmenter import ClauseSegmenter
from composer.generator.serializer import DocumentMeta, download_filename, serialize, summarize
from composer.workflow.models import GeneratedWorkflow, GenerationRequest, ResolvedIntent

logger = structlog.get_logger(__name__)

RequestLike = Union[GenerationRequest, Mapping[str, Any]]


class WorkflowGenerator:
    """Runs segmentation, classification, graph building and serialization.

    Instances hold only the settings and the catalog, both read-only, so one
    generator can serve any number of requests.
    """

    def __init__(self, settings: Optional[Settings] = None, catalog: Optional[NodeCatalog] = None):
        self.settings = settings or get_settings()
        self.catalog = catalog or get_catalog()
        self.segmenter = ClauseSegmenter(self.settings)
        self.classifier = IntentClassifier(self.catalog)
        self.builder = GraphBuilder(self.settings)

    def validate(self, request: GenerationRequest) -> str:
        """Check request preconditions in order, returning the workflow name."""
        name = request.workflow_name.strip()
        if not name:
            raise InvalidNameError("Workflow name must not be empty.")

        self.segmenter.check_length(request.prompt)

        if not self.settings.is_supported_timezone(request.timezone):
            supported = ", ".join(self.settings.supported_timezones)
            raise InvalidTimezoneError(
                f"Unsupported timezone '{request.timezone}'. Choose one of: {supported}."
            )
        return name

    def explain(self, prompt: str) -> List[ResolvedIntent]:
        """Resolved intents of a prompt, without building a document."""
        return self.classifier.classify_all(self.segmenter.segment(prompt))

    def generate(self, request: RequestLike) -> GeneratedWorkflow:
        if not isinstance(request, GenerationRequest):
            request = GenerationRequest.model_validate(request)

        name = self.validate(request)
        intents = self.explain(request.prompt)
        graph = self.builder.build(intents, include_notes=request.include_notes, name=name)

        document = serialize(graph, DocumentMeta(name=name, timezone=request.timezone), self.settings)
        result = GeneratedWorkflow(
            document=document,
            node_summaries=tuple(summarize(graph)),
            filename=download_filename(name),
        )

        logger.info(
            "workflow_generated",
            name=name,
            nodes=len(graph),
            trigger=intents[0].descriptor.key,
            timezone=request.timezone,
        )
        return result


def generate_workflow(request: RequestLike, settings: Optional[Settings] = None) -> GeneratedWorkflow:
    """Generate an n8n workflow document from a request."""
    return WorkflowGenerator(settings).generate(request)


def explain(prompt: str, settings: Optional[Settings] = None) -> List[ResolvedIntent]:
    return WorkflowGenerator(settings).explain(prompt)
