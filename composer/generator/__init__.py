"""Natural-language to n8n workflow generation."""

from .builder import GraphBuilder
from .classifier import IntentClassifier
from .engine import WorkflowGenerator, explain, generate_workflow
from .segmenter import ClauseSegmenter, segment
from .serializer import DocumentMeta, download_filename, render, serialize, summarize

__all__ = [
    'ClauseSegmenter',
    'DocumentMeta',
    'GraphBuilder',
    'IntentClassifier',
    'WorkflowGenerator',
    'download_filename',
    'explain',
    'generate_workflow',
    'render',
    'segment',
    'serialize',
    'summarize',
]
