"""
Pytest configuration and fixtures for the workflow-composer project.
"""

import os
import sys
import json
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from composer.catalog import get_catalog
from composer.config import Settings, get_settings
from composer.generator import ClauseSegmenter, GraphBuilder, IntentClassifier, WorkflowGenerator
from composer.workflow import GenerationRequest


SUPPORT_TICKET_PROMPT = (
    "When a new support ticket is created, fetch the customer's details, "
    "update the Notion CRM page, and post a summary to Slack."
)


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
    """Isolate tests from COMPOSER_* variables and cached settings."""
    for key in list(os.environ):
        if key.startswith("COMPOSER_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Default settings without reading a .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def catalog():
    """The bundled node catalog."""
    return get_catalog()


@pytest.fixture
def segmenter(settings):
    return ClauseSegmenter(settings)


@pytest.fixture
def classifier(catalog):
    return IntentClassifier(catalog)


@pytest.fixture
def builder(settings):
    return GraphBuilder(settings)


@pytest.fixture
def generator(settings, catalog):
    return WorkflowGenerator(settings, catalog)


@pytest.fixture
def support_request():
    """The support-ticket enrichment request used throughout the docs."""
    return GenerationRequest(
        workflow_name="Support Ticket Enrichment",
        prompt=SUPPORT_TICKET_PROMPT,
        timezone="UTC",
        include_notes=True,
    )


@pytest.fixture
def intents_for(segmenter, classifier):
    """Segment and classify a prompt in one step."""
    def resolve(prompt):
        return classifier.classify_all(segmenter.segment(prompt))
    return resolve


@pytest.fixture
def document_for(generator):
    """Generate a prompt and return the parsed document."""
    def build(prompt, **overrides):
        request = {
            "workflowName": "Test Flow",
            "prompt": prompt,
            "timezone": "UTC",
            "includeNotes": True,
        }
        request.update(overrides)
        return json.loads(generator.generate(request).document)
    return build


@pytest.fixture
def support_prompt():
    return SUPPORT_TICKET_PROMPT
