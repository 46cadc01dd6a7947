# cli/commands/generate.py
"""Workflow generation commands."""

import sys
from pathlib import Path
from typing import Optional

import click

from composer.config import get_settings
from composer.errors import GenerationError
from composer.generator import WorkflowGenerator
from composer.log import configure_logging
from composer.workflow import GenerationRequest


@click.command()
@click.argument('prompt')
@click.option('--name', '-n', default=None, help='Workflow name (also used for the file name)')
@click.option('--timezone', '-z', default=None, help='Timezone stored in the workflow settings')
@click.option('--notes/--no-notes', default=True, help='Attach each clause as a note on its node')
@click.option('--output', '-o', type=click.Path(file_okay=False, path_type=Path),
              default=Path('.'), help='Directory to write the workflow JSON into')
@click.option('--stdout', 'to_stdout', is_flag=True, help='Print the document instead of writing a file')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def generate(prompt: str, name: Optional[str], timezone: Optional[str], notes: bool,
             output: Path, to_stdout: bool, verbose: bool):
    """Generate an n8n workflow from a plain-language PROMPT."""
    settings = get_settings()
    if verbose:
        configure_logging("INFO")

    request = GenerationRequest(
        workflow_name=settings.default_workflow_name if name is None else name,
        prompt=prompt,
        timezone=timezone or settings.default_timezone,
        include_notes=notes,
    )

    try:
        result = WorkflowGenerator(settings).generate(request)
    except GenerationError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    if to_stdout:
        click.echo(result.document)
        return

    click.echo(f"🧩 Generated {len(result.node_summaries)} nodes:")
    for summary in result.node_summaries:
        click.echo(f"  • {summary.name} ({summary.type})")
        if summary.summary:
            click.echo(f"    {summary.summary}")

    output.mkdir(parents=True, exist_ok=True)
    target = output / result.filename
    target.write_text(result.document + "\n", encoding="utf-8")
    click.echo(f"✅ Saved workflow to {target}")


@click.command()
@click.argument('prompt')
def explain(prompt: str):
    """Show how each clause of PROMPT maps to a node type."""
    try:
        intents = WorkflowGenerator().explain(prompt)
    except GenerationError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    for intent in intents:
        clause = intent.clause
        marker = " (default)" if clause.synthesized else ""
        click.echo(f"{clause.order}. [{intent.kind.value}] {clause.text}{marker}")
        click.echo(f"   -> {intent.descriptor.label} ({intent.descriptor.type_id})")
