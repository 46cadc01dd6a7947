# cli/commands/catalog.py
"""Node catalog and settings inspection commands."""

import click

from composer.catalog import ACTION, TRIGGER, get_catalog
from composer.config import get_settings


@click.group()
def catalog():
    """Inspect the node catalog."""
    pass


@catalog.command(name='list')
@click.option('--category', type=click.Choice([TRIGGER, ACTION]), default=None, help='Only show one category')
def list_nodes(category):
    """List node types in match priority order."""
    descriptors = get_catalog().descriptors(category)

    click.echo("Available node types:")
    click.echo("-" * 60)

    current = None
    for descriptor in descriptors:
        if descriptor.category != current:
            current = descriptor.category
            click.echo(f"{current.capitalize()}s:")
        flags = []
        if descriptor.destination:
            flags.append("destination")
        if descriptor.fallback:
            flags.append("fallback")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        click.echo(f"  📦 {descriptor.key}: {descriptor.label} ({descriptor.type_id} v{descriptor.type_version}){suffix}")
        if descriptor.match_keywords:
            click.echo(f"     Keywords: {', '.join(descriptor.match_keywords)}")


@click.command()
def timezones():
    """List supported workflow timezones."""
    settings = get_settings()
    for timezone in settings.supported_timezones:
        marker = " (default)" if timezone == settings.default_timezone else ""
        click.echo(f"{timezone}{marker}")
