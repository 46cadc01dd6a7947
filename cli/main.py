# cli/main.py
"""Main CLI entry point for Workflow Composer."""

import click

from composer import __version__
from composer.config import get_settings
from composer.log import configure_logging


@click.group()
@click.version_option(version=__version__)
def cli():
    """Workflow Composer CLI - Turn plain-language requests into n8n workflows."""
    configure_logging(get_settings().log_level)


# Import and register command groups
def register_commands():
    """Register all CLI commands."""
    from cli.commands.generate import explain, generate
    cli.add_command(generate)
    cli.add_command(explain)

    from cli.commands.catalog import catalog, timezones
    cli.add_command(catalog)
    cli.add_command(timezones)


# Register all commands
register_commands()


if __name__ == '__main__':
    cli()
