# ABOUTME: CLI package for pdflibrarian, built on Click.
# ABOUTME: Defines the root command group and registers subcommands.

import click

from pdflibrarian.cli.commands import lookup_cmd


@click.group()
@click.version_option(package_name="pdflibrarian")
def cli() -> None:
    """pdflibrarian - look up bibliographic metadata for PDF books and papers."""


cli.add_command(lookup_cmd.lookup)
