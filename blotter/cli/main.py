"""Main CLI entry point."""

import logging

import click

from blotter.cli.cases import cases
from blotter.cli.db import db


def setup_logging(verbose: bool = False):
    """Configure logging for CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def cli(verbose: bool):
    """Barangay Blotter CLI."""
    setup_logging(verbose)


cli.add_command(db)
cli.add_command(cases)


if __name__ == "__main__":
    cli()
