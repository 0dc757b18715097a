"""CLI error handling helpers."""

import click

from fintrack.domain.errors import AtomicWriteFailure, DomainError, ImportFailure


def handle_domain_error(
    ctx: click.Context, error: DomainError | AtomicWriteFailure | ImportFailure
) -> None:
    """Render a core error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
