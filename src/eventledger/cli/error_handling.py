"""CLI error handling helpers."""

import click

from eventledger.domain.entities import BatchResult
from eventledger.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def report_batch(ctx: click.Context, result: BatchResult, verbose: bool = False) -> None:
    """Print the aggregate line of a batch operation; exit 1 if anything failed.

    Individual failures are only listed when ``verbose`` is set.
    """
    click.echo(result.summary())
    if verbose:
        for key, message in result.failed:
            click.echo(f"  {key}: {message}", err=True)
    if result.failure_count:
        ctx.exit(1)
