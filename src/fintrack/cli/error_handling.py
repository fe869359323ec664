"""CLI error handling helpers."""

import click
import requests

from fintrack.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_network_error(ctx: click.Context, error: requests.RequestException) -> None:
    """Render a backend failure and exit with failure."""
    click.echo(f"Error: Could not reach the backend: {error}", err=True)
    ctx.exit(1)
