"""CLI error handling helpers."""

import click

from payminder.app import AppContext
from payminder.domain.errors import DomainError
from payminder.utils.payment_resolver import resolve_payment


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def require_login(ctx: click.Context) -> AppContext:
    """Return the app context, or exit when nobody is signed in."""
    app: AppContext = ctx.obj["app"]
    if not app.session.is_authenticated:
        click.echo("Error: Not logged in. Run 'payminder login' first.", err=True)
        ctx.exit(1)
    return app


def resolve_payment_or_exit(ctx: click.Context, app: AppContext, reference: str) -> str:
    """Resolve a payment reference, or exit with a CLI error."""
    try:
        return resolve_payment(app.ledger, reference)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
