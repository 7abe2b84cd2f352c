"""Summary command."""

import click

from payminder.cli.error_handling import require_login
from payminder.utils.amount_parser import format_amount


@click.command("summary")
@click.pass_context
def summary(ctx):
    """Show totals and payment counts."""
    app = require_login(ctx)
    ledger = app.ledger
    today = ledger.today()

    overdue = ledger.overdue_payments(today)
    upcoming = ledger.upcoming_payments(today)

    click.echo(f"\nPayments for {app.session.user.name} as of {today}:")
    click.echo("-" * 40)
    click.echo(f"{'Total due':<20} {format_amount(ledger.total_due()):>18}")
    click.echo(f"{'Total paid':<20} {format_amount(ledger.total_paid()):>18}")
    click.echo("-" * 40)
    click.echo(f"{'Active':<20} {len(ledger.active_payments()):>18}")
    click.echo(f"{'  Overdue':<20} {len(overdue):>18}")
    click.echo(f"{'  Upcoming':<20} {len(upcoming):>18}")
    click.echo(f"{'Paid':<20} {len(ledger.paid_payments()):>18}")
    click.echo(f"{'Archived':<20} {len(ledger.archived_payments()):>18}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
