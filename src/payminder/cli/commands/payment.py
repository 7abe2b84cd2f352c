"""Payment management commands."""

import click

from payminder.cli.error_handling import (
    handle_domain_error,
    require_login,
    resolve_payment_or_exit,
)
from payminder.cli.notifier import ConsoleNotifier
from payminder.domain.entities import NotificationType, Payment, PaymentState
from payminder.domain.errors import DomainError, delete_requires_archive
from payminder.domain.notifications import describe_due
from payminder.utils.amount_parser import format_amount, parse_amount
from payminder.utils.date_parser import days_until_due, parse_date

SHORT_ID = 8


def _short_id(payment: Payment) -> str:
    return payment.id[:SHORT_ID]


def _status(payment: Payment, today) -> str:
    """Status column text, e.g. "overdue by 2 days" or "paid"."""
    if payment.state is not PaymentState.ACTIVE:
        return payment.state.value
    return describe_due(days_until_due(payment.due_date, today)).removeprefix("is ")


def _parse_due_date(ctx, value: str):
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid due date: {e}", err=True)
        ctx.exit(1)


def _parse_amount(ctx, value: str):
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount: {e}", err=True)
        ctx.exit(1)


@click.group()
def payment_group():
    """Manage payments."""
    pass


@payment_group.command("add")
@click.option("--title", required=True, help="Payment title")
@click.option(
    "--due-date",
    required=True,
    help="Due date (YYYY-MM-DD or relative like 'tomorrow', 'in 10 days')",
)
@click.option("--amount", default="0", show_default=True, help="Amount (e.g., 49.99)")
@click.option("--description", default="", help="Description")
@click.pass_context
def add_payment(ctx, title: str, due_date: str, amount: str, description: str):
    """Record an upcoming payment.

    Examples:
        payminder payment add --title "Rent" --due-date 2025-01-01 --amount 1200
        payminder payment add --title "Gym" --due-date "in 10 days" --amount 35
    """
    app = require_login(ctx)
    due = _parse_due_date(ctx, due_date)
    value = _parse_amount(ctx, amount)

    scheduler = app.create_scheduler(notifier=ConsoleNotifier())
    stop_listening = scheduler.listen()
    try:
        payment = app.ledger.add_payment(
            title=title, due_date=due, amount=value, description=description
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    finally:
        stop_listening()

    click.echo(f"Added payment '{payment.title}' (ID: {payment.id})")
    click.echo(f"  Due: {payment.due_date}")
    click.echo(f"  Amount: {format_amount(payment.amount)}")
    for notification in scheduler.notifications():
        if notification.type is NotificationType.PAYMENT_ADDED:
            click.echo(f"{notification.title}: {notification.message}")


@payment_group.command("list")
@click.option(
    "--show",
    "view",
    type=click.Choice(["active", "overdue", "upcoming", "paid", "archived", "all"]),
    default="active",
    show_default=True,
    help="Which payments to list",
)
@click.pass_context
def list_payments(ctx, view: str):
    """List payments.

    Active payments are listed by default; overdue and upcoming split them
    by due date.
    """
    app = require_login(ctx)
    ledger = app.ledger
    today = ledger.today()

    views = {
        "active": ledger.active_payments,
        "paid": ledger.paid_payments,
        "archived": ledger.archived_payments,
        "all": ledger.list_payments,
        "overdue": lambda: ledger.overdue_payments(today),
        "upcoming": lambda: ledger.upcoming_payments(today),
    }
    payments = views[view]()

    if not payments:
        click.echo(f"No {view} payments found." if view != "all" else "No payments found.")
        return

    click.echo(f"\nFound {len(payments)} payment(s):")
    click.echo("-" * 90)
    click.echo(f"{'ID':<10} {'Title':<28} {'Due':<12} {'Amount':>12}  {'Status':<24}")
    click.echo("-" * 90)
    for payment in payments:
        click.echo(
            f"{_short_id(payment):<10} {payment.title[:28]:<28} {str(payment.due_date):<12} "
            f"{format_amount(payment.amount):>12}  {_status(payment, today):<24}"
        )


@payment_group.command("show")
@click.argument("payment", metavar="PAYMENT")
@click.pass_context
def show_payment(ctx, payment: str):
    """Show one payment.

    PAYMENT can be a payment ID, an ID prefix or the exact title.
    """
    app = require_login(ctx)
    payment_id = resolve_payment_or_exit(ctx, app, payment)
    record = app.ledger.get_payment(payment_id)

    click.echo(f"Payment ID: {record.id}")
    click.echo(f"  Title: {record.title}")
    if record.description:
        click.echo(f"  Description: {record.description}")
    click.echo(f"  Due: {record.due_date}")
    click.echo(f"  Amount: {format_amount(record.amount)}")
    click.echo(f"  Status: {_status(record, app.ledger.today())}")
    click.echo(f"  Created: {record.created_at.isoformat(timespec='seconds')}")


@payment_group.command("update")
@click.argument("payment", metavar="PAYMENT")
@click.option("--title", help="New title")
@click.option("--description", help="New description")
@click.option("--due-date", help="New due date")
@click.option("--amount", help="New amount")
@click.pass_context
def update_payment(
    ctx,
    payment: str,
    title: str | None,
    description: str | None,
    due_date: str | None,
    amount: str | None,
):
    """Edit a payment's details.

    Examples:
        payminder payment update 1 --amount 175.50
        payminder payment update "Internet Bill" --due-date 2025-01-20
    """
    app = require_login(ctx)
    payment_id = resolve_payment_or_exit(ctx, app, payment)

    changes = {}
    if title is not None:
        changes["title"] = title
    if description is not None:
        changes["description"] = description
    if due_date is not None:
        changes["due_date"] = _parse_due_date(ctx, due_date)
    if amount is not None:
        changes["amount"] = _parse_amount(ctx, amount)

    if not changes:
        click.echo("Error: Nothing to update. Pass at least one option.", err=True)
        ctx.exit(1)

    try:
        updated = app.ledger.update_payment(payment_id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated payment '{updated.title}'")


@payment_group.command("pay")
@click.argument("payment", metavar="PAYMENT")
@click.pass_context
def pay_payment(ctx, payment: str):
    """Mark a payment as paid."""
    app = require_login(ctx)
    payment_id = resolve_payment_or_exit(ctx, app, payment)
    record = app.ledger.get_payment(payment_id)
    if record.is_paid:
        click.echo(f"'{record.title}' is already paid.")
        return
    app.ledger.mark_as_paid(payment_id)
    click.echo(f"{record.title} marked as paid!")


@payment_group.command("archive")
@click.argument("payment", metavar="PAYMENT")
@click.pass_context
def archive_payment(ctx, payment: str):
    """Archive a payment."""
    app = require_login(ctx)
    payment_id = resolve_payment_or_exit(ctx, app, payment)
    record = app.ledger.get_payment(payment_id)
    if record.is_archived:
        click.echo(f"'{record.title}' is already archived.")
        return
    app.ledger.archive_payment(payment_id)
    click.echo(f"Archived '{record.title}'")


@payment_group.command("delete")
@click.argument("payment", metavar="PAYMENT")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_payment(ctx, payment: str, yes: bool):
    """Delete an archived payment permanently.

    Only archived payments can be deleted; archive it first.
    """
    app = require_login(ctx)
    payment_id = resolve_payment_or_exit(ctx, app, payment)
    record = app.ledger.get_payment(payment_id)

    if not record.is_archived:
        click.echo(f"Error: {delete_requires_archive(record.title)}", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Are you sure you want to delete '{record.title}' permanently?"
    ):
        click.echo("Deletion cancelled.")
        return

    app.ledger.delete_payment(payment_id)
    click.echo("Payment deleted permanently")


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
