"""Notification commands."""

import time

import click

from payminder.cli.error_handling import require_login
from payminder.cli.notifier import ConsoleNotifier
from payminder.domain.entities import Notification
from payminder.domain.permissions import PermissionState


def _render_feed(entries: list[Notification]) -> None:
    if not entries:
        click.echo("No notifications.")
        return

    unread = sum(1 for n in entries if not n.read)
    click.echo(f"\nNotifications ({unread} unread):")
    click.echo("-" * 80)
    for notification in entries:
        marker = "*" if not notification.read else " "
        stamp = notification.timestamp.strftime("%Y-%m-%d %H:%M")
        click.echo(f"{marker} {stamp}  {notification.title}")
        click.echo(f"    {notification.message}")


@click.group()
def notifications_group():
    """Payment reminders."""
    pass


@notifications_group.command("check")
@click.pass_context
def check_notifications(ctx):
    """Run one reminder cycle and show the notification feed.

    Showing the feed marks every notification as read.
    """
    app = require_login(ctx)
    scheduler = app.create_scheduler()
    scheduler.tick()
    _render_feed(scheduler.open_feed())


@notifications_group.command("watch")
@click.option(
    "--duration",
    type=click.FloatRange(min=0),
    help="Stop after this many seconds (default: run until Ctrl+C)",
)
@click.pass_context
def watch_notifications(ctx, duration: float | None):
    """Keep running and remind about payments as they come due.

    Reminders are shown immediately and then every few minutes (5 by
    default, see PAYMINDER_REMINDER_INTERVAL_MINUTES). Desktop notification
    permission is asked for the first time this runs.
    """
    app = require_login(ctx)
    scheduler = app.create_scheduler(notifier=ConsoleNotifier())

    if app.permission.state() is PermissionState.DEFAULT:
        if scheduler.request_permission() is PermissionState.GRANTED:
            click.echo("Notifications enabled")

    scheduler.start()
    try:
        if scheduler.reminders_running:
            minutes = app.settings.reminder_interval_minutes
            click.echo(f"Watching payments; reminders every {minutes} minute(s). Press Ctrl+C to stop.")
        else:
            if app.permission.state() is not PermissionState.GRANTED:
                click.echo(
                    "Desktop notifications are not enabled; run 'payminder permission grant' "
                    "to receive reminders."
                )
            elif not app.ledger.active_payments():
                click.echo("No active payments to remind about.")
            _render_feed(scheduler.open_feed())

        deadline = None if duration is None else time.monotonic() + duration
        while deadline is None or time.monotonic() < deadline:
            remaining = 1.0 if deadline is None else deadline - time.monotonic()
            time.sleep(max(0.0, min(1.0, remaining)))
    except KeyboardInterrupt:
        click.echo("\nStopped.")
    finally:
        scheduler.stop()


def register_commands(cli):
    """Register notification commands with main CLI."""
    cli.add_command(notifications_group, name="notifications")
