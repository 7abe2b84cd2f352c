"""Main CLI entry point."""

import click

from payminder.app import build_context
from payminder.config import Settings
from payminder.utils.logging import configure_logging

# Import and register all commands at module level
from payminder.cli.commands import (
    auth,
    payment,
    summary,
    notifications,
    permission,
)


def _ask_notification_permission() -> bool:
    return click.confirm("Allow payminder to show desktop notifications?", default=True)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PAYMINDER_DB_PATH environment variable)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (overrides PAYMINDER_LOG_LEVEL environment variable)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Payminder - Bill and payment reminders.

    Record upcoming payments with due dates and amounts, and get reminded
    as they come due or become overdue.
    """
    ctx.ensure_object(dict)

    # Initialize storage only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        overrides = {}
        if db_path is not None:
            overrides["db_path"] = db_path
        if log_level is not None:
            overrides["log_level"] = log_level
        try:
            settings = Settings(**overrides)
        except ValueError as e:
            click.echo(f"Error: Invalid configuration: {e}", err=True)
            ctx.exit(1)

        configure_logging(settings.log_level, settings.json_logs)
        app = build_context(settings, permission_prompt=_ask_notification_permission)
        ctx.obj["app"] = app
        ctx.call_on_close(app.close)


# Register all commands
auth.register_commands(cli)
payment.register_commands(cli)
summary.register_commands(cli)
notifications.register_commands(cli)
permission.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
