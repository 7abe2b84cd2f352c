"""Notification permission commands."""

import click

from payminder.cli.notifier import ConsoleNotifier
from payminder.domain.permissions import PermissionState


@click.group()
def permission_group():
    """Manage desktop notification permission."""
    pass


@permission_group.command("status")
@click.pass_context
def permission_status(ctx):
    """Show the current permission state."""
    app = ctx.obj["app"]
    click.echo(f"Notification permission: {app.permission.state().value}")


@permission_group.command("request")
@click.pass_context
def permission_request(ctx):
    """Ask for permission if it has not been decided yet."""
    app = ctx.obj["app"]
    scheduler = app.create_scheduler(notifier=ConsoleNotifier())
    before = app.permission.state()
    state = scheduler.request_permission()
    if state is PermissionState.GRANTED and before is not PermissionState.GRANTED:
        click.echo("Notifications enabled")
    else:
        click.echo(f"Notification permission: {state.value}")


@permission_group.command("grant")
@click.pass_context
def permission_grant(ctx):
    """Allow desktop notifications."""
    app = ctx.obj["app"]
    app.permission.set(PermissionState.GRANTED)
    click.echo("Notifications enabled")


@permission_group.command("deny")
@click.pass_context
def permission_deny(ctx):
    """Block desktop notifications."""
    app = ctx.obj["app"]
    app.permission.set(PermissionState.DENIED)
    click.echo("Notifications blocked")


@permission_group.command("reset")
@click.pass_context
def permission_reset(ctx):
    """Forget the decision; the next watch asks again."""
    app = ctx.obj["app"]
    app.permission.set(PermissionState.DEFAULT)
    click.echo("Notification permission reset")


def register_commands(cli):
    """Register permission commands with main CLI."""
    cli.add_command(permission_group, name="permission")
