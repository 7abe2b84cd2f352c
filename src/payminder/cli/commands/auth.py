"""Session commands."""

import click

from payminder.cli.error_handling import handle_domain_error
from payminder.domain.errors import DomainError


@click.command("login")
@click.argument("email")
@click.password_option("--password", confirmation_prompt=False, help="Password")
@click.pass_context
def login(ctx, email: str, password: str):
    """Sign in with an email address.

    Examples:
        payminder login me@example.com
        payminder login me@example.com --password secret
    """
    app = ctx.obj["app"]
    try:
        app.session.login(email, password)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Logged in as {app.session.user.email}")


@click.command("signup")
@click.argument("name")
@click.argument("email")
@click.option("--address", help="Postal address (optional)")
@click.password_option("--password", help="Password")
@click.pass_context
def signup(ctx, name: str, email: str, address: str | None, password: str):
    """Create an account and sign in.

    The password is asked twice; mismatching entries are refused.

    Examples:
        payminder signup "Ada Lovelace" ada@example.com --address "12 Analytical St"
    """
    app = ctx.obj["app"]
    try:
        app.session.signup(name, email, address, password)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Welcome, {app.session.user.name}! Logged in as {app.session.user.email}")


@click.command("logout")
@click.pass_context
def logout(ctx):
    """Sign out."""
    app = ctx.obj["app"]
    if not app.session.is_authenticated:
        click.echo("Not logged in.")
        return
    app.session.logout()
    click.echo("Logged out.")


@click.command("whoami")
@click.pass_context
def whoami(ctx):
    """Show the signed-in user."""
    app = ctx.obj["app"]
    user = app.session.user
    if user is None:
        click.echo("Not logged in.")
        return
    click.echo(f"Name: {user.name}")
    click.echo(f"Email: {user.email}")
    if user.address:
        click.echo(f"Address: {user.address}")


def register_commands(cli):
    """Register session commands with main CLI."""
    cli.add_command(login)
    cli.add_command(signup)
    cli.add_command(logout)
    cli.add_command(whoami)
