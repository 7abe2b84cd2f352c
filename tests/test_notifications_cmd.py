"""Tests for notification and permission commands."""

from payminder.cli.main import cli
from payminder.domain.permissions import PERMISSION_KEY


def _invoke(cli_runner, db_path, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", db_path, *args], **kwargs)


def test_check_shows_feed(cli_runner, logged_in):
    """Seeded unpaid payments are past due, so the feed reports them."""
    result = _invoke(cli_runner, logged_in, "notifications", "check")

    assert result.exit_code == 0
    assert "Notifications (3 unread):" in result.output
    assert "Overdue Payments!" in result.output
    assert "You have 2 overdue payment(s) and 2 total unpaid payments!" in result.output
    assert "Electricity Bill is overdue by" in result.output
    # Permission was never granted, so nothing is shown natively
    assert "[Payment Overdue!]" not in result.output


def test_check_without_active_payments(cli_runner, logged_in):
    _invoke(cli_runner, logged_in, "payment", "pay", "1")
    _invoke(cli_runner, logged_in, "payment", "pay", "2")
    result = _invoke(cli_runner, logged_in, "notifications", "check")
    assert result.exit_code == 0
    assert "No notifications." in result.output


def test_check_requires_login(cli_runner, temp_store):
    result = _invoke(cli_runner, temp_store.database_path, "notifications", "check")
    assert result.exit_code == 1


def test_watch_denied_permission(cli_runner, logged_in, temp_store):
    result = _invoke(cli_runner, logged_in, "notifications", "watch", "--duration", "0", input="n\n")

    assert result.exit_code == 0
    assert "Desktop notifications are not enabled" in result.output
    # Overdue payments are announced in the feed regardless
    assert "Payment Overdue!" in result.output
    assert temp_store.get(PERMISSION_KEY) == "denied"


def test_watch_with_permission(cli_runner, logged_in, temp_store):
    result = _invoke(cli_runner, logged_in, "notifications", "watch", "--duration", "0", input="y\n")

    assert result.exit_code == 0
    assert "Notifications enabled" in result.output
    assert "[Notifications Enabled]" in result.output
    assert "[Payment Overdue!] Internet Bill is overdue by" in result.output
    assert "[Overdue Payments!]" in result.output
    assert "Watching payments; reminders every 5 minute(s)" in result.output
    assert temp_store.get(PERMISSION_KEY) == "granted"


def test_watch_does_not_ask_twice(cli_runner, logged_in):
    _invoke(cli_runner, logged_in, "permission", "grant")
    result = _invoke(cli_runner, logged_in, "notifications", "watch", "--duration", "0")
    assert result.exit_code == 0
    assert "[Notifications Enabled]" not in result.output
    assert "[Payment Overdue!]" in result.output


class TestPermissionCommands:
    """Tests for permission commands."""

    def test_status_default(self, cli_runner, temp_store):
        result = _invoke(cli_runner, temp_store.database_path, "permission", "status")
        assert result.exit_code == 0
        assert "Notification permission: default" in result.output

    def test_grant_deny_reset(self, cli_runner, temp_store):
        db_path = temp_store.database_path

        assert "Notifications enabled" in _invoke(cli_runner, db_path, "permission", "grant").output
        assert "granted" in _invoke(cli_runner, db_path, "permission", "status").output

        assert "Notifications blocked" in _invoke(cli_runner, db_path, "permission", "deny").output
        assert "denied" in _invoke(cli_runner, db_path, "permission", "status").output

        _invoke(cli_runner, db_path, "permission", "reset")
        assert "default" in _invoke(cli_runner, db_path, "permission", "status").output
        assert temp_store.get(PERMISSION_KEY) is None

    def test_request(self, cli_runner, temp_store):
        result = _invoke(cli_runner, temp_store.database_path, "permission", "request", input="y\n")
        assert result.exit_code == 0
        assert "Notifications enabled" in result.output
        assert "[Notifications Enabled] You will now receive payment reminders" in result.output

        # Decided permission is not asked again
        result = _invoke(cli_runner, temp_store.database_path, "permission", "request")
        assert "Notification permission: granted" in result.output

    def test_request_denied(self, cli_runner, temp_store):
        result = _invoke(cli_runner, temp_store.database_path, "permission", "request", input="n\n")
        assert "Notification permission: denied" in result.output
