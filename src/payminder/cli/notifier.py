"""Terminal rendition of native notifications."""

from typing import Optional

import click

from payminder.domain.notifier import NativeNotifier, NotificationHandle


class ConsoleHandle(NotificationHandle):
    """Handle for a notification printed to the terminal."""

    def __init__(self, title: str, tag: Optional[str]):
        self.title = title
        self.tag = tag
        self.closed = False

    def close(self) -> None:
        self.closed = True


class ConsoleNotifier(NativeNotifier):
    """Prints native notifications as highlighted terminal lines."""

    def __init__(self, color: Optional[bool] = None):
        self.color = color
        self.shown: list[ConsoleHandle] = []

    def show(self, title: str, body: str, tag: Optional[str] = None) -> ConsoleHandle:
        click.echo(
            click.style(f"[{title}]", fg="yellow", bold=True) + f" {body}",
            color=self.color,
        )
        handle = ConsoleHandle(title, tag)
        self.shown.append(handle)
        return handle
