"""Code under test shared by the runnable examples."""

from __future__ import annotations

import typing as t


class Mailer:
    """Sends mail. Talks to the network, so tests replace it."""

    def send(self, to: str, subject: str, *, urgent: bool = False) -> bool:
        """Deliver a message and return whether it was accepted."""
        msg = "Mailer.send needs a mail server"
        raise RuntimeError(msg)


class Notifier:
    """Notifies users through a mailer."""

    def __init__(self, mailer: Mailer) -> None:
        self.mailer = mailer

    def notify_all(self, users: t.Iterable[str], subject: str) -> int:
        """Send *subject* to every user and return the number accepted."""
        return sum(1 for user in users if self.mailer.send(user, subject))

    def alert(self, user: str) -> bool:
        """Send an urgent alert to *user*."""
        return self.mailer.send(user, "ALERT", urgent=True)
