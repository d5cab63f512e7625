"""
E-mail Dispatch Protocol — Interface for sending transactional e-mails.

Raceman builds subject and body; the dispatcher only delivers them.
Any transport (SMTP, provider API, queue) can implement it.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class EmailDispatcher(Protocol):
    """
    Protocol for e-mail delivery.

    Implementations raise on failure; callers log and move on.
    """

    def send(self, to: str, subject: str, html: str) -> None:
        """
        Deliver one e-mail.

        Args:
            to: Recipient address
            subject: Subject line
            html: Rendered HTML body
        """
        ...
