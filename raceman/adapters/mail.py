"""
Raceman Mail Adapter — e-mail delivery through Django's mail framework.

This module also loads the configured EmailDispatcher from settings.

Usage:
    from raceman.adapters import get_email_dispatcher

    dispatcher = get_email_dispatcher()
    dispatcher.send("maria@exemplo.com", subject, html)

Settings:
    RACEMAN = {
        "EMAIL_DISPATCHER": "raceman.adapters.mail.DjangoMailDispatcher",
    }

The transport itself is whatever EMAIL_BACKEND the project configures.
"""

from __future__ import annotations

import logging
import threading

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.mail import send_mail
from django.utils.html import strip_tags
from django.utils.module_loading import import_string

from raceman.conf import raceman_settings
from raceman.protocols.email import EmailDispatcher

logger = logging.getLogger(__name__)


class DjangoMailDispatcher:
    """Send through django.core.mail (HTML body plus a plain-text fallback)."""

    def send(self, to: str, subject: str, html: str) -> None:
        send_mail(
            subject=subject,
            message=strip_tags(html),
            from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
            recipient_list=[to],
            html_message=html,
            fail_silently=False,
        )


# Cached dispatcher instance
_lock = threading.Lock()
_email_dispatcher: EmailDispatcher | None = None


def get_email_dispatcher() -> EmailDispatcher:
    """
    Return the configured e-mail dispatcher.

    Raises:
        ImproperlyConfigured: If EMAIL_DISPATCHER is empty or import fails
    """
    global _email_dispatcher

    if _email_dispatcher is None:
        with _lock:
            if _email_dispatcher is None:  # double-checked
                dispatcher_path = raceman_settings.EMAIL_DISPATCHER

                if not dispatcher_path:
                    raise ImproperlyConfigured(
                        "RACEMAN['EMAIL_DISPATCHER'] must be configured. "
                        "Example: 'raceman.adapters.mail.DjangoMailDispatcher'"
                    )

                try:
                    dispatcher_class = import_string(dispatcher_path)
                    _email_dispatcher = dispatcher_class()
                    logger.debug("Loaded e-mail dispatcher: %s", dispatcher_path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import e-mail dispatcher '{dispatcher_path}': {e}"
                    ) from e

    return _email_dispatcher


def reset_email_dispatcher() -> None:
    """Reset the cached dispatcher. Useful for testing."""
    global _email_dispatcher
    _email_dispatcher = None
