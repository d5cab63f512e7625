"""
Raceman configuration.

Usage in settings.py:
    RACEMAN = {
        "EMAIL_DISPATCHER": "raceman.adapters.mail.DjangoMailDispatcher",
        "SITE_URL": "https://www.exemplo.com.br",
        "MIN_OBSERVATION_LENGTH": 10,
        "ALLOW_EDIT_AFTER_CLOSE": False,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class RacemanSettings:
    """Raceman configuration settings."""

    # Bib numbers: {prefix}{sequence zero-padded to this width}
    BIB_SEQUENCE_DIGITS: int = 3

    # Minimum observation length for non-delivered outcomes
    MIN_OBSERVATION_LENGTH: int = 10

    # Allow editing an identified participant after the race has closed
    ALLOW_EDIT_AFTER_CLOSE: bool = False

    DEFAULT_KIT_TYPE: str = "Padrão"
    DEFAULT_AGENT_NAME: str = "Entregador"

    ORDER_NUMBER_LENGTH: int = 10

    # E-mail dispatch backend (dotted path)
    EMAIL_DISPATCHER: str = "raceman.adapters.mail.DjangoMailDispatcher"

    SITE_NAME: str = "Endorfina Esportes"
    SITE_URL: str = "http://localhost:8000"
    LOGO_URL: str = ""

    # Print view for home-delivery labels
    LABEL_PRINT_PATH: str = "/admin/delivery/print"

    # Identification reminders
    PENDING_MIN_HOURS_SINCE_CREATION: int = 48
    PENDING_MIN_HOURS_BETWEEN_EMAILS: int = 48

    # Abandoned-cart reminders
    ABANDONED_CART_MIN_HOURS_SINCE_UPDATE: int = 2
    ABANDONED_CART_MIN_HOURS_BETWEEN_EMAILS: int = 24

    # Sent automated e-mails per recipient per local day, both jobs together
    MAX_EMAILS_PER_DAY: int = 2


def get_raceman_settings() -> RacemanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "RACEMAN", {})
    return RacemanSettings(**{
        k: v for k, v in user_settings.items()
        if k in RacemanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_raceman_settings(), name)


raceman_settings = _LazySettings()
