"""Django app configuration for Raceman."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class RacemanConfig(AppConfig):
    """Configuration for Raceman app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "raceman"
    verbose_name = _("Inscrições e Kits")
