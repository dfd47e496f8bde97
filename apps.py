"""
Django EcoEngine app configuration.
"""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class EcoEngineConfig(AppConfig):
    """EcoEngine application configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "ecoengine"
    verbose_name = _("Economy")
