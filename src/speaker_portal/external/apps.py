"""Django app configuration for the external sync app."""

from django.apps import AppConfig


class SpeakerPortalExternalConfig(AppConfig):
    """Configuration for the external sync app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "speaker_portal.external"
    label = "portal_external"
    verbose_name = "External sync"
