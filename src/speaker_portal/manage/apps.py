"""Django app configuration for the organizer management app."""

from django.apps import AppConfig


class SpeakerPortalManageConfig(AppConfig):
    """Configuration for the organizer management app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "speaker_portal.manage"
    label = "portal_manage"
    verbose_name = "Management"
