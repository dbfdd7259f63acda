"""Django app configuration for the speakers app."""

from django.apps import AppConfig


class SpeakerPortalSpeakersConfig(AppConfig):
    """Configuration for the speakers app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "speaker_portal.speakers"
    label = "portal_speakers"
    verbose_name = "Speakers"
