"""Django app configuration for the projects app."""

from django.apps import AppConfig


class SpeakerPortalProjectsConfig(AppConfig):
    """Configuration for the projects app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "speaker_portal.projects"
    label = "portal_projects"
    verbose_name = "Projects"

    def ready(self) -> None:
        """Import signal handlers."""
        import speaker_portal.projects.signals  # noqa: F401, PLC0415
