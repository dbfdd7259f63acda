"""Signals for the projects app."""

from django.db.models.signals import post_save
from django.dispatch import receiver

from speaker_portal.projects.models import Project, TransportationSettings


@receiver(post_save, sender=Project)
def create_transportation_settings(
    sender: type[Project],  # noqa: ARG001
    instance: Project,
    *,
    created: bool,
    **kwargs: object,  # noqa: ARG001
) -> None:
    """Auto-create a TransportationSettings row when a new Project is saved."""
    if created:
        TransportationSettings.objects.get_or_create(project=instance)
