"""Management command to sync projects and speakers from the external datastore.

Usage::

    # Sync every external project
    manage.py sync_external

    # Sync one project by its external id
    manage.py sync_external --project 3f2c9a4e-1b7d-4c1e-9f55-0d6a2f1e8b10

    # Sync the speakers of a local project
    manage.py sync_external --speakers ai-summit-2025
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.core.management.base import BaseCommand, CommandError

from speaker_portal.external.sync import ExternalSyncService
from speaker_portal.projects.models import Project

if TYPE_CHECKING:
    import argparse


class Command(BaseCommand):
    """Sync projects and speakers from the external datastore."""

    help = "Sync projects and speakers from the external datastore"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Register command-line arguments.

        Args:
            parser: The argument parser to add arguments to.
        """
        parser.add_argument(
            "--project",
            default=None,
            dest="external_id",
            help="External id of a single project to sync.",
        )
        parser.add_argument(
            "--speakers",
            default=None,
            dest="project_slug",
            help="Slug of a local project whose speakers should be synced.",
        )

    def handle(self, **options: object) -> None:
        """Execute the sync command.

        Runs a full project sync unless ``--project`` or ``--speakers``
        narrows it down.
        """
        external_id = options.get("external_id")
        project_slug = options.get("project_slug")

        try:
            service = ExternalSyncService()
        except ValueError as exc:
            raise CommandError(str(exc)) from None

        try:
            if project_slug:
                self._sync_speakers(service, str(project_slug))
            elif external_id:
                action = service.sync_project(str(external_id))
                self.stdout.write(self.style.SUCCESS(f"Project {external_id}: {action}"))
            else:
                result = service.sync_projects()
                self.stdout.write(
                    self.style.SUCCESS(
                        f"Synced {result.total} external projects: "
                        f"{result.created} new, {result.updated} updated, {result.failed} failed"
                    )
                )
        except (RuntimeError, ValueError) as exc:
            raise CommandError(str(exc)) from None

    def _sync_speakers(self, service: ExternalSyncService, project_slug: str) -> None:
        try:
            project = Project.objects.get(slug=project_slug)
        except Project.DoesNotExist:
            msg = f"Project with slug '{project_slug}' not found"
            raise CommandError(msg) from None

        result = service.sync_speakers(project)
        self.stdout.write(
            self.style.SUCCESS(
                f"Synced {result.total} speakers for {project_slug}: "
                f"{result.created} new, {result.updated} updated, {result.failed} failed"
            )
        )
