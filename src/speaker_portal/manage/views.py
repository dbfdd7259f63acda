"""Organizer-only endpoints for sync, import, and submission review.

Sync and push endpoints are POST-only and report back through
``django.contrib.messages`` before redirecting to the project admin.  The
speaker import and review endpoints answer JSON for the organizer UI.
"""

import json
import logging
from typing import Any

from django.contrib import messages
from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.exceptions import PermissionDenied
from django.db.models import Count, Q
from django.http import FileResponse, Http404, HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect
from django.views import View

from speaker_portal.external.sync import ExternalSyncService
from speaker_portal.features import FeatureRequiredMixin
from speaker_portal.projects.models import Project
from speaker_portal.speakers.models import PresentationFile
from speaker_portal.speakers.services import progress_steps

logger = logging.getLogger(__name__)

CHANGE_PROJECT_PERMISSION = "portal_projects.change_project"


def _changelist() -> HttpResponse:
    return redirect("admin:portal_projects_project_changelist")


class ManagePermissionMixin(LoginRequiredMixin):
    """Permission mixin for organizer endpoints.

    Checks that the authenticated user is a superuser or holds the
    ``portal_projects.change_project`` permission.  When the URL carries a
    ``project_slug``, the project is resolved onto ``self.project``.

    Raises:
        PermissionDenied: If the user lacks the required permission.
    """

    project: Project

    def dispatch(self, request: HttpRequest, *args: str, **kwargs: str) -> HttpResponse:
        """Enforce permissions and resolve the project before dispatch.

        Unauthenticated users are handed to ``LoginRequiredMixin``, which
        redirects them to the login page.

        Raises:
            PermissionDenied: If the user is not authorized.
        """
        if not request.user.is_authenticated:
            return self.handle_no_permission()

        if not (request.user.is_superuser or request.user.has_perm(CHANGE_PROJECT_PERMISSION)):
            raise PermissionDenied

        if "project_slug" in kwargs:
            self.project = get_object_or_404(Project, slug=kwargs["project_slug"])

        return super().dispatch(request, *args, **kwargs)


class SyncProjectsView(ManagePermissionMixin, FeatureRequiredMixin, View):
    """Run a full project sync from the external datastore."""

    required_feature = ("manage_ui", "external_sync")

    def post(self, request: HttpRequest) -> HttpResponse:
        """Sync every external project and redirect to the project list."""
        try:
            service = ExternalSyncService()
        except ValueError as exc:
            messages.error(request, str(exc))
            return _changelist()

        try:
            result = service.sync_projects()
        except RuntimeError as exc:
            logger.exception("Full project sync failed")
            messages.error(request, f"Sync failed: {exc}")
            return _changelist()

        message = (
            f"Synced {result.total} external projects: "
            f"{result.created} new, {result.updated} updated, {result.failed} failed."
        )
        if result.failed:
            messages.warning(request, message)
        else:
            messages.success(request, message)
        return _changelist()


class SyncProjectView(ManagePermissionMixin, FeatureRequiredMixin, View):
    """Resync one linked project from the external datastore."""

    required_feature = ("manage_ui", "external_sync")

    def post(self, request: HttpRequest, **kwargs: str) -> HttpResponse:  # noqa: ARG002
        """Sync the project and redirect back to its admin page."""
        if not self.project.external_project_id:
            messages.error(request, f"Project '{self.project}' is not linked to the external datastore.")
            return redirect("admin:portal_projects_project_change", self.project.pk)

        try:
            action = ExternalSyncService().sync_project(self.project.external_project_id)
        except (RuntimeError, ValueError) as exc:
            messages.error(request, f"Sync failed: {exc}")
        else:
            messages.success(request, f"Project '{self.project}' {action}.")
        return redirect("admin:portal_projects_project_change", self.project.pk)


class PushProjectView(ManagePermissionMixin, FeatureRequiredMixin, View):
    """Write a local project to the external datastore."""

    required_feature = ("manage_ui", "external_sync")

    def post(self, request: HttpRequest, **kwargs: str) -> HttpResponse:  # noqa: ARG002
        """Push the project and redirect back to its admin page."""
        try:
            action = ExternalSyncService().push_project(self.project)
        except (RuntimeError, ValueError) as exc:
            messages.error(request, f"Push failed: {exc}")
        else:
            messages.success(request, f"Project '{self.project}' {action} in the external datastore.")
        return redirect("admin:portal_projects_project_change", self.project.pk)


class ExternalSpeakersView(ManagePermissionMixin, FeatureRequiredMixin, View):
    """List the external speakers of a project for import."""

    required_feature = ("manage_ui", "external_sync")

    def get(self, request: HttpRequest, **kwargs: str) -> JsonResponse:  # noqa: ARG002
        """Return each external speaker with its import and conflict status."""
        try:
            service = ExternalSyncService()
            speakers = service.fetch_speakers(self.project)
        except ValueError as exc:
            return JsonResponse({"error": str(exc)}, status=400)
        except RuntimeError as exc:
            logger.exception("Failed to fetch external speakers for %s", self.project.slug)
            return JsonResponse({"error": "Failed to fetch external speakers", "details": str(exc)}, status=500)

        imported = set(
            self.project.speakers.exclude(external_supplier_id=None).values_list("external_supplier_id", flat=True)
        )
        conflicts = {conflict.external.id: conflict for conflict in service.find_conflicts(self.project, speakers)}
        rows: list[dict[str, Any]] = []
        for speaker in speakers:
            conflict = conflicts.get(speaker.id)
            rows.append(
                {
                    "id": speaker.id,
                    "name": speaker.name,
                    "email": speaker.email,
                    "organization": speaker.organization,
                    "position": speaker.position,
                    "phone": speaker.phone,
                    "already_imported": speaker.id in imported,
                    "conflicts": list(conflict.reasons) if conflict else [],
                }
            )
        return JsonResponse({"speakers": rows})


class ImportSpeakersView(ManagePermissionMixin, FeatureRequiredMixin, View):
    """Import a selection of external speakers into a project."""

    required_feature = ("manage_ui", "external_sync")

    def post(self, request: HttpRequest, **kwargs: str) -> JsonResponse:  # noqa: ARG002
        """Import ``{"speaker_ids": [...], "force": bool}``.

        Returns:
            The import summary, or 409 with the conflicts when name
            conflicts block the import.
        """
        try:
            body = json.loads(request.body or b"{}")
        except (json.JSONDecodeError, UnicodeDecodeError):
            return JsonResponse({"error": "Request body is not valid JSON"}, status=400)
        if not isinstance(body, dict):
            return JsonResponse({"error": "Request body must be a JSON object"}, status=400)

        speaker_ids = body.get("speaker_ids")
        if not isinstance(speaker_ids, list) or not speaker_ids:
            return JsonResponse({"error": "speaker_ids must be a non-empty list"}, status=400)
        wanted = {str(speaker_id) for speaker_id in speaker_ids}

        try:
            service = ExternalSyncService()
            speakers = [speaker for speaker in service.fetch_speakers(self.project) if speaker.id in wanted]
        except ValueError as exc:
            return JsonResponse({"error": str(exc)}, status=400)
        except RuntimeError as exc:
            logger.exception("Failed to fetch external speakers for %s", self.project.slug)
            return JsonResponse({"error": "Failed to fetch external speakers", "details": str(exc)}, status=500)

        result = service.import_speakers(self.project, speakers, force=bool(body.get("force")))
        if result.blocked:
            return JsonResponse({"error": "Speaker name conflicts", **result.as_dict()}, status=409)
        return JsonResponse({"success": True, **result.as_dict()})


class SubmissionsView(ManagePermissionMixin, FeatureRequiredMixin, View):
    """Roster of a project's speakers with their submission progress."""

    required_feature = "manage_ui"

    def get(self, request: HttpRequest, **kwargs: str) -> JsonResponse:  # noqa: ARG002
        """Return every speaker with per-step completion and file counts."""
        sessions = self.project.speakers.annotate(
            file_count=Count("files"),
            primary_count=Count("files", filter=Q(files__is_primary=True)),
        )
        roster = []
        for session in sessions:
            steps = progress_steps(session)
            roster.append(
                {
                    "id": session.pk,
                    "speaker_name": session.speaker_name,
                    "email": session.email,
                    "organization": session.organization,
                    "external_supplier_id": session.external_supplier_id,
                    "file_count": session.file_count,
                    "has_primary_file": session.primary_count > 0,
                    "steps": {step.key: step.completed for step in steps},
                }
            )
        return JsonResponse({"project": self.project.slug, "speakers": roster})


class PresentationFileDownloadView(ManagePermissionMixin, FeatureRequiredMixin, View):
    """Stream an uploaded presentation file to an organizer."""

    required_feature = "manage_ui"

    def get(self, request: HttpRequest, file_id: int) -> FileResponse:  # noqa: ARG002
        """Return the file as an attachment under its original name.

        Raises:
            Http404: If the row or the stored blob does not exist.
        """
        presentation_file = get_object_or_404(PresentationFile, pk=file_id)
        try:
            handle = presentation_file.file.open("rb")
        except FileNotFoundError as exc:
            msg = "File is missing from storage"
            raise Http404(msg) from exc
        return FileResponse(handle, as_attachment=True, filename=presentation_file.file_name)
