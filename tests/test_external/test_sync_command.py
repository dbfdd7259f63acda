"""Tests for the sync_external management command."""

from io import StringIO
from unittest.mock import MagicMock, patch

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from speaker_portal.external.sync import SyncResult
from speaker_portal.projects.models import Project

_COMMAND_SERVICE = "speaker_portal.external.management.commands.sync_external.ExternalSyncService"


@pytest.mark.django_db
def test_command_requires_configuration(settings):
    settings.SPEAKER_PORTAL = {}

    with pytest.raises(CommandError, match="not configured"):
        call_command("sync_external", stdout=StringIO())


@pytest.mark.django_db
@patch(_COMMAND_SERVICE)
def test_command_default_runs_full_sync(mock_service_cls):
    service = MagicMock()
    service.sync_projects.return_value = SyncResult(created=2, updated=1, failed=1, total=4)
    mock_service_cls.return_value = service
    out = StringIO()

    call_command("sync_external", stdout=out)

    service.sync_projects.assert_called_once_with()
    assert "Synced 4 external projects: 2 new, 1 updated, 1 failed" in out.getvalue()


@pytest.mark.django_db
@patch(_COMMAND_SERVICE)
def test_command_syncs_single_project(mock_service_cls):
    service = MagicMock()
    service.sync_project.return_value = "deactivated"
    mock_service_cls.return_value = service
    out = StringIO()

    call_command("sync_external", "--project", "p1", stdout=out)

    service.sync_project.assert_called_once_with("p1")
    service.sync_projects.assert_not_called()
    assert "Project p1: deactivated" in out.getvalue()


@pytest.mark.django_db
@patch(_COMMAND_SERVICE)
def test_command_syncs_speakers(mock_service_cls):
    project = Project.objects.create(project_name="Summit", slug="summit", external_project_id="p1")
    service = MagicMock()
    service.sync_speakers.return_value = SyncResult(created=3, total=3)
    mock_service_cls.return_value = service
    out = StringIO()

    call_command("sync_external", "--speakers", "summit", stdout=out)

    service.sync_speakers.assert_called_once_with(project)
    assert "Synced 3 speakers for summit: 3 new, 0 updated, 0 failed" in out.getvalue()


@pytest.mark.django_db
@patch(_COMMAND_SERVICE)
def test_command_speakers_unknown_project(mock_service_cls):
    mock_service_cls.return_value = MagicMock()

    with pytest.raises(CommandError, match="Project with slug 'nope' not found"):
        call_command("sync_external", "--speakers", "nope", stdout=StringIO())


@pytest.mark.django_db
@patch(_COMMAND_SERVICE)
def test_command_wraps_runtime_errors(mock_service_cls):
    service = MagicMock()
    service.sync_projects.side_effect = RuntimeError("External datastore connection error")
    mock_service_cls.return_value = service

    with pytest.raises(CommandError, match="connection error"):
        call_command("sync_external", stdout=StringIO())
