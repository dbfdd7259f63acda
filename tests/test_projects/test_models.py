"""Tests for project models and their signals."""

import datetime

import pytest
from django.db import IntegrityError
from django.utils import timezone

from speaker_portal.projects.models import AttendanceField, Project, ProjectSetting, TransportationSettings
from speaker_portal.settings import get_config


@pytest.fixture
def project(db):
    return Project.objects.create(
        project_name="AI Summit",
        slug="ai-summit",
        start_date=datetime.date(2025, 3, 5),
        end_date=datetime.date(2025, 3, 7),
    )


@pytest.mark.parametrize(
    ("on", "expected"),
    [
        (datetime.date(2025, 3, 4), Project.AccessStatus.NOT_STARTED),
        (datetime.date(2025, 3, 5), Project.AccessStatus.OPEN),
        (datetime.date(2025, 3, 7), Project.AccessStatus.OPEN),
        (datetime.date(2025, 3, 8), Project.AccessStatus.ENDED),
    ],
)
def test_access_status(project, on, expected):
    assert project.access_status(on) == expected


@pytest.mark.django_db
def test_access_status_open_without_dates():
    project = Project.objects.create(project_name="Open", slug="open")

    assert project.access_status() == Project.AccessStatus.OPEN


def test_new_project_gets_transportation_settings(project):
    settings_row = TransportationSettings.objects.get(project=project)

    assert settings_row.supported_methods == list(get_config().transportation_methods)
    assert settings_row.requires_receipt is True


def test_transportation_settings_created_once(project):
    project.project_name = "Renamed"
    project.save()

    assert TransportationSettings.objects.filter(project=project).count() == 1


def test_get_setting_returns_stored_value(project):
    ProjectSetting.objects.create(project=project, setting_key="badge", setting_value={"color": "blue"})

    assert project.get_setting("badge") == {"color": "blue"}
    assert project.get_setting("missing", default=7) == 7


def test_external_project_id_is_unique(project):
    project.external_project_id = "ext-1"
    project.save()

    with pytest.raises(IntegrityError):
        Project.objects.create(project_name="Copy", slug="copy", external_project_id="ext-1")


def test_unlinked_projects_may_coexist(project):
    Project.objects.create(project_name="Other", slug="other")

    assert Project.objects.filter(external_project_id=None).count() == 2


def test_attendance_field_is_closed(project):
    past = AttendanceField.objects.create(
        project=project,
        field_key="dinner",
        field_label="Dinner",
        deadline=timezone.now() - datetime.timedelta(hours=1),
    )
    future = AttendanceField.objects.create(
        project=project,
        field_key="lunch",
        field_label="Lunch",
        deadline=timezone.now() + datetime.timedelta(hours=1),
    )
    open_ended = AttendanceField.objects.create(project=project, field_key="party", field_label="Party")

    assert past.is_closed is True
    assert future.is_closed is False
    assert open_ended.is_closed is False
