"""Tests for slug generation and receipt deadline resolution."""

import datetime

import pytest
from django.utils import timezone

from speaker_portal.projects.models import Project, ProjectSetting, TransportationSettings
from speaker_portal.projects.utils import generate_slug, receipt_deadline, unique_project_slug


def _make_project(slug="summit", **overrides):
    defaults = {"project_name": "Summit", "slug": slug}
    defaults.update(overrides)
    return Project.objects.create(**defaults)


# ---------------------------------------------------------------------------
# generate_slug
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("AI Summit 2025", "ai-summit-2025"),
        ("2025 인공지능 컨퍼런스", "2025-인공지능-컨퍼런스"),
        ("Hello, World!", "hello-world"),
        ("  --Spaced   Out--  ", "spaced-out"),
        ("a - b", "a-b"),
        ("Tabs\tand\nnewlines", "tabs-and-newlines"),
        ("데이터 & AI: 서울", "데이터-ai-서울"),
    ],
)
def test_generate_slug(text, expected):
    assert generate_slug(text) == expected


def test_generate_slug_drops_unsupported_scripts():
    assert generate_slug("東京 Café") == "caf"


def test_generate_slug_can_be_empty():
    assert generate_slug("!!! ???") == ""


# ---------------------------------------------------------------------------
# unique_project_slug
# ---------------------------------------------------------------------------


@pytest.mark.django_db
def test_unique_slug_uses_title_when_free():
    assert unique_project_slug("AI Summit") == "ai-summit"


@pytest.mark.django_db
def test_unique_slug_appends_counter_on_collision():
    _make_project(slug="ai-summit")
    _make_project(slug="ai-summit-2")

    assert unique_project_slug("AI Summit") == "ai-summit-3"


@pytest.mark.django_db
def test_unique_slug_falls_back_to_external_id():
    assert unique_project_slug("!!!", "8c1e-77AB") == "8c1e-77ab"


@pytest.mark.django_db
def test_unique_slug_last_resort():
    assert unique_project_slug("", None) == "project"


@pytest.mark.django_db
def test_unique_slug_ignores_excluded_project():
    project = _make_project(slug="ai-summit")

    assert unique_project_slug("AI Summit", exclude_pk=project.pk) == "ai-summit"


# ---------------------------------------------------------------------------
# receipt_deadline
# ---------------------------------------------------------------------------


def _end_of_day(day):
    return timezone.make_aware(datetime.datetime.combine(day, datetime.time.max))


@pytest.mark.django_db
def test_receipt_deadline_defaults_to_three_days_after_end():
    project = _make_project(end_date=datetime.date(2025, 3, 7))

    assert receipt_deadline(project) == _end_of_day(datetime.date(2025, 3, 10))


@pytest.mark.django_db
def test_receipt_deadline_counts_business_days_when_weekends_excluded():
    # 2025-03-07 is a Friday.
    project = _make_project(end_date=datetime.date(2025, 3, 7))
    ProjectSetting.objects.create(
        project=project,
        setting_key=ProjectSetting.RECEIPT_UPLOAD_DEADLINE,
        setting_value={"deadline_days": 2, "include_weekends": False},
    )

    assert receipt_deadline(project) == _end_of_day(datetime.date(2025, 3, 11))


@pytest.mark.django_db
def test_receipt_deadline_prefers_custom_deadline():
    project = _make_project(end_date=datetime.date(2025, 3, 7))
    ProjectSetting.objects.create(
        project=project,
        setting_key=ProjectSetting.RECEIPT_UPLOAD_DEADLINE,
        setting_value={"custom_deadline": "2025-04-01"},
    )

    assert receipt_deadline(project) == _end_of_day(datetime.date(2025, 4, 1))


@pytest.mark.django_db
def test_receipt_deadline_uses_event_end_override():
    project = _make_project(end_date=datetime.date(2025, 3, 7))

    deadline = receipt_deadline(project, event_end=datetime.date(2025, 3, 1))

    assert deadline == _end_of_day(datetime.date(2025, 3, 4))


@pytest.mark.django_db
def test_receipt_deadline_falls_back_to_transportation_settings():
    project = _make_project()
    fixed = timezone.now() + datetime.timedelta(days=10)
    TransportationSettings.objects.filter(project=project).update(receipt_deadline=fixed)
    project = Project.objects.get(pk=project.pk)

    assert receipt_deadline(project) == fixed


@pytest.mark.django_db
def test_receipt_deadline_none_without_any_source():
    project = _make_project()

    assert receipt_deadline(project) is None
