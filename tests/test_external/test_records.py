"""Tests for mapping external rows onto typed records."""

import datetime

import pytest
from django.utils import timezone

from speaker_portal.external.records import (
    ExternalProject,
    ExternalSpeaker,
    parse_external_date,
    parse_external_datetime,
)


@pytest.mark.parametrize(
    ("row", "title"),
    [
        ({"id": "p1", "title": "New Title", "project_name": "Old"}, "New Title"),
        ({"id": "p1", "project_name": "Project Name"}, "Project Name"),
        ({"id": "p1", "event_name": "Event Name"}, "Event Name"),
        ({"id": "p1", "name": "Plain Name"}, "Plain Name"),
        ({"id": "p1", "title": "  ", "event_name": "Event"}, "Event"),
    ],
)
def test_project_title_resolution(row, title):
    assert ExternalProject.from_api(row).title == title


def test_project_requires_id():
    with pytest.raises(ValueError, match="no id"):
        ExternalProject.from_api({"title": "Orphan"})


def test_project_dates_accept_event_date_and_datetimes():
    record = ExternalProject.from_api(
        {"id": 7, "event_date": "2025-03-05T09:00:00+09:00", "end_date": "2025-03-07"},
    )

    assert record.id == "7"
    assert record.start_date == datetime.date(2025, 3, 5)
    assert record.end_date == datetime.date(2025, 3, 7)


def test_project_local_fields_use_one_title_for_both_names():
    fields = ExternalProject(id="p1", title="AI Summit", description="desc").to_local_fields()

    assert fields["project_name"] == "AI Summit"
    assert fields["event_name"] == "AI Summit"
    assert fields["description"] == "desc"


def test_project_local_fields_fall_back_to_id():
    fields = ExternalProject(id="p1").to_local_fields()

    assert fields["project_name"] == "p1"
    assert fields["event_name"] == "p1"


def test_project_to_api():
    record = ExternalProject(id="p1", title="T", start_date=datetime.date(2025, 1, 2))

    assert record.to_api() == {"title": "T", "description": "", "start_date": "2025-01-02", "end_date": None}


def test_speaker_from_embedded_supplier():
    speaker = ExternalSpeaker.from_api(
        {
            "id": "assignment-1",
            "presentation_time": "2025-03-05T14:00:00+09:00",
            "suppliers": {
                "id": "s1",
                "nickname": "Kim",
                "representative": "Kim Rep",
                "company_name": "ACME",
                "email": "kim@example.com",
                "mobile": "010-1234-5678",
                "phone": "02-000-0000",
            },
        }
    )

    assert speaker.id == "s1"
    assert speaker.name == "Kim"
    assert speaker.organization == "ACME"
    assert speaker.phone == "010-1234-5678"
    assert speaker.presentation_date is not None
    assert timezone.is_aware(speaker.presentation_date)


def test_speaker_name_falls_back_to_unknown():
    speaker = ExternalSpeaker.from_api({"suppliers": {"id": "s1"}})

    assert speaker.name == "Unknown"


def test_speaker_with_null_embed_is_skipped():
    assert ExternalSpeaker.from_api({"id": "a1", "suppliers": None}) is None


def test_speaker_from_bare_row_prefers_supplier_id():
    speaker = ExternalSpeaker.from_api(
        {"id": "a1", "supplier_id": "s9", "speaker_name": "Lee", "contact_email": "lee@example.com"}
    )

    assert speaker.id == "s9"
    assert speaker.name == "Lee"
    assert speaker.email == "lee@example.com"


def test_parse_helpers_tolerate_free_form_values():
    assert parse_external_date("") is None
    assert parse_external_date("soon") is None
    assert parse_external_datetime("14:00 - 14:45") is None
    assert parse_external_datetime("2025-03-05") == timezone.make_aware(datetime.datetime(2025, 3, 5))
