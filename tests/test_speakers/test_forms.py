"""Tests for the speaker step forms."""

import base64
import datetime

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone

from speaker_portal.projects.models import AttendanceField, ConsentField, PresentationField, Project
from speaker_portal.speakers.forms import (
    AttendanceForm,
    ConsentForm,
    HonorariumForm,
    PresentationFileForm,
    PresentationInfoForm,
    TransportationForm,
)


@pytest.fixture
def project(db):
    return Project.objects.create(project_name="Summit", slug="summit")


def _pdf(name="slides.pdf", size=32):
    return SimpleUploadedFile(name, b"%" * size, content_type="application/pdf")


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------


def test_presentation_file_accepts_allowed_extension():
    form = PresentationFileForm(data={"is_primary": "true"}, files={"file": _pdf("deck.PPTX")})

    assert form.is_valid(), form.errors
    assert form.cleaned_data["is_primary"] is True


def test_presentation_file_rejects_other_extensions():
    form = PresentationFileForm(data={}, files={"file": _pdf("deck.key")})

    assert not form.is_valid()
    assert "Unsupported file type" in form.errors["file"][0]


def test_presentation_file_enforces_size_limit(settings):
    settings.SPEAKER_PORTAL = {"uploads": {"max_presentation_mb": 1}}
    form = PresentationFileForm(data={}, files={"file": _pdf(size=1024 * 1024 + 1)})

    assert not form.is_valid()
    assert "under 1 MB" in form.errors["file"][0]


@pytest.mark.django_db
def test_honorarium_normalizes_account_number():
    form = HonorariumForm(data={"bank_name": "KB", "account_number": " 123-45 6789 ", "account_holder": "Kim"})

    assert form.is_valid(), form.errors
    assert form.cleaned_data["account_number"] == "123-456789"


@pytest.mark.django_db
def test_honorarium_rejects_letters_in_account_number():
    form = HonorariumForm(data={"bank_name": "KB", "account_number": "12AB", "account_holder": "Kim"})

    assert not form.is_valid()
    assert "account_number" in form.errors


@pytest.mark.django_db
def test_honorarium_rejects_document_with_wrong_type():
    form = HonorariumForm(
        data={"bank_name": "KB", "account_number": "123", "account_holder": "Kim"},
        files={"id_card_file": SimpleUploadedFile("id.exe", b"MZ")},
    )

    assert not form.is_valid()
    assert "id_card_file" in form.errors


# ---------------------------------------------------------------------------
# Transportation
# ---------------------------------------------------------------------------


@pytest.mark.django_db
def test_transportation_rejects_unsupported_method():
    form = TransportationForm(data={"transportation_method": "Teleport"}, methods=["KTX", "항공"])

    assert not form.is_valid()
    assert "Unsupported transportation method" in form.errors["transportation_method"][0]


@pytest.mark.django_db
def test_transportation_rejects_negative_costs():
    form = TransportationForm(data={"transportation_method": "KTX", "actual_cost": "-1"}, methods=["KTX"])

    assert not form.is_valid()
    assert form.errors["actual_cost"] == ["Cost cannot be negative."]


@pytest.mark.django_db
def test_transportation_rejects_receipt_after_deadline():
    form = TransportationForm(
        data={"transportation_method": "KTX"},
        files={"receipt_file": SimpleUploadedFile("receipt.png", b"png")},
        methods=["KTX"],
        receipt_deadline=timezone.now() - datetime.timedelta(minutes=1),
    )

    assert not form.is_valid()
    assert "deadline has passed" in form.errors["receipt_file"][0]


# ---------------------------------------------------------------------------
# Presentation info
# ---------------------------------------------------------------------------


@pytest.fixture
def presentation_fields(project):
    return [
        PresentationField.objects.create(
            project=project, field_key="title", field_label="Talk title", is_required=True
        ),
        PresentationField.objects.create(
            project=project,
            field_key="level",
            field_label="Level",
            field_type=PresentationField.FieldType.SELECT,
            options=["beginner", "advanced"],
        ),
        PresentationField.objects.create(
            project=project, field_key="minutes", field_label="Minutes", field_type=PresentationField.FieldType.NUMBER
        ),
        PresentationField.objects.create(
            project=project,
            field_key="agree",
            field_label="Agree",
            field_type=PresentationField.FieldType.CHECKBOX,
            is_required=True,
        ),
    ]


def test_presentation_info_validates_custom_fields(presentation_fields):
    form = PresentationInfoForm(
        data={
            "use_audio": True,
            "custom_fields": {"title": "Scaling", "level": "advanced", "minutes": "30", "agree": True, "extra": 1},
        },
        field_definitions=presentation_fields,
    )

    assert form.is_valid(), form.errors
    assert form.cleaned_data["custom_fields"] == {
        "title": "Scaling",
        "level": "advanced",
        "minutes": "30",
        "agree": True,
    }


def test_presentation_info_reports_each_invalid_field(presentation_fields):
    form = PresentationInfoForm(
        data={"custom_fields": {"level": "expert", "minutes": "half an hour", "agree": False}},
        field_definitions=presentation_fields,
    )

    assert not form.is_valid()
    errors = form.non_field_errors()
    assert "'Talk title' is required." in errors
    assert "'Level' must be one of: beginner, advanced." in errors
    assert "'Minutes' must be a number." in errors
    assert "'Agree' is required." in errors


def test_presentation_info_accepts_json_string_from_multipart(presentation_fields):
    form = PresentationInfoForm(
        data={"custom_fields": '{"title": "Scaling", "agree": "true"}'},
        field_definitions=presentation_fields,
    )

    assert form.is_valid(), form.errors
    assert form.cleaned_data["custom_fields"] == {"title": "Scaling", "agree": True}


# ---------------------------------------------------------------------------
# Consent
# ---------------------------------------------------------------------------


def test_consent_requires_mandatory_clauses(project):
    clause = ConsentField.objects.create(project=project, field_key="privacy-policy", title="Privacy policy")

    form = ConsentForm(data={"custom_consents": {}}, consent_fields=[clause])

    assert not form.is_valid()
    assert "You must agree to 'Privacy policy'." in form.non_field_errors()


def test_consent_decodes_signature(project):
    png = b"\x89PNG\r\n\x1a\nsignature"
    form = ConsentForm(
        data={"privacy_consent": True, "signature": "data:image/png;base64," + base64.b64encode(png).decode()},
        consent_fields=[],
    )

    assert form.is_valid(), form.errors
    signature = form.cleaned_data["signature"]
    assert signature.name == "signature.png"
    assert signature.read() == png


def test_consent_rejects_non_png_signature(project):
    form = ConsentForm(data={"signature": "data:image/jpeg;base64,AAAA"}, consent_fields=[])

    assert not form.is_valid()
    assert "signature" in form.errors


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------


def test_attendance_rejects_closed_and_unknown_fields(project):
    closed = AttendanceField.objects.create(
        project=project,
        field_key="dinner",
        field_label="Dinner",
        deadline=timezone.now() - datetime.timedelta(days=1),
    )

    form = AttendanceForm(data={"responses": {"dinner": True, "ghost": True}}, attendance_fields=[closed])

    assert not form.is_valid()
    errors = form.non_field_errors()
    assert "The deadline for 'Dinner' has passed." in errors
    assert "Unknown attendance field 'ghost'." in errors


def test_attendance_required_field_may_be_answered_earlier(project):
    required = AttendanceField.objects.create(
        project=project, field_key="rehearsal", field_label="Rehearsal", is_required=True
    )

    missing = AttendanceForm(data={"responses": {}}, attendance_fields=[required])
    answered_before = AttendanceForm(data={"responses": {}}, attendance_fields=[required], answered={"rehearsal"})

    assert not missing.is_valid()
    assert answered_before.is_valid()
