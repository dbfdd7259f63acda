"""Django admin configuration for the speakers app."""

from django.contrib import admin

from speaker_portal.speakers.models import (
    AttendanceResponse,
    ConsentRecord,
    HonorariumInfo,
    PresentationFile,
    PresentationInfo,
    SpeakerSession,
    TransportationInfo,
)


class HonorariumInfoInline(admin.StackedInline):
    """Banking details submitted by the speaker."""

    model = HonorariumInfo
    extra = 0
    can_delete = False


class TransportationInfoInline(admin.StackedInline):
    """Travel details and the reimbursement receipt."""

    model = TransportationInfo
    extra = 0
    can_delete = False
    readonly_fields = ("receipt_submitted",)


class PresentationInfoInline(admin.StackedInline):
    """Equipment needs and custom field answers."""

    model = PresentationInfo
    extra = 0
    can_delete = False


class PresentationFileInline(admin.TabularInline):
    """Uploaded presentation files."""

    model = PresentationFile
    extra = 0
    fields = ("file_name", "file", "file_size", "is_primary", "uploaded_at")
    readonly_fields = ("file_size", "uploaded_at")


class ConsentRecordInline(admin.StackedInline):
    """Consents and signature."""

    model = ConsentRecord
    extra = 0
    can_delete = False


class AttendanceResponseInline(admin.TabularInline):
    """Answers to the attendance questions."""

    model = AttendanceResponse
    extra = 0
    readonly_fields = ("responded_at",)


@admin.register(SpeakerSession)
class SpeakerSessionAdmin(admin.ModelAdmin):
    """Admin interface for speaker sessions.

    Sessions are created by organizers or imported from the external
    datastore.  ``external_supplier_id`` is the sync key and stays
    read-only; every submission step is editable through the inlines.
    """

    list_display = ("speaker_name", "project", "email", "organization", "external_supplier_id", "synced_at")
    list_filter = ("project",)
    search_fields = ("speaker_name", "email", "organization", "external_supplier_id")
    readonly_fields = ("speaker_id", "external_supplier_id", "synced_at", "created_at", "updated_at")
    inlines = [
        HonorariumInfoInline,
        TransportationInfoInline,
        PresentationInfoInline,
        PresentationFileInline,
        ConsentRecordInline,
        AttendanceResponseInline,
    ]


@admin.register(PresentationFile)
class PresentationFileAdmin(admin.ModelAdmin):
    """Admin interface for reviewing uploaded presentation files."""

    list_display = ("file_name", "session", "file_type", "file_size", "is_primary", "uploaded_at")
    list_filter = ("is_primary", "session__project")
    search_fields = ("file_name", "session__speaker_name")
    raw_id_fields = ("session",)
    readonly_fields = ("uploaded_at",)
