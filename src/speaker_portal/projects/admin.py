"""Django admin configuration for the projects app."""

from django.contrib import admin, messages
from django.db.models import QuerySet
from django.http import HttpRequest

from speaker_portal.external.sync import ExternalSyncService
from speaker_portal.projects.models import (
    ArrivalChecklistItem,
    ArrivalGuide,
    AttendanceField,
    ConsentField,
    PresentationField,
    Project,
    ProjectSetting,
    TransportationSettings,
)


class PresentationFieldInline(admin.TabularInline):
    """Inline editor for the custom presentation questions of a project."""

    model = PresentationField
    extra = 0
    fields = ("field_key", "field_label", "field_type", "options", "is_required", "display_order")


class ConsentFieldInline(admin.StackedInline):
    """Inline editor for the consent clauses of a project."""

    model = ConsentField
    extra = 0
    fields = ("field_key", "title", "content", "is_required", "display_order")


class AttendanceFieldInline(admin.TabularInline):
    """Inline editor for attendance questions and their deadlines."""

    model = AttendanceField
    extra = 0
    fields = ("field_key", "field_label", "field_description", "is_required", "display_order", "deadline")


class TransportationSettingsInline(admin.StackedInline):
    """Inline editor for the project's transportation rules.

    One row per project, created automatically when the project is saved.
    """

    model = TransportationSettings
    can_delete = False
    fields = ("supported_methods", "requires_receipt", "receipt_deadline", "additional_notes")


class ArrivalGuideInline(admin.StackedInline):
    """Inline editor for venue and day-of logistics."""

    model = ArrivalGuide
    can_delete = False
    extra = 0


class ArrivalChecklistItemInline(admin.TabularInline):
    """Inline editor for the arrival checklist."""

    model = ArrivalChecklistItem
    extra = 0
    fields = ("item_text", "display_order", "requires_response")


class ProjectSettingInline(admin.TabularInline):
    """Inline editor for free-form project settings such as the receipt deadline policy."""

    model = ProjectSetting
    extra = 0
    fields = ("setting_key", "setting_value")


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    """Admin interface for managing projects.

    Synced projects keep their ``external_project_id`` read-only so an
    accidental edit cannot break the link used by the sync.  Organizers can
    resync selected projects or push local ones to the external datastore
    from the changelist.
    """

    list_display = ("project_name", "slug", "start_date", "end_date", "is_active", "external_project_id", "synced_at")
    list_filter = ("is_active",)
    search_fields = ("project_name", "event_name", "slug", "external_project_id")
    prepopulated_fields = {"slug": ("project_name",)}
    readonly_fields = ("synced_at", "created_at", "updated_at")
    actions = ["sync_from_external", "push_to_external"]
    inlines = [
        PresentationFieldInline,
        ConsentFieldInline,
        AttendanceFieldInline,
        TransportationSettingsInline,
        ArrivalGuideInline,
        ArrivalChecklistItemInline,
        ProjectSettingInline,
    ]

    def get_readonly_fields(self, request: HttpRequest, obj: Project | None = None) -> tuple[str, ...]:
        """Lock ``external_project_id`` once a project is linked."""
        fields = tuple(super().get_readonly_fields(request, obj))
        if obj is not None and obj.external_project_id:
            fields += ("external_project_id",)
        return fields

    @admin.action(description="Sync selected projects from the external datastore")
    def sync_from_external(self, request: HttpRequest, queryset: QuerySet[Project]) -> None:
        """Resync every selected project that carries an external id."""
        try:
            service = ExternalSyncService()
        except ValueError as exc:
            self.message_user(request, str(exc), level=messages.ERROR)
            return

        synced = 0
        for project in queryset.exclude(external_project_id=None):
            try:
                service.sync_project(str(project.external_project_id))
            except RuntimeError as exc:
                self.message_user(request, f"{project}: {exc}", level=messages.ERROR)
                continue
            synced += 1
        self.message_user(request, f"Synced {synced} projects.", level=messages.SUCCESS)

    @admin.action(description="Push selected projects to the external datastore")
    def push_to_external(self, request: HttpRequest, queryset: QuerySet[Project]) -> None:
        """Create or update the external row of every selected project."""
        try:
            service = ExternalSyncService()
        except ValueError as exc:
            self.message_user(request, str(exc), level=messages.ERROR)
            return

        pushed = 0
        for project in queryset:
            try:
                service.push_project(project)
            except RuntimeError as exc:
                self.message_user(request, f"{project}: {exc}", level=messages.ERROR)
                continue
            pushed += 1
        self.message_user(request, f"Pushed {pushed} projects.", level=messages.SUCCESS)


@admin.register(ProjectSetting)
class ProjectSettingAdmin(admin.ModelAdmin):
    """Admin interface for free-form project settings."""

    list_display = ("setting_key", "project", "updated_at")
    list_filter = ("project",)
    search_fields = ("setting_key",)
