"""Django admin configuration for the external sync app."""

from django.contrib import admin
from django.http import HttpRequest

from speaker_portal.external.models import WebhookEvent, WebhookProcessingError


class WebhookProcessingErrorInline(admin.TabularInline):
    """Read-only list of failures captured for a webhook event."""

    model = WebhookProcessingError
    extra = 0
    can_delete = False
    fields = ("message", "created_at")
    readonly_fields = ("message", "created_at")


@admin.register(WebhookEvent)
class WebhookEventAdmin(admin.ModelAdmin):
    """Read-only admin for external datastore webhook events."""

    list_display = ("__str__", "event_type", "table", "record_id", "processed", "created_at")
    list_filter = ("event_type", "table", "processed")
    search_fields = ("record_id", "table")
    readonly_fields = ("event_type", "table", "record_id", "payload", "processed", "result", "created_at")
    inlines = [WebhookProcessingErrorInline]

    def has_add_permission(self, request: HttpRequest) -> bool:  # noqa: ARG002, D102
        return False

    def has_change_permission(
        self,
        request: HttpRequest,  # noqa: ARG002
        obj: WebhookEvent | None = None,  # noqa: ARG002
    ) -> bool:  # noqa: D102
        return False


@admin.register(WebhookProcessingError)
class WebhookProcessingErrorAdmin(admin.ModelAdmin):
    """Read-only admin for webhook processing errors."""

    list_display = ("message", "event", "created_at")
    readonly_fields = ("event", "message", "traceback", "created_at")

    def has_add_permission(self, request: HttpRequest) -> bool:  # noqa: ARG002, D102
        return False

    def has_change_permission(
        self,
        request: HttpRequest,  # noqa: ARG002
        obj: WebhookProcessingError | None = None,  # noqa: ARG002
    ) -> bool:  # noqa: D102
        return False
