"""Persistence for incoming external datastore webhooks."""

from django.db import models


class WebhookEvent(models.Model):
    """A row-change notification received from the external datastore.

    Payloads follow the ``{type, table, record, old_record}`` shape.  The
    raw payload is stored verbatim so failed events can be inspected and
    replayed from the admin.
    """

    class EventType(models.TextChoices):
        INSERT = "INSERT", "Insert"
        UPDATE = "UPDATE", "Update"
        DELETE = "DELETE", "Delete"
        UNKNOWN = "", "Unknown"

    event_type = models.CharField(max_length=10, choices=EventType.choices, blank=True, default="")
    table = models.CharField(max_length=100, blank=True, default="")
    record_id = models.CharField(max_length=100, blank=True, default="")
    payload = models.JSONField(default=dict)
    processed = models.BooleanField(default=False)
    result = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        target = self.record_id or "all"
        return f"{self.event_type or 'EVENT'} {self.table or '?'} ({target})"


class WebhookProcessingError(models.Model):
    """A captured failure while handling a :class:`WebhookEvent`."""

    event = models.ForeignKey(WebhookEvent, on_delete=models.CASCADE, related_name="errors")
    message = models.CharField(max_length=500)
    traceback = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.message
