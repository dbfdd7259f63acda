"""Project, project setting, and per-project field definition models."""

import datetime

from django.db import models
from django.utils import timezone


def _default_transportation_methods() -> list[str]:
    from speaker_portal.settings import get_config  # noqa: PLC0415

    return list(get_config().transportation_methods)


class Project(models.Model):
    """A conference or event that speakers submit materials for.

    Projects are either created locally or synced from the external
    datastore.  Synced projects carry the external row id in
    ``external_project_id``, which is the only key used to match them on
    subsequent syncs.
    """

    class AccessStatus(models.TextChoices):
        OPEN = "open", "Open"
        NOT_STARTED = "not_started", "Not started"
        ENDED = "ended", "Ended"

    project_name = models.CharField(max_length=200)
    event_name = models.CharField(max_length=200, blank=True, default="")
    description = models.TextField(blank=True, default="")
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    slug = models.SlugField(max_length=200, unique=True, allow_unicode=True)
    is_active = models.BooleanField(default=True)
    external_project_id = models.CharField(max_length=100, unique=True, null=True, blank=True)
    synced_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-start_date", "project_name"]

    def __str__(self) -> str:
        return self.project_name

    def access_status(self, on: datetime.date | None = None) -> str:
        """Return whether speakers may sign in on the given date.

        Args:
            on: The date to check. Defaults to today in the current timezone.

        Returns:
            One of the :class:`AccessStatus` values.
        """
        today = on or timezone.localdate()
        if self.start_date and today < self.start_date:
            return self.AccessStatus.NOT_STARTED
        if self.end_date and today > self.end_date:
            return self.AccessStatus.ENDED
        return self.AccessStatus.OPEN

    def get_setting(self, key: str, default: object = None) -> object:
        """Return the JSON value stored under *key*, or *default*."""
        setting = self.settings.filter(setting_key=key).first()
        return default if setting is None else setting.setting_value


class ProjectSetting(models.Model):
    """A free-form JSON setting attached to a project.

    ``receipt_upload_deadline`` is the only key the portal reads itself;
    organizers may store others for their own tooling.
    """

    RECEIPT_UPLOAD_DEADLINE = "receipt_upload_deadline"

    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="settings")
    setting_key = models.CharField(max_length=100)
    setting_value = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["setting_key"]
        unique_together = [("project", "setting_key")]

    def __str__(self) -> str:
        return f"{self.project}: {self.setting_key}"


class PresentationField(models.Model):
    """A custom question shown on the presentation info step."""

    class FieldType(models.TextChoices):
        TEXT = "text", "Text"
        TEXTAREA = "textarea", "Text area"
        NUMBER = "number", "Number"
        DATE = "date", "Date"
        SELECT = "select", "Select"
        CHECKBOX = "checkbox", "Checkbox"

    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="presentation_fields")
    field_key = models.SlugField(max_length=100)
    field_label = models.CharField(max_length=200)
    field_type = models.CharField(max_length=20, choices=FieldType.choices, default=FieldType.TEXT)
    field_description = models.TextField(blank=True, default="")
    options = models.JSONField(default=list, blank=True)
    is_required = models.BooleanField(default=False)
    display_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["display_order", "id"]
        unique_together = [("project", "field_key")]

    def __str__(self) -> str:
        return self.field_label


class ConsentField(models.Model):
    """A consent clause speakers agree to on the consent step."""

    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="consent_fields")
    field_key = models.SlugField(max_length=100)
    title = models.CharField(max_length=200)
    content = models.TextField(blank=True, default="")
    is_required = models.BooleanField(default=True)
    display_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["display_order", "id"]
        unique_together = [("project", "field_key")]

    def __str__(self) -> str:
        return self.title


class AttendanceField(models.Model):
    """A yes/no attendance question, optionally closing at a deadline."""

    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="attendance_fields")
    field_key = models.SlugField(max_length=100)
    field_label = models.CharField(max_length=200)
    field_description = models.TextField(blank=True, default="")
    is_required = models.BooleanField(default=False)
    display_order = models.PositiveIntegerField(default=0)
    deadline = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["display_order", "id"]
        unique_together = [("project", "field_key")]

    def __str__(self) -> str:
        return self.field_label

    @property
    def is_closed(self) -> bool:
        """Return ``True`` once the response deadline has passed."""
        return self.deadline is not None and self.deadline < timezone.now()


class TransportationSettings(models.Model):
    """Per-project transportation rules (allowed methods, receipt policy)."""

    project = models.OneToOneField(Project, on_delete=models.CASCADE, related_name="transportation_settings")
    supported_methods = models.JSONField(default=_default_transportation_methods, blank=True)
    requires_receipt = models.BooleanField(default=True)
    receipt_deadline = models.DateTimeField(null=True, blank=True)
    additional_notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "transportation settings"

    def __str__(self) -> str:
        return f"Transportation settings for {self.project}"


class ArrivalGuide(models.Model):
    """Venue and day-of logistics shown on the final speaker step."""

    project = models.OneToOneField(Project, on_delete=models.CASCADE, related_name="arrival_guide")
    venue_name = models.CharField(max_length=200, blank=True, default="")
    venue_address = models.CharField(max_length=500, blank=True, default="")
    venue_map_url = models.URLField(blank=True, default="")
    check_in_time = models.CharField(max_length=100, blank=True, default="")
    check_in_location = models.CharField(max_length=200, blank=True, default="")
    presentation_time = models.CharField(max_length=100, blank=True, default="")
    presentation_room = models.CharField(max_length=200, blank=True, default="")
    parking_info = models.TextField(blank=True, default="")
    contact_name = models.CharField(max_length=100, blank=True, default="")
    contact_phone = models.CharField(max_length=50, blank=True, default="")
    contact_email = models.EmailField(blank=True, default="")
    emergency_contact = models.CharField(max_length=100, blank=True, default="")
    additional_notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Arrival guide for {self.project}"


class ArrivalChecklistItem(models.Model):
    """A checklist line on the arrival guide."""

    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="checklist_items")
    item_text = models.CharField(max_length=500)
    display_order = models.PositiveIntegerField(default=0)
    requires_response = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["display_order", "id"]

    def __str__(self) -> str:
        return self.item_text
