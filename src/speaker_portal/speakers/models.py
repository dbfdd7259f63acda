"""Speaker session and per-step submission models."""

from __future__ import annotations

import uuid
from pathlib import PurePath

from django.db import models
from django.utils import timezone
from encrypted_fields import EncryptedCharField


def _new_speaker_id() -> str:
    return str(uuid.uuid4())


def _timestamped_name(session_id: int, filename: str) -> str:
    ext = PurePath(filename).suffix.lower()
    return f"{session_id}_{int(timezone.now().timestamp() * 1000)}{ext}"


def presentation_upload_to(instance: PresentationFile, filename: str) -> str:
    """Store presentation files as ``presentations/<session>/<session>_<ms>.<ext>``."""
    return f"presentations/{instance.session_id}/{_timestamped_name(instance.session_id, filename)}"


def document_upload_to(instance: HonorariumInfo, filename: str) -> str:
    """Store ID card and bankbook scans under the owning session."""
    return f"documents/{instance.session_id}/{_timestamped_name(instance.session_id, filename)}"


def signature_upload_to(instance: ConsentRecord, filename: str) -> str:
    """Store consent signatures as ``signatures/<session>_<ms>.png``."""
    return f"signatures/{_timestamped_name(instance.session_id, filename)}"


def receipt_upload_to(instance: TransportationInfo, filename: str) -> str:
    """Store transportation receipts under the owning session."""
    return f"receipts/{instance.session_id}/{_timestamped_name(instance.session_id, filename)}"


class SpeakerSession(models.Model):
    """One speaker's working record within a project.

    Speakers sign in by email, so the email is the lookup key within a
    project.  Sessions imported or synced from the external datastore keep
    the external speaker id in ``external_supplier_id``.
    """

    project = models.ForeignKey(
        "portal_projects.Project",
        on_delete=models.CASCADE,
        related_name="speakers",
    )
    speaker_id = models.CharField(max_length=64, default=_new_speaker_id, unique=True)
    speaker_name = models.CharField(max_length=200)
    email = models.EmailField(blank=True, default="")
    organization = models.CharField(max_length=200, blank=True, default="")
    department = models.CharField(max_length=200, blank=True, default="")
    position = models.CharField(max_length=200, blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    event_name = models.CharField(max_length=200, blank=True, default="")
    presentation_date = models.DateTimeField(null=True, blank=True)
    external_supplier_id = models.CharField(max_length=100, null=True, blank=True)
    synced_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["speaker_name"]
        constraints = [
            models.UniqueConstraint(
                fields=["project", "external_supplier_id"],
                condition=~models.Q(external_supplier_id=None),
                name="unique_speaker_external_id_per_project",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.speaker_name} ({self.project})"


class HonorariumInfo(models.Model):
    """Banking details and identity documents for paying the honorarium."""

    session = models.OneToOneField(SpeakerSession, on_delete=models.CASCADE, related_name="honorarium")
    bank_name = models.CharField(max_length=100)
    account_number = EncryptedCharField(max_length=128)
    account_holder = models.CharField(max_length=100)
    id_card_file = models.FileField(upload_to=document_upload_to, blank=True)
    bankbook_file = models.FileField(upload_to=document_upload_to, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "honorarium info"

    def __str__(self) -> str:
        return f"Honorarium info for {self.session.speaker_name}"


class PresentationInfo(models.Model):
    """Equipment needs and answers to the project's custom presentation fields."""

    session = models.OneToOneField(SpeakerSession, on_delete=models.CASCADE, related_name="presentation_info")
    use_audio = models.BooleanField(default=False)
    use_video = models.BooleanField(default=False)
    use_personal_laptop = models.BooleanField(default=False)
    special_requests = models.TextField(blank=True, default="")
    custom_fields = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "presentation info"

    def __str__(self) -> str:
        return f"Presentation info for {self.session.speaker_name}"


class PresentationFile(models.Model):
    """An uploaded slide deck or handout."""

    session = models.ForeignKey(SpeakerSession, on_delete=models.CASCADE, related_name="files")
    file = models.FileField(upload_to=presentation_upload_to, max_length=255)
    file_name = models.CharField(max_length=255)
    file_type = models.CharField(max_length=100, blank=True, default="")
    file_size = models.PositiveBigIntegerField(default=0)
    is_primary = models.BooleanField(default=False)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-is_primary", "-uploaded_at"]

    def __str__(self) -> str:
        return self.file_name


class ConsentRecord(models.Model):
    """The speaker's answers to the standard and project-specific consents."""

    session = models.OneToOneField(SpeakerSession, on_delete=models.CASCADE, related_name="consent")
    privacy_consent = models.BooleanField(default=False)
    portrait_consent = models.BooleanField(default=False)
    recording_consent = models.BooleanField(default=False)
    copyright_consent = models.BooleanField(default=False)
    distribution_consent = models.BooleanField(default=False)
    custom_consents = models.JSONField(default=dict, blank=True)
    signature_image = models.FileField(upload_to=signature_upload_to, blank=True)
    consent_date = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Consent for {self.session.speaker_name}"


class TransportationInfo(models.Model):
    """How the speaker travels to the venue and what it cost."""

    session = models.OneToOneField(SpeakerSession, on_delete=models.CASCADE, related_name="transportation")
    transportation_method = models.CharField(max_length=50)
    departure_location = models.CharField(max_length=200, blank=True, default="")
    arrival_location = models.CharField(max_length=200, blank=True, default="")
    departure_date = models.DateField(null=True, blank=True)
    departure_time = models.TimeField(null=True, blank=True)
    arrival_date = models.DateField(null=True, blank=True)
    arrival_time = models.TimeField(null=True, blank=True)
    vehicle_type = models.CharField(max_length=100, blank=True, default="")
    vehicle_number = models.CharField(max_length=50, blank=True, default="")
    train_number = models.CharField(max_length=50, blank=True, default="")
    seat_number = models.CharField(max_length=50, blank=True, default="")
    flight_number = models.CharField(max_length=50, blank=True, default="")
    airline = models.CharField(max_length=100, blank=True, default="")
    requires_reimbursement = models.BooleanField(default=False)
    estimated_cost = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    actual_cost = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    receipt_file = models.FileField(upload_to=receipt_upload_to, blank=True)
    receipt_submitted = models.BooleanField(default=False)
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "transportation info"

    def __str__(self) -> str:
        return f"{self.transportation_method} for {self.session.speaker_name}"


class AttendanceResponse(models.Model):
    """A speaker's yes/no answer to one attendance question."""

    session = models.ForeignKey(SpeakerSession, on_delete=models.CASCADE, related_name="attendance_responses")
    field_key = models.SlugField(max_length=100)
    response = models.BooleanField()
    responded_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["field_key"]
        unique_together = [("session", "field_key")]

    def __str__(self) -> str:
        return f"{self.session.speaker_name}: {self.field_key}={'yes' if self.response else 'no'}"
