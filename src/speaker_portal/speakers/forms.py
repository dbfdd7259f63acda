"""Forms for the speaker submission steps.

The speaker-facing endpoints accept JSON or multipart bodies; both are bound
to these forms so validation lives in one place regardless of transport.
"""

from __future__ import annotations

import base64
import binascii
import datetime
import json
from decimal import Decimal, InvalidOperation
from pathlib import PurePath
from typing import TYPE_CHECKING, Any

from django import forms
from django.core.files.base import ContentFile
from django.utils import timezone

from speaker_portal.projects.models import PresentationField
from speaker_portal.settings import get_config
from speaker_portal.speakers.models import HonorariumInfo, PresentationInfo, SpeakerSession, TransportationInfo

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

    from speaker_portal.projects.models import AttendanceField, ConsentField

_MB = 1024 * 1024
_PNG_DATA_URL_PREFIX = "data:image/png;base64,"


def validate_upload(upload: UploadedFile | None, extensions: tuple[str, ...], max_mb: int) -> UploadedFile | None:
    """Check an uploaded file's extension and size.

    Raises:
        forms.ValidationError: If the extension is not allowed or the file
            is larger than *max_mb* megabytes.
    """
    if not upload:
        return upload
    ext = PurePath(upload.name or "").suffix.lower()
    if ext not in extensions:
        msg = f"Unsupported file type. Allowed: {', '.join(extensions)}."
        raise forms.ValidationError(msg)
    if upload.size is not None and upload.size > max_mb * _MB:
        msg = f"File size must be under {max_mb} MB."
        raise forms.ValidationError(msg)
    return upload


def _json_mapping(value: object, label: str) -> dict[str, Any]:
    """Accept a dict or a JSON-encoded object (multipart bodies send strings)."""
    if value in (None, ""):
        return {}
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            msg = f"{label} must be a JSON object."
            raise forms.ValidationError(msg) from None
    if not isinstance(value, dict):
        msg = f"{label} must be a JSON object."
        raise forms.ValidationError(msg)
    return value


def _as_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


class SpeakerLoginForm(forms.Form):
    """Email sign-in for a project's speaker portal."""

    email = forms.EmailField()


class SpeakerProfileForm(forms.ModelForm):
    """Step 1: the speaker's contact and affiliation details."""

    class Meta:
        model = SpeakerSession
        fields = ["speaker_name", "email", "organization", "department", "position", "phone"]

    def __init__(self, *args: object, **kwargs: object) -> None:
        """Require an email, since it is the sign-in key."""
        super().__init__(*args, **kwargs)
        self.fields["email"].required = True


class HonorariumForm(forms.ModelForm):
    """Step 2a: banking details and identity documents for the honorarium."""

    class Meta:
        model = HonorariumInfo
        fields = ["bank_name", "account_number", "account_holder", "id_card_file", "bankbook_file"]

    def clean_account_number(self) -> str:
        """Strip whitespace and reject anything but digits and dashes."""
        value = "".join(str(self.cleaned_data.get("account_number", "")).split())
        if not value.replace("-", "").isdigit():
            msg = "Account number may only contain digits and dashes."
            raise forms.ValidationError(msg)
        return value

    def clean_id_card_file(self) -> object:
        """Enforce the document size and type limits."""
        uploads = get_config().uploads
        return validate_upload(
            self.cleaned_data.get("id_card_file"), uploads.document_extensions, uploads.max_document_mb
        )

    def clean_bankbook_file(self) -> object:
        """Enforce the document size and type limits."""
        uploads = get_config().uploads
        return validate_upload(
            self.cleaned_data.get("bankbook_file"), uploads.document_extensions, uploads.max_document_mb
        )


class TransportationForm(forms.ModelForm):
    """Step 2b: travel plans, costs, and the reimbursement receipt.

    Args:
        methods: The transportation methods the project accepts.
        receipt_deadline: When receipts stop being accepted, if ever.
    """

    class Meta:
        model = TransportationInfo
        fields = [
            "transportation_method",
            "departure_location",
            "arrival_location",
            "departure_date",
            "departure_time",
            "arrival_date",
            "arrival_time",
            "vehicle_type",
            "vehicle_number",
            "train_number",
            "seat_number",
            "flight_number",
            "airline",
            "requires_reimbursement",
            "estimated_cost",
            "actual_cost",
            "receipt_file",
            "notes",
        ]

    def __init__(
        self,
        *args: object,
        methods: list[str] | tuple[str, ...] = (),
        receipt_deadline: datetime.datetime | None = None,
        **kwargs: object,
    ) -> None:
        """Bind the project's transportation rules."""
        super().__init__(*args, **kwargs)
        self.methods = list(methods)
        self.receipt_deadline = receipt_deadline

    def clean_transportation_method(self) -> str:
        """Only accept methods the project supports."""
        method = self.cleaned_data.get("transportation_method", "")
        if self.methods and method not in self.methods:
            msg = f"Unsupported transportation method. Choose one of: {', '.join(self.methods)}."
            raise forms.ValidationError(msg)
        return method

    def clean_receipt_file(self) -> object:
        """Enforce receipt type, size, and the upload deadline."""
        receipt = self.cleaned_data.get("receipt_file")
        if receipt and "receipt_file" in self.files:
            if self.receipt_deadline is not None and timezone.now() > self.receipt_deadline:
                msg = "The receipt upload deadline has passed."
                raise forms.ValidationError(msg)
            uploads = get_config().uploads
            validate_upload(receipt, uploads.receipt_extensions, uploads.max_document_mb)
        return receipt

    def clean(self) -> dict[str, object]:
        """Validate that costs are non-negative."""
        cleaned = super().clean()
        for name in ("estimated_cost", "actual_cost"):
            value = cleaned.get(name)
            if value is not None and value < 0:
                self.add_error(name, "Cost cannot be negative.")
        return cleaned

    def save(self, commit: bool = True) -> TransportationInfo:  # noqa: FBT001, FBT002
        """Mark the receipt as submitted when one was uploaded."""
        info = super().save(commit=False)
        if "receipt_file" in self.files:
            info.receipt_submitted = True
        if commit:
            info.save()
        return info


class PresentationInfoForm(forms.ModelForm):
    """Step 3a: equipment needs plus answers to the project's custom fields.

    Args:
        field_definitions: The project's ``PresentationField`` rows.
    """

    class Meta:
        model = PresentationInfo
        fields = ["use_audio", "use_video", "use_personal_laptop", "special_requests"]

    def __init__(
        self,
        *args: object,
        field_definitions: list[PresentationField] | None = None,
        **kwargs: object,
    ) -> None:
        """Bind the custom field definitions."""
        super().__init__(*args, **kwargs)
        self.field_definitions = list(field_definitions or [])

    def clean(self) -> dict[str, object]:
        """Validate ``custom_fields`` against the field definitions.

        Unknown keys are dropped.  Required fields must be non-empty,
        numbers must parse, and select answers must be one of the options.
        """
        cleaned = super().clean()
        try:
            raw = _json_mapping(self.data.get("custom_fields"), "custom_fields")
        except forms.ValidationError as exc:
            self.add_error(None, exc)
            return cleaned

        answers: dict[str, object] = {}
        for definition in self.field_definitions:
            value = raw.get(definition.field_key)
            if value in (None, "", []):
                if definition.is_required:
                    self.add_error(None, f"'{definition.field_label}' is required.")
                continue
            error = self._check_value(definition, value)
            if error:
                self.add_error(None, error)
                continue
            answers[definition.field_key] = _as_bool(value) if definition.field_type == "checkbox" else value

        for definition in self.field_definitions:
            if (
                definition.is_required
                and definition.field_type == PresentationField.FieldType.CHECKBOX
                and definition.field_key in answers
                and not answers[definition.field_key]
            ):
                self.add_error(None, f"'{definition.field_label}' is required.")

        cleaned["custom_fields"] = answers
        return cleaned

    @staticmethod
    def _check_value(definition: PresentationField, value: object) -> str | None:
        if definition.field_type == PresentationField.FieldType.NUMBER:
            try:
                Decimal(str(value))
            except InvalidOperation:
                return f"'{definition.field_label}' must be a number."
        elif definition.field_type == PresentationField.FieldType.SELECT:
            options = [str(option) for option in definition.options or []]
            if options and str(value) not in options:
                return f"'{definition.field_label}' must be one of: {', '.join(options)}."
        elif definition.field_type == PresentationField.FieldType.DATE:
            try:
                datetime.date.fromisoformat(str(value))
            except ValueError:
                return f"'{definition.field_label}' must be a date (YYYY-MM-DD)."
        return None

    def save(self, commit: bool = True) -> PresentationInfo:  # noqa: FBT001, FBT002
        """Store the validated custom field answers alongside the model fields."""
        info = super().save(commit=False)
        info.custom_fields = self.cleaned_data.get("custom_fields", {})
        if commit:
            info.save()
        return info


class PresentationFileForm(forms.Form):
    """Step 3b: a single presentation file upload."""

    file = forms.FileField()
    is_primary = forms.BooleanField(required=False)

    def clean_file(self) -> object:
        """Enforce the presentation size and type limits."""
        uploads = get_config().uploads
        return validate_upload(
            self.cleaned_data.get("file"), uploads.presentation_extensions, uploads.max_presentation_mb
        )


class ConsentForm(forms.Form):
    """Step 4: standard consents, project-specific consents, and a signature.

    Args:
        consent_fields: The project's ``ConsentField`` rows.
    """

    privacy_consent = forms.BooleanField(required=False)
    portrait_consent = forms.BooleanField(required=False)
    recording_consent = forms.BooleanField(required=False)
    copyright_consent = forms.BooleanField(required=False)
    distribution_consent = forms.BooleanField(required=False)
    signature = forms.CharField(required=False)

    def __init__(
        self,
        *args: object,
        consent_fields: list[ConsentField] | None = None,
        **kwargs: object,
    ) -> None:
        """Bind the project's consent clauses."""
        super().__init__(*args, **kwargs)
        self.consent_fields = list(consent_fields or [])

    def clean_signature(self) -> ContentFile | None:
        """Decode a ``data:image/png;base64,...`` signature into a file."""
        value = self.cleaned_data.get("signature", "")
        if not value:
            return None
        if not value.startswith(_PNG_DATA_URL_PREFIX):
            msg = "Signature must be a PNG data URL."
            raise forms.ValidationError(msg)
        try:
            content = base64.b64decode(value.removeprefix(_PNG_DATA_URL_PREFIX), validate=True)
        except (binascii.Error, ValueError):
            msg = "Signature is not valid base64 data."
            raise forms.ValidationError(msg) from None
        if not content:
            msg = "Signature is empty."
            raise forms.ValidationError(msg)
        return ContentFile(content, name="signature.png")

    def clean(self) -> dict[str, object]:
        """Require every mandatory consent clause to be agreed."""
        cleaned = super().clean()
        try:
            raw = _json_mapping(self.data.get("custom_consents"), "custom_consents")
        except forms.ValidationError as exc:
            self.add_error(None, exc)
            return cleaned

        consents: dict[str, bool] = {}
        for consent in self.consent_fields:
            agreed = _as_bool(raw.get(consent.field_key, False))
            if consent.is_required and not agreed:
                self.add_error(None, f"You must agree to '{consent.title}'.")
            consents[consent.field_key] = agreed
        cleaned["custom_consents"] = consents
        return cleaned


class AttendanceForm(forms.Form):
    """Step 5: yes/no answers to the project's attendance questions.

    The bound data is ``{"responses": {field_key: bool}}``.

    Args:
        attendance_fields: The project's ``AttendanceField`` rows.
        answered: Field keys the speaker has already answered.
    """

    def __init__(
        self,
        *args: object,
        attendance_fields: list[AttendanceField] | None = None,
        answered: set[str] | None = None,
        **kwargs: object,
    ) -> None:
        """Bind the attendance questions and existing answers."""
        super().__init__(*args, **kwargs)
        self.attendance_fields = {field.field_key: field for field in attendance_fields or []}
        self.answered = set(answered or ())

    def clean(self) -> dict[str, object]:
        """Validate the responses against the questions and their deadlines."""
        cleaned = super().clean()
        try:
            raw = _json_mapping(self.data.get("responses"), "responses")
        except forms.ValidationError as exc:
            self.add_error(None, exc)
            return cleaned

        responses: dict[str, bool] = {}
        for key, value in raw.items():
            definition = self.attendance_fields.get(key)
            if definition is None:
                self.add_error(None, f"Unknown attendance field '{key}'.")
                continue
            if definition.is_closed:
                self.add_error(None, f"The deadline for '{definition.field_label}' has passed.")
                continue
            responses[key] = _as_bool(value)

        for key, definition in self.attendance_fields.items():
            if definition.is_required and key not in responses and key not in self.answered:
                self.add_error(None, f"'{definition.field_label}' requires an answer.")

        cleaned["responses"] = responses
        return cleaned
