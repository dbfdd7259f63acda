"""JSON endpoints for the speaker submission flow.

Speakers sign in with their email on a project's landing endpoint; the
``SpeakerSession`` primary key is then kept in the Django session under
``SPEAKER_PORTAL['session_key']``.  Every ``me/`` endpoint resolves the
speaker from there through :class:`SpeakerSessionMixin`.
"""

import json
import logging
from typing import Any

from django.core.exceptions import ObjectDoesNotExist
from django.db import DatabaseError
from django.forms import Form
from django.forms.models import model_to_dict
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.views import View

from speaker_portal.features import FeatureRequiredMixin, require_feature
from speaker_portal.projects.models import Project, TransportationSettings
from speaker_portal.projects.utils import receipt_deadline
from speaker_portal.settings import get_config
from speaker_portal.speakers import services
from speaker_portal.speakers.forms import (
    AttendanceForm,
    ConsentForm,
    HonorariumForm,
    PresentationFileForm,
    PresentationInfoForm,
    SpeakerLoginForm,
    SpeakerProfileForm,
    TransportationForm,
)
from speaker_portal.speakers.models import (
    HonorariumInfo,
    PresentationInfo,
    SpeakerSession,
    TransportationInfo,
)

logger = logging.getLogger(__name__)


class InvalidBody(ValueError):
    """The request body could not be parsed."""


def error_response(message: str, status: int, **extra: object) -> JsonResponse:
    """Return ``{"error": message, ...}`` with the given status code."""
    return JsonResponse({"error": message, **extra}, status=status)


def form_error_response(form: Form) -> JsonResponse:
    """Return a 400 listing every field and non-field error of *form*."""
    errors = {field: [str(message) for message in messages] for field, messages in form.errors.items()}
    return error_response("Validation failed", 400, errors=errors)


def request_data(request: HttpRequest) -> dict[str, Any]:
    """Read a JSON or form-encoded request body into a plain dict.

    Raises:
        InvalidBody: If a JSON body is malformed or not an object.
    """
    if request.content_type == "application/json":
        try:
            data = json.loads(request.body or b"{}")
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            msg = "Request body is not valid JSON"
            raise InvalidBody(msg) from exc
        if not isinstance(data, dict):
            msg = "Request body must be a JSON object"
            raise InvalidBody(msg)
        return data
    return request.POST.dict()


def _file_name(field_file: object) -> str | None:
    return field_file.name if field_file else None


def _instance_data(instance: object, fields: list[str]) -> dict[str, Any]:
    """Current values of *instance*, so a partial body only changes what it sends."""
    if instance is None or instance.pk is None:
        return {}
    return model_to_dict(instance, fields=fields)


class SpeakerSessionMixin:
    """Resolve the signed-in speaker or answer 401.

    Stores the speaker on ``self.speaker`` and the project on
    ``self.project`` before the handler runs.  Answers 404 while the
    ``speaker_portal`` feature is disabled.
    """

    speaker: SpeakerSession
    project: Project

    def dispatch(self, request: HttpRequest, *args: object, **kwargs: object) -> HttpResponse:
        """Load the speaker session referenced by the Django session."""
        require_feature("speaker_portal")
        session_pk = request.session.get(get_config().session_key)
        speaker = (
            SpeakerSession.objects.select_related("project").filter(pk=session_pk).first()
            if session_pk is not None
            else None
        )
        if speaker is None:
            return error_response("Not signed in", 401)
        self.speaker = speaker
        self.project = speaker.project
        return super().dispatch(request, *args, **kwargs)  # type: ignore[misc]


class SpeakerFormView(SpeakerSessionMixin, View):
    """Shared POST handling for the step endpoints that bind a form."""

    def parse(self, request: HttpRequest) -> dict[str, Any] | JsonResponse:
        """Return the request data, or a 400 response when it is malformed."""
        try:
            return request_data(request)
        except InvalidBody as exc:
            return error_response(str(exc), 400)


class ProjectInfoView(FeatureRequiredMixin, View):
    """Public information about an active project."""

    required_feature = "speaker_portal"

    def get(self, request: HttpRequest, slug: str) -> JsonResponse:  # noqa: ARG002
        """Return the project and whether speakers may sign in today."""
        project = get_object_or_404(Project, slug=slug, is_active=True)
        return JsonResponse({"project": services.serialize_project(project)})


class LoginView(FeatureRequiredMixin, View):
    """Sign a speaker in by email."""

    required_feature = "speaker_portal"

    def post(self, request: HttpRequest, slug: str) -> JsonResponse:
        """Validate the email and store the speaker session.

        Returns:
            403 while the project is not open, 404 when no speaker in the
            project uses the email, otherwise the session.
        """
        project = get_object_or_404(Project, slug=slug, is_active=True)
        status = project.access_status()
        if status == Project.AccessStatus.NOT_STARTED:
            return error_response("This project has not started yet", 403, access_status=status)
        if status == Project.AccessStatus.ENDED:
            return error_response("This project has ended", 403, access_status=status)

        try:
            form = SpeakerLoginForm(request_data(request))
        except InvalidBody as exc:
            return error_response(str(exc), 400)
        if not form.is_valid():
            return form_error_response(form)

        speaker = project.speakers.filter(email__iexact=form.cleaned_data["email"]).first()
        if speaker is None:
            return error_response("No speaker with this email is registered for the project", 404)

        request.session.cycle_key()
        request.session[get_config().session_key] = speaker.pk
        logger.info("Speaker session %s signed in to %s", speaker.pk, project.slug)
        return JsonResponse({"session": services.serialize_session(speaker)})


class LogoutView(View):
    """Forget the speaker session."""

    def post(self, request: HttpRequest) -> JsonResponse:
        """Drop the stored speaker session, if any."""
        request.session.pop(get_config().session_key, None)
        return JsonResponse({"success": True})


class DashboardView(SpeakerSessionMixin, View):
    """The signed-in speaker and their progress through the steps."""

    def get(self, request: HttpRequest) -> JsonResponse:  # noqa: ARG002
        """Return the session with each step's completion."""
        steps = services.progress_steps(self.speaker)
        return JsonResponse(
            {
                "session": services.serialize_session(self.speaker),
                "steps": [step.as_dict() for step in steps],
                "completed": sum(step.completed for step in steps),
            }
        )


class ProfileView(SpeakerFormView):
    """Step 1: contact and affiliation details."""

    def post(self, request: HttpRequest) -> JsonResponse:
        """Update the speaker's profile."""
        data = self.parse(request)
        if isinstance(data, JsonResponse):
            return data
        fields = list(SpeakerProfileForm.Meta.fields)
        form = SpeakerProfileForm({**_instance_data(self.speaker, fields), **data}, instance=self.speaker)
        if not form.is_valid():
            return form_error_response(form)
        form.save()
        return JsonResponse({"session": services.serialize_session(self.speaker)})


class HonorariumView(SpeakerFormView):
    """Step 2a: honorarium banking details and identity documents."""

    def _current(self) -> HonorariumInfo | None:
        try:
            return self.speaker.honorarium
        except ObjectDoesNotExist:
            return None

    @staticmethod
    def _serialize(info: HonorariumInfo | None) -> dict[str, Any] | None:
        if info is None:
            return None
        return {
            "bank_name": info.bank_name,
            "account_number": info.account_number,
            "account_holder": info.account_holder,
            "id_card_file": _file_name(info.id_card_file),
            "bankbook_file": _file_name(info.bankbook_file),
        }

    def get(self, request: HttpRequest) -> JsonResponse:  # noqa: ARG002
        """Return the stored honorarium details."""
        return JsonResponse({"honorarium": self._serialize(self._current())})

    def post(self, request: HttpRequest) -> JsonResponse:
        """Create or update the honorarium details (multipart for uploads)."""
        data = self.parse(request)
        if isinstance(data, JsonResponse):
            return data
        instance = self._current() or HonorariumInfo(session=self.speaker)
        fields = ["bank_name", "account_number", "account_holder"]
        form = HonorariumForm({**_instance_data(instance, fields), **data}, request.FILES, instance=instance)
        if not form.is_valid():
            return form_error_response(form)
        info = form.save()
        logger.info("Saved honorarium details for session %s", self.speaker.pk)
        return JsonResponse({"honorarium": self._serialize(info)})


class TransportationView(SpeakerFormView):
    """Step 2b: travel plans and the reimbursement receipt."""

    def _settings(self) -> TransportationSettings:
        settings_row, _ = TransportationSettings.objects.get_or_create(project=self.project)
        return settings_row

    def _current(self) -> TransportationInfo | None:
        try:
            return self.speaker.transportation
        except ObjectDoesNotExist:
            return None

    @staticmethod
    def _serialize(info: TransportationInfo | None) -> dict[str, Any] | None:
        if info is None:
            return None
        data = model_to_dict(info, exclude=["id", "session", "receipt_file"])
        for key, value in data.items():
            if hasattr(value, "isoformat"):
                data[key] = value.isoformat()
        for key in ("estimated_cost", "actual_cost"):
            if data[key] is not None:
                data[key] = str(data[key])
        data["receipt_file"] = _file_name(info.receipt_file)
        return data

    def get(self, request: HttpRequest) -> JsonResponse:  # noqa: ARG002
        """Return the travel details, the project rules, and the receipt deadline."""
        settings_row = self._settings()
        deadline = receipt_deadline(self.project)
        return JsonResponse(
            {
                "transportation": self._serialize(self._current()),
                "settings": {
                    "supported_methods": settings_row.supported_methods,
                    "requires_receipt": settings_row.requires_receipt,
                    "additional_notes": settings_row.additional_notes,
                },
                "receipt_deadline": deadline.isoformat() if deadline else None,
            }
        )

    def post(self, request: HttpRequest) -> JsonResponse:
        """Create or update the travel details (multipart for the receipt)."""
        data = self.parse(request)
        if isinstance(data, JsonResponse):
            return data
        instance = self._current() or TransportationInfo(session=self.speaker)
        fields = [name for name in TransportationForm.Meta.fields if name != "receipt_file"]
        form = TransportationForm(
            {**_instance_data(instance, fields), **data},
            request.FILES,
            instance=instance,
            methods=self._settings().supported_methods or get_config().transportation_methods,
            receipt_deadline=receipt_deadline(self.project),
        )
        if not form.is_valid():
            return form_error_response(form)
        info = form.save()
        return JsonResponse({"transportation": self._serialize(info)})


class PresentationInfoView(SpeakerFormView):
    """Step 3a: equipment needs and custom presentation fields."""

    def _current(self) -> PresentationInfo | None:
        try:
            return self.speaker.presentation_info
        except ObjectDoesNotExist:
            return None

    def _definitions(self) -> list[dict[str, Any]]:
        return [
            {
                "field_key": definition.field_key,
                "field_label": definition.field_label,
                "field_type": definition.field_type,
                "field_description": definition.field_description,
                "options": definition.options,
                "is_required": definition.is_required,
            }
            for definition in self.project.presentation_fields.all()
        ]

    @staticmethod
    def _serialize(info: PresentationInfo | None) -> dict[str, Any] | None:
        if info is None:
            return None
        return model_to_dict(
            info, fields=["use_audio", "use_video", "use_personal_laptop", "special_requests", "custom_fields"]
        )

    def get(self, request: HttpRequest) -> JsonResponse:  # noqa: ARG002
        """Return the stored info and the project's custom field definitions."""
        return JsonResponse({"presentation": self._serialize(self._current()), "fields": self._definitions()})

    def post(self, request: HttpRequest) -> JsonResponse:
        """Create or update the presentation info."""
        data = self.parse(request)
        if isinstance(data, JsonResponse):
            return data
        instance = self._current() or PresentationInfo(session=self.speaker)
        fields = [*PresentationInfoForm.Meta.fields, "custom_fields"]
        form = PresentationInfoForm(
            {**_instance_data(instance, fields), **data},
            instance=instance,
            field_definitions=list(self.project.presentation_fields.all()),
        )
        if not form.is_valid():
            return form_error_response(form)
        info = form.save()
        return JsonResponse({"presentation": self._serialize(info)})


class PresentationFilesView(SpeakerSessionMixin, View):
    """Step 3b: list and upload presentation files."""

    def get(self, request: HttpRequest) -> JsonResponse:  # noqa: ARG002
        """List the speaker's files, primary first."""
        return JsonResponse({"files": [services.serialize_file(item) for item in self.speaker.files.all()]})

    def post(self, request: HttpRequest) -> JsonResponse:
        """Upload one file (multipart ``file`` plus optional ``is_primary``)."""
        form = PresentationFileForm(request.POST, request.FILES)
        if not form.is_valid():
            return form_error_response(form)
        try:
            stored = services.save_presentation_file(
                self.speaker, form.cleaned_data["file"], is_primary=form.cleaned_data["is_primary"]
            )
        except DatabaseError:
            return error_response("Could not save the uploaded file", 500)
        return JsonResponse({"file": services.serialize_file(stored)}, status=201)


class PresentationFileDeleteView(SpeakerSessionMixin, View):
    """Remove one of the speaker's presentation files."""

    def post(self, request: HttpRequest, file_id: int) -> JsonResponse:  # noqa: ARG002
        """Delete the row and the stored blob."""
        presentation_file = self.speaker.files.filter(pk=file_id).first()
        if presentation_file is None:
            return error_response("File not found", 404)
        services.delete_presentation_file(presentation_file)
        return JsonResponse({"success": True})


class ConsentView(SpeakerFormView):
    """Step 4: consents and the signature."""

    def _serialize(self) -> dict[str, Any] | None:
        try:
            record = self.speaker.consent
        except ObjectDoesNotExist:
            return None
        return {
            "privacy_consent": record.privacy_consent,
            "portrait_consent": record.portrait_consent,
            "recording_consent": record.recording_consent,
            "copyright_consent": record.copyright_consent,
            "distribution_consent": record.distribution_consent,
            "custom_consents": record.custom_consents,
            "signature_image": _file_name(record.signature_image),
            "consent_date": record.consent_date.isoformat(),
        }

    def get(self, request: HttpRequest) -> JsonResponse:  # noqa: ARG002
        """Return the stored consent and the project's consent clauses."""
        clauses = [
            {
                "field_key": clause.field_key,
                "title": clause.title,
                "content": clause.content,
                "is_required": clause.is_required,
            }
            for clause in self.project.consent_fields.all()
        ]
        return JsonResponse({"consent": self._serialize(), "fields": clauses})

    def post(self, request: HttpRequest) -> JsonResponse:
        """Validate and store the consent record."""
        data = self.parse(request)
        if isinstance(data, JsonResponse):
            return data
        form = ConsentForm(data, consent_fields=list(self.project.consent_fields.all()))
        if not form.is_valid():
            return form_error_response(form)
        services.save_consent(self.speaker, form.cleaned_data)
        return JsonResponse({"consent": self._serialize()})


class AttendanceView(SpeakerFormView):
    """Step 5: attendance questions."""

    def _payload(self) -> dict[str, Any]:
        answers = dict(self.speaker.attendance_responses.values_list("field_key", "response"))
        return {
            "fields": [
                {
                    "field_key": field.field_key,
                    "field_label": field.field_label,
                    "field_description": field.field_description,
                    "is_required": field.is_required,
                    "deadline": field.deadline.isoformat() if field.deadline else None,
                    "is_closed": field.is_closed,
                    "response": answers.get(field.field_key),
                }
                for field in self.project.attendance_fields.all()
            ],
            "completed": services.attendance_complete(self.speaker),
        }

    def get(self, request: HttpRequest) -> JsonResponse:  # noqa: ARG002
        """Return the questions with the speaker's answers."""
        return JsonResponse(self._payload())

    def post(self, request: HttpRequest) -> JsonResponse:
        """Upsert answers given as ``{"responses": {field_key: bool}}``."""
        data = self.parse(request)
        if isinstance(data, JsonResponse):
            return data
        form = AttendanceForm(
            data,
            attendance_fields=list(self.project.attendance_fields.all()),
            answered=set(self.speaker.attendance_responses.values_list("field_key", flat=True)),
        )
        if not form.is_valid():
            return form_error_response(form)
        services.save_attendance(self.speaker, form.cleaned_data["responses"])
        return JsonResponse(self._payload())


class ArrivalGuideView(SpeakerSessionMixin, View):
    """Step 6: the venue guide and checklist."""

    def get(self, request: HttpRequest) -> JsonResponse:  # noqa: ARG002
        """Return the arrival guide, or ``null`` when none is configured."""
        try:
            guide = self.project.arrival_guide
        except ObjectDoesNotExist:
            guide = None
        checklist = [
            {"item_text": item.item_text, "requires_response": item.requires_response}
            for item in self.project.checklist_items.all()
        ]
        return JsonResponse(
            {
                "guide": model_to_dict(guide, exclude=["id", "project"]) if guide else None,
                "checklist": checklist,
            }
        )


class OrganizerInfoView(SpeakerSessionMixin, View):
    """Organizer contact and assignment details for the speaker."""

    def get(self, request: HttpRequest) -> JsonResponse:  # noqa: ARG002
        """Return the local details merged with the external assignment."""
        return JsonResponse({"organizer": services.organizer_info(self.speaker)})
