"""Business logic for the speaker submission flow.

Views stay thin: they authenticate the speaker session, bind a form, and
call into these helpers to persist uploads, compute progress, and build
the JSON payloads returned to the browser.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from django.core.exceptions import ObjectDoesNotExist
from django.db import DatabaseError, transaction
from django.utils import timezone

from speaker_portal.features import is_feature_enabled
from speaker_portal.projects.models import AttendanceField
from speaker_portal.settings import get_config
from speaker_portal.speakers.models import ConsentRecord, PresentationFile

if TYPE_CHECKING:
    from django.core.files.base import File

    from speaker_portal.projects.models import Project
    from speaker_portal.speakers.models import SpeakerSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Step:
    """One step of the speaker submission flow."""

    number: int
    key: str
    title: str
    completed: bool

    def as_dict(self) -> dict[str, Any]:
        """Return the step as a JSON-serializable dict."""
        return {"number": self.number, "key": self.key, "title": self.title, "completed": self.completed}


def _related(session: SpeakerSession, name: str) -> object | None:
    try:
        return getattr(session, name)
    except ObjectDoesNotExist:
        return None


def attendance_complete(session: SpeakerSession) -> bool:
    """Return ``True`` when every required attendance question is answered."""
    required = set(
        AttendanceField.objects.filter(project_id=session.project_id, is_required=True).values_list(
            "field_key", flat=True
        )
    )
    answered = set(session.attendance_responses.values_list("field_key", flat=True))
    return required <= answered


def progress_steps(session: SpeakerSession) -> list[Step]:
    """Compute the six submission steps and whether each is complete.

    The arrival guide has nothing to submit and counts as complete once the
    five steps before it are.
    """
    profile_done = bool(session.speaker_name and session.email and session.phone)
    honorarium_done = _related(session, "honorarium") is not None
    files_done = session.files.exists()
    consent_done = _related(session, "consent") is not None
    attendance_done = attendance_complete(session)
    steps = [
        Step(1, "profile", "Profile", profile_done),
        Step(2, "honorarium", "Honorarium and transportation", honorarium_done),
        Step(3, "presentation", "Presentation materials", files_done),
        Step(4, "consent", "Consent", consent_done),
        Step(5, "attendance", "Attendance", attendance_done),
    ]
    steps.append(Step(6, "guide", "Arrival guide", all(step.completed for step in steps)))
    return steps


def serialize_project(project: Project) -> dict[str, Any]:
    """Return the public view of a project."""
    return {
        "id": project.pk,
        "slug": project.slug,
        "project_name": project.project_name,
        "event_name": project.event_name,
        "description": project.description,
        "start_date": project.start_date.isoformat() if project.start_date else None,
        "end_date": project.end_date.isoformat() if project.end_date else None,
        "access_status": project.access_status(),
    }


def serialize_session(session: SpeakerSession) -> dict[str, Any]:
    """Return the speaker's own view of their session."""
    return {
        "id": session.pk,
        "speaker_id": session.speaker_id,
        "speaker_name": session.speaker_name,
        "email": session.email,
        "organization": session.organization,
        "department": session.department,
        "position": session.position,
        "phone": session.phone,
        "event_name": session.event_name or session.project.event_name,
        "presentation_date": session.presentation_date.isoformat() if session.presentation_date else None,
        "project": serialize_project(session.project),
    }


def serialize_file(presentation_file: PresentationFile) -> dict[str, Any]:
    """Return the metadata of an uploaded presentation file."""
    return {
        "id": presentation_file.pk,
        "file_name": presentation_file.file_name,
        "file_path": presentation_file.file.name,
        "file_type": presentation_file.file_type,
        "file_size": presentation_file.file_size,
        "is_primary": presentation_file.is_primary,
        "uploaded_at": presentation_file.uploaded_at.isoformat() if presentation_file.uploaded_at else None,
    }


def save_presentation_file(session: SpeakerSession, upload: File, *, is_primary: bool = False) -> PresentationFile:
    """Store an uploaded presentation file and record it.

    The blob is written first.  If the database row cannot be saved, the
    blob is removed again so storage never holds orphaned files.

    Raises:
        DatabaseError: If the row could not be saved.
    """
    presentation_file = PresentationFile(
        session=session,
        file_name=upload.name,
        file_type=getattr(upload, "content_type", "") or "",
        file_size=upload.size or 0,
        is_primary=is_primary,
    )
    presentation_file.file.save(upload.name, upload, save=False)
    try:
        with transaction.atomic():
            if is_primary:
                session.files.filter(is_primary=True).update(is_primary=False)
            presentation_file.save()
    except DatabaseError:
        logger.exception("Failed to record presentation file for session %s; removing blob", session.pk)
        presentation_file.file.delete(save=False)
        raise
    logger.info("Stored presentation file %s for session %s", presentation_file.file.name, session.pk)
    return presentation_file


def delete_presentation_file(presentation_file: PresentationFile) -> None:
    """Delete a presentation file row and its blob."""
    name = presentation_file.file.name
    presentation_file.delete()
    presentation_file.file.storage.delete(name)
    logger.info("Deleted presentation file %s", name)


def save_consent(session: SpeakerSession, cleaned: dict[str, Any]) -> ConsentRecord:
    """Create or update the consent record with freshly validated data."""
    record = _related(session, "consent") or ConsentRecord(session=session)
    for name in (
        "privacy_consent",
        "portrait_consent",
        "recording_consent",
        "copyright_consent",
        "distribution_consent",
        "custom_consents",
    ):
        setattr(record, name, cleaned[name])
    record.consent_date = timezone.now()
    signature = cleaned.get("signature")
    if signature is not None:
        if record.signature_image:
            record.signature_image.delete(save=False)
        record.signature_image.save(signature.name, signature, save=False)
    record.save()
    logger.info("Saved consent for session %s", session.pk)
    return record


def save_attendance(session: SpeakerSession, responses: dict[str, bool]) -> int:
    """Upsert attendance responses keyed by ``(session, field_key)``.

    Returns:
        The number of responses written.
    """
    with transaction.atomic():
        for key, value in responses.items():
            session.attendance_responses.update_or_create(field_key=key, defaults={"response": value})
    return len(responses)


def organizer_info(session: SpeakerSession) -> dict[str, Any]:
    """Build the organizer contact sheet for a speaker.

    Starts from the local project and its arrival guide.  When the session
    is linked to the external datastore and sync is configured, the
    external assignment (presentation time, honorarium, contact) is merged
    over it; external failures are logged and ignored.
    """
    project = session.project
    guide = _related(project, "arrival_guide")
    info: dict[str, Any] = {
        "event_name": project.event_name or project.project_name,
        "start_date": project.start_date.isoformat() if project.start_date else None,
        "end_date": project.end_date.isoformat() if project.end_date else None,
        "venue": getattr(guide, "venue_name", "") or None,
        "presentation_time": getattr(guide, "presentation_time", "") or None,
        "arrival_time": getattr(guide, "check_in_time", "") or None,
        "honorarium": None,
        "expected_attendees": None,
        "contact": {
            "name": getattr(guide, "contact_name", "") or None,
            "phone": getattr(guide, "contact_phone", "") or None,
            "email": getattr(guide, "contact_email", "") or None,
        },
    }

    if not (
        session.external_supplier_id and get_config().external.is_configured and is_feature_enabled("external_sync")
    ):
        return info

    from speaker_portal.external.sync import ExternalSyncService  # noqa: PLC0415

    try:
        assignment = ExternalSyncService().fetch_assignment(session)
    except (RuntimeError, ValueError):
        logger.warning("Could not load external assignment for session %s", session.pk, exc_info=True)
        return info
    if not assignment:
        return info

    for key in ("presentation_time", "arrival_time", "honorarium", "expected_attendees", "venue"):
        if assignment.get(key):
            info[key] = assignment[key]
    if assignment.get("contact_phone"):
        info["contact"]["phone"] = assignment["contact_phone"]
    if assignment.get("contact_email"):
        info["contact"]["email"] = assignment["contact_email"]
    return info
