"""Synchronization service for reconciling external projects and speakers.

Provides :class:`ExternalSyncService`, the single place where rows from the
external datastore are copied into local ``Project`` and ``SpeakerSession``
records.  Full syncs, webhook-triggered syncs, and organizer imports all go
through the same field mapping (:mod:`speaker_portal.external.records`) and
the same upsert routine.

Reconciliation is keyed on ``Project.external_project_id`` for projects and
on ``(project, external_supplier_id)`` for speakers.  Batches are
best-effort: each row is written in its own savepoint and a failing row is
logged and skipped without rolling back the rows before it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from django.db import DatabaseError, transaction
from django.utils import timezone

from speaker_portal.external.client import ExternalDatastoreClient
from speaker_portal.external.records import ExternalProject, ExternalSpeaker
from speaker_portal.external.signals import project_synced
from speaker_portal.projects.models import Project
from speaker_portal.projects.utils import unique_project_slug
from speaker_portal.settings import get_config
from speaker_portal.speakers.models import SpeakerSession

if TYPE_CHECKING:
    import datetime

logger = logging.getLogger(__name__)

CREATED = "created"
UPDATED = "updated"
DEACTIVATED = "deactivated"
MISSING = "missing"

_NON_DIGITS_RE = re.compile(r"\D")


@dataclass(slots=True)
class SyncResult:
    """Counts from one batch sync run."""

    created: int = 0
    updated: int = 0
    failed: int = 0
    total: int = 0

    def as_dict(self) -> dict[str, int]:
        """Return the counts under the names used in API responses."""
        return {
            "new_projects": self.created,
            "updated_projects": self.updated,
            "failed_projects": self.failed,
            "total_external": self.total,
        }


@dataclass(frozen=True, slots=True)
class SpeakerConflict:
    """An external speaker whose name matches a local speaker with different contact details."""

    external: ExternalSpeaker
    existing: SpeakerSession
    reasons: tuple[str, ...]

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable description of the conflict."""
        return {
            "external": _speaker_summary(self.external),
            "existing": {
                "id": self.existing.pk,
                "name": self.existing.speaker_name,
                "email": self.existing.email,
                "phone": self.existing.phone,
                "organization": self.existing.organization,
            },
            "reasons": list(self.reasons),
        }


@dataclass(slots=True)
class ImportResult:
    """Outcome of importing a selection of external speakers."""

    created: list[SpeakerSession] = field(default_factory=list)
    skipped: list[ExternalSpeaker] = field(default_factory=list)
    conflicts: list[SpeakerConflict] = field(default_factory=list)
    failed: int = 0
    blocked: bool = False

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable summary."""
        return {
            "created": len(self.created),
            "skipped": len(self.skipped),
            "failed": self.failed,
            "blocked": self.blocked,
            "conflicts": [conflict.as_dict() for conflict in self.conflicts],
        }


def normalize_name(name: str) -> str:
    """Normalize a speaker name for duplicate detection."""
    return name.strip().casefold()


def normalize_phone(phone: str) -> str:
    """Keep only the digits of a phone number."""
    return _NON_DIGITS_RE.sub("", phone)


def contact_differences(existing: SpeakerSession, speaker: ExternalSpeaker) -> list[str]:
    """List the contact details that differ between a local and an external speaker.

    Only values present on both sides are compared.  Emails compare
    case-insensitively and phone numbers compare digits only.

    Returns:
        Human-readable ``"field: old -> new"`` descriptions.
    """
    reasons: list[str] = []
    if existing.email and speaker.email and existing.email.strip().lower() != speaker.email.strip().lower():
        reasons.append(f"email: {existing.email} -> {speaker.email}")
    if existing.phone and speaker.phone and normalize_phone(existing.phone) != normalize_phone(speaker.phone):
        reasons.append(f"phone: {existing.phone} -> {speaker.phone}")
    return reasons


def match_unlinked_session(sessions: list[SpeakerSession], speaker: ExternalSpeaker) -> SpeakerSession | None:
    """Find the local, not yet linked session that stands for an external speaker.

    A session with the same email (case-insensitive) wins; otherwise a
    session with the same normalized name and no differing contact details.
    """
    email = speaker.email.strip().lower()
    if email:
        for session in sessions:
            if session.email and session.email.strip().lower() == email:
                return session
    name = normalize_name(speaker.name)
    for session in sessions:
        if normalize_name(session.speaker_name) == name and not contact_differences(session, speaker):
            return session
    return None


def extract_record_id(payload: object, key: str = "id") -> str | None:
    """Read ``record[key]``, falling back to ``old_record[key]``, from a webhook payload.

    Returns:
        The value as a string, or ``None`` when neither record carries it.
    """
    if not isinstance(payload, dict):
        return None
    for record_key in ("record", "old_record"):
        record = payload.get(record_key)
        if isinstance(record, dict):
            value = record.get(key)
            if value is not None and str(value).strip():
                return str(value).strip()
    return None


def _speaker_summary(speaker: ExternalSpeaker) -> dict[str, Any]:
    return {
        "id": speaker.id,
        "name": speaker.name,
        "email": speaker.email,
        "organization": speaker.organization,
        "position": speaker.position,
        "phone": speaker.phone,
    }


def _speaker_fields(speaker: ExternalSpeaker) -> dict[str, object]:
    return {
        "speaker_name": speaker.name,
        "email": speaker.email,
        "organization": speaker.organization,
        "department": speaker.department,
        "position": speaker.position,
        "phone": speaker.phone,
        "presentation_date": speaker.presentation_date,
    }


def build_client() -> ExternalDatastoreClient:
    """Create a client from ``SPEAKER_PORTAL['external']``.

    Raises:
        ValueError: If the URL or the service key is not configured.
    """
    config = get_config().external
    if not config.is_configured:
        msg = "External datastore is not configured; set SPEAKER_PORTAL['external']['url'] and ['service_key']"
        raise ValueError(msg)
    return ExternalDatastoreClient(str(config.url), service_key=str(config.service_key), timeout=config.timeout)


class ExternalSyncService:
    """Reconciles local projects and speakers with the external datastore.

    Args:
        client: The datastore client to use.  Built from settings when
            omitted.

    Raises:
        ValueError: If no client is given and the external datastore is not
            configured.
    """

    def __init__(self, client: ExternalDatastoreClient | None = None) -> None:
        """Initialize the service, building a client from settings when needed.

        Args:
            client: The datastore client to use.

        Raises:
            ValueError: If no client is given and the external datastore is
                not configured.
        """
        self.client = client if client is not None else build_client()

    # -- Projects ------------------------------------------------------------

    def sync_projects(self) -> SyncResult:
        """Fetch every external project and create or update its local copy.

        Returns:
            Counts of created, updated, and failed rows.

        Raises:
            RuntimeError: If the external project list cannot be fetched.
        """
        rows = self.client.fetch_projects()
        logger.info("Found %d external projects", len(rows))
        result = SyncResult(total=len(rows))

        records: list[ExternalProject] = []
        for row in rows:
            try:
                records.append(ExternalProject.from_api(row))
            except ValueError:
                logger.warning("Skipping external project row without an id: %r", row)
                result.failed += 1

        known: dict[str, Project] = {
            str(project.external_project_id): project
            for project in Project.objects.filter(external_project_id__in=[record.id for record in records])
        }
        now = timezone.now()

        for record in records:
            try:
                project, action = self._upsert_project(record, known.get(record.id), now)
            except DatabaseError:
                logger.exception("Failed to sync external project %s", record.id)
                result.failed += 1
                continue
            known[record.id] = project
            if action == CREATED:
                result.created += 1
            else:
                result.updated += 1

        logger.info(
            "Project sync complete: %d new, %d updated, %d failed of %d external",
            result.created,
            result.updated,
            result.failed,
            result.total,
        )
        return result

    def sync_project(self, external_id: str) -> str:
        """Sync a single project by its external id.

        Args:
            external_id: The external project id.

        Returns:
            ``"created"`` or ``"updated"``.  When the external row no longer
            exists, ``"deactivated"`` if a local copy was switched off, or
            ``"missing"`` if there was nothing local either.

        Raises:
            RuntimeError: If the external datastore cannot be reached.
        """
        external_id = str(external_id)
        row = self.client.fetch_project(external_id)
        project = Project.objects.filter(external_project_id=external_id).first()

        if row is None:
            if project is None:
                logger.warning("External project %s not found and no local copy exists", external_id)
                return MISSING
            if project.is_active:
                project.is_active = False
                project.save(update_fields=["is_active", "updated_at"])
            logger.info("Deactivated project %s; external project %s no longer exists", project.slug, external_id)
            return DEACTIVATED

        _, action = self._upsert_project(ExternalProject.from_api(row), project, timezone.now())
        return action

    def handle_change(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Apply a ``{type, table, record, old_record}`` change notification.

        The project id is read from ``record.id`` or ``old_record.id``.
        Without one, every project is resynced.

        Returns:
            A JSON-serializable summary of what was done.
        """
        external_id = extract_record_id(payload)
        if external_id is None:
            logger.info("Change notification carries no project id, syncing all projects")
            result = self.sync_projects()
            return {"action": "synced_all", **result.as_dict()}

        logger.info("Syncing external project %s after %s notification", external_id, payload.get("type") or "change")
        return {"action": self.sync_project(external_id), "external_project_id": external_id}

    def push_project(self, project: Project) -> str:
        """Write a local project to the external datastore.

        Linked projects update their external row; unlinked ones create a
        row and store its id locally.

        Returns:
            ``"created"`` or ``"updated"``.

        Raises:
            RuntimeError: If the write fails or the linked row no longer
                exists.
        """
        payload = ExternalProject(
            id=project.external_project_id or "",
            title=project.project_name,
            description=project.description,
            start_date=project.start_date,
            end_date=project.end_date,
        ).to_api()

        if project.external_project_id:
            row = self.client.update_project(project.external_project_id, payload)
            if row is None:
                msg = f"External project {project.external_project_id} no longer exists"
                raise RuntimeError(msg)
            action = UPDATED
        else:
            row = self.client.create_project(payload)
            project.external_project_id = ExternalProject.from_api(row).id
            action = CREATED

        project.synced_at = timezone.now()
        project.save(update_fields=["external_project_id", "synced_at", "updated_at"])
        logger.info("Pushed project %s to external datastore (%s)", project.slug, action)
        return action

    def _upsert_project(
        self,
        record: ExternalProject,
        project: Project | None,
        now: datetime.datetime,
    ) -> tuple[Project, str]:
        """Create or update the local copy of one external project.

        New projects get a unique slug generated from the title (or the
        external id when the title yields no slug) and start out active.
        Updates leave ``is_active`` alone: an inactive project, whether an
        organizer or :meth:`sync_project` switched it off, stays inactive
        until it is reactivated in the admin.
        """
        with transaction.atomic():
            if project is None:
                project = Project(
                    external_project_id=record.id,
                    slug=unique_project_slug(record.title, record.id),
                    is_active=True,
                )
                action = CREATED
            else:
                action = UPDATED
            for name, value in record.to_local_fields().items():
                setattr(project, name, value)
            project.synced_at = now
            project.save()

        logger.info("%s project %s (external %s)", action.capitalize(), project.project_name, record.id)
        project_synced.send(sender=type(self), project=project, action=action)
        return project, action

    # -- Speakers ------------------------------------------------------------

    def fetch_speakers(self, project: Project) -> list[ExternalSpeaker]:
        """List the external speakers assigned to a synced project.

        Returns:
            Speakers in external order, one per external speaker id.

        Raises:
            ValueError: If the project has no ``external_project_id``.
            RuntimeError: If the external datastore cannot be reached.
        """
        if not project.external_project_id:
            msg = f"Project '{project.slug}' has no external_project_id"
            raise ValueError(msg)

        speakers: list[ExternalSpeaker] = []
        seen: set[str] = set()
        for row in self.client.fetch_project_speakers(project.external_project_id):
            speaker = ExternalSpeaker.from_api(row)
            if speaker is None or speaker.id in seen:
                continue
            seen.add(speaker.id)
            speakers.append(speaker)
        logger.debug("Fetched %d external speakers for %s", len(speakers), project.slug)
        return speakers

    def find_conflicts(self, project: Project, speakers: list[ExternalSpeaker]) -> list[SpeakerConflict]:
        """Find external speakers that share a name with a different local speaker.

        Returns:
            One conflict per external speaker whose email or phone differs
            from the same-named local speaker.
        """
        by_name: dict[str, SpeakerSession] = {}
        for session in project.speakers.all():
            by_name.setdefault(normalize_name(session.speaker_name), session)

        conflicts: list[SpeakerConflict] = []
        for speaker in speakers:
            existing = by_name.get(normalize_name(speaker.name))
            if existing is None or existing.external_supplier_id == speaker.id:
                continue
            reasons = contact_differences(existing, speaker)
            if reasons:
                conflicts.append(SpeakerConflict(external=speaker, existing=existing, reasons=tuple(reasons)))
        return conflicts

    def import_speakers(
        self,
        project: Project,
        speakers: list[ExternalSpeaker],
        *,
        force: bool = False,
    ) -> ImportResult:
        """Create local sessions for a selection of external speakers.

        Speakers already linked by external id are skipped, as are
        same-named speakers whose contact details match.  Name conflicts
        block the whole import unless *force* is set.

        Args:
            project: The local project to import into.
            speakers: The external speakers the organizer selected.
            force: Import conflicting speakers anyway.

        Returns:
            The created sessions, skipped speakers, and any conflicts.
        """
        result = ImportResult()
        linked = set(
            project.speakers.exclude(external_supplier_id=None).values_list("external_supplier_id", flat=True)
        )
        candidates = [speaker for speaker in speakers if speaker.id not in linked]
        result.skipped.extend(speaker for speaker in speakers if speaker.id in linked)

        result.conflicts = self.find_conflicts(project, candidates)
        if result.conflicts and not force:
            result.blocked = True
            logger.info(
                "Import into %s blocked by %d name conflicts",
                project.slug,
                len(result.conflicts),
            )
            return result

        conflicting = {conflict.external.id for conflict in result.conflicts}
        local_names = {normalize_name(name) for name in project.speakers.values_list("speaker_name", flat=True)}
        now = timezone.now()

        for speaker in candidates:
            if speaker.id not in conflicting and normalize_name(speaker.name) in local_names:
                result.skipped.append(speaker)
                continue
            try:
                with transaction.atomic():
                    session = SpeakerSession.objects.create(
                        project=project,
                        external_supplier_id=speaker.id,
                        event_name=project.event_name,
                        synced_at=now,
                        **_speaker_fields(speaker),
                    )
            except DatabaseError:
                logger.exception("Failed to import external speaker %s into %s", speaker.id, project.slug)
                result.failed += 1
                continue
            result.created.append(session)

        logger.info(
            "Imported %d speakers into %s (%d skipped, %d failed)",
            len(result.created),
            project.slug,
            len(result.skipped),
            result.failed,
        )
        return result

    def sync_speakers(self, project: Project) -> SyncResult:
        """Create or refresh local sessions for every external speaker of a project.

        Existing sessions are matched by ``external_supplier_id``.  A speaker
        with no linked session is matched against the unlinked local
        sessions (see :func:`match_unlinked_session`) and linked in place
        instead of duplicated.  Matched sessions only receive non-empty
        external values, so details a speaker filled in locally are not
        blanked.

        Returns:
            Counts of created, updated, and failed rows.

        Raises:
            ValueError: If the project has no ``external_project_id``.
            RuntimeError: If the external datastore cannot be reached.
        """
        speakers = self.fetch_speakers(project)
        result = SyncResult(total=len(speakers))
        existing: dict[str, SpeakerSession] = {
            str(session.external_supplier_id): session
            for session in project.speakers.filter(external_supplier_id__in=[speaker.id for speaker in speakers])
        }
        unlinked = list(project.speakers.filter(external_supplier_id=None))
        now = timezone.now()

        for speaker in speakers:
            fields = _speaker_fields(speaker)
            try:
                with transaction.atomic():
                    session = existing.get(speaker.id)
                    if session is None:
                        session = match_unlinked_session(unlinked, speaker)
                        if session is not None:
                            unlinked.remove(session)
                            session.external_supplier_id = speaker.id
                            logger.info("Linked local speaker %s to external speaker %s", session.pk, speaker.id)
                    if session is None:
                        SpeakerSession.objects.create(
                            project=project,
                            external_supplier_id=speaker.id,
                            event_name=project.event_name,
                            synced_at=now,
                            **fields,
                        )
                        result.created += 1
                        continue
                    for name, value in fields.items():
                        if value:
                            setattr(session, name, value)
                    session.synced_at = now
                    session.save()
                    result.updated += 1
            except DatabaseError:
                logger.exception("Failed to sync external speaker %s for %s", speaker.id, project.slug)
                result.failed += 1

        logger.info(
            "Synced speakers for %s: %d new, %d updated, %d failed",
            project.slug,
            result.created,
            result.updated,
            result.failed,
        )
        return result

    def fetch_assignment(self, session: SpeakerSession) -> dict[str, Any] | None:
        """Return the external assignment details of a linked speaker.

        Returns:
            Presentation time, arrival time, honorarium, contact, expected
            attendees, and venue, or ``None`` when the session is not
            linked or has no assignment.
        """
        if not session.external_supplier_id:
            return None
        row = self.client.fetch_speaker_assignment(session.external_supplier_id)
        if row is None:
            return None
        project = row.get("projects") if isinstance(row.get("projects"), dict) else {}
        return {
            "presentation_time": row.get("presentation_time"),
            "arrival_time": row.get("arrival_time"),
            "honorarium": row.get("honorarium"),
            "contact_phone": row.get("contact_phone"),
            "contact_email": row.get("contact_email"),
            "expected_attendees": row.get("expected_attendees"),
            "venue": project.get("venue"),
        }
