"""Typed records for rows read from the external datastore.

Every sync entry point maps external rows through these dataclasses, so the
choice of which external column feeds which local column lives in exactly
one place.  External schemas have drifted over time (``title`` on newer
rows, ``project_name``/``event_name``/``name`` on older ones; ``event_date``
instead of ``start_date``), and ``from_api()`` accepts all of them.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import Any

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

logger = logging.getLogger(__name__)

_UNKNOWN_SPEAKER = "Unknown"


def _first(data: dict[str, Any], *keys: str) -> str:
    """Return the first non-blank string value among *keys*, or ``""``."""
    for key in keys:
        value = data.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ""


def parse_external_date(value: object) -> datetime.date | None:
    """Parse an ISO date or datetime string into a date.

    Returns:
        The date, or ``None`` for empty or unparseable values.
    """
    if not value:
        return None
    text = str(value)
    try:
        parsed = parse_date(text[:10])
    except ValueError:
        parsed = None
    if parsed is None:
        logger.debug("Could not parse external date %r", value)
    return parsed


def parse_external_datetime(value: object) -> datetime.datetime | None:
    """Parse an ISO datetime (or bare date) string into an aware datetime.

    Returns:
        The datetime, or ``None`` for empty or unparseable values such as
        free-form times like ``"14:00 - 14:45"``.
    """
    if not value:
        return None
    text = str(value)
    try:
        parsed = parse_datetime(text)
    except ValueError:
        parsed = None
    if parsed is None:
        day = parse_external_date(text)
        if day is None:
            return None
        parsed = datetime.datetime.combine(day, datetime.time.min)
    return parsed if timezone.is_aware(parsed) else timezone.make_aware(parsed)


@dataclass(frozen=True, slots=True)
class ExternalProject:
    """A project row from the external datastore.

    Attributes:
        id: The external primary key, stored locally as ``external_project_id``.
        title: Display title, resolved across legacy column names.
        description: Free-form description.
        start_date: First day of the event.
        end_date: Last day of the event.
    """

    id: str
    title: str = ""
    description: str = ""
    start_date: datetime.date | None = None
    end_date: datetime.date | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ExternalProject:
        """Construct an ``ExternalProject`` from a raw row.

        Args:
            data: A single row from the external ``projects`` table.

        Returns:
            A populated ``ExternalProject``.

        Raises:
            ValueError: If the row has no ``id``.
        """
        project_id = _first(data, "id")
        if not project_id:
            msg = "External project row has no id"
            raise ValueError(msg)
        return cls(
            id=project_id,
            title=_first(data, "title", "project_name", "event_name", "name"),
            description=str(data.get("description") or ""),
            start_date=parse_external_date(data.get("start_date") or data.get("event_date")),
            end_date=parse_external_date(data.get("end_date")),
        )

    def to_local_fields(self) -> dict[str, object]:
        """Return the local ``Project`` field values this row maps to."""
        title = self.title or self.id
        return {
            "project_name": title,
            "event_name": title,
            "description": self.description,
            "start_date": self.start_date,
            "end_date": self.end_date,
        }

    def to_api(self) -> dict[str, object]:
        """Return the payload used to write this project back."""
        return {
            "title": self.title,
            "description": self.description,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
        }


@dataclass(frozen=True, slots=True)
class ExternalSpeaker:
    """A speaker assigned to an external project.

    Attributes:
        id: The external speaker (supplier) id, stored locally as
            ``external_supplier_id``.
        name: Display name.
        email: Contact email.
        organization: Company or affiliation.
        department: Department within the organization.
        position: Job title.
        phone: Mobile number, falling back to the landline.
        presentation_date: Scheduled presentation time, when parseable.
    """

    id: str
    name: str
    email: str = ""
    organization: str = ""
    department: str = ""
    position: str = ""
    phone: str = ""
    presentation_date: datetime.datetime | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ExternalSpeaker | None:
        """Construct an ``ExternalSpeaker`` from a ``project_speakers`` row.

        Rows with an embedded ``suppliers`` mapping take the speaker's
        identity from the supplier.  Bare rows fall back to the assignment's
        own columns.

        Args:
            data: A single ``project_speakers`` row.

        Returns:
            A populated ``ExternalSpeaker``, or ``None`` when the row has
            no usable id.
        """
        presentation_date = parse_external_datetime(data.get("presentation_time") or data.get("presentation_date"))
        supplier = data.get("suppliers")
        if isinstance(supplier, dict):
            supplier_id = _first(supplier, "id")
            if not supplier_id:
                return None
            return cls(
                id=supplier_id,
                name=_first(supplier, "title", "nickname", "representative", "name", "company_name")
                or _UNKNOWN_SPEAKER,
                email=_first(supplier, "email"),
                organization=_first(supplier, "company_name"),
                position=_first(supplier, "title"),
                phone=_first(supplier, "mobile", "phone"),
                presentation_date=presentation_date,
            )
        if "suppliers" in data:
            # Embedded join present but no supplier row: nothing to link to.
            return None

        speaker_id = _first(data, "supplier_id", "id")
        if not speaker_id:
            return None
        return cls(
            id=speaker_id,
            name=_first(data, "speaker_name", "name", "title") or _UNKNOWN_SPEAKER,
            email=_first(data, "email", "speaker_email", "contact_email"),
            organization=_first(data, "organization", "company"),
            department=_first(data, "department"),
            position=_first(data, "position"),
            phone=_first(data, "phone", "mobile", "contact_phone"),
            presentation_date=presentation_date,
        )
