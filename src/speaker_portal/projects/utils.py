"""Utility functions for the projects app."""

import datetime
import logging
import re

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from speaker_portal.projects.models import Project, ProjectSetting
from speaker_portal.settings import get_config

logger = logging.getLogger(__name__)

_SLUG_RE = re.compile(r"[^a-z0-9가-힣\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_DASHES_RE = re.compile(r"-+")

_SATURDAY = 5


def generate_slug(text: str) -> str:
    """Convert a display title to a URL slug, keeping Korean characters.

    Args:
        text: The title to slugify.

    Returns:
        Lowercase, hyphen-separated slug.  May be empty when *text* holds no
        letters, digits, or Hangul syllables.
    """
    value = _SLUG_RE.sub("", str(text).lower())
    value = _WHITESPACE_RE.sub("-", value)
    value = _DASHES_RE.sub("-", value)
    return value.strip("-")


def unique_project_slug(source: str | None, fallback: str | None = None, *, exclude_pk: int | None = None) -> str:
    """Return a project slug that no other project uses.

    The slug is generated from *source*, then *fallback* (typically the
    external id) when *source* yields nothing, then ``"project"``.  Taken
    slugs get a numeric suffix.

    Args:
        source: The preferred text, usually the project title.
        fallback: Text to slugify when *source* produces an empty slug.
        exclude_pk: A project primary key to ignore when checking for
            collisions (the project being renamed).

    Returns:
        A slug free for use.
    """
    base = generate_slug(source or "") or generate_slug(fallback or "") or "project"
    base = base[:190]
    taken = Project.objects.filter(slug__startswith=base)
    if exclude_pk is not None:
        taken = taken.exclude(pk=exclude_pk)
    existing = set(taken.values_list("slug", flat=True))

    slug = base
    counter = 2
    while slug in existing:
        slug = f"{base}-{counter}"
        counter += 1
    return slug


def _add_business_days(start: datetime.date, days: int) -> datetime.date:
    current = start
    remaining = days
    while remaining > 0:
        current += datetime.timedelta(days=1)
        if current.weekday() < _SATURDAY:
            remaining -= 1
    return current


def receipt_deadline(project: Project, event_end: datetime.date | None = None) -> datetime.datetime | None:
    """Compute when transportation receipts stop being accepted.

    Resolution order:

    1. ``custom_deadline`` in the ``receipt_upload_deadline`` project setting.
    2. The event end (``event_end`` or the project's ``end_date``) plus
       ``deadline_days``, counting only weekdays when ``include_weekends``
       is false.  The deadline is the end of that day.
    3. ``TransportationSettings.receipt_deadline``.

    Args:
        project: The project whose policy applies.
        event_end: Overrides the project's end date (e.g. a speaker's own
            presentation date).

    Returns:
        An aware datetime, or ``None`` when no deadline applies.
    """
    policy = project.get_setting(ProjectSetting.RECEIPT_UPLOAD_DEADLINE, default={})
    if not isinstance(policy, dict):
        logger.warning("Ignoring malformed receipt deadline setting for project %s", project.slug)
        policy = {}

    custom = policy.get("custom_deadline")
    if custom:
        try:
            custom_date = parse_date(str(custom))
            parsed = (
                datetime.datetime.combine(custom_date, datetime.time.max)
                if custom_date is not None
                else parse_datetime(str(custom))
            )
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed if timezone.is_aware(parsed) else timezone.make_aware(parsed)
        logger.warning("Ignoring unparseable custom receipt deadline %r for project %s", custom, project.slug)

    end = event_end or project.end_date
    if end is not None:
        days = policy.get("deadline_days", get_config().receipt_deadline_days)
        try:
            days = int(days)
        except (TypeError, ValueError):
            days = get_config().receipt_deadline_days
        if policy.get("include_weekends", True):
            last_day = end + datetime.timedelta(days=days)
        else:
            last_day = _add_business_days(end, days)
        return timezone.make_aware(datetime.datetime.combine(last_day, datetime.time.max))

    settings_row = getattr(project, "transportation_settings", None)
    if settings_row is not None:
        return settings_row.receipt_deadline
    return None
