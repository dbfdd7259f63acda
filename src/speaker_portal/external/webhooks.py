"""Webhook handling for external datastore change notifications.

The external datastore posts ``{type, table, record, old_record}`` payloads
whenever a row changes.  A registry maps the changed table to a handler
class that decides what to resync.  Tables without a handler fall back to a
project resync, which is always safe.

Usage in URL configuration::

    from speaker_portal.external.webhooks import external_webhook

    urlpatterns = [
        path("webhooks/external/", external_webhook),
    ]
"""

from __future__ import annotations

import hmac
import json
import logging
import traceback
from typing import Any

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from speaker_portal.external.models import WebhookEvent, WebhookProcessingError
from speaker_portal.external.sync import ExternalSyncService, extract_record_id
from speaker_portal.features import is_feature_enabled
from speaker_portal.projects.models import Project
from speaker_portal.settings import get_config

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class WebhookRegistry:
    """Registry mapping external table names to handler classes.

    Handlers are registered at module load time and looked up by the webhook
    view when a notification arrives.
    """

    def __init__(self, default: type[Webhook] | None = None) -> None:
        """Initialize an empty handler registry.

        Args:
            default: Handler used for tables with no registered handler.
        """
        self._registry: dict[str, type[Webhook]] = {}
        self.default = default

    def register(self, table: str, handler_class: type[Webhook]) -> None:
        """Register a handler class for a table.

        Args:
            table: The external table name (e.g. ``"projects"``).
            handler_class: A ``Webhook`` subclass that handles changes to it.
        """
        self._registry[table] = handler_class

    def get(self, table: str) -> type[Webhook] | None:
        """Return the handler class for a table, falling back to the default.

        Args:
            table: The external table name.

        Returns:
            The registered handler class, the default handler, or ``None``.
        """
        return self._registry.get(table, self.default)

    def keys(self) -> list[str]:
        """Return all tables with an explicitly registered handler."""
        return list(self._registry.keys())


# ---------------------------------------------------------------------------
# Base handler
# ---------------------------------------------------------------------------


class Webhook:
    """Base class for change-notification handlers.

    Subclasses implement ``process_webhook()`` and return a JSON-serializable
    summary.  The base ``process()`` method wraps execution with
    bookkeeping and exception capture.

    Attributes:
        table: The external table this handler processes.
        event: The ``WebhookEvent`` model instance being handled.
    """

    table: str = ""

    def __init__(self, event: WebhookEvent, service: ExternalSyncService | None = None) -> None:
        """Bind the handler to a persisted notification.

        Args:
            event: The persisted ``WebhookEvent`` to process.
            service: Sync service to use; built from settings when omitted.
        """
        self.event = event
        self._service = service

    @property
    def service(self) -> ExternalSyncService:
        """Return the sync service, building it on first use."""
        if self._service is None:
            self._service = ExternalSyncService()
        return self._service

    @property
    def payload(self) -> dict[str, Any]:
        """Return the stored payload as a dict."""
        return self.event.payload if isinstance(self.event.payload, dict) else {}

    def process(self) -> dict[str, Any]:
        """Run the handler, recording the result or the failure.

        On success, marks the event processed and stores the result. On
        failure, captures the traceback to ``WebhookProcessingError`` and
        re-raises.
        """
        if self.event.processed:
            logger.info("Webhook event %s already processed, skipping", self.event.pk)
            return dict(self.event.result)

        try:
            result = self.process_webhook()
        except Exception:
            self.log_exception()
            raise

        self.event.processed = True
        self.event.result = result
        self.event.save(update_fields=["processed", "result"])
        return result

    def process_webhook(self) -> dict[str, Any]:
        """Implement table-specific processing logic.

        Raises:
            NotImplementedError: Subclasses must override this method.
        """
        raise NotImplementedError

    def log_exception(self) -> None:
        """Capture the current exception to ``WebhookProcessingError``."""
        tb = traceback.format_exc()
        logger.error("Error processing webhook for table %s (event %s): %s", self.table, self.event.pk, tb)
        WebhookProcessingError.objects.create(
            event=self.event,
            message=tb.strip().splitlines()[-1][:500] if tb.strip() else "Unknown error",
            traceback=tb,
        )


# ---------------------------------------------------------------------------
# Concrete handlers
# ---------------------------------------------------------------------------


class ProjectChangeWebhook(Webhook):
    """Handles changes to the external ``projects`` table.

    Resyncs the changed project when the payload names it, otherwise every
    project.
    """

    table = "projects"

    def process_webhook(self) -> dict[str, Any]:
        """Resync the affected project(s)."""
        return self.service.handle_change(self.payload)


class ProjectSpeakersChangeWebhook(Webhook):
    """Handles changes to the external ``project_speakers`` table.

    Resolves the owning project from ``project_id`` and resyncs its speakers,
    syncing the project itself first when it is not known locally.
    """

    table = "project_speakers"

    def process_webhook(self) -> dict[str, Any]:
        """Resync the speakers of the affected project."""
        external_id = extract_record_id(self.payload, key="project_id")
        if external_id is None:
            logger.info("Speaker change without project_id, falling back to project sync")
            return self.service.handle_change(self.payload | {"record": None, "old_record": None})

        project = Project.objects.filter(external_project_id=external_id).first()
        if project is None:
            action = self.service.sync_project(external_id)
            project = Project.objects.filter(external_project_id=external_id).first()
            if project is None:
                return {"action": action, "external_project_id": external_id}

        result = self.service.sync_speakers(project)
        return {
            "action": "speakers_synced",
            "external_project_id": external_id,
            "new_speakers": result.created,
            "updated_speakers": result.updated,
            "failed_speakers": result.failed,
        }


registry = WebhookRegistry(default=ProjectChangeWebhook)
registry.register(ProjectChangeWebhook.table, ProjectChangeWebhook)
registry.register(ProjectSpeakersChangeWebhook.table, ProjectSpeakersChangeWebhook)


# ---------------------------------------------------------------------------
# View
# ---------------------------------------------------------------------------


def _secret_matches(request: HttpRequest) -> bool:
    secret = get_config().external.webhook_secret
    if not secret:
        return True
    provided = request.headers.get("X-Webhook-Secret", "")
    return hmac.compare_digest(provided.encode(), str(secret).encode())


@csrf_exempt
@require_POST
def external_webhook(request: HttpRequest) -> HttpResponse:
    """Receive and process a change notification from the external datastore.

    Checks the optional shared secret, persists the raw payload, and
    dispatches to the handler registered for the changed table.

    Args:
        request: The incoming HTTP request.

    Returns:
        200 with the handler result, 400 for a bad secret or malformed
        JSON, 404 when webhooks are disabled, or 500 when processing fails.
    """
    if not is_feature_enabled("webhooks"):
        return JsonResponse({"error": "Webhooks are disabled"}, status=404)

    if not _secret_matches(request):
        logger.warning("Rejected external webhook with an invalid secret")
        return JsonResponse({"error": "Invalid webhook secret"}, status=400)

    try:
        payload = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Rejected external webhook with a malformed body")
        return JsonResponse({"error": "Invalid JSON payload"}, status=400)
    if not isinstance(payload, dict):
        return JsonResponse({"error": "Payload must be a JSON object"}, status=400)

    event_type = str(payload.get("type") or "").upper()
    table = str(payload.get("table") or "")
    event = WebhookEvent.objects.create(
        event_type=event_type if event_type in WebhookEvent.EventType.values else "",
        table=table,
        record_id=extract_record_id(payload) or "",
        payload=payload,
    )
    logger.info("Received %s webhook for table '%s' (event %s)", event_type or "change", table or "?", event.pk)

    handler_class = registry.get(table)
    if handler_class is None:
        logger.info("No handler registered for table '%s'", table)
        return JsonResponse({"success": True, "action": "ignored"})

    try:
        result = handler_class(event).process()
    except Exception as exc:  # noqa: BLE001
        return JsonResponse({"error": "Webhook processing failed", "details": str(exc)}, status=500)

    return JsonResponse({"success": True, **result})
