"""HTTP client for the external project/speaker datastore.

The external datastore exposes its tables through a PostgREST-style REST API
at ``<url>/rest/v1/<table>``.  Rows are filtered with query parameters such
as ``id=eq.<value>`` and related rows are embedded through ``select``
expressions (``*,suppliers(id,email)``).  Every request authenticates with
the service key, sent both as ``apikey`` and as a bearer token.
"""

import http
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

SUPPLIER_COLUMNS = "id,name,title,nickname,representative,company_name,email,mobile,phone"


class ExternalDatastoreClient:
    """HTTP client for the external datastore's REST API.

    Args:
        base_url: Root URL of the external instance (without ``/rest/v1``).
        service_key: Service role key used for ``apikey`` and bearer auth.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, mainly for tests.

    Example::

        client = ExternalDatastoreClient("https://xyz.example.co", service_key="...")
        projects = client.fetch_projects()
        speakers = client.fetch_project_speakers(projects[0]["id"])
    """

    def __init__(
        self,
        base_url: str,
        *,
        service_key: str,
        timeout: int = 30,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client for one external instance.

        Args:
            base_url: Root URL of the external instance.
            service_key: Service role key.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, mainly for tests.
        """
        normalized_base_url = base_url.rstrip("/")
        normalized_base_url = normalized_base_url.removesuffix("/rest/v1")
        self.base_url = normalized_base_url
        self.rest_url = f"{self.base_url}/rest/v1/"
        self.timeout = timeout
        self.transport = transport
        self.headers: dict[str, str] = {
            "Accept": "application/json",
            "apikey": service_key,
            "Authorization": f"Bearer {service_key}",
        }

    def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        prefer: str | None = None,
    ) -> list[dict[str, Any]]:
        """Send one request to a table endpoint and return the row list.

        Args:
            method: HTTP method.
            table: Table name relative to ``/rest/v1/``.
            params: PostgREST query parameters.
            json: Request body for writes.
            prefer: Optional ``Prefer`` header (e.g. ``return=representation``).

        Returns:
            The decoded rows.  Single-object responses are wrapped in a list.

        Raises:
            RuntimeError: If the API returns an HTTP error status or the
                connection fails.
        """
        url = f"{self.rest_url}{table}"
        headers = dict(self.headers)
        if prefer:
            headers["Prefer"] = prefer

        with httpx.Client(timeout=self.timeout, headers=headers, transport=self.transport) as client:
            logger.debug("%s %s %s", method, url, params or "")
            try:
                response = client.request(method, url, params=params, json=json)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                msg = f"External datastore request failed: {exc.response.status_code} for URL {exc.request.url}"
                raise ExternalRequestError(msg, status_code=exc.response.status_code) from exc
            except httpx.RequestError as exc:
                msg = f"External datastore connection error for URL {url}: {exc}"
                raise RuntimeError(msg) from exc

        if not response.content:
            return []
        data = response.json()
        if isinstance(data, dict):
            return [data]
        return list(data)

    def fetch_projects(self) -> list[dict[str, Any]]:
        """Fetch every project row, newest first.

        Returns:
            A list of raw project dicts.
        """
        rows = self._request("GET", "projects", params={"select": "*", "order": "created_at.desc"})
        logger.debug("Fetched %d external projects", len(rows))
        return rows

    def fetch_project(self, project_id: str) -> dict[str, Any] | None:
        """Fetch a single project row by id.

        Returns:
            The raw project dict, or ``None`` if no such row exists.
        """
        rows = self._request("GET", "projects", params={"select": "*", "id": f"eq.{project_id}"})
        return rows[0] if rows else None

    def fetch_project_speakers(self, project_id: str) -> list[dict[str, Any]]:
        """Fetch the speaker assignments of a project.

        Tries to embed the related ``suppliers`` row.  When the embed is
        rejected (the relationship is not exposed), falls back to the bare
        ``project_speakers`` rows.

        Returns:
            A list of raw assignment dicts, each optionally carrying a
            ``suppliers`` mapping.
        """
        try:
            return self._request(
                "GET",
                "project_speakers",
                params={"select": f"*,suppliers({SUPPLIER_COLUMNS})", "project_id": f"eq.{project_id}"},
            )
        except ExternalRequestError as exc:
            if exc.status_code != http.HTTPStatus.BAD_REQUEST:
                raise
            logger.warning("Supplier embed rejected for project %s, using bare project_speakers rows", project_id)
        return self._request("GET", "project_speakers", params={"select": "*", "project_id": f"eq.{project_id}"})

    def fetch_speaker_assignment(self, supplier_id: str) -> dict[str, Any] | None:
        """Fetch the newest project assignment of a speaker, with its project embedded.

        Returns:
            The raw assignment dict, or ``None`` when the speaker has none.
        """
        rows = self._request(
            "GET",
            "project_speakers",
            params={
                "select": "*,projects(*)",
                "supplier_id": f"eq.{supplier_id}",
                "order": "created_at.desc",
                "limit": "1",
            },
        )
        return rows[0] if rows else None

    def create_project(self, data: dict[str, Any]) -> dict[str, Any]:
        """Insert a project row and return it as stored.

        Raises:
            RuntimeError: If the API call fails or returns no row.
        """
        rows = self._request("POST", "projects", json=data, prefer="return=representation")
        if not rows:
            msg = "External datastore did not return the created project"
            raise RuntimeError(msg)
        return rows[0]

    def update_project(self, project_id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        """Update a project row and return it as stored.

        Returns:
            The updated row, or ``None`` when no row matched *project_id*.
        """
        rows = self._request(
            "PATCH",
            "projects",
            params={"id": f"eq.{project_id}"},
            json=data,
            prefer="return=representation",
        )
        return rows[0] if rows else None


class ExternalRequestError(RuntimeError):
    """An HTTP error status returned by the external datastore."""

    def __init__(self, message: str, *, status_code: int) -> None:
        """Store the status code alongside the message."""
        super().__init__(message)
        self.status_code = status_code
