"""Tests for the external datastore REST client."""

import json

import httpx
import pytest

from speaker_portal.external.client import SUPPLIER_COLUMNS, ExternalDatastoreClient, ExternalRequestError


def _client(handler):
    return ExternalDatastoreClient(
        "https://datastore.example.com",
        service_key="secret-key",
        transport=httpx.MockTransport(handler),
    )


def test_client_normalizes_base_url_with_rest_suffix():
    client = ExternalDatastoreClient("https://datastore.example.com/rest/v1/", service_key="k")

    assert client.base_url == "https://datastore.example.com"
    assert client.rest_url == "https://datastore.example.com/rest/v1/"


def test_requests_carry_service_key_headers():
    seen = {}

    def handler(request):
        seen["apikey"] = request.headers["apikey"]
        seen["authorization"] = request.headers["Authorization"]
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=[{"id": "p1"}])

    rows = _client(handler).fetch_projects()

    assert rows == [{"id": "p1"}]
    assert seen == {
        "apikey": "secret-key",
        "authorization": "Bearer secret-key",
        "path": "/rest/v1/projects",
        "params": {"select": "*", "order": "created_at.desc"},
    }


def test_fetch_project_returns_none_when_missing():
    def handler(request):
        assert request.url.params["id"] == "eq.p9"
        return httpx.Response(200, json=[])

    assert _client(handler).fetch_project("p9") is None


def test_fetch_project_speakers_embeds_suppliers():
    def handler(request):
        assert request.url.params["select"] == f"*,suppliers({SUPPLIER_COLUMNS})"
        assert request.url.params["project_id"] == "eq.p1"
        return httpx.Response(200, json=[{"id": "a1", "suppliers": {"id": "s1"}}])

    assert _client(handler).fetch_project_speakers("p1") == [{"id": "a1", "suppliers": {"id": "s1"}}]


def test_fetch_project_speakers_falls_back_when_embed_rejected():
    selects = []

    def handler(request):
        selects.append(request.url.params["select"])
        if request.url.params["select"] != "*":
            return httpx.Response(400, json={"message": "Could not find a relationship"})
        return httpx.Response(200, json=[{"id": "a1", "supplier_id": "s1"}])

    rows = _client(handler).fetch_project_speakers("p1")

    assert rows == [{"id": "a1", "supplier_id": "s1"}]
    assert selects == [f"*,suppliers({SUPPLIER_COLUMNS})", "*"]


def test_fetch_project_speakers_reraises_other_errors():
    def handler(request):
        return httpx.Response(503)

    with pytest.raises(ExternalRequestError) as excinfo:
        _client(handler).fetch_project_speakers("p1")

    assert excinfo.value.status_code == 503


def test_http_status_error_becomes_runtime_error():
    def handler(request):
        return httpx.Response(500, json={"message": "down"})

    with pytest.raises(RuntimeError, match="500"):
        _client(handler).fetch_projects()


def test_connection_error_becomes_runtime_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(RuntimeError, match="connection error"):
        _client(handler).fetch_projects()


def test_create_project_posts_with_representation():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["prefer"] = request.headers["Prefer"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json=[{"id": "new-id", "title": "AI Summit"}])

    row = _client(handler).create_project({"title": "AI Summit"})

    assert row == {"id": "new-id", "title": "AI Summit"}
    assert seen == {"method": "POST", "prefer": "return=representation", "body": {"title": "AI Summit"}}


def test_create_project_requires_a_row():
    def handler(request):
        return httpx.Response(201, content=b"")

    with pytest.raises(RuntimeError, match="did not return"):
        _client(handler).create_project({"title": "AI Summit"})


def test_update_project_returns_none_without_match():
    def handler(request):
        assert request.method == "PATCH"
        assert request.url.params["id"] == "eq.gone"
        return httpx.Response(200, json=[])

    assert _client(handler).update_project("gone", {"title": "x"}) is None


def test_single_object_response_is_wrapped():
    def handler(request):
        return httpx.Response(200, json={"id": "a1", "projects": {"venue": "COEX"}})

    assert _client(handler).fetch_speaker_assignment("s1") == {"id": "a1", "projects": {"venue": "COEX"}}
