"""Tests für den HTTP-Datenspeicher (mit httpx.MockTransport, ohne Netzwerk)."""

import json

import httpx
import pytest

from data.remote import RemoteStore

BASE_URL = "https://example.org/exec"


def _make_store(handler) -> RemoteStore:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return RemoteStore(BASE_URL, client=client)


class TestFetchAll:

    def test_get_with_action_and_cache_buster(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"teachers": [], "subs": []})

        data = _make_store(handler).fetch_all()
        assert data == {"teachers": [], "subs": []}
        request = seen[0]
        assert request.method == "GET"
        assert request.url.params["action"] == "getData"
        assert request.url.params["t"].isdigit()

    @pytest.mark.parametrize("response", [
        httpx.Response(500, text="Fehler"),
        httpx.Response(200, text="<html>kein json</html>"),
        httpx.Response(200, json=["keine", "bulk-antwort"]),
        httpx.Response(200, content=b'{"teachers": "\xff"}'),
    ])
    def test_bad_response_is_unavailable(self, response):
        assert _make_store(lambda request: response).fetch_all() is None

    def test_network_error_is_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("keine Verbindung", request=request)

        assert _make_store(handler).fetch_all() is None


class TestWrites:

    def _capture(self):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append((request.headers["content-type"], json.loads(request.content)))
            return httpx.Response(200, json={"status": "ok"})

        return bodies, _make_store(handler)

    def test_create_posts_plain_text_json(self):
        bodies, store = self._capture()
        store.create("Teachers", {"id": "t1", "name": "Jörg"})
        content_type, body = bodies[0]
        assert content_type.startswith("text/plain")
        assert body == {"action": "create", "collection": "Teachers",
                        "data": {"id": "t1", "name": "Jörg"}}

    def test_update_and_delete(self):
        bodies, store = self._capture()
        store.update("LeaveRequests", {"id": "l1", "status": "APPROVED"})
        store.delete("SubstituteAssignments", "sub1")
        assert bodies[0][1]["action"] == "update"
        assert bodies[1][1] == {"action": "delete", "collection": "SubstituteAssignments",
                                "data": {"id": "sub1"}}

    def test_server_error_raises(self):
        store = _make_store(lambda request: httpx.Response(500))
        with pytest.raises(httpx.HTTPStatusError):
            store.create("Teachers", {"id": "t1"})
