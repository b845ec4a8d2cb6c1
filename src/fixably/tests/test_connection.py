import json
import logging

import pytest

from .. import exceptions
from ..config import Config, config, configure
from ..connection import (
    Connection,
    build_query_string,
    get_connection,
    get_transport,
    handle_response,
    response_code_allows_body,
    use_transport,
)
from ..transport import RequestsTransport, Response
from .testing import SITE, RecordingTransport


@pytest.fixture
def target():
    recording = RecordingTransport()
    return Connection(Config(api_key="secret", subdomain="demo"), recording), recording


class TestHandleResponse:
    @pytest.mark.parametrize("status", [100, 200, 201, 204, 299])
    def test_success(self, status):
        response = Response(status)
        assert handle_response(response, "url") is response

    @pytest.mark.parametrize(
        "status, error",
        [
            (301, exceptions.Redirection),
            (400, exceptions.BadRequest),
            (401, exceptions.UnauthorizedAccess),
            (403, exceptions.ForbiddenAccess),
            (404, exceptions.ResourceNotFound),
            (405, exceptions.MethodNotAllowed),
            (409, exceptions.ResourceConflict),
            (410, exceptions.ResourceGone),
            (422, exceptions.UnprocessableEntity),
            (429, exceptions.ClientError),
            (500, exceptions.ServerError),
            (503, exceptions.ServerError),
            (600, exceptions.ConnectionError),
        ],
    )
    def test_failure(self, status, error):
        with pytest.raises(error) as e:
            handle_response(Response(status, body="oops"), f"{SITE}/orders")
        assert type(e.value) is error
        assert e.value.status_code == status
        assert e.value.body == "oops"
        assert str(e.value) == f"Failed with {status} at {SITE}/orders"


@pytest.mark.parametrize(
    "status, expected", [(100, False), (200, True), (204, False), (304, False), (404, True)]
)
def test_response_code_allows_body(status, expected):
    assert response_code_allows_body(status) is expected


def test_build_query_string():
    assert build_query_string(None) == ""
    assert (
        build_query_string({"q": "firstName:Jill Smith", "expand": "items(notes(items))"})
        == "expand=items(notes(items))&q=firstName:Jill+Smith"
    )


class TestConnection:
    def test_get(self, target):
        conn, recording = target
        recording.queue({"id": 1})
        response = conn.get("/orders/1", {"expand": "notes(items)"})

        request = recording.last_request
        assert request.method == "GET"
        assert request.url == f"{SITE}/orders/1?expand=notes(items)"
        assert request.body is None
        assert request.headers == {
            "Authorization": "secret",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        assert response.json() == {"id": 1}

    def test_post(self, target):
        conn, recording = target
        recording.queue({"id": 1}, status_code=201)
        conn.post("/customers", {"firstName": "Jill"})
        assert recording.last_request.method == "POST"
        assert json.loads(recording.last_request.body) == {"firstName": "Jill"}

    def test_absolute_path(self, target):
        conn, _ = target
        assert conn.url_for("https://other.fixably.com/api/v3/orders") == (
            "https://other.fixably.com/api/v3/orders"
        )

    def test_requires_api_key(self):
        recording = RecordingTransport()
        conn = Connection(Config(subdomain="demo"), recording)
        with pytest.raises(exceptions.ConfigurationError, match="api_key"):
            conn.get("/orders")
        assert recording.requests == []

    def test_raises_on_failure(self, target):
        conn, recording = target
        recording.queue({"error": "gone"}, status_code=410)
        with pytest.raises(exceptions.ResourceGone):
            conn.delete("/orders/1")

    def test_logs_requests(self, target, caplog):
        conn, recording = target
        recording.queue(status_code=204)
        with caplog.at_level(logging.DEBUG, logger="fixably"):
            conn.delete("/orders/1")
        assert f"DELETE {SITE}/orders/1 responded with 204" in caplog.text


def test_use_transport():
    recording = RecordingTransport()
    previous = get_transport()
    with use_transport(recording) as t:
        assert t is recording
        assert get_connection().transport is recording
    assert get_transport() is previous


class FakeResponse:
    status_code = 201
    text = '{"id": 3}'
    headers = {"Location": "/orders/3"}


class FakeSession:
    def request(self, method, url, **kwargs):
        self.call = (method, url, kwargs)
        return FakeResponse()


def test_requests_transport():
    session = FakeSession()
    transport = RequestsTransport(session=session, timeout=5.0)
    response = transport.post(f"{SITE}/orders", body='{"a": "é"}', headers={"X": "1"})

    method, url, kwargs = session.call
    assert (method, url) == ("POST", f"{SITE}/orders")
    assert kwargs == {
        "data": '{"a": "é"}'.encode("utf-8"),
        "headers": {"X": "1"},
        "timeout": 5.0,
    }
    assert response == Response(201, '{"id": 3}', {"Location": "/orders/3"})
    assert response.json() == {"id": 3}


def test_requests_transport_follows_configured_timeout():
    saved = config.timeout
    session = FakeSession()
    transport = RequestsTransport(session=session)
    try:
        configure(timeout=7.5)
        transport.get(f"{SITE}/orders")
        assert session.call[2]["timeout"] == 7.5

        configure(timeout=2.0)
        transport.get(f"{SITE}/orders")
        assert session.call[2]["timeout"] == 2.0

        assert RequestsTransport(session=session, timeout=1.0).get(SITE) is not None
        assert session.call[2]["timeout"] == 1.0
    finally:
        config.timeout = saved
