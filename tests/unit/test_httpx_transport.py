# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

import httpx
import pytest

from chainhttp.config import TIMEOUT_DEFAULT, ClientSettings
from chainhttp.context import client_context
from chainhttp.errors import ConnectionFailedError, ErrorCategory, UsageError
from chainhttp.models import TransportRequest
from chainhttp.request import Request
from chainhttp.transport import HttpxTransport, create_default_transport
from chainhttp.transport.httpx_transport import _verify_option


def _mock(handler):
    return HttpxTransport(transport=httpx.MockTransport(handler))


def test_identifier_and_factory():
    transport = create_default_transport()
    assert isinstance(transport, HttpxTransport)
    assert transport.identifier == f"httpx/{httpx.__version__}"


def test_post_json_end_to_end():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["headers"] = request.headers
        seen["body"] = request.content
        return httpx.Response(201, json={"id": 7}, headers={"X-Trace": "abc"})

    response = Request.post("http://api.local/items", {"a": 1}, "json").send(_mock(handler))

    assert seen["method"] == "POST"
    assert json.loads(seen["body"]) == {"a": 1}
    assert seen["headers"]["content-type"] == "application/json"
    assert seen["headers"]["content-length"] == str(len(seen["body"]))
    assert seen["headers"]["user-agent"].startswith("chainhttp/")
    assert "expect" not in seen["headers"]

    assert response.code == 201
    assert response.body == {"id": 7}
    assert response.headers["x-trace"] == "abc"
    assert response.meta_data["status_code"] == 201
    assert response.meta_data["redirect_count"] == 0


def test_smart_string_payload_is_sent_verbatim():
    seen = {}

    def handler(request):
        seen["body"] = request.content
        return httpx.Response(204)

    Request.post("http://api.local/raw", "already json", "json").send(_mock(handler))
    assert seen["body"] == b"already json"


def test_redirects_are_followed_and_split():
    def handler(request):
        if request.url.path == "/old":
            return httpx.Response(302, headers={"Location": "/new"})
        return httpx.Response(200, text="moved here", headers={"Content-Type": "text/plain"})

    response = Request.get("http://api.local/old").with_redirects().send(_mock(handler))

    assert response.code == 200
    assert response.raw_body == b"moved here"
    assert response.meta_data["redirect_count"] == 1
    assert response.meta_data["url"] == "http://api.local/new"


def test_redirects_not_followed_by_default():
    def handler(request):
        return httpx.Response(302, headers={"Location": "/new"})

    response = Request.get("http://api.local/old").send(_mock(handler))
    assert response.code == 302
    assert response.headers["location"] == "/new"


def test_connect_error_routes_through_error_callback():
    messages = []

    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ConnectionFailedError) as excinfo:
        Request.get("http://down.local").when_error(messages.append).send(_mock(handler))

    assert excinfo.value.error_code == ErrorCategory.CONNECTION_ERROR.value
    assert "connection refused" in excinfo.value.error_message
    assert messages and messages[0].startswith('Unable to connect to "http://down.local"')


def test_timeout_is_categorized():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(ConnectionFailedError) as excinfo:
        Request.get("http://slow.local").with_timeout(0.1).when_error(lambda message: None).send(_mock(handler))
    assert excinfo.value.error_code == ErrorCategory.TIMEOUT.value


def test_unreachable_host_never_builds_a_response():
    errors = []
    with pytest.raises(ConnectionFailedError):
        Request.get("http://127.0.0.1:9/").with_timeout(2).when_error(errors.append).send(HttpxTransport())
    assert len(errors) == 1


def test_error_sink_from_context_receives_failures():
    sink = []

    def handler(request):
        raise httpx.ConnectError("nope", request=request)

    with client_context(transport=_mock(handler), error_sink=sink.append):
        with pytest.raises(ConnectionFailedError):
            Request.get("http://down.local").send()
    assert len(sink) == 1


def test_basic_auth_header():
    def handler(request):
        assert request.headers["authorization"].startswith("Basic ")
        return httpx.Response(200)

    assert Request.get("http://api.local").basic_auth("u", "p").send(_mock(handler)).code == 200


def test_digest_auth_challenge():
    def handler(request):
        if "authorization" not in request.headers:
            return httpx.Response(
                401,
                headers={"WWW-Authenticate": 'Digest realm="api", nonce="abc123", qop="auth", algorithm=MD5'},
            )
        assert request.headers["authorization"].startswith("Digest ")
        return httpx.Response(200, text="secret", headers={"Content-Type": "text/plain"})

    response = Request.get("http://api.local/private").digest_auth("u", "p").send(_mock(handler))
    assert response.code == 200
    assert response.raw_body == b"secret"


def test_ntlm_requires_auth_transport_option():
    with pytest.raises(UsageError, match="NTLM"):
        Request.get("http://api.local").ntlm_auth("u", "p").send(_mock(lambda request: httpx.Response(200)))


def test_ntlm_with_auth_transport_option():
    def handler(request):
        assert request.headers["authorization"].startswith("Basic ")
        return httpx.Response(200)

    request = Request.get("http://api.local").ntlm_auth("u", "p").add_transport_option("auth", httpx.BasicAuth("u", "p"))
    assert request.send(_mock(handler)).code == 200


def test_socks4_proxy_is_rejected():
    request = Request.get("http://api.local").use_socks4_proxy("socks.local", 1080)
    with pytest.raises(UsageError, match="SOCKS4"):
        request.send(_mock(lambda request: httpx.Response(200)))
    assert not request.has_been_initialized()


def test_non_pem_client_cert_is_rejected(tmp_path):
    cert = tmp_path / "c.der"
    key = tmp_path / "c.key"
    cert.write_bytes(b"cert")
    key.write_bytes(b"key")
    request = Request.get("https://api.local").client_side_cert(str(cert), str(key), encoding="DER")
    with pytest.raises(UsageError, match="encoding"):
        request.send(_mock(lambda request: httpx.Response(200)))


def test_multipart_upload(tmp_path):
    path = tmp_path / "report.csv"
    path.write_text("id\n1\n")
    seen = {}

    def handler(request):
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = request.read()
        return httpx.Response(200)

    Request.post("http://api.local/upload").attach({"report": str(path)}).send(_mock(handler))

    assert seen["content_type"].startswith("multipart/form-data; boundary=")
    assert b'name="report"; filename="report.csv"' in seen["body"]
    assert b"id\n1\n" in seen["body"]


def test_verify_option():
    assert _verify_option(TransportRequest(method="GET", url="https://x")) is True
    assert _verify_option(TransportRequest(method="GET", url="https://x", verify_peer=False, verify_host=0)) is False


def test_upload_without_files_is_still_multipart():
    seen = {}

    def handler(request):
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = request.read()
        return httpx.Response(200)

    Request.post("http://api.local/upload", {"title": "x", "count": 2}, "upload").send(_mock(handler))

    assert seen["content_type"].startswith("multipart/form-data; boundary=")
    assert b'Content-Disposition: form-data; name="title"\r\n\r\nx' in seen["body"]
    assert b'name="count"\r\n\r\n2' in seen["body"]


def test_unknown_transport_option_is_a_usage_error():
    sink = []
    request = Request.get("http://api.local").add_transport_option("no_such_option", True).when_error(sink.append)
    with pytest.raises(UsageError, match="Unsupported transport option"):
        request.send(_mock(lambda request: httpx.Response(200)))
    assert sink == []


def test_default_timeout_is_finite():
    transport = HttpxTransport(settings=ClientSettings())
    kwargs = transport._client_kwargs(TransportRequest(method="GET", url="http://x"))
    assert kwargs["timeout"] == TIMEOUT_DEFAULT
    kwargs = transport._client_kwargs(TransportRequest(method="GET", url="http://x", timeout=2.5))
    assert kwargs["timeout"] == 2.5
