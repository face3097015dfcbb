# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Fluent request builder.

Requests are created through the per-method factories (``Request.get``,
``Request.post``, ...), configured through chained calls that each return the
request, and consumed by ``send``. Every new request starts as a copy of the
default template, so ``Request.ini`` only affects requests created after it.
"""

from __future__ import annotations

import copy
import logging
import mimetypes
import os
import platform
import re
import threading
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import urlsplit

from . import mime
from .config import MAX_REDIRECTS_DEFAULT, load_client_settings
from .context import get_error_sink, get_registry, get_settings, get_transport
from .errors import ConnectionFailedError, UsageError, connection_error_message
from .headers import has_header
from .http import Method
from .models import (
    AuthScheme,
    ClientCert,
    Credentials,
    FileAttachment,
    ProxyConfig,
    ProxyType,
    SerializeMode,
    TransportRequest,
    TransportResult,
)
from .registry import MimeRegistry
from .response import Response
from .transport.base import Transport
from .version import __version__

logger = logging.getLogger(__name__)

_PROXY_ESTABLISHED = re.compile(rb"\AHTTP/1\.[01] 200 Connection established.*?\r\n\r\n", re.IGNORECASE | re.DOTALL)
_BASE_ACCEPT = "*/*; q=0.5, text/plain; q=0.8, text/html;level=3;"

Callback = Callable[..., Any]

_template: Request | None = None
_template_lock = threading.Lock()


class Request:
    """A request under construction. Not safe to share across threads."""

    def __init__(self, attrs: Mapping[str, Any] | None = None):
        self.uri: str | None = None
        self.method: str = Method.GET.value
        self.headers: dict[str, str] = {}
        self.raw_headers = ""
        self.strict_ssl = True
        self.content_type: str | None = None
        self.expected_type: str | None = None
        self.transport_options: dict[str, Any] = {}
        self.auto_parse = True
        self.serialize_payload_method = SerializeMode.SMART
        self.username: str | None = None
        self.password: str | None = None
        self.auth_scheme: AuthScheme | None = None
        self.payload: Any = None
        self.serialized_payload: Any = None
        self.parse_callback: Callback | None = None
        self.error_callback: Callback | None = None
        self.send_callback: Callback | None = None
        self.follow_redirects = False
        self.max_redirects = MAX_REDIRECTS_DEFAULT
        self.payload_serializers: dict[str, Callback] = {}
        self.timeout: float | None = None
        self.client_cert: str | None = None
        self.client_key: str | None = None
        self.client_passphrase: str | None = None
        self.client_encoding = "PEM"
        self.proxy: ProxyConfig | None = None

        # Finalized descriptor; released after every send.
        self._prepared: TransportRequest | None = None

        for attr, value in (attrs or {}).items():
            setattr(self, attr, value)

    # Factories

    @classmethod
    def init(cls, method: str | Method | None = None, mime_type: str | None = None, *, template: Request | None = None) -> Request:
        """Create a request seeded from ``template`` (or the process-wide default)."""
        request = cls()
        request._set_defaults(template)
        return request.with_method(method).sends(mime_type).expects(mime_type)

    @classmethod
    def get(cls, uri: str, mime_type: str | None = None, *, template: Request | None = None) -> Request:
        return cls.init(Method.GET, template=template).with_uri(uri).mime(mime_type)

    @classmethod
    def post(cls, uri: str, payload: Any = None, mime_type: str | None = None, *, template: Request | None = None) -> Request:
        return cls.init(Method.POST, template=template).with_uri(uri).body(payload, mime_type)

    @classmethod
    def put(cls, uri: str, payload: Any = None, mime_type: str | None = None, *, template: Request | None = None) -> Request:
        return cls.init(Method.PUT, template=template).with_uri(uri).body(payload, mime_type)

    @classmethod
    def patch(cls, uri: str, payload: Any = None, mime_type: str | None = None, *, template: Request | None = None) -> Request:
        return cls.init(Method.PATCH, template=template).with_uri(uri).body(payload, mime_type)

    @classmethod
    def delete(cls, uri: str, mime_type: str | None = None, *, template: Request | None = None) -> Request:
        return cls.init(Method.DELETE, template=template).with_uri(uri).mime(mime_type)

    @classmethod
    def head(cls, uri: str, *, template: Request | None = None) -> Request:
        return cls.init(Method.HEAD, template=template).with_uri(uri)

    @classmethod
    def options(cls, uri: str, *, template: Request | None = None) -> Request:
        return cls.init(Method.OPTIONS, template=template).with_uri(uri)

    @classmethod
    def get_quick(cls, uri: str, mime_type: str | None = None) -> Response:
        """Like ``get`` but sends the request straight away."""
        return cls.get(uri, mime_type).send()

    # Template management

    @classmethod
    def ini(cls, template: Request) -> None:
        """Lock in defaults for every request created from now on."""
        global _template
        snapshot = template.copy()
        with _template_lock:
            _template = snapshot

    @classmethod
    def reset_ini(cls) -> None:
        """Reset the default template back to the library defaults."""
        global _template
        defaults = _library_defaults()
        with _template_lock:
            _template = defaults

    @classmethod
    def d(cls, attr: str | None = None) -> Any:
        """Read one attribute of the default template, or the template itself."""
        template = _current_template()
        return getattr(template, attr) if attr else template

    def copy(self) -> Request:
        """Copy every public field; internal state such as the prepared descriptor is not copied."""
        clone = type(self)()
        clone._copy_public_fields(self)
        return clone

    def _set_defaults(self, template: Request | None = None) -> Request:
        self._copy_public_fields(template or _current_template())
        return self

    def _copy_public_fields(self, source: Request) -> None:
        for attr, value in vars(source).items():
            if attr.startswith("_"):
                continue
            if isinstance(value, (dict, list)):
                value = copy.copy(value)
            setattr(self, attr, value)

    # Predicates

    def has_timeout(self) -> bool:
        return self.timeout is not None

    def has_been_initialized(self) -> bool:
        return self._prepared is not None

    def has_basic_auth(self) -> bool:
        return self.username is not None and self.password is not None

    def has_digest_auth(self) -> bool:
        return self.has_basic_auth() and self.auth_scheme is AuthScheme.DIGEST

    def has_client_side_cert(self) -> bool:
        return self.client_cert is not None and self.client_key is not None

    def has_proxy(self) -> bool:
        """Proxies may also come from the environment, as with most HTTP stacks."""
        if self.proxy is not None or self.transport_options.get("proxy"):
            return True
        return bool(os.getenv("http_proxy") or os.getenv("HTTP_PROXY"))

    def is_upload(self) -> bool:
        return self.content_type == mime.UPLOAD

    # Setters

    def with_uri(self, uri: str) -> Request:
        self.uri = uri
        return self

    def with_method(self, method: str | Method | None) -> Request:
        if not method:
            return self
        self.method = method.value if isinstance(method, Method) else str(method).upper()
        return self

    def body(self, payload: Any, mime_type: str | None = None) -> Request:
        """Set the payload; serialization is deferred until the request is prepared."""
        self.mime(mime_type)
        self.payload = payload
        return self

    def mime(self, mime_type: str | None) -> Request:
        """Set both the content type and the expected type."""
        if not mime_type:
            return self
        self.content_type = self.expected_type = mime.get_full_mime(mime_type)
        if self.is_upload():
            self.never_serialize_payload()
        return self

    def sends(self, mime_type: str | None) -> Request:
        if not mime_type:
            return self
        self.content_type = mime.get_full_mime(mime_type)
        if self.is_upload():
            self.never_serialize_payload()
        return self

    def expects(self, mime_type: str | None) -> Request:
        if not mime_type:
            return self
        self.expected_type = mime.get_full_mime(mime_type)
        return self

    def attach(self, files: Mapping[str, str]) -> Request:
        """Send ``files`` (field name -> path) as a multipart upload."""
        if not isinstance(self.payload, dict):
            self.payload = {}
        for field_name, path in files.items():
            mime_type, _ = mimetypes.guess_type(path)
            self.payload[field_name] = FileAttachment(path, mime_type)
        return self.sends(mime.UPLOAD)

    def with_header(self, name: str, value: str) -> Request:
        self.headers[name] = value
        return self

    def with_headers(self, headers: Mapping[str, str]) -> Request:
        for name, value in headers.items():
            self.with_header(name, value)
        return self

    def basic_auth(self, username: str, password: str) -> Request:
        """Only use over HTTPS."""
        self.username = username
        self.password = password
        self.auth_scheme = AuthScheme.BASIC
        return self

    def digest_auth(self, username: str, password: str) -> Request:
        self.basic_auth(username, password)
        self.auth_scheme = AuthScheme.DIGEST
        return self

    def ntlm_auth(self, username: str, password: str) -> Request:
        self.basic_auth(username, password)
        self.auth_scheme = AuthScheme.NTLM
        return self

    def client_side_cert(self, cert: str, key: str, passphrase: str | None = None, encoding: str = "PEM") -> Request:
        self.client_cert = cert
        self.client_key = key
        self.client_passphrase = passphrase
        self.client_encoding = encoding
        return self

    def with_timeout(self, seconds: float) -> Request:
        self.timeout = seconds
        return self

    def with_redirects(self, follow: bool | int = True) -> Request:
        """Follow redirects; an integer caps the number of hops."""
        if follow is True:
            self.max_redirects = MAX_REDIRECTS_DEFAULT
        else:
            self.max_redirects = max(0, int(follow))
        self.follow_redirects = bool(follow)
        return self

    def without_redirects(self) -> Request:
        return self.with_redirects(False)

    def with_strict_ssl(self, strict: bool = True) -> Request:
        self.strict_ssl = strict
        return self

    def without_strict_ssl(self) -> Request:
        return self.with_strict_ssl(False)

    def use_proxy(
        self,
        host: str,
        port: int = 80,
        auth_type: AuthScheme | None = None,
        username: str | None = None,
        password: str | None = None,
        proxy_type: ProxyType = ProxyType.HTTP,
    ) -> Request:
        """Route the request through a proxy; only basic and NTLM proxy auth are honored."""
        if auth_type not in (AuthScheme.BASIC, AuthScheme.NTLM):
            auth_type = username = password = None
        self.proxy = ProxyConfig(
            host=host,
            port=port,
            proxy_type=proxy_type,
            auth_type=auth_type,
            username=username,
            password=password,
        )
        return self

    def use_socks4_proxy(self, host: str, port: int = 80, auth_type=None, username=None, password=None) -> Request:
        return self.use_proxy(host, port, auth_type, username, password, ProxyType.SOCKS4)

    def use_socks5_proxy(self, host: str, port: int = 80, auth_type=None, username=None, password=None) -> Request:
        return self.use_proxy(host, port, auth_type, username, password, ProxyType.SOCKS5)

    def serialize_payload(self, mode: SerializeMode) -> Request:
        """
        Choose how the payload becomes the wire body.

        SMART (the default) runs mappings, sequences and objects through the
        codec for the content type and sends scalars as they are. ALWAYS runs
        every payload through the codec (so ``"Blah"`` becomes ``"\\"Blah\\""``
        for JSON). NEVER sends the payload untouched.
        """
        self.serialize_payload_method = SerializeMode(mode)
        return self

    def never_serialize_payload(self) -> Request:
        return self.serialize_payload(SerializeMode.NEVER)

    def smart_serialize_payload(self) -> Request:
        return self.serialize_payload(SerializeMode.SMART)

    def always_serialize_payload(self) -> Request:
        return self.serialize_payload(SerializeMode.ALWAYS)

    def with_auto_parsing(self, auto_parse: bool = True) -> Request:
        self.auto_parse = auto_parse
        return self

    def without_auto_parsing(self) -> Request:
        return self.with_auto_parsing(False)

    def parse_with(self, callback: Callback) -> Request:
        """Parse response bodies with ``callback(raw_body)`` instead of the registry."""
        self.parse_callback = callback
        return self

    def when_error(self, callback: Callback) -> Request:
        """Receive transport error messages instead of the default error sink."""
        self.error_callback = callback
        return self

    def before_send(self, callback: Callback) -> Request:
        """Called with this request after payload serialization, before the descriptor is built."""
        self.send_callback = callback
        return self

    def register_payload_serializer(self, mime_type: str, callback: Callback) -> Request:
        """
        Serialize payloads of ``mime_type`` with ``callback``.

        ``*`` applies to every content type; an exact content-type entry wins
        over ``*``.
        """
        self.payload_serializers[mime.get_full_mime(mime_type)] = callback
        return self

    def serialize_payload_with(self, callback: Callback) -> Request:
        return self.register_payload_serializer("*", callback)

    def add_transport_option(self, name: str, value: Any) -> Request:
        """Escape hatch for transport options not otherwise exposed."""
        self.transport_options[name] = value
        return self

    # Sending

    def send(self, transport: Transport | None = None) -> Response:
        """Prepare, execute and parse. Raises ConnectionFailedError or ParseError."""
        transport = transport or get_transport()
        try:
            if not self.has_been_initialized():
                self.prepare(transport.identifier)
            prepared = self._prepared
            if prepared is None:
                raise UsageError("Request was not prepared before sending.")
            result = transport.execute(prepared)
            return self.build_response(result)
        finally:
            self._prepared = None

    def prepare(self, transport_identifier: str | None = None) -> TransportRequest:
        """Finalize this request into a transport descriptor without sending it."""
        if not self.uri:
            raise UsageError("Attempting to send a request before defining a URI endpoint.")

        if self.payload is not None:
            self.serialized_payload = self._serialize_payload(self.payload)

        if self.send_callback is not None:
            self.send_callback(self)

        credentials = None
        if self.has_basic_auth():
            credentials = Credentials(self.username, self.password, self.auth_scheme or AuthScheme.BASIC)

        client_cert = None
        if self.has_client_side_cert():
            if not os.path.exists(self.client_key):
                raise UsageError("Could not read Client Key")
            if not os.path.exists(self.client_cert):
                raise UsageError("Could not read Client Certificate")
            client_cert = ClientCert(self.client_cert, self.client_key, self.client_passphrase, self.client_encoding)

        caller_headers = dict(self.headers)
        body: bytes | None = None
        form_fields: tuple[tuple[str, Any], ...] | None = None
        if self.payload is not None:
            if self.is_upload():
                form_fields = self._form_fields()
            else:
                body = _to_wire_bytes(self.serialized_payload)
                _drop_header(caller_headers, "Content-Length")
                caller_headers["Content-Length"] = str(len(body))

        # "Expect:" suppresses 100-continue negotiation.
        wire_headers: list[tuple[str, str]] = [("Expect", "")]
        if not has_header(self.headers, "User-Agent"):
            wire_headers.append(("User-Agent", get_settings().user_agent or self.build_user_agent(transport_identifier)))
        if self.content_type:
            wire_headers.append(("Content-Type", self.content_type))
        if not has_header(self.headers, "Accept"):
            wire_headers.append(("Accept", self._accept_header()))
        # Some proxies (squid) answer 411 when Content-Length is missing.
        if not has_header(caller_headers, "Content-Length") and not self.is_upload():
            caller_headers["Content-Length"] = "0"
        wire_headers.extend((name, str(value)) for name, value in caller_headers.items())

        self.raw_headers = self._build_raw_headers(wire_headers)

        self._prepared = TransportRequest(
            method=self.method,
            url=self.uri,
            headers=tuple(wire_headers),
            body=body,
            form_fields=form_fields,
            credentials=credentials,
            client_cert=client_cert,
            verify_peer=bool(self.strict_ssl),
            verify_host=2 if self.strict_ssl else 0,
            timeout=self.timeout,
            follow_redirects=self.follow_redirects,
            max_redirects=self.max_redirects,
            proxy=self.proxy,
            transport_options=dict(self.transport_options),
            raw_headers=self.raw_headers,
        )
        logger.debug("Prepared %s %s", self.method, self.uri)
        return self._prepared

    def build_response(self, result: TransportResult, registry: MimeRegistry | None = None) -> Response:
        """Turn a transport result into a Response, or raise ConnectionFailedError."""
        if not result.ok or not result.raw:
            self._error(connection_error_message(self.uri or "", result.error_code, result.error_message))
            raise ConnectionFailedError(self.uri or "", result.error_code, result.error_message)

        raw = result.raw
        # Drop leading "HTTP/1.x 200 Connection established" blocks added by tunnelling proxies.
        if self.has_proxy():
            while _PROXY_ESTABLISHED.match(raw):
                raw = _PROXY_ESTABLISHED.sub(b"", raw, count=1)

        pieces = raw.split(b"\r\n\r\n", 1 + result.redirect_count)
        body = pieces.pop() if len(pieces) > 1 else b""
        headers = pieces.pop()

        return Response(
            body,
            headers.decode("latin-1"),
            self,
            meta_data=result.meta,
            registry=registry or get_registry(),
        )

    def build_user_agent(self, transport_identifier: str | None = None) -> str:
        user_agent = f"chainhttp/{__version__} ({transport_identifier or 'unknown/?.?.?'}"
        user_agent += f" Python/{platform.python_version()} ({platform.system()})"

        server_software = os.getenv("SERVER_SOFTWARE")
        if server_software:
            user_agent += " " + re.sub(r"Python/[\d.]+", "", server_software).strip()
        else:
            term_program = os.getenv("TERM_PROGRAM")
            if term_program:
                user_agent += f" {term_program}"
            term_version = os.getenv("TERM_PROGRAM_VERSION")
            if term_version:
                user_agent += f"/{term_version}"

        http_user_agent = os.getenv("HTTP_USER_AGENT")
        if http_user_agent:
            user_agent += f" {http_user_agent}"

        return user_agent + ")"

    def _accept_header(self) -> str:
        accept = _BASE_ACCEPT
        if self.expected_type:
            accept += f"q=0.9, {self.expected_type}"
        return accept

    def _build_raw_headers(self, wire_headers: list[tuple[str, str]]) -> str:
        parts = urlsplit(self.uri or "")
        path = (parts.path or "/") + (f"?{parts.query}" if parts.query else "")
        host = parts.netloc.rpartition("@")[2] or "localhost"
        lines = [f"{self.method} {path} HTTP/1.1", f"Host: {host}"]
        lines.extend(f"{name}: {value}" if value else f"{name}:" for name, value in wire_headers)
        return "\r\n".join(lines) + "\r\n"

    def _serialize_payload(self, payload: Any) -> Any:
        if payload is None or self.serialize_payload_method == SerializeMode.NEVER:
            return payload

        # Scalars are assumed to be serialized already in smart mode.
        if self.serialize_payload_method == SerializeMode.SMART and isinstance(payload, (str, bytes, int, float, bool)):
            return payload

        if self.content_type in self.payload_serializers:
            return self.payload_serializers[self.content_type](payload)
        if "*" in self.payload_serializers:
            return self.payload_serializers["*"](payload)

        return get_registry().resolve(self.content_type).serialize(payload)

    def _form_fields(self) -> tuple[tuple[str, Any], ...]:
        payload = self.serialized_payload
        if not isinstance(payload, Mapping):
            raise UsageError("Multipart uploads need a mapping of field names to values")
        for value in payload.values():
            if isinstance(value, FileAttachment) and not os.path.isfile(value.path):
                raise UsageError(f"Could not read attachment {value.path}")
        return tuple(payload.items())

    def _error(self, message: str) -> None:
        if self.error_callback is not None:
            self.error_callback(message)
        else:
            get_error_sink()(message)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Request {self.method} {self.uri!r}>"


def _to_wire_bytes(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, bytearray):
        return bytes(value)
    return str(value).encode("utf-8")


def _drop_header(headers: dict[str, str], name: str) -> None:
    lower = name.lower()
    for key in [key for key in headers if key.lower() == lower]:
        del headers[key]


def _library_defaults() -> Request:
    settings = load_client_settings()
    template = Request({"method": Method.GET.value})
    template.with_strict_ssl(settings.verify_tls)
    template.follow_redirects = settings.follow_redirects
    template.max_redirects = settings.max_redirects
    return template


def _current_template() -> Request:
    global _template
    with _template_lock:
        if _template is None:
            _template = _library_defaults()
        return _template


__all__ = ["Request"]
