# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
chainhttp package entrypoint.

A fluent HTTP client: requests are configured through chained builder calls,
sent through an injectable transport (httpx by default), and the response body
is decoded by the codec registered for its MIME type.
"""

from . import mime
from .codecs import Codec, CsvCodec, FormCodec, JsonCodec, PassthroughCodec, XmlCodec, XmlSerializable
from .config import ClientSettings, load_client_settings
from .context import ClientContext, client_context
from .errors import (
    ChainHttpError,
    ConnectionFailedError,
    CsvParseError,
    ErrorCategory,
    ImmutableHeadersError,
    JsonParseError,
    ParseError,
    ResponseParseError,
    UsageError,
    XmlParseError,
)
from .headers import Headers
from .http import Method
from .log import setup_logging
from .models import AuthScheme, ProxyType, SerializeMode, TransportRequest, TransportResult
from .registry import MimeRegistry, get_default_registry, is_registered, register, resolve, short_to_full
from .request import Request
from .response import Response
from .transport import HttpxTransport, StubTransport, Transport, create_default_transport
from .version import __version__


def get(uri, mime_type=None):
    return Request.get(uri, mime_type)


def post(uri, payload=None, mime_type=None):
    return Request.post(uri, payload, mime_type)


def put(uri, payload=None, mime_type=None):
    return Request.put(uri, payload, mime_type)


def patch(uri, payload=None, mime_type=None):
    return Request.patch(uri, payload, mime_type)


def delete(uri, mime_type=None):
    return Request.delete(uri, mime_type)


def head(uri):
    return Request.head(uri)


def options(uri):
    return Request.options(uri)


def get_quick(uri, mime_type=None):
    return Request.get_quick(uri, mime_type)


__all__ = [
    "AuthScheme",
    "ChainHttpError",
    "ClientContext",
    "ClientSettings",
    "Codec",
    "ConnectionFailedError",
    "CsvCodec",
    "CsvParseError",
    "ErrorCategory",
    "FormCodec",
    "Headers",
    "HttpxTransport",
    "ImmutableHeadersError",
    "JsonCodec",
    "JsonParseError",
    "Method",
    "MimeRegistry",
    "ParseError",
    "PassthroughCodec",
    "ProxyType",
    "Request",
    "Response",
    "ResponseParseError",
    "SerializeMode",
    "StubTransport",
    "Transport",
    "TransportRequest",
    "TransportResult",
    "UsageError",
    "XmlCodec",
    "XmlParseError",
    "XmlSerializable",
    "__version__",
    "client_context",
    "create_default_transport",
    "delete",
    "get",
    "get_default_registry",
    "get_quick",
    "head",
    "is_registered",
    "load_client_settings",
    "mime",
    "options",
    "patch",
    "post",
    "put",
    "register",
    "resolve",
    "setup_logging",
    "short_to_full",
]
