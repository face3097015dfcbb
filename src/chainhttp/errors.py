# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers.

Usage errors are caller bugs and always propagate. Connection and parse errors
are expected failures that callers are meant to catch.
"""

from __future__ import annotations

from enum import Enum


class ChainHttpError(Exception):
    """Base class for every error raised by chainhttp."""


class UsageError(ChainHttpError, ValueError):
    """The library was used incorrectly (missing URI, unreadable certificate, ...)."""


class ImmutableHeadersError(UsageError, TypeError):
    """Parsed response headers cannot be modified."""

    def __init__(self, message: str = "Headers are read-only."):
        super().__init__(message)


class ParseError(ChainHttpError, ValueError):
    """A response could not be interpreted."""


class ResponseParseError(ParseError):
    """The status line or header framing of a response is malformed."""


class JsonParseError(ParseError):
    pass


class XmlParseError(ParseError):
    pass


class CsvParseError(ParseError):
    pass


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    PROXY_ERROR = "PROXY_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ConnectionFailedError(ChainHttpError):
    """The transport could not complete the exchange; no response exists."""

    def __init__(
        self,
        uri: str,
        error_code: str | None = None,
        error_message: str | None = None,
    ):
        self.uri = uri
        self.error_code = error_code
        self.error_message = error_message
        super().__init__(connection_error_message(uri, error_code, error_message))


def connection_error_message(uri: str, error_code: str | None, error_message: str | None) -> str:
    if error_code:
        detail = f"{error_code} {error_message}" if error_message else str(error_code)
        return f'Unable to connect to "{uri}": {detail}'
    return f'Unable to connect to "{uri}".'


def categorize_exception(exc: BaseException, _depth: int = 0) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory, following the exception chain
    so that a DNS or TLS failure wrapped by httpx is still reported as such.
    """
    import socket
    import ssl as ssl_module

    import httpx

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, httpx.ProxyError):
        return ErrorCategory.PROXY_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    cause = exc.__cause__ or exc.__context__
    if cause is not None and cause is not exc and _depth < 5:
        nested = categorize_exception(cause, _depth + 1)
        if nested is not ErrorCategory.UNKNOWN_ERROR:
            return nested

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


__all__ = [
    "ChainHttpError",
    "ConnectionFailedError",
    "CsvParseError",
    "ErrorCategory",
    "ImmutableHeadersError",
    "JsonParseError",
    "ParseError",
    "ResponseParseError",
    "UsageError",
    "XmlParseError",
    "categorize_exception",
    "connection_error_message",
]
