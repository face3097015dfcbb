# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Data models shared by the request builder and the transports."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any


class SerializeMode(IntEnum):
    """How a request payload is turned into the wire body."""

    NEVER = 0
    ALWAYS = 1
    SMART = 2


class AuthScheme(str, Enum):
    BASIC = "basic"
    DIGEST = "digest"
    NTLM = "ntlm"


class ProxyType(str, Enum):
    HTTP = "http"
    SOCKS4 = "socks4"
    SOCKS5 = "socks5"


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str
    scheme: AuthScheme = AuthScheme.BASIC


@dataclass(frozen=True)
class ClientCert:
    cert: str
    key: str
    passphrase: str | None = None
    encoding: str = "PEM"


@dataclass(frozen=True)
class ProxyConfig:
    host: str
    port: int = 80
    proxy_type: ProxyType = ProxyType.HTTP
    auth_type: AuthScheme | None = None
    username: str | None = None
    password: str | None = None

    @property
    def url(self) -> str:
        """Proxy URL, with credentials only when an auth type was requested."""
        userinfo = ""
        if self.auth_type is not None and self.username is not None:
            userinfo = f"{self.username}:{self.password or ''}@"
        return f"{self.proxy_type.value}://{userinfo}{self.host}:{self.port}"


@dataclass(frozen=True)
class FileAttachment:
    """A file sent as one part of a multipart upload."""

    path: str
    mime_type: str | None = None


@dataclass(frozen=True)
class TransportRequest:
    """Finalized, transport-ready description of one request."""

    method: str
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes | None = None
    form_fields: tuple[tuple[str, Any], ...] | None = None
    credentials: Credentials | None = None
    client_cert: ClientCert | None = None
    verify_peer: bool = True
    verify_host: int = 2
    timeout: float | None = None
    follow_redirects: bool = False
    max_redirects: int = 25
    proxy: ProxyConfig | None = None
    transport_options: dict[str, Any] = field(default_factory=dict)
    raw_headers: str = ""

    @property
    def is_upload(self) -> bool:
        return self.form_fields is not None


@dataclass
class TransportResult:
    """Raw outcome of executing a TransportRequest.

    On success ``raw`` holds every header block (one per redirect hop, then the
    final one) followed by the body, separated by blank lines, exactly as they
    would appear on the wire.
    """

    ok: bool
    raw: bytes = b""
    redirect_count: int = 0
    error_code: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)


__all__ = [
    "AuthScheme",
    "ClientCert",
    "Credentials",
    "FileAttachment",
    "ProxyConfig",
    "ProxyType",
    "SerializeMode",
    "TransportRequest",
    "TransportResult",
]
