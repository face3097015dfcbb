# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed Transport implementation."""

from __future__ import annotations

import logging
import os
import ssl
from contextlib import ExitStack
from typing import Any

import certifi
import httpx

from ..config import ClientSettings, load_client_settings
from ..errors import UsageError, categorize_exception
from ..models import AuthScheme, FileAttachment, ProxyType, TransportRequest, TransportResult
from .base import Transport

logger = logging.getLogger(__name__)


class HttpxTransport(Transport):
    """Synchronous httpx transport.

    Every execution opens its own ``httpx.Client`` and closes it before
    returning, so no connection outlives the request that created it.
    """

    def __init__(self, settings: ClientSettings | None = None, transport: httpx.BaseTransport | None = None):
        self.settings = settings or load_client_settings()
        self._transport = transport

    @property
    def identifier(self) -> str:
        return f"httpx/{httpx.__version__}"

    def execute(self, request: TransportRequest) -> TransportResult:
        headers = _collapse_headers(request)

        try:
            client = self._open_client(request)
            with ExitStack() as stack:
                stack.enter_context(client)
                send_kwargs: dict[str, Any] = {"headers": headers}
                if request.is_upload:
                    send_kwargs["files"] = _multipart(request, stack)
                elif request.body is not None:
                    send_kwargs["content"] = request.body

                response = client.request(request.method, request.url, **send_kwargs)

            for hop in response.history:
                logger.debug("Redirect %s -> %s", hop.status_code, hop.headers.get("location"))
            hops = [*response.history, response]
            raw = b"\r\n\r\n".join(_header_block(hop) for hop in hops) + b"\r\n\r\n" + response.content
        except UsageError:
            raise
        except Exception as exc:  # noqa: BLE001
            category = categorize_exception(exc)
            logger.debug("Transport failure for %s %s: %s", request.method, request.url, exc)
            return TransportResult(
                ok=False,
                error_code=category.value,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
            )

        return TransportResult(
            ok=True,
            raw=raw,
            redirect_count=len(response.history),
            meta={
                "status_code": response.status_code,
                "url": str(response.url),
                "http_version": response.http_version,
                "redirect_count": len(response.history),
            },
        )

    def close(self) -> None:
        if self._transport is not None:
            self._transport.close()

    def _open_client(self, request: TransportRequest) -> httpx.Client:
        client_kwargs = self._client_kwargs(request)
        try:
            return httpx.Client(**client_kwargs)
        except TypeError as exc:
            raise UsageError(f"Unsupported transport option: {exc}") from exc

    def _client_kwargs(self, request: TransportRequest) -> dict[str, Any]:
        timeout = request.timeout if request.timeout is not None else self.settings.timeout
        kwargs: dict[str, Any] = {
            "verify": _verify_option(request),
            "timeout": timeout,
            "follow_redirects": request.follow_redirects,
            "max_redirects": request.max_redirects,
        }
        if request.credentials is not None:
            kwargs["auth"] = _auth_option(request)
        if request.proxy is not None:
            if request.proxy.proxy_type is ProxyType.SOCKS4:
                raise UsageError("SOCKS4 proxies are not supported by the httpx transport")
            if request.proxy.auth_type is AuthScheme.NTLM:
                raise UsageError("NTLM proxy authentication is not supported by the httpx transport")
            kwargs["proxy"] = request.proxy.url
        if self._transport is not None:
            kwargs["transport"] = self._transport
        # Raw overrides shadow everything above.
        kwargs.update(request.transport_options)
        credentials = request.credentials
        if credentials is not None and credentials.scheme is AuthScheme.NTLM and kwargs.get("auth") is None:
            raise UsageError("NTLM authentication requires an httpx auth implementation passed as the 'auth' transport option")
        return kwargs


def _auth_option(request: TransportRequest) -> httpx.Auth | None:
    credentials = request.credentials
    if credentials is None:
        return None
    if credentials.scheme is AuthScheme.DIGEST:
        return httpx.DigestAuth(credentials.username, credentials.password)
    if credentials.scheme is AuthScheme.NTLM:
        # httpx ships no NTLM support; callers plug one in through transport options.
        return None
    return httpx.BasicAuth(credentials.username, credentials.password)


def _verify_option(request: TransportRequest) -> bool | ssl.SSLContext:
    cert = request.client_cert
    if cert is None:
        if not request.verify_peer:
            return False
        if request.verify_host >= 2:
            return True

    if cert is not None and cert.encoding.upper() != "PEM":
        raise UsageError(f"Unsupported client certificate encoding: {cert.encoding}")

    context = ssl.create_default_context(cafile=certifi.where())
    if not request.verify_peer:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    elif request.verify_host < 2:
        context.check_hostname = False
    if cert is not None:
        context.load_cert_chain(cert.cert, cert.key, cert.passphrase)
    return context


def _collapse_headers(request: TransportRequest) -> dict[str, str]:
    """Last write wins per (case-insensitive) name; empty values are suppressions."""
    headers: dict[str, str] = {}
    index: dict[str, str] = {}
    for name, value in request.headers:
        lower = name.lower()
        if request.is_upload and lower == "content-type":
            # httpx adds the multipart boundary itself.
            continue
        previous = index.pop(lower, None)
        if previous is not None:
            headers.pop(previous, None)
        if value == "":
            continue
        headers[name] = value
        index[lower] = name
    return headers


def _multipart(request: TransportRequest, stack: ExitStack) -> list[tuple[str, Any]]:
    """Every field goes through ``files`` so httpx always encodes multipart/form-data."""
    files: list[tuple[str, Any]] = []
    for name, value in request.form_fields or ():
        if isinstance(value, FileAttachment):
            handle = stack.enter_context(open(value.path, "rb"))
            filename = os.path.basename(value.path)
            if value.mime_type:
                files.append((name, (filename, handle, value.mime_type)))
            else:
                files.append((name, (filename, handle)))
        else:
            # No filename makes this a plain form field part.
            files.append((name, (None, value if isinstance(value, (str, bytes)) else str(value))))
    return files


def _header_block(response: httpx.Response) -> bytes:
    status = f"{response.http_version} {response.status_code} {response.reason_phrase}".rstrip()
    lines = [status.encode("latin-1")]
    lines.extend(name + b": " + value for name, value in response.headers.raw)
    return b"\r\n".join(lines)


__all__ = ["HttpxTransport"]
