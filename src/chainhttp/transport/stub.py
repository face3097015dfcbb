# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Deterministic transport for tests and offline use."""

from __future__ import annotations

from collections.abc import Mapping

from ..errors import ErrorCategory
from ..models import TransportRequest, TransportResult
from .base import Transport


def raw_result(
    status: int = 200,
    headers: Mapping[str, str] | None = None,
    body: bytes | str = b"",
    *,
    reason: str = "OK",
    http_version: str = "HTTP/1.1",
) -> TransportResult:
    """Build a successful TransportResult from its parts."""
    lines = [f"{http_version} {status} {reason}".rstrip()]
    lines.extend(f"{name}: {value}" for name, value in (headers or {}).items())
    payload = body.encode("utf-8") if isinstance(body, str) else body
    raw = "\r\n".join(lines).encode("latin-1") + b"\r\n\r\n" + payload
    return TransportResult(ok=True, raw=raw, meta={"status_code": status})


class StubTransport(Transport):
    """Deterministic, programmable Transport for tests."""

    identifier = "stub/0"

    def __init__(self, results: dict[str, TransportResult] | None = None):
        self._results = results or {}
        self.requests: list[TransportRequest] = []

    def add(self, url: str, result: TransportResult) -> None:
        self._results[url] = result

    def execute(self, request: TransportRequest) -> TransportResult:
        self.requests.append(request)
        if request.url in self._results:
            return self._results[request.url]
        return TransportResult(
            ok=False,
            error_code=ErrorCategory.CONNECTION_ERROR.value,
            error_message="No stubbed response configured",
        )

    def close(self) -> None:
        return None
