# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport abstraction and factory."""

from typing import Protocol

from ..config import ClientSettings, load_client_settings
from ..models import TransportRequest, TransportResult


class Transport(Protocol):
    """Executes a finalized request and returns the raw wire result."""

    identifier: str

    def execute(self, request: TransportRequest) -> TransportResult: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


def create_default_transport(settings: ClientSettings | None = None) -> Transport:
    """Factory for the default httpx-backed transport."""
    from .httpx_transport import HttpxTransport

    return HttpxTransport(settings or load_client_settings())
