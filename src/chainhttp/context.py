# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Ambient client context.

A ContextVar-backed ClientContext carries the collaborators a request needs at
send time (transport, codec registry, error sink, settings). Requests read from
this context when explicit arguments are omitted, so a block of code can be
pointed at a stub transport or an isolated registry without touching any
process-wide state.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Any

from .config import ClientSettings, load_client_settings
from .log import default_error_sink
from .registry import MimeRegistry, get_default_registry
from .transport.base import Transport, create_default_transport

ErrorSink = Callable[[str], None]


@dataclass(frozen=True)
class ClientContext:
    transport: Transport | None = None
    registry: MimeRegistry | None = None
    error_sink: ErrorSink | None = None
    settings: ClientSettings | None = None


_current_client_context: ContextVar[ClientContext | None] = ContextVar("chainhttp_client_context", default=None)


def get_client_context() -> ClientContext:
    """Return the current ambient client context."""
    return _current_client_context.get() or ClientContext()


def get_settings() -> ClientSettings:
    """Return ClientSettings from context, falling back to loading defaults."""
    context = get_client_context()
    if context.settings is not None:
        return context.settings
    return load_client_settings()


def get_registry() -> MimeRegistry:
    context = get_client_context()
    if context.registry is not None:
        return context.registry
    return get_default_registry()


def get_transport() -> Transport:
    context = get_client_context()
    if context.transport is not None:
        return context.transport
    return create_default_transport(get_settings())


def get_error_sink() -> ErrorSink:
    context = get_client_context()
    if context.error_sink is not None:
        return context.error_sink
    return default_error_sink


@contextmanager
def client_context(**overrides: Any) -> Iterator[ClientContext]:
    """
    Context manager that layers overrides onto the ambient ClientContext.

    None-valued overrides are ignored to preserve outer context values.
    """
    current = get_client_context()
    filtered = {key: value for key, value in overrides.items() if value is not None}
    new_context = replace(current, **filtered) if filtered else current
    token = _current_client_context.set(new_context)
    try:
        yield new_context
    finally:
        _current_client_context.reset(token)


__all__ = [
    "ClientContext",
    "ErrorSink",
    "client_context",
    "get_client_context",
    "get_error_sink",
    "get_registry",
    "get_settings",
    "get_transport",
]
