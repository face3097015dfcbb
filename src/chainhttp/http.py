# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP method constants and their semantic classes."""

from __future__ import annotations

from enum import Enum


class Method(str, Enum):
    HEAD = "HEAD"
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


def safe_methods() -> tuple[Method, ...]:
    return (Method.HEAD, Method.GET, Method.OPTIONS, Method.TRACE)


def idempotent_methods() -> tuple[Method, ...]:
    # POST may be idempotent for a given server but is never guaranteed to be.
    return (
        Method.HEAD,
        Method.GET,
        Method.PUT,
        Method.DELETE,
        Method.OPTIONS,
        Method.TRACE,
        Method.PATCH,
    )


def _normalize(method: str | Method) -> str:
    return str(method.value if isinstance(method, Method) else method).upper()


def is_safe_method(method: str | Method) -> bool:
    return _normalize(method) in {m.value for m in safe_methods()}


def is_unsafe_method(method: str | Method) -> bool:
    return not is_safe_method(method)


def is_idempotent(method: str | Method) -> bool:
    return _normalize(method) in {m.value for m in idempotent_methods()}


def is_not_idempotent(method: str | Method) -> bool:
    return not is_idempotent(method)


__all__ = [
    "Method",
    "idempotent_methods",
    "is_idempotent",
    "is_not_idempotent",
    "is_safe_method",
    "is_unsafe_method",
    "safe_methods",
]
