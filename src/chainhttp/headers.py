# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Response header collection and header lookup helpers.

HTTP header field names are case-insensitive (RFC 9110). Parsed response
headers keep the spelling and position of the first occurrence of each name and
fold repeated fields into one comma-joined value (RFC 9110 section 5.3).
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from typing import Any

from .errors import ImmutableHeadersError

_LINE_BREAKS = re.compile(r"[\r\n]+")


class Headers(Mapping[str, str]):
    """Read-only, ordered, case-insensitive header mapping."""

    __slots__ = ("_headers", "_index")

    def __init__(self, headers: Mapping[str, str] | None = None):
        merged: dict[str, str] = {}
        index: dict[str, str] = {}
        for key, value in (headers or {}).items():
            _merge(merged, index, key, value)
        object.__setattr__(self, "_headers", merged)
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_string(cls, raw: str) -> Headers:
        """Parse a raw header block; the first line is the status line and is skipped."""
        lines = [line for line in _LINE_BREAKS.split(raw or "") if line]
        merged: dict[str, str] = {}
        index: dict[str, str] = {}
        for line in lines[1:]:
            if ":" not in line:
                continue
            key, raw_value = line.split(":", 1)
            key = key.strip()
            if not key:
                continue
            _merge(merged, index, key, raw_value.strip())
        headers = cls()
        object.__setattr__(headers, "_headers", merged)
        object.__setattr__(headers, "_index", index)
        return headers

    def __getitem__(self, key: str) -> str:
        actual = self._index.get(str(key).lower())
        if actual is None:
            raise KeyError(key)
        return self._headers[actual]

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._index

    def __setitem__(self, key: str, value: Any) -> None:
        raise ImmutableHeadersError()

    def __delitem__(self, key: str) -> None:
        raise ImmutableHeadersError()

    def __setattr__(self, name: str, value: Any) -> None:
        raise ImmutableHeadersError()

    def to_dict(self) -> dict[str, str]:
        return dict(self._headers)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"Headers({self._headers!r})"


def _merge(merged: dict[str, str], index: dict[str, str], key: str, value: str) -> None:
    lower = key.lower()
    existing = index.get(lower)
    if existing is None:
        index[lower] = key
        merged[key] = value
    else:
        merged[existing] = f"{merged[existing]},{value}"


def has_header(headers: Mapping[str, Any] | None, name: str) -> bool:
    """Case-insensitive presence check for caller-supplied header dicts."""
    if not headers or not name:
        return False
    lower = name.lower()
    return any(str(key).lower() == lower for key in headers)


__all__ = ["Headers", "has_header"]
