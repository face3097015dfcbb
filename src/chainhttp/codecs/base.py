# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Codec base class and the passthrough codec.

A codec is a parse/serialize pair for one MIME type. Custom codecs only need to
provide ``parse`` and ``serialize``; subclassing :class:`Codec` is optional.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

Body = bytes | str

_BOMS: tuple[bytes, ...] = (
    b"\xef\xbb\xbf",  # UTF-8
    b"\xff\xfe\x00\x00",  # UTF-32 LE
    b"\x00\x00\xfe\xff",  # UTF-32 BE
    b"\xff\xfe",  # UTF-16 LE
    b"\xfe\xff",  # UTF-16 BE
)


@runtime_checkable
class CodecProtocol(Protocol):
    """Structural contract every registered codec satisfies."""

    def parse(self, body: Body) -> Any: ...

    def serialize(self, payload: Any) -> Body: ...


class Codec:
    """Default behavior: parse returns the body unchanged, serialize stringifies."""

    def parse(self, body: Body) -> Any:
        return body

    def serialize(self, payload: Any) -> Body:
        if payload is None:
            return ""
        if isinstance(payload, (bytes, str)):
            return payload
        return str(payload)

    @staticmethod
    def strip_bom(body: Body) -> Body:
        """Drop a leading byte-order mark (UTF-8, UTF-32 LE/BE, UTF-16 LE/BE)."""
        if isinstance(body, str):
            return body[1:] if body.startswith("\ufeff") else body
        for bom in _BOMS:
            if body.startswith(bom):
                return body[len(bom) :]
        return body

    @staticmethod
    def to_text(body: Body) -> str:
        if isinstance(body, str):
            return body
        return bytes(body).decode("utf-8", errors="replace")

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"{type(self).__name__}()"


class PassthroughCodec(Codec):
    """Used for unregistered MIME types and for payloads that are never serialized."""


__all__ = ["Body", "Codec", "CodecProtocol", "PassthroughCodec"]
