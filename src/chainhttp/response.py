# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP response model."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING, Any

from .errors import ResponseParseError
from .headers import Headers
from .mime import get_full_mime
from .registry import MimeRegistry, get_default_registry

if TYPE_CHECKING:
    from .request import Request


class Response:
    """
    A received response, parsed once at construction.

    ``raw_body`` and ``raw_headers`` are kept verbatim; ``body`` holds the value
    produced by the codec chosen for this response (or the raw body when the
    request disabled auto-parsing). Construction fails as a whole when the
    status line or the body cannot be parsed.
    """

    def __init__(
        self,
        body: bytes,
        headers: str,
        request: Request,
        meta_data: dict[str, Any] | None = None,
        registry: MimeRegistry | None = None,
    ):
        self.request = request
        self.raw_headers = headers
        self.raw_body = body
        self.meta_data = dict(meta_data or {})
        self._registry = registry or get_default_registry()

        self.code = self._parse_code(headers)
        self.headers = Headers.from_string(headers)

        self.content_type = ""
        self.charset = ""
        self.parent_type = ""
        self.is_mime_vendor_specific = False
        self.is_mime_personal = False
        self._interpret_headers()

        self.body = self._parse(body)

    def has_errors(self) -> bool:
        """Did we receive a 4xx or 5xx?"""
        return self.code >= 400

    def has_body(self) -> bool:
        if self.body is None:
            return False
        # Element truthiness counts children, not content.
        if isinstance(self.body, ET.Element):
            return True
        return bool(self.body)

    @property
    def text(self) -> str:
        try:
            return self.raw_body.decode(self.charset or "utf-8", errors="replace")
        except LookupError:
            return self.raw_body.decode("utf-8", errors="replace")

    def _parse(self, body: bytes) -> Any:
        if not self.request.auto_parse:
            return body

        if self.request.parse_callback is not None:
            return self.request.parse_callback(body)

        # Expected type first, then a codec registered for the content type
        # itself, then the structured-suffix parent type.
        parse_with = self.request.expected_type
        if not parse_with:
            parse_with = self.content_type if self._registry.is_registered(self.content_type) else self.parent_type

        return self._registry.resolve(parse_with).parse(body)

    @staticmethod
    def _parse_code(headers: str) -> int:
        status_line = headers.split("\r\n", 1)[0]
        parts = status_line.split(" ")
        if len(parts) < 2 or not (parts[1].isascii() and parts[1].isdigit()):
            raise ResponseParseError("Unable to parse response code from HTTP response due to malformed response")
        return int(parts[1])

    def _interpret_headers(self) -> None:
        segments = self.headers.get("Content-Type", "").split(";")
        self.content_type = segments[0].strip()

        if len(segments) >= 2 and "=" in segments[1]:
            self.charset = segments[1].split("=", 1)[1].strip().strip('"')

        # text/* defaults to ISO-8859-1, everything else to UTF-8 (RFC 2616 3.7.1).
        if not self.charset:
            self.charset = "iso-8859-1" if self.content_type.startswith("text/") else "utf-8"

        if "/" in self.content_type:
            sub_type = self.content_type.split("/", 1)[1]
            self.is_mime_vendor_specific = sub_type.startswith("vnd.")
            self.is_mime_personal = sub_type.startswith("prs.")

        # e.g. xml for application/vnd.github.message+xml
        self.parent_type = self.content_type
        if "+" in self.content_type:
            self.parent_type = get_full_mime(self.content_type.split("+", 1)[1])

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Response [{self.code}] {self.content_type or '-'}>"


__all__ = ["Response"]
