# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""MIME type constants and the short-name table."""

from __future__ import annotations

JSON = "application/json"
XML = "application/xml"
XHTML = "application/html+xml"
FORM = "application/x-www-form-urlencoded"
UPLOAD = "multipart/form-data"
PLAIN = "text/plain"
JS = "text/javascript"
HTML = "text/html"
YAML = "application/x-yaml"
CSV = "text/csv"

# Short name -> full MIME type.
MIMES: dict[str, str] = {
    "csv": CSV,
    "form": FORM,
    "html": HTML,
    "javascript": JS,
    "js": JS,
    "json": JSON,
    "plain": PLAIN,
    "text": PLAIN,
    "upload": UPLOAD,
    "xhtml": XHTML,
    "xml": XML,
    "yaml": YAML,
}


def get_full_mime(short_name: str) -> str:
    """
    Return the full MIME type for a short name (e.g. ``json`` -> ``application/json``).

    Unknown names are returned unchanged, so a full MIME string is accepted
    anywhere a short name is.
    """
    return MIMES.get(short_name, short_name)


def supports_mime_type(short_name: str) -> bool:
    return short_name in MIMES


__all__ = [
    "CSV",
    "FORM",
    "HTML",
    "JS",
    "JSON",
    "MIMES",
    "PLAIN",
    "UPLOAD",
    "XHTML",
    "XML",
    "YAML",
    "get_full_mime",
    "supports_mime_type",
]
