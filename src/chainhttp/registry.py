# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""MIME type -> codec registry.

One process-wide registry backs the module-level helpers. Registration is rare
and resolution frequent, so both go through a single lock and resolution hands
back the codec object itself; replacing a registration never affects a codec
an in-flight request already holds.
"""

from __future__ import annotations

import logging
import threading

from . import mime
from .codecs import CodecProtocol, CsvCodec, FormCodec, JsonCodec, PassthroughCodec, XmlCodec

logger = logging.getLogger(__name__)


class MimeRegistry:
    def __init__(self) -> None:
        self._codecs: dict[str, CodecProtocol] = {}
        self._default = PassthroughCodec()
        self._lock = threading.RLock()
        self._defaults_registered = False

    def register(self, mime_type: str, codec: CodecProtocol) -> None:
        """Insert or overwrite the codec for ``mime_type``."""
        with self._lock:
            self._codecs[mime_type] = codec
        logger.debug("Registered codec %s for %s", type(codec).__name__, mime_type)

    def resolve(self, mime_type: str | None = None) -> CodecProtocol:
        """Return the codec for ``mime_type``, or the shared passthrough codec."""
        if not mime_type:
            return self._default
        with self._lock:
            return self._codecs.get(mime_type, self._default)

    def is_registered(self, mime_type: str | None) -> bool:
        if not mime_type:
            return False
        with self._lock:
            return mime_type in self._codecs

    @staticmethod
    def short_to_full(name: str) -> str:
        return mime.get_full_mime(name)

    def register_default_codecs(self) -> None:
        """Install the csv/form/json/xml codecs once, keeping caller registrations."""
        with self._lock:
            if self._defaults_registered:
                return
            defaults: dict[str, CodecProtocol] = {
                mime.CSV: CsvCodec(),
                mime.FORM: FormCodec(),
                mime.JSON: JsonCodec(),
                mime.XML: XmlCodec(),
            }
            for mime_type, codec in defaults.items():
                if mime_type not in self._codecs:
                    self._codecs[mime_type] = codec
            self._defaults_registered = True

    def registered_types(self) -> list[str]:
        with self._lock:
            return list(self._codecs)


_default_registry = MimeRegistry()


def get_default_registry() -> MimeRegistry:
    """Return the process-wide registry with the default codecs installed."""
    _default_registry.register_default_codecs()
    return _default_registry


def register(mime_type: str, codec: CodecProtocol) -> None:
    get_default_registry().register(mime_type, codec)


def resolve(mime_type: str | None = None) -> CodecProtocol:
    return get_default_registry().resolve(mime_type)


def is_registered(mime_type: str | None) -> bool:
    return get_default_registry().is_registered(mime_type)


def short_to_full(name: str) -> str:
    return mime.get_full_mime(name)


__all__ = [
    "MimeRegistry",
    "get_default_registry",
    "is_registered",
    "register",
    "resolve",
    "short_to_full",
]
