# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Codec for application/x-www-form-urlencoded."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, urlencode

from .base import Body, Codec


class FormCodec(Codec):
    def parse(self, body: Body) -> dict[str, str]:
        text = self.to_text(self.strip_bom(body))
        return dict(parse_qsl(text, keep_blank_values=True))

    def serialize(self, payload: Any) -> Body:
        if isinstance(payload, Mapping):
            payload = list(payload.items())
        return urlencode(payload, doseq=True)


__all__ = ["FormCodec"]
