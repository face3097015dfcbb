# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Codec for application/json."""

from __future__ import annotations

import json
from typing import Any

from ..errors import JsonParseError
from .base import Body, Codec


class JsonCodec(Codec):
    def __init__(self, **loads_kwargs: Any):
        self._loads_kwargs = loads_kwargs

    def parse(self, body: Body) -> Any:
        body = self.strip_bom(body)
        if not body:
            return None
        try:
            return json.loads(body, **self._loads_kwargs)
        except ValueError as exc:
            # ``null`` decodes to None; anything else that fails is an error.
            if self.to_text(body).strip().lower() == "null":
                return None
            raise JsonParseError(f"Unable to parse response as JSON: {exc}") from exc

    def serialize(self, payload: Any) -> Body:
        return json.dumps(payload)


__all__ = ["JsonCodec"]
