# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Codec for text/csv."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Mapping
from typing import Any

from ..errors import CsvParseError
from .base import Body, Codec


class CsvCodec(Codec):
    def parse(self, body: Body) -> list[list[str]] | None:
        body = self.strip_bom(body)
        if not body:
            return None
        try:
            parsed = [row for row in csv.reader(io.StringIO(self.to_text(body), newline="")) if row]
        except csv.Error as exc:
            raise CsvParseError(f"Unable to parse response as CSV: {exc}") from exc
        if not parsed:
            raise CsvParseError("Unable to parse response as CSV")
        return parsed

    def serialize(self, payload: Iterable[Mapping[str, Any]]) -> Body:
        """Emit a header row from the first row's keys, then one line per row."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        for index, row in enumerate(payload):
            if index == 0:
                writer.writerow(list(row.keys()))
            writer.writerow(list(row.values()))
        return buffer.getvalue()


__all__ = ["CsvCodec"]
