# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Codec for application/xml.

Parsing yields an :class:`xml.etree.ElementTree.Element`. Serialization prefers
the explicit :class:`XmlSerializable` capability; other values go through a
reflective walk that is best-effort only. Cyclic graphs, opaque objects and
keys that are not valid element names produce lossy or invalid documents, and
that walk is kept as a compatibility shim rather than a general XML mapper.
"""

from __future__ import annotations

import dataclasses
import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from ..errors import XmlParseError
from .base import Body, Codec

XML_DECLARATION = '<?xml version="1.0"?>\n'
_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")


@runtime_checkable
class XmlSerializable(Protocol):
    """Types that know how to write themselves under ``parent``."""

    def to_xml(self, parent: ET.Element) -> None: ...


class XmlCodec(Codec):
    def parse(self, body: Body) -> ET.Element | None:
        body = self.strip_bom(body)
        if not body:
            return None
        try:
            return ET.fromstring(body)
        except ET.ParseError as exc:
            raise XmlParseError("Unable to parse response as XML") from exc

    def serialize(self, payload: Any) -> Body:
        root = ET.Element("response")
        _serialize_value(payload, root)
        # Objects are the document root; everything else is wrapped in <response>.
        if _is_object(payload) and len(root) == 1:
            root = root[0]
        return XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"


def _is_object(value: Any) -> bool:
    if isinstance(value, XmlSerializable):
        return True
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return True
    if isinstance(value, (Mapping, list, tuple, set, frozenset, str, bytes, int, float, bool)) or value is None:
        return False
    return hasattr(value, "__dict__")


def _public_fields(value: Any) -> list[tuple[str, Any]]:
    if dataclasses.is_dataclass(value):
        return [(f.name, getattr(value, f.name)) for f in dataclasses.fields(value) if not f.name.startswith("_")]
    return [(name, attr) for name, attr in vars(value).items() if not name.startswith("_")]


def _append_text(node: ET.Element, text: str) -> None:
    if len(node):
        last = node[-1]
        last.tail = (last.tail or "") + text
    else:
        node.text = (node.text or "") + text


def _serialize_value(value: Any, node: ET.Element) -> None:
    if isinstance(value, XmlSerializable):
        value.to_xml(node)
    elif _is_object(value):
        obj_node = ET.SubElement(node, type(value).__name__)
        for name, attr in _public_fields(value):
            _serialize_value(attr, ET.SubElement(obj_node, name))
    elif isinstance(value, (Mapping, list, tuple, set, frozenset)):
        arr_node = ET.SubElement(node, "array")
        items = value.items() if isinstance(value, Mapping) else enumerate(value)
        for key, item in items:
            name = f"child-{key}" if _is_numeric_key(key) else str(key)
            _serialize_value(item, ET.SubElement(arr_node, name))
    elif isinstance(value, bool):
        _append_text(node, "TRUE" if value else "FALSE")
    elif value is None:
        _append_text(node, "")
    elif isinstance(value, bytes):
        _append_text(node, value.decode("utf-8", errors="replace"))
    else:
        _append_text(node, str(value))


def _is_numeric_key(key: Any) -> bool:
    if isinstance(key, bool):
        return False
    if isinstance(key, (int, float)):
        return True
    return _NUMERIC_RE.match(str(key)) is not None


__all__ = ["XML_DECLARATION", "XmlCodec", "XmlSerializable"]
