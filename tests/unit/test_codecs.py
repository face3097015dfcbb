# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import xml.etree.ElementTree as ET
from dataclasses import dataclass

import pytest

from chainhttp.codecs import Codec, CsvCodec, FormCodec, JsonCodec, PassthroughCodec, XmlCodec
from chainhttp.errors import CsvParseError, JsonParseError, ParseError, XmlParseError


@pytest.mark.parametrize(
    "bom",
    [b"\xef\xbb\xbf", b"\xff\xfe\x00\x00", b"\x00\x00\xfe\xff", b"\xff\xfe", b"\xfe\xff"],
)
def test_strip_bom_bytes(bom):
    assert Codec.strip_bom(bom + b"{}") == b"{}"


def test_strip_bom_text():
    assert Codec.strip_bom("\ufeff[1]") == "[1]"
    assert Codec.strip_bom("[1]") == "[1]"


def test_passthrough_codec():
    codec = PassthroughCodec()
    assert codec.parse(b"raw") == b"raw"
    assert codec.serialize(None) == ""
    assert codec.serialize(b"x") == b"x"
    assert codec.serialize(12) == "12"


def test_json_parse_and_serialize():
    codec = JsonCodec()
    assert codec.parse(b'\xef\xbb\xbf{"a": [1, 2]}') == {"a": [1, 2]}
    assert codec.parse(b"") is None
    assert codec.parse("null") is None
    assert codec.parse(codec.serialize({"a": 1, "b": [True, None]})) == {"a": 1, "b": [True, None]}


def test_json_parse_error_carries_diagnostic():
    with pytest.raises(JsonParseError) as excinfo:
        JsonCodec().parse(b"{not json")
    assert "Unable to parse response as JSON" in str(excinfo.value)
    assert isinstance(excinfo.value, ParseError)
    assert isinstance(excinfo.value, ValueError)


def test_form_codec():
    codec = FormCodec()
    assert codec.serialize({"a": "1", "b": "x y"}) == "a=1&b=x+y"
    assert codec.serialize({"tags": ["x", "y"]}) == "tags=x&tags=y"
    assert codec.parse(b"a=1&b=x+y&empty=") == {"a": "1", "b": "x y", "empty": ""}
    assert codec.parse(codec.serialize({"k": "v&w"})) == {"k": "v&w"}


def test_csv_codec_round_trip_with_header_row():
    codec = CsvCodec()
    rows = [{"id": "1", "name": "alpha"}, {"id": "2", "name": "beta, gamma"}]
    text = codec.serialize(rows)
    assert text == 'id,name\n1,alpha\n2,"beta, gamma"\n'
    assert codec.parse(text) == [["id", "name"], ["1", "alpha"], ["2", "beta, gamma"]]


def test_csv_codec_empty_and_invalid():
    codec = CsvCodec()
    assert codec.parse(b"") is None
    with pytest.raises(CsvParseError):
        codec.parse("\ufeff\n")


def test_xml_parse():
    root = XmlCodec().parse(b"\xef\xbb\xbf<root><item>1</item></root>")
    assert root.tag == "root"
    assert root.find("item").text == "1"
    assert XmlCodec().parse(b"") is None


def test_xml_parse_error():
    with pytest.raises(XmlParseError, match="Unable to parse response as XML"):
        XmlCodec().parse(b"<root>")


def test_xml_serialize_mapping_and_scalars():
    text = XmlCodec().serialize({"name": "a", "ok": True, "none": None, 0: "zero"})
    assert text.startswith('<?xml version="1.0"?>')
    root = ET.fromstring(text.split("\n", 1)[1])
    assert root.tag == "response"
    array = root.find("array")
    assert array.find("name").text == "a"
    assert array.find("ok").text == "TRUE"
    assert array.find("none").text is None
    assert array.find("child-0").text == "zero"


def test_xml_serialize_dataclass_becomes_root():
    @dataclass
    class Widget:
        name: str
        sizes: list

    text = XmlCodec().serialize(Widget("bolt", [1, 2]))
    root = ET.fromstring(text.split("\n", 1)[1])
    assert root.tag == "Widget"
    assert root.find("name").text == "bolt"
    assert [child.text for child in root.find("sizes/array")] == ["1", "2"]


def test_xml_serialize_explicit_capability():
    class Point:
        def __init__(self, x, y):
            self.x = x
            self.y = y

        def to_xml(self, parent):
            ET.SubElement(parent, "point", {"x": str(self.x), "y": str(self.y)})

    text = XmlCodec().serialize(Point(1, 2))
    root = ET.fromstring(text.split("\n", 1)[1])
    assert root.tag == "point"
    assert root.attrib == {"x": "1", "y": "2"}
