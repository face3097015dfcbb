# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from chainhttp.errors import ImmutableHeadersError, UsageError
from chainhttp.headers import Headers, has_header

RAW = (
    "HTTP/1.1 200 OK\r\n"
    "Content-Type: text/html; charset=utf-8\r\n"
    "Set-Cookie: a=1\r\n"
    "X-Empty:\r\n"
    "not a header line\r\n"
    "set-cookie: b=2\r\n"
    "Location: http://example.com:8080/x\r\n"
)


def test_from_string_merges_duplicates_case_insensitively():
    headers = Headers.from_string(RAW)
    assert headers["Set-Cookie"] == "a=1,b=2"
    assert headers["set-cookie"] == "a=1,b=2"
    assert list(headers) == ["Content-Type", "Set-Cookie", "X-Empty", "Location"]


def test_values_split_on_first_colon_only():
    headers = Headers.from_string(RAW)
    assert headers["location"] == "http://example.com:8080/x"
    assert headers["x-empty"] == ""


def test_missing_header_lookup():
    headers = Headers.from_string(RAW)
    assert headers.get("x-missing") is None
    assert "CONTENT-TYPE" in headers
    assert "x-missing" not in headers
    with pytest.raises(KeyError):
        headers["x-missing"]


def test_headers_are_read_only():
    headers = Headers.from_string(RAW)
    with pytest.raises(ImmutableHeadersError, match="read-only"):
        headers["X-New"] = "1"
    with pytest.raises(UsageError):
        del headers["Set-Cookie"]
    with pytest.raises(TypeError):
        headers.extra = "nope"


def test_headers_from_mapping_and_to_dict():
    headers = Headers({"Accept": "a", "accept": "b"})
    assert headers.to_dict() == {"Accept": "a,b"}
    assert len(headers) == 1


def test_has_header():
    assert has_header({"user-agent": "x"}, "User-Agent")
    assert not has_header({}, "Accept")
    assert not has_header(None, "Accept")
