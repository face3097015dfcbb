# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from chainhttp.request import Request


@pytest.fixture(autouse=True)
def _reset_request_template(monkeypatch):
    for name in (
        "http_proxy",
        "HTTP_PROXY",
        "CHAINHTTP_TIMEOUT",
        "CHAINHTTP_USER_AGENT",
        "CHAINHTTP_VERIFY_TLS",
        "CHAINHTTP_FOLLOW_REDIRECTS",
        "CHAINHTTP_MAX_REDIRECTS",
    ):
        monkeypatch.delenv(name, raising=False)
    Request.reset_ini()
    yield
    Request.reset_ini()
