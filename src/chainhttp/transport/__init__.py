# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport exports."""

from .base import Transport, create_default_transport
from .httpx_transport import HttpxTransport
from .stub import StubTransport, raw_result

__all__ = [
    "HttpxTransport",
    "StubTransport",
    "Transport",
    "create_default_transport",
    "raw_result",
]
