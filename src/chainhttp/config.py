# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for chainhttp."""

import os
from dataclasses import dataclass

MAX_REDIRECTS_DEFAULT = 25
TIMEOUT_DEFAULT = 10.0


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _optional_float_env(name: str, default: float | None) -> float | None:
    try:
        value = os.getenv(name)
        if value is None:
            return default
        parsed = float(value)
        return parsed if parsed > 0 else None
    except ValueError:
        return default


@dataclass
class ClientSettings:
    """Library defaults used to seed the request template and the default transport."""

    timeout: float | None = TIMEOUT_DEFAULT
    verify_tls: bool = True
    follow_redirects: bool = False
    max_redirects: int = MAX_REDIRECTS_DEFAULT
    user_agent: str | None = None

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_redirects = _int_env("CHAINHTTP_MAX_REDIRECTS", cls.max_redirects)
        if max_redirects < 0:
            max_redirects = cls.max_redirects
        return cls(
            timeout=_optional_float_env("CHAINHTTP_TIMEOUT", cls.timeout),
            verify_tls=_bool_env("CHAINHTTP_VERIFY_TLS", cls.verify_tls),
            follow_redirects=_bool_env("CHAINHTTP_FOLLOW_REDIRECTS", cls.follow_redirects),
            max_redirects=max_redirects,
            user_agent=os.getenv("CHAINHTTP_USER_AGENT") or cls.user_agent,
        )


def load_client_settings() -> ClientSettings:
    """Load client settings from environment with sensible defaults."""
    return ClientSettings.from_env()
