# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for chainhttp."""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = os.getenv("CHAINHTTP_LOG_LEVEL", "WARNING").upper()

logger = logging.getLogger("chainhttp")


def setup_logging(level: str | None = None) -> None:
    """Configure standard logging for scripts embedding the library."""
    effective_level = (level or DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, effective_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def default_error_sink(message: str) -> None:
    """Error sink used when a request has no error callback of its own."""
    logger.error(message)


__all__ = ["default_error_sink", "setup_logging"]
