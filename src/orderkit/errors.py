"""Structured errors raised by orderkit itself.

Failures inside caller supplied key / compare / predicate functions are
never wrapped; they propagate to whoever called ``compare`` or ``sort``.
"""

from __future__ import annotations
from typing import Any


class OrderingError(Exception):
    """Base class for ordering related issues."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class UnknownDirectionError(OrderingError, ValueError):
    """Raised when a step is configured with a direction other than asc/desc."""
