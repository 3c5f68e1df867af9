"""Caller contract violations raised by the metrics engine."""

from __future__ import annotations


class MetricsError(ValueError):
    """Base class for malformed metrics input."""


class InvalidWindowError(MetricsError):
    """The requested window starts after it ends."""


class TradeStatusError(MetricsError):
    """A trade that is not closed was handed to the engine."""


class TradeOutsideWindowError(MetricsError):
    """A trade's exit date falls outside the requested window."""
