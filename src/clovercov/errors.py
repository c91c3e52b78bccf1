"""Centralised exception hierarchy for clovercov."""

from __future__ import annotations


class CloverCovError(Exception):
    """Base class for all custom clovercov exceptions."""


class ReportError(CloverCovError):
    """Base class for errors related to Clover report handling."""


class ParseError(ReportError):
    """Report text is not well-formed (or not safely parseable) XML."""


class MalformedReportError(ReportError):
    """Report is well-formed XML but lacks required Clover data."""

    def __init__(self, message: str, *, file: str | None = None) -> None:
        self.file = file
        super().__init__(f"{file}: {message}" if file else message)


class ConfigurationError(CloverCovError, ValueError):
    """Invalid metric name, limit expression or change-set entry."""


__all__ = [
    "CloverCovError",
    "ConfigurationError",
    "MalformedReportError",
    "ParseError",
    "ReportError",
]
