"""Exceptions raised by the report engine."""

from typing import Any


class ReportError(Exception):
    """Base exception for report generation errors."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class UnsupportedReportTypeError(ReportError):
    """Requested report kind is not one the engine builds."""

    pass


class StorageError(ReportError):
    """The storage adapter failed to return transactions or employees."""

    pass


class RenderError(ReportError):
    """The external renderer failed to produce a document."""

    pass
