"""Exceptions raised by the trends client.

Network failures are not wrapped: ``httpx.HTTPError`` reaches the caller as-is.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import ReportType


class TrendsError(Exception):
    """Base exception for trends client errors."""


class UnexpectedResponseError(TrendsError):
    """Raised for a non-200 response the retry policy could not recover from."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Unexpected response {status_code}: {body[:200]}")


class WidgetUnavailableError(TrendsError):
    """Raised when explore succeeded but offered no widget of the requested type.

    Typically means the query has too little search volume for that report.
    """

    def __init__(self, report_type: "ReportType"):
        self.report_type = report_type
        super().__init__(f"Search feature unavailable: no {report_type.widget_id} widget")


class DecodeError(TrendsError):
    """Raised when a response body does not parse into the expected shape."""

    def __init__(self, message: str, body: Optional[str] = None):
        self.body = body
        super().__init__(message)


class PayloadError(TrendsError):
    """Raised when a refinement value cannot be written into a widget payload."""
