"""
Error types raised by the picker backend.

Each error carries the HTTP status it is reported with; the application turns
any ``PickerError`` into a ``{"error": ..., "details": ...}`` JSON body.
"""

from __future__ import annotations

from typing import Optional


class PickerError(Exception):
    """Base class for errors reported to API callers."""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def as_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class Unauthorized(PickerError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized", details: Optional[str] = None):
        super().__init__(message, details)


class MalformedRequest(PickerError):
    status_code = 400

    def __init__(self, message: str = "Invalid request", details: Optional[str] = None):
        super().__init__(message, details)


class InvalidInput(PickerError):
    status_code = 400


class Conflict(PickerError):
    """A record with the same id already exists."""

    status_code = 400


class NotFound(PickerError):
    status_code = 404


class StoreError(PickerError):
    """Failures talking to, or reading from, the document store."""

    status_code = 500


class StoreUnavailable(StoreError):
    pass


class CorruptDocument(StoreError):
    pass


class VersionConflict(StoreError):
    """
    The stored document changed after it was read.

    The caller has to start over from a fresh read; nothing is retried here.
    Reported as a 500 like the other store failures.
    """

    def __init__(
        self,
        message: str = "Document was modified concurrently, retry the request",
        details: Optional[str] = None,
    ):
        super().__init__(message, details)
