"""Dispatch error taxonomy.

Every message is suitable for direct display to the user.
"""

from __future__ import annotations


class DispatchError(Exception):
    """Base class for all dispatch failures."""


class AdmissionError(DispatchError):
    """The slot allocator call itself failed. Not retried."""


class MissingCredentialError(DispatchError):
    """No usable credential could be resolved; no request was sent."""


class RemoteCallError(DispatchError):
    """The HTTP exchange failed or returned a non-success status."""

    def __init__(self, message: str, status_code: int | None = None, payload: object = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class ExhaustedCredentialsError(RemoteCallError):
    """Every candidate credential failed; carries the last attempt's error."""

    def __init__(self, last_error: RemoteCallError):
        super().__init__(last_error.message, status_code=last_error.status_code, payload=last_error.payload)
        self.last_error = last_error


class SlotAllocatorError(Exception):
    """Raised by slot allocator clients on transport or database faults."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
