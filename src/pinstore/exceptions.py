from __future__ import annotations

from typing import Any


class PinStoreError(Exception):
    """Base error for the service. Carries the HTTP status it maps to."""

    status_code: int = 500

    def __init__(self, message: str, *, status_code: int | None = None, details: Any = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ConfigurationError(PinStoreError):
    """A required setting (credential, connection string) is missing."""

    status_code = 500


class InvalidRequestError(PinStoreError):
    status_code = 400


class NotFoundError(PinStoreError):
    status_code = 404


class UpstreamError(PinStoreError):
    """The WebHash API failed or answered with a non-success status."""

    status_code = 500


class DatabaseUnavailableError(PinStoreError):
    status_code = 503


class PersistenceError(PinStoreError):
    status_code = 500


class SerializationError(PinStoreError):
    status_code = 500
