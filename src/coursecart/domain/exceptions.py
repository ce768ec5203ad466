"""Domain-level exceptions.

Business rule violations are subclasses of DomainException. Failures of the
remote system of record are subclasses of ApiError so application components
can catch them at their boundary and turn them into result objects.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class StorageError(DomainException):
    """The durable local store could not be written."""


class ApiError(DomainException):
    """A request to the remote marketplace API failed.

    ``status_code`` is None for transport failures (no response at all).
    ``code`` carries a structured error code when the server sent one.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    @property
    def is_transport_failure(self) -> bool:
        return self.status_code is None


class AuthenticationError(ApiError):
    """401/403: the caller is not (or no longer) authenticated."""


class NotFoundError(ApiError):
    """404: the requested resource does not exist."""
