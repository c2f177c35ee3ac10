"""Error taxonomy shared by services and the HTTP boundary.

Services raise these exceptions; the handlers registered in ``app.main`` turn them
into the ``{"status": "error", ...}`` envelope using ``status_code``.
"""

from typing import Any


class AppError(Exception):
    """Base class for errors that map to a fixed HTTP status."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class RequestValidationFailed(AppError):
    """Malformed or missing input, optionally with field-level detail."""

    status_code = 400

    def __init__(
        self,
        message: str = "Validation error",
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, resource: str, resource_id: Any = None):
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.resource_id = resource_id


class DuplicateKeyError(AppError):
    status_code = 409

    def __init__(self, field: str, value: Any):
        super().__init__(f"Duplicate value: {field} with value {value} already exists")
        self.field = field
        self.value = value


class InvalidStateError(AppError):
    """Illegal lifecycle transition, e.g. cancelling a finished execution."""

    status_code = 400


class StorageUnavailableError(AppError):
    """The entity store could not be reached. Callers may retry with backoff."""

    status_code = 503

    def __init__(self, message: str = "Storage unavailable"):
        super().__init__(message)
