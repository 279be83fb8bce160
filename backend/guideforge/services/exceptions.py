"""Base service exceptions.

These exceptions are raised by the service layer and should be caught
by the API layer and converted to appropriate HTTP responses.
"""


class ServiceError(Exception):
    """Base service exception."""

    pass


class NotFoundError(ServiceError):
    """Resource not found."""

    pass


class UnauthorizedError(ServiceError):
    """Principal is not allowed to access or mutate the resource."""

    pass


class ConflictError(ServiceError):
    """Resource state conflicts with the request (e.g. unique constraint)."""

    pass


class InvalidArgumentError(ServiceError):
    """Request data is malformed or out of range."""

    pass


class StorageError(ServiceError):
    """Underlying database or blob-store failure.

    Carries the entity and operation that failed; the original exception
    is chained as __cause__.
    """

    def __init__(self, entity: str, operation: str, detail: str | None = None):
        self.entity = entity
        self.operation = operation
        message = f"Storage failure during {operation} of {entity}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
