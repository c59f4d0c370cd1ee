"""Exception hierarchy for the data-access core.

All errors inherit from FarmsteadError. Only AllocationError and
EntityUpdateError are expected to reach a calling screen; the others
are caught inside the core and degraded to a documented fallback.
"""


class FarmsteadError(Exception):
    """Base exception for all Farmstead errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class KeyValueStoreError(FarmsteadError):
    """Raised when a key-value store operation fails (quota, I/O, network)."""

    def __init__(self, message: str, operation: str, key: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.key = key


class RemoteServiceError(FarmsteadError):
    """Raised when the remote service answers with an error."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: object = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class AllocationError(FarmsteadError):
    """Raised when an entity code cannot be allocated for a category."""

    def __init__(self, message: str, category_code: str) -> None:
        super().__init__(message)
        self.category_code = category_code


class EntityUpdateError(FarmsteadError):
    """Raised when the business mutation itself fails."""

    def __init__(self, message: str, table: str, entity_id: object = None) -> None:
        super().__init__(message)
        self.table = table
        self.entity_id = entity_id
