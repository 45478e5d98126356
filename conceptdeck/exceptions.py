"""Custom exception hierarchy for conceptdeck."""


class ConceptDeckError(Exception):
    """Base exception for all conceptdeck errors."""

    def __init__(self, message: str) -> None:
        """Initialize exception with message."""
        self.message = message
        super().__init__(self.message)


class NotFoundError(ConceptDeckError):
    """Resource not found error."""


class NotebookNotFoundError(NotFoundError):
    """Notebook not found error."""

    def __init__(self, notebook_id: object) -> None:
        """Initialize with notebook ID."""
        self.notebook_id = notebook_id
        super().__init__(f"Notebook with id {notebook_id} not found")


class ShardNotFoundError(NotFoundError):
    """Concept shard not found error."""

    def __init__(self, shard_id: object) -> None:
        """Initialize with shard ID."""
        self.shard_id = shard_id
        super().__init__(f"Concept shard with id {shard_id} not found")


class ConceptNotFoundError(NotFoundError):
    """Concept address or id does not resolve."""

    def __init__(
        self,
        shard_id: object | None = None,
        local_offset: int | None = None,
        *,
        concept_id: object | None = None,
    ) -> None:
        """Initialize with the (shard, offset) address or the concept id that failed."""
        self.shard_id = shard_id
        self.local_offset = local_offset
        self.concept_id = concept_id
        if concept_id is not None:
            super().__init__(f"Concept with id {concept_id} not found")
        else:
            super().__init__(f"Concept at {shard_id}/{local_offset} not found")


class ValidationError(ConceptDeckError):
    """Validation error."""


class AddressParseError(ValidationError):
    """Invalid concept address."""

    def __init__(self, address: str, reason: str) -> None:
        """Initialize with the invalid address and reason for failure."""
        self.address = address
        self.reason = reason
        super().__init__(f"Invalid concept address '{address}': {reason}")


class NotebookFrozenError(ConceptDeckError):
    """Mutation attempted on a frozen notebook."""

    def __init__(self, notebook_id: object) -> None:
        """Initialize with notebook ID."""
        self.notebook_id = notebook_id
        super().__init__(f"Notebook {notebook_id} is frozen and cannot be modified")


class ServiceError(ConceptDeckError):
    """Service layer error."""


class StoreTimeoutError(ServiceError):
    """A store round trip exceeded the configured timeout."""

    def __init__(self, operation: str, timeout: float) -> None:
        """Initialize with the operation name and the timeout that expired."""
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"Store operation '{operation}' timed out after {timeout}s")
