"""
Errors raised by notebooks, shards, concepts and their value objects.

Every error carries a message plus a ``details`` dict for structured logs.
Use cases turn the recoverable ones (a stale offset, a frozen notebook)
into typed results or application errors.
"""


class DomainError(Exception):
    """Root of the domain error tree."""

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ValidationError(DomainError):
    """A field value is unacceptable, e.g. a blank term or a negative repetition count."""

    def __init__(self, message: str, field: str | None = None, value: object = None) -> None:
        details: dict[str, object] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(message, details)
        self.field = field
        self.value = value


class EntityNotFoundError(DomainError):
    """A local offset points past the end of a shard's concept array."""

    def __init__(self, entity_type: str, entity_id: object) -> None:
        super().__init__(
            f"{entity_type} {entity_id} does not exist",
            {"entity_type": entity_type, "entity_id": entity_id},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class InvariantViolationError(DomainError):
    """A shard would end up holding no concepts."""

    def __init__(self, aggregate: str, invariant: str) -> None:
        super().__init__(
            f"{aggregate}: {invariant}", {"aggregate": aggregate, "invariant": invariant}
        )
        self.aggregate = aggregate
        self.invariant = invariant


class BusinessRuleViolationError(DomainError):
    """A mutation was attempted on a frozen notebook."""

    def __init__(self, rule: str, details: dict[str, object] | None = None) -> None:
        super().__init__(rule, details)
        self.rule = rule
