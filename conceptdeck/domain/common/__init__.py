"""
Domain common module.

Contains base classes for domain modeling:
- Entity / EntityId: Objects with identity and their typed identifiers
- DomainError hierarchy: Raised when domain rules are broken
"""

from .entity import Entity, EntityId
from .exceptions import (
    BusinessRuleViolationError,
    DomainError,
    EntityNotFoundError,
    InvariantViolationError,
    ValidationError,
)

__all__ = [
    "BusinessRuleViolationError",
    "DomainError",
    "Entity",
    "EntityId",
    "EntityNotFoundError",
    "InvariantViolationError",
    "ValidationError",
]
