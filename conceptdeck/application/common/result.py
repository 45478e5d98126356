"""
Result type for operations whose failure is an expected outcome.

Not-found outcomes (an address that no longer resolves, a shard that was
deleted by someone else) are returned as ``Failure`` instead of raised, so
aggregator and cursor state never depend on exception control flow.

Example:
    async def delete_concept(shard_id: ShardId, offset: int) -> Result[ShardWriteOutcome, NotFoundError]:
        shard = await store.get_shard(shard_id)
        if shard is None:
            return Failure(ShardNotFoundError(shard_id))
        ...
        return Success(outcome)

    result = await coordinator.delete_concept(shard_id, 0)
    if result.is_success:
        print(result.unwrap().action)
    else:
        print(result.unwrap_error().message)
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True)
class Success(Generic[T]):
    """A successful outcome carrying a value."""

    value: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_error(self) -> None:
        """Raises ValueError - Success has no error."""
        raise ValueError("Cannot get error from Success result")

    def value_or(self, default: T) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> "Success[U]":
        return Success(fn(self.value))


@dataclass(frozen=True)
class Failure(Generic[E]):
    """A failed outcome carrying the error."""

    error: E

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    def unwrap(self) -> None:
        """Raises ValueError - Failure has no value."""
        raise ValueError(f"Cannot get value from Failure result: {self.error!r}")

    def unwrap_error(self) -> E:
        return self.error

    def value_or(self, default: T) -> T:
        return default

    def map(self, fn: Callable[[T], U]) -> "Failure[E]":
        return self


Result = Success[T] | Failure[E]
