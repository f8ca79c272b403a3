"""
Result type for consistent error handling across services.

Services return expected, user-caused failures as a failed Result instead of
raising, so command handlers can turn them into a rejection reply. Failures
may carry a `detail` mapping with structured data for that reply, such as
the remaining cooldown.

Usage:
    return Result.ok(receipt)
    return Result.fail("Wait 3 more minutes", code=RATE_LIMITED, retry_after_minutes=3)

    if not result:
        await send_rejection(result.error)
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    A simple result type for service method return values.

    Attributes:
        success: Whether the operation succeeded
        value: The return value if successful
        error: Error message if failed
        error_code: Error code from services.error_codes
        detail: Structured failure data (e.g. retry_after_minutes)
    """

    success: bool
    value: T | None = None
    error: str | None = None
    error_code: str | None = None
    detail: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        """Create a successful result with an optional value."""
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str, code: str | None = None, **detail: Any) -> "Result[T]":
        """Create a failed result with an error message, optional code and detail."""
        return cls(success=False, error=error, error_code=code, detail=detail)

    def __bool__(self) -> bool:
        return self.success

    def unwrap(self) -> T:
        """
        Get the value, raising ValueError if the result is a failure.

        Raises:
            ValueError: If the result is a failure
        """
        if not self.success:
            raise ValueError(f"Cannot unwrap failed result: {self.error}")
        return self.value  # type: ignore

    def unwrap_or(self, default: T) -> T:
        return self.value if self.success else default  # type: ignore

    def map(self, fn: Callable[[T], "Result"]) -> "Result":
        """Apply fn to the value of a successful result; failures pass through unchanged."""
        if not self.success:
            return self
        return fn(self.value)
