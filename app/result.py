"""
Result type for the public balancing and team operations.

Public operations return a Result instead of raising, so the HTTP layer
can render failures without catching exceptions:

    result = service.auto_assign(owner_id)
    if result.success:
        member = result.value
    else:
        print(f"Error ({result.error_code}): {result.error}")
"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

# Error kinds
UNAUTHENTICATED = "unauthenticated"
NOT_FOUND = "not_found"
VALIDATION_ERROR = "validation_error"
NO_MEMBERS_AVAILABLE = "no_members_available"
NO_CAPACITY_AVAILABLE = "no_capacity_available"
STORE_ERROR = "store_error"


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Tagged success/failure value.

    Attributes:
        success: Whether the operation succeeded
        value: The return value. Failures may carry partial progress here.
        error: Human-readable message if failed
        error_code: One of the error kinds above if failed
    """

    success: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "Result[T]":
        """Create a successful result with an optional value."""
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str, code: str = STORE_ERROR, value: Optional[T] = None) -> "Result[T]":
        """Create a failed result with an error message and error kind."""
        return cls(success=False, value=value, error=error, error_code=code)

    def __bool__(self) -> bool:
        return self.success

    def unwrap(self) -> T:
        """
        Get the value, raising ValueError if the result is a failure.
        """
        if not self.success:
            raise ValueError(f"Cannot unwrap failed result: {self.error}")
        return self.value  # type: ignore
