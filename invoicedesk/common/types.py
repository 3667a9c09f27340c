"""
Shared types for the InvoiceDesk E2E suite.
Rust-inspired Result pattern plus the string aliases used across the harness.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type

# ===============================================================================
# RESULT TYPES
# ===============================================================================


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Success result containing a value"""

    value: T

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the success value"""
        return self.value

    def unwrap_err(self) -> Any:
        raise ValueError(f"Called unwrap_err on Ok: {self.value}")


@dataclass(frozen=True)
class Err(Generic[E]):
    """Error result containing an error value"""

    error: E

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        """Raises an exception - check is_err() first"""
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_err(self) -> E:
        """Get the error value"""
        return self.error


Result = Ok[T] | Err[E]

# ===============================================================================
# DOMAIN ALIASES
# ===============================================================================

ProductLabel = str  # Full option text, e.g. "Ice Cream - Rs 1200.00"
CustomerLabel = str  # Customer option text, e.g. "Shihara Wickramasinghe (LKR)"
DisplayAmount = str  # Rendered amount, e.g. "Rs 1416.00"
StepName = str  # Harness step identifier
