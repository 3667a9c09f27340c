"""
Bounded retry for flaky remote steps (navigation, server readiness, login).

The policy owns attempt count, backoff and which exceptions are worth another
try; the action being retried knows nothing about it.
"""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])
R = TypeVar("R")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry an action up to ``attempts`` times.

    Only exceptions listed in ``retry_on`` trigger another attempt; anything
    else propagates immediately. After the last attempt the final exception
    is re-raised unchanged.
    """

    attempts: int = 2
    backoff_seconds: float = 1.0
    retry_on: tuple[type[BaseException], ...] = (Exception,)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {self.attempts}")
        if self.backoff_seconds < 0:
            raise ValueError(f"backoff_seconds must be >= 0, got {self.backoff_seconds}")

    def call(self, func: Callable[..., R], *args: Any, **kwargs: Any) -> R:
        name = getattr(func, "__name__", repr(func))
        for attempt in range(1, self.attempts + 1):
            try:
                return func(*args, **kwargs)
            except self.retry_on as e:
                if attempt == self.attempts:
                    logger.warning(f"❌ [Retry] {name} failed after {attempt} attempts: {str(e)[:100]}")
                    raise
                logger.info(
                    f"🔄 [Retry] {name} attempt {attempt}/{self.attempts} failed "
                    f"({type(e).__name__}), retrying in {self.backoff_seconds}s"
                )
                self.sleep(self.backoff_seconds)
        raise AssertionError("unreachable")  # pragma: no cover

    def wrap(self, func: F) -> F:
        """Decorator form of :meth:`call`."""

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return self.call(func, *args, **kwargs)

        return wrapper  # type: ignore[return-value]


NO_RETRY = RetryPolicy(attempts=1, backoff_seconds=0)
