"""
Bounded waits around blocking provider calls.

Each remote call runs in a worker thread and is awaited with a ceiling. When
the ceiling is hit we stop waiting (the HTTP call itself keeps running in its
thread until the SDK gives up) and either hand back the policy's fallback
value or raise ProviderTimeout.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from models.errors import ProviderTimeout
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_NO_FALLBACK = object()


@dataclass(frozen=True)
class TimeoutPolicy(Generic[T]):
    timeout_s: float
    phase: str = "search"
    fallback: Any = _NO_FALLBACK

    @property
    def has_fallback(self) -> bool:
        return self.fallback is not _NO_FALLBACK

    def with_fallback(self, value: T) -> "TimeoutPolicy[T]":
        return TimeoutPolicy(timeout_s=self.timeout_s, phase=self.phase, fallback=value)


@dataclass(frozen=True)
class BoundedResult(Generic[T]):
    value: T
    timed_out: bool
    elapsed_ms: int


async def bounded_call(fn: Callable[[], T], policy: TimeoutPolicy) -> BoundedResult[T]:
    """
    Run blocking `fn` in a thread and wait at most `policy.timeout_s`.

    Exceptions raised by `fn` propagate unchanged; only the timeout is mapped
    to the fallback value (or ProviderTimeout when the policy has none).
    """
    start = time.perf_counter()
    try:
        value = await asyncio.wait_for(asyncio.to_thread(fn), timeout=policy.timeout_s)
    except asyncio.TimeoutError:
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.warning(
            f"Provider call exceeded {policy.timeout_s}s during {policy.phase}",
            extra={
                "extra_fields": {
                    "phase": policy.phase,
                    "timeout_s": policy.timeout_s,
                    "elapsed_ms": elapsed_ms,
                    "fallback_used": policy.has_fallback,
                }
            },
        )
        if policy.has_fallback:
            return BoundedResult(value=policy.fallback, timed_out=True, elapsed_ms=elapsed_ms)
        raise ProviderTimeout(timeout_s=policy.timeout_s, phase=policy.phase)

    elapsed_ms = int((time.perf_counter() - start) * 1000)
    return BoundedResult(value=value, timed_out=False, elapsed_ms=elapsed_ms)
