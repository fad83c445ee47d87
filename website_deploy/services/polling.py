from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PollState(str, Enum):
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class PollConfig:
    """Fixed-interval polling budget (no backoff, no jitter)."""

    max_attempts: int
    interval: float

    def __post_init__(self) -> None:
        if self.max_attempts <= 0:
            raise ValueError("max_attempts must be a positive integer")
        if self.interval < 0:
            raise ValueError("interval must not be negative")


@dataclass(frozen=True)
class PollResult(Generic[T]):
    """Outcome of a single status check, or of a whole poll.

    A status check returns PENDING, READY or FAILED. The poller returns READY,
    FAILED or TIMED_OUT with `attempts` set to the number of checks performed.
    """

    state: PollState
    value: Optional[T] = None
    reason: Optional[str] = None
    attempts: int = 0

    @staticmethod
    def pending() -> "PollResult[T]":
        return PollResult(state=PollState.PENDING)

    @staticmethod
    def ready(value: T) -> "PollResult[T]":
        return PollResult(state=PollState.READY, value=value)

    @staticmethod
    def failed(reason: str) -> "PollResult[T]":
        return PollResult(state=PollState.FAILED, reason=reason)

    @staticmethod
    def timed_out(attempts: int) -> "PollResult[T]":
        return PollResult(state=PollState.TIMED_OUT, attempts=attempts)

    @property
    def is_terminal(self) -> bool:
        return self.state is not PollState.PENDING


StatusCheck = Callable[[], Awaitable[PollResult[T]]]
Sleep = Callable[[float], Awaitable[None]]


async def poll_until_ready(
    check: StatusCheck[T],
    config: PollConfig,
    *,
    sleep: Sleep = asyncio.sleep,
    description: str = "resource",
) -> PollResult[T]:
    """Call `check` until it reports READY or FAILED, or the budget runs out.

    Errors raised by `check` propagate to the caller; they are not retried.
    No delay follows the final check.
    """

    for attempt in range(1, config.max_attempts + 1):
        result = await check()

        if result.state is PollState.READY or result.state is PollState.FAILED:
            logger.info("%s: %s after %d attempt(s)", description, result.state.value, attempt)
            return replace(result, attempts=attempt)

        if attempt == config.max_attempts:
            break

        logger.info(
            "%s: not ready (attempt %d/%d), waiting %.0fs",
            description,
            attempt,
            config.max_attempts,
            config.interval,
        )
        await sleep(config.interval)

    logger.warning("%s: timed out after %d attempt(s)", description, config.max_attempts)
    return PollResult.timed_out(config.max_attempts)
