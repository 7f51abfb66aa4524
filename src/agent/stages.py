"""Tagged stage results and bounded capability calls.

Every stage of the query pipeline reports one of three outcomes:

- ``Ok(value)``: the stage did its job.
- ``Degraded(value, reason)``: the stage fell back to a usable value
  (no retrieved context, no synthesized audio).
- ``Fatal(error)``: the request cannot be answered; remaining stages are
  skipped.

The orchestrator routes purely on these types, so no routing decision
depends on which backend produced the result.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from src.errors import PipelineError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Degraded(Generic[T]):
    value: T
    reason: str


@dataclass(frozen=True)
class Fatal:
    error: PipelineError


StageResult = Ok | Degraded | Fatal


def call_with_timeout(fn: Callable[..., Any], *args, timeout: float | None = None, **kwargs) -> Any:
    """Run fn(*args, **kwargs), raising TimeoutError after timeout seconds.

    The call runs on a worker thread. On timeout the thread is abandoned
    rather than joined; its eventual result is discarded. timeout=None calls
    fn inline.
    """
    if timeout is None:
        return fn(*args, **kwargs)

    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(fn, *args, **kwargs)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError as e:
        future.cancel()
        name = getattr(fn, "__qualname__", repr(fn))
        logger.warning("%s did not finish within %.1fs", name, timeout)
        raise TimeoutError(f"{name} timed out after {timeout}s") from e
    finally:
        executor.shutdown(wait=False)
