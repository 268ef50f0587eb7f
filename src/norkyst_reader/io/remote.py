"""
NorKyst Reader Remote Call Policy

Blocking reads against a remote server are bounded by a timeout and retried
with a short delay schedule when the failure looks transient.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Callable, Optional, Sequence, TypeVar

from ..core.exceptions import DataSourceError, DataSourceTimeoutError, NorKystReaderError

logger = logging.getLogger('norkyst_reader.io.remote')

T = TypeVar("T")

# netCDF4/DAP transport failures surface as OSError or RuntimeError
TRANSIENT_ERRORS = (OSError, RuntimeError, TimeoutError)


def retry_delay(retry_delays: Sequence[float], attempt: int) -> float:
    """Delay after failed attempt ``attempt`` (1-based); the last delay repeats."""
    if not retry_delays:
        return 0.0
    return float(retry_delays[min(attempt - 1, len(retry_delays) - 1)])


def _call_with_timeout(func: Callable[[], T], timeout: Optional[float]) -> T:
    if timeout is None:
        return func()

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="norkyst-read")
    future = executor.submit(func)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError:
        future.cancel()
        raise TimeoutError(f"no response within {timeout} s")
    finally:
        # A hung read cannot be interrupted; let the worker finish in the background
        executor.shutdown(wait=False)


def call_with_retries(
    func: Callable[[], T],
    *,
    resource: str,
    operation: str,
    timeout: Optional[float] = None,
    max_retries: int = 1,
    retry_delays: Sequence[float] = (),
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Run a blocking read with a timeout and bounded retries.

    Only transport-level failures (OSError, RuntimeError, timeouts) are
    retried. Package errors and anything else propagate on the first
    occurrence.

    Args:
        func: Zero-argument callable performing the read
        resource: Dataset location, for error messages
        operation: Short description of the read, for error messages
        timeout: Seconds to wait per attempt (None waits indefinitely)
        max_retries: Total number of attempts
        retry_delays: Sleep before each retry; the last value repeats
        sleep: Sleep function (injectable for tests)

    Returns:
        Result of func

    Raises:
        DataSourceTimeoutError: If every attempt timed out
        DataSourceError: If attempts are exhausted on other transient failures
    """
    attempts = max(1, int(max_retries))
    last_error: Optional[BaseException] = None

    for attempt in range(1, attempts + 1):
        try:
            return _call_with_timeout(func, timeout)
        except NorKystReaderError:
            raise
        except TRANSIENT_ERRORS as e:
            last_error = e
            logger.warning(
                "Attempt %d/%d to %s from %s failed: %s", attempt, attempts, operation, resource, e
            )

        if attempt < attempts:
            delay = retry_delay(retry_delays, attempt)
            if delay > 0:
                logger.info("Retrying in %.1f s...", delay)
                sleep(delay)

    if isinstance(last_error, TimeoutError) and timeout is not None:
        raise DataSourceTimeoutError(resource, operation, timeout, attempts) from last_error
    raise DataSourceError(resource, operation, f"{type(last_error).__name__}: {last_error}") from last_error
