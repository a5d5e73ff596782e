import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from ..exceptions import OperationTimeoutError

T = TypeVar("T")
logger = logging.getLogger(__name__)


async def run_with_timeout(
    operation: Callable[[], Awaitable[T]],
    timeout_seconds: Optional[float],
    operation_name: str = "operation",
) -> T:
    """Run an awaitable operation, raising OperationTimeoutError when it runs too long.

    A missing or non-positive timeout disables the limit.
    """
    if not timeout_seconds or timeout_seconds <= 0:
        return await operation()
    try:
        return await asyncio.wait_for(operation(), timeout=timeout_seconds)
    except asyncio.TimeoutError as exc:
        logger.warning(f"{operation_name} exceeded {timeout_seconds}s")
        raise OperationTimeoutError(operation_name, timeout_seconds) from exc
