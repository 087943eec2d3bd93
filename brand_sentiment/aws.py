"""
Retry wrapper for blocking boto3 calls made from asyncio code.

Calls run in the loop's default executor. Throttling responses and
connection-level botocore errors are retried with exponential backoff; any
other client error is raised on the first attempt.
"""

import asyncio
import logging
from typing import Any, Callable

from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

THROTTLING_ERROR_CODES = frozenset({
    'Throttling', 'ThrottlingException', 'ThrottledException', 'RequestLimitExceeded',
})


def error_code(error: ClientError) -> str:
    """AWS error code carried by a ClientError."""
    return error.response.get('Error', {}).get('Code', 'Unknown')


async def call_with_retries(description: str, call: Callable[[], Any],
                            max_retries: int = 3, base_delay: float = 1.0) -> Any:
    """
    Run ``call`` in an executor, retrying transient AWS failures.

    Args:
        description: What the call does, used in log messages
        call: Zero-argument callable issuing the boto3 request
        max_retries: Total attempts before giving up
        base_delay: Delay before the first retry; doubles on every retry

    Returns:
        The boto3 response

    Raises:
        ClientError: For a non-throttling error, or throttling on the last attempt
        BotoCoreError: When the last attempt fails at the connection level
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    loop = asyncio.get_running_loop()

    for attempt in range(1, max_retries + 1):
        try:
            return await loop.run_in_executor(None, call)
        except ClientError as e:
            code = error_code(e)
            if code not in THROTTLING_ERROR_CODES or attempt == max_retries:
                raise
            reason = f"throttled ({code})"
        except BotoCoreError as e:
            if attempt == max_retries:
                raise
            reason = f"failed ({e})"

        delay = base_delay * (2 ** (attempt - 1))
        logger.warning(f"{description} {reason}, attempt {attempt}/{max_retries}; retrying in {delay}s")
        await asyncio.sleep(delay)
