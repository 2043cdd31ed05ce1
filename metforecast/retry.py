"""Send a forecast request with retries and exponential backoff (1s, 2s, ...)."""

import asyncio
import logging

import requests

from metforecast.errors import UpstreamError
from metforecast.transport import ForecastRequest

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
FAILED_MESSAGE = "Failed to retrieve forecast after multiple attempts."


class AttemptFailed(Exception):
    """One attempt did not produce a usable forecast body."""

    def __init__(self, reason: str, *, status_code: int | None = None):
        super().__init__(reason)
        self.status_code = status_code

    @property
    def is_client_error(self) -> bool:
        return self.status_code is not None and 400 <= self.status_code < 500


def backoff_delay(attempt: int) -> int:
    """Seconds to wait after the 0-indexed attempt failed."""
    return 2**attempt


def parse_response(response: requests.Response):
    """Return the JSON body, or raise AttemptFailed for non-2xx, non-JSON or an `error` field."""
    if not 200 <= response.status_code < 300:
        raise AttemptFailed(f"HTTP error! status: {response.status_code}", status_code=response.status_code)
    try:
        data = response.json()
    except ValueError as e:
        raise AttemptFailed(f"Response body is not JSON: {e}", status_code=response.status_code) from e
    if isinstance(data, dict) and data.get("error"):
        raise AttemptFailed(f"ERROR: {data['error']}", status_code=response.status_code)
    return data


async def send_with_retry(
    session: requests.Session,
    request: ForecastRequest,
    *,
    attempts: int = MAX_ATTEMPTS,
    timeout: float = 10.0,
    sleep=asyncio.sleep,
    retry_client_errors: bool = True,
):
    """
    Send request up to `attempts` times and return the parsed body.

    Args:
        session: requests session; the blocking call runs in a worker thread.
        request: prepared ForecastRequest, reused for every attempt.
        attempts: total attempts, including the first.
        timeout: per-request timeout in seconds.
        sleep: awaitable delay, called with backoff_delay(attempt) between attempts.
        retry_client_errors: if False, a 4xx response stops retrying immediately.

    Raises:
        UpstreamError: once every attempt failed. The last failure is chained as __cause__.
    """
    last_error: AttemptFailed | None = None
    made = 0
    for attempt in range(attempts):
        made = attempt + 1
        try:
            response = await asyncio.to_thread(
                session.request,
                request.method,
                request.url,
                params=request.params,
                headers=request.headers,
                json=request.json,
                timeout=timeout,
            )
            return parse_response(response)
        except AttemptFailed as e:
            last_error = e
        except requests.RequestException as e:
            last_error = AttemptFailed(f"{type(e).__name__}: {e}")
            last_error.__cause__ = e

        logger.warning(
            "%s %s attempt %d/%d failed: %s", request.method, request.url, made, attempts, last_error
        )
        if last_error.is_client_error and not retry_client_errors:
            break
        if attempt < attempts - 1:
            await sleep(backoff_delay(attempt))

    logger.debug("%s %s gave up after %d attempt(s)", request.method, request.url, made)
    raise UpstreamError(
        FAILED_MESSAGE,
        attempts=made,
        status_code=last_error.status_code if last_error else None,
    ) from last_error
