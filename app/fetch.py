from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

import httpx

from .errors import FetchExhausted

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceEndpoint:
    label: str
    url: str


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed-delay retry budget: ``retries`` extra attempts after the first."""

    retries: int = 3
    delay_seconds: float = 1.0


async def fetch_with_retry(
    client: httpx.AsyncClient,
    endpoint: SourceEndpoint,
    policy: RetryPolicy,
) -> Any:
    """GET an endpoint and return its parsed JSON body.

    Transport errors, non-2xx responses and undecodable bodies are retried
    after ``policy.delay_seconds`` until the budget is spent.

    Raises:
        FetchExhausted: once every attempt has failed. Carries the upstream
            status code when the last failure was an HTTP error response.
    """
    total_attempts = max(policy.retries, 0) + 1
    last_error: Optional[Exception] = None

    for attempt in range(1, total_attempts + 1):
        try:
            response = await client.get(endpoint.url)
            response.raise_for_status()
            data = response.json()
            count = f"{len(data)} items" if isinstance(data, list) else type(data).__name__
            logger.info(
                f"Fetched {endpoint.label} ({count}) from {endpoint.url} on attempt {attempt}"
            )
            return data
        except (httpx.HTTPError, ValueError) as e:
            last_error = e
            logger.warning(
                f"Attempt {attempt}/{total_attempts} failed for {endpoint.label}: {e}"
            )
            if attempt < total_attempts:
                await asyncio.sleep(policy.delay_seconds)

    status_code = None
    if isinstance(last_error, httpx.HTTPStatusError) and last_error.response.is_error:
        status_code = last_error.response.status_code

    raise FetchExhausted(endpoint.label, total_attempts, str(last_error), status_code)


async def fetch_sources(
    client: httpx.AsyncClient,
    endpoints: Sequence[SourceEndpoint],
    policy: RetryPolicy,
) -> List[Any]:
    """Fetch all endpoints concurrently, returning payloads in endpoint order.

    The first failure cancels the fetches still in flight and is re-raised.
    """
    tasks = [
        asyncio.create_task(fetch_with_retry(client, endpoint, policy), name=endpoint.label)
        for endpoint in endpoints
    ]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            logger.info(f"Cancelled in-flight fetches: {[t.get_name() for t in pending]}")
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
