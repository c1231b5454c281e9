"""
Batched concurrent fetching with a fixed pause between batches.

Items are split into fixed-size batches. Each batch runs concurrently and
completes when every task in it has finished or failed; batches run one
after another with a fixed delay in between to stay under upstream rate
limits. A failed task resolves to an empty list instead of aborting the run.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Hashable, Sequence, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")

DEFAULT_BATCH_SIZE = 5
DEFAULT_BATCH_DELAY_SECONDS = 0.5


def chunked(items: Sequence[K], size: int) -> list[list[K]]:
    """Split items into consecutive lists of at most ``size`` elements."""
    if size < 1:
        raise ValueError("batch size must be at least 1")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


async def fetch_in_batches(
    keys: Sequence[K],
    fetch: Callable[[K], Awaitable[list[T]]],
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
) -> dict[K, list[T]]:
    """Run ``fetch`` for every key, ``batch_size`` at a time.

    Args:
        keys: Keys to fetch (e.g. player IDs), in the order to process them
        fetch: Coroutine function returning the results for one key
        batch_size: Number of concurrent fetches per batch
        delay_seconds: Pause between consecutive batches (not after the last)

    Returns:
        Mapping of every key to its results; failed keys map to ``[]``
    """
    results: dict[K, list[T]] = {}
    batches = chunked(keys, batch_size)

    for index, batch in enumerate(batches, start=1):
        logger.info(f"Processing batch {index}/{len(batches)} ({len(batch)} items)")
        outcomes = await asyncio.gather(*(fetch(key) for key in batch), return_exceptions=True)

        for key, outcome in zip(batch, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.warning(f"Fetch failed for {key!r}: {outcome}")
                results[key] = []
            else:
                results[key] = list(outcome)
                logger.debug(f"Fetched {len(results[key])} records for {key!r}")

        if index < len(batches) and delay_seconds > 0:
            logger.debug(f"Waiting {delay_seconds}s before next batch")
            await asyncio.sleep(delay_seconds)

    return results
