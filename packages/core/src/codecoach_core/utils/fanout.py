"""Concurrent fan-out of independent platform calls.

PyGithub and requests are both blocking, so independent calls (listing comments,
deleting them, posting one inline comment per group) run on a small thread pool
and are joined before the reporter moves to its next step.
"""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Any, Callable, Sequence

logger = logging.getLogger(__name__)

MAX_PARALLELISM = 8


def run_all(calls: Sequence[Callable[[], Any]], max_workers: int = MAX_PARALLELISM) -> list[Any]:
    """Run every call concurrently and return their results in call order.

    Fails fast: the first call to raise has its exception re-raised as soon as
    it completes. Calls that have not started yet are cancelled; calls already
    in flight are left to finish and nothing they did is undone.
    """
    if not calls:
        return []

    executor = ThreadPoolExecutor(max_workers=min(max_workers, len(calls)))
    try:
        futures = [executor.submit(call) for call in calls]
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        for future in futures:
            if future in done and future.exception() is not None:
                for p in pending:
                    p.cancel()
                logger.debug("Fan-out aborted: %d of %d call(s) still pending", len(pending), len(futures))
                raise future.exception()
        return [future.result() for future in futures]
    finally:
        executor.shutdown(wait=False)
