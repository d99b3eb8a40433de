"""
concurrency.py — issue independent requests in parallel and join them.

A joined load is all-or-nothing: the first failure is re-raised and the
other results are dropped, so a page never renders half of its data.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

log = logging.getLogger(__name__)

_MAX_WORKERS = 4


def fetch_all(*calls: Callable[[], Any]) -> list[Any]:
    if not calls:
        return []
    with ThreadPoolExecutor(max_workers=min(_MAX_WORKERS, len(calls))) as pool:
        futures = [pool.submit(call) for call in calls]
        try:
            return [f.result() for f in futures]
        except Exception as e:
            log.warning("Joined load failed: %s", e)
            for f in futures:
                f.cancel()
            raise
