from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, TypeVar

from relnotes.config import MAX_CONCURRENCY

T = TypeVar("T")
R = TypeVar("R")


def fan_out(
    fn: Callable[[T], R], items: Iterable[T], max_workers: Optional[int] = None
) -> List[R]:
    """
    Call ``fn`` for every item on a bounded thread pool and return results in input order.

    The first exception raised by any call propagates to the caller once the
    pool has drained; remaining results are discarded.
    """
    work = list(items)
    if not work:
        return []
    workers = max(1, min(max_workers or MAX_CONCURRENCY, len(work)))
    if workers == 1:
        return [fn(item) for item in work]
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="relnotes") as ex:
        futures = [ex.submit(fn, item) for item in work]
        return [f.result() for f in futures]


def run_both(
    first: Callable[[], T], second: Callable[[], R], max_workers: Optional[int] = None
) -> tuple[T, R]:
    """Run two independent calls concurrently and return both results."""
    workers = max(1, min(max_workers or MAX_CONCURRENCY, 2))
    if workers == 1:
        return first(), second()
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="relnotes") as ex:
        a = ex.submit(first)
        b = ex.submit(second)
        return a.result(), b.result()
