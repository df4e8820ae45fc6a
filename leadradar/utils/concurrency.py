"""Bounded fan-out that settles every task independently."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outcome(Generic[T, R]):
    """Result of one task: either ``value`` or ``error`` is set."""

    item: T
    value: R | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def settle_all(
    func: Callable[[T], R],
    items: Iterable[T],
    max_workers: int = 5,
) -> list[Outcome[T, R]]:
    """Run ``func`` over ``items`` in a bounded pool; one failure never cancels the rest.

    Outcomes are returned in input order.
    """
    work = list(items)
    if not work:
        return []

    results: list[Outcome[T, R] | None] = [None] * len(work)
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(work)))) as executor:
        futures = {executor.submit(func, item): index for index, item in enumerate(work)}
        for future in as_completed(futures):
            index = futures[future]
            try:
                results[index] = Outcome(item=work[index], value=future.result())
            except Exception as exc:
                logger.warning(
                    "concurrency.task.failed",
                    extra={"event": "concurrency.task.failed", "error": str(exc)},
                )
                results[index] = Outcome(item=work[index], error=exc)
    return [outcome for outcome in results if outcome is not None]
