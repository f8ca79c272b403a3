"""
Concurrent fan-out of blocking document reads and writes.

Repositories are synchronous; each call runs on a worker thread via
asyncio.to_thread and independent calls are awaited together.

Writes are a saga, not a transaction: every write in a batch is attempted,
each failure is logged on its own, and nothing is rolled back.
"""

import asyncio
import logging
from typing import Any, Callable

logger = logging.getLogger("bucks_bot.services.fanout")


class PartialWriteError(Exception):
    """One or more writes in a batch failed after every write had settled."""

    def __init__(self, operation: str, failures: dict[str, Exception]):
        labels = ", ".join(failures)
        super().__init__(f"{operation}: {len(failures)} write(s) failed ({labels})")
        self.operation = operation
        self.failures = failures


async def gather_reads(*calls: Callable[[], Any]) -> list[Any]:
    """Run zero-argument read callables concurrently; the first failure propagates."""
    return list(await asyncio.gather(*(asyncio.to_thread(call) for call in calls)))


class WriteBatch:
    """
    Ordered list of labelled, independent writes committed concurrently.

    Usage:
        batch = WriteBatch("transfer")
        batch.add("target", accounts.upsert, target)
        batch.add("leaderboard", leaderboards.upsert, board)
        await batch.commit()
    """

    def __init__(self, operation: str):
        self.operation = operation
        self._writes: list[tuple[str, Callable[..., Any], tuple]] = []

    def add(self, label: str, fn: Callable[..., Any], *args: Any) -> "WriteBatch":
        self._writes.append((label, fn, args))
        return self

    @property
    def labels(self) -> list[str]:
        return [label for label, _, _ in self._writes]

    def __len__(self) -> int:
        return len(self._writes)

    async def commit(self, raise_on_failure: bool = True) -> dict[str, Exception]:
        """
        Issue every write and wait for all of them.

        Returns the failures keyed by label. Raises PartialWriteError when any
        write failed unless raise_on_failure is False.
        """
        outcomes = await asyncio.gather(
            *(asyncio.to_thread(fn, *args) for _, fn, args in self._writes),
            return_exceptions=True,
        )
        failures: dict[str, Exception] = {}
        for (label, _, _), outcome in zip(self._writes, outcomes):
            if isinstance(outcome, Exception):
                logger.error(
                    f"{self.operation}: write '{label}' failed: {outcome}", exc_info=outcome
                )
                failures[label] = outcome
            elif isinstance(outcome, BaseException):
                raise outcome
        if failures and raise_on_failure:
            raise PartialWriteError(self.operation, failures)
        return failures
