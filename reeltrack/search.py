import asyncio
import functools
import logging
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEBOUNCE_SECONDS = 0.3


class DebouncedSearch(Generic[T]):
    """Search-as-you-type session.

    `submit()` waits `delay` seconds before searching and supersedes any
    earlier query still waiting or in flight. Results are applied only when
    they belong to the latest submitted query.
    """

    def __init__(
        self,
        search: Callable[[str], Awaitable[List[T]]],
        on_results: Optional[Callable[[str, List[T]], None]] = None,
        on_error: Optional[Callable[[str, BaseException], None]] = None,
        delay: float = DEBOUNCE_SECONDS,
    ):
        self._search = search
        self._on_results = on_results
        self._on_error = on_error
        self._delay = delay
        self._generation = 0
        self._task: Optional[asyncio.Task] = None

        self.query = ""
        self.results: List[T] = []
        self.error: Optional[BaseException] = None

    def submit(self, query: str) -> None:
        self._generation += 1
        self.query = query
        self.error = None
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

        if not query or not query.strip():
            self._apply(query, [])
            return
        self._task = asyncio.get_running_loop().create_task(self._run(self._generation, query))
        self._task.add_done_callback(functools.partial(self._log_failure, query))

    @staticmethod
    def _log_failure(query: str, task: asyncio.Task) -> None:
        # retrieves the exception so an un-awaited failure is never reported as lost
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Search for %r failed: %s", query, exc)

    async def _run(self, generation: int, query: str) -> None:
        await asyncio.sleep(self._delay)
        try:
            results = await self._search(query)
        except Exception as exc:
            if generation != self._generation:
                return
            self.error = exc
            if self._on_error is None:
                raise
            self._on_error(query, exc)
            return

        if generation != self._generation:
            logger.debug("Discarding stale results for %r", query)
            return
        self._apply(query, results)

    def _apply(self, query: str, results: List[T]) -> None:
        self.results = list(results)
        if self._on_results is not None:
            self._on_results(query, self.results)

    async def wait(self) -> None:
        """Wait for the latest submitted search; re-raises its error when no `on_error` is set."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    def cancel(self) -> None:
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
