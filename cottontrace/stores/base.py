"""In-memory store lifecycle shared by every record collection.

A store moves ``empty -> loading -> populated`` (or ``error``). A populated
store skips refetching unless forced; an error stays until someone calls
``load`` again. Each fetch carries a generation number and only the newest
generation may commit, so a slow superseded fetch can never overwrite a
newer result. ``cancel`` abandons the in-flight fetch and restores the last
committed state.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from cottontrace.exceptions import StoreLoadError
from cottontrace.utils.performance import timed_fetch

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoadStatus(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    POPULATED = "populated"
    ERROR = "error"


@dataclass(frozen=True)
class LoadState:
    status: LoadStatus
    message: str | None = None

    @property
    def is_populated(self) -> bool:
        return self.status is LoadStatus.POPULATED

    @property
    def is_error(self) -> bool:
        return self.status is LoadStatus.ERROR

    @property
    def is_loading(self) -> bool:
        return self.status is LoadStatus.LOADING


EMPTY = LoadState(LoadStatus.EMPTY)
LOADING = LoadState(LoadStatus.LOADING)
POPULATED = LoadState(LoadStatus.POPULATED)


class Store(Generic[T]):
    """Owner of one record collection.

    Subclasses implement ``fetch``; views read ``items`` (a copy) and never
    mutate records in place.
    """

    name = "records"
    error_message = "Failed to fetch records"

    def __init__(self, latency_ms: int = 0):
        self.latency_ms = latency_ms
        self._items: list[T] = []
        self._state: LoadState = EMPTY
        self._committed: LoadState = EMPTY
        self._generation = 0
        self._task: asyncio.Task | None = None
        # Resolved when the newest fetch commits, fails or is cancelled
        self._settled: asyncio.Future | None = None

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def items(self) -> list[T]:
        return list(self._items)

    @property
    def generation(self) -> int:
        return self._generation

    async def fetch(self) -> list[T]:
        raise NotImplementedError

    async def load(self, force: bool = False) -> LoadState:
        """Populate the store.

        A populated store returns immediately unless ``force``. Non-forced
        callers arriving during a fetch wait for that fetch; a forced call
        starts a new fetch that supersedes it.
        """
        if self._state.is_populated and not force:
            return self._state
        if force or self._task is None or self._task.done():
            self._start()
        return await self._wait()

    async def ensure_loaded(self) -> list[T]:
        """Load if needed and return the items.

        Raises:
            StoreLoadError: If the store is (or ends up) in its error state
        """
        state = await self.load()
        if state.is_error:
            raise StoreLoadError(self.name, state.message or self.error_message)
        if not state.is_populated:
            raise StoreLoadError(self.name, f"{self.name} load did not complete")
        return self.items

    def cancel(self) -> bool:
        """Abandon the in-flight fetch; returns False if nothing was running."""
        if self._task is None or self._task.done():
            return False
        self._generation += 1
        self._task.cancel()
        self._task = None
        self._settle(self._committed)
        logger.info(f"Cancelled {self.name} fetch; state restored to {self._state.status.value}")
        return True

    def _start(self) -> asyncio.Task:
        self._generation += 1
        if not self._state.is_loading:
            self._committed = self._state
        self._state = LOADING
        if self._settled is None or self._settled.done():
            self._settled = asyncio.get_running_loop().create_future()
        self._task = asyncio.create_task(self._run(self._generation))
        return self._task

    async def _wait(self) -> LoadState:
        # Superseding fetches share the pending future, so waiters see the newest result
        if self._settled is None:
            return self._state
        return await asyncio.shield(self._settled)

    def _settle(self, state: LoadState) -> None:
        self._state = state
        if self._settled is not None and not self._settled.done():
            self._settled.set_result(state)

    @timed_fetch(threshold_ms=1000)
    async def _run(self, generation: int) -> None:
        try:
            if self.latency_ms:
                await asyncio.sleep(self.latency_ms / 1000)
            items = await self.fetch()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if generation != self._generation:
                logger.debug(f"Ignoring failure from superseded {self.name} fetch: {e}")
                return
            logger.error(f"{self.error_message}: {e}")
            self._committed = LoadState(LoadStatus.ERROR, self.error_message)
            self._settle(self._committed)
            return

        if generation != self._generation:
            logger.debug(f"Discarding superseded {self.name} fetch (generation {generation})")
            return
        self._items = list(items)
        self._committed = POPULATED
        self._settle(POPULATED)
        logger.info(f"Loaded {len(self._items)} {self.name}")


class CallableStore(Store[T]):
    """Store backed by an async callable, for ad hoc collections and tests."""

    def __init__(
        self,
        fetcher: Callable[[], Awaitable[list[T]]],
        name: str = "records",
        latency_ms: int = 0,
    ):
        super().__init__(latency_ms=latency_ms)
        self._fetcher = fetcher
        self.name = name
        self.error_message = f"Failed to fetch {name}"

    async def fetch(self) -> list[T]:
        return await self._fetcher()
