"""
Async execution contract for searches and leaderboard loads
Only the most recent call may commit its result; older calls are cancelled and discarded
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from ..leaderboard.service import LeaderboardService
from ..models.leaderboard import LeaderboardSelector
from ..models.search import SearchFilters, SortMode
from ..search.config import SearchConfig
from ..search.engine import SearchEngine
from .history import SearchHistoryStore

logger = logging.getLogger(__name__)


class ExecutionState(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


class ExecutionSnapshot(BaseModel):
    """Observable state of an executor at one point in time"""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    state: ExecutionState = ExecutionState.IDLE
    generation: int = 0
    args: Dict[str, Any] = {}
    results: Optional[Any] = None
    error: Optional[str] = None


class SingleFlightExecutor:
    """
    Runs one bounded async operation at a time

    Every execute() bumps the generation counter and cancels the call in flight.
    A result is committed only while its generation is still current, so a slow
    earlier call can never overwrite a later one.
    """

    def __init__(self, timeout: float = SearchConfig.EXECUTION_TIMEOUT):
        self.timeout = timeout
        self.generation = 0
        self.last_args: Optional[Dict[str, Any]] = None
        self.snapshot = ExecutionSnapshot()
        self._settled = self.snapshot
        self._task: Optional[asyncio.Future] = None

    async def operation(self, **args) -> Any:
        raise NotImplementedError

    def classify(self, result: Any) -> ExecutionState:
        return ExecutionState.READY

    def default_args(self, args: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    def on_commit(self, snapshot: ExecutionSnapshot) -> None:
        pass

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def _cancel_task(self) -> None:
        if self.in_flight:
            self._task.cancel()
        self._task = None

    async def execute(self, **args) -> ExecutionSnapshot:
        self.generation += 1
        generation = self.generation
        self._cancel_task()

        self.last_args = dict(args)
        self.snapshot = ExecutionSnapshot(
            state=ExecutionState.SEARCHING,
            generation=generation,
            args=self.last_args,
            results=self._settled.results,
        )

        task = asyncio.ensure_future(asyncio.wait_for(self.operation(**args), timeout=self.timeout))
        self._task = task

        try:
            result = await task
        except asyncio.CancelledError:
            if generation != self.generation:
                # Superseded or cancelled; the newer state stands
                return self.snapshot
            # The caller went away; drop the call and fall back to the last settled state
            self._cancel_task()
            self.snapshot = self._settled
            logger.debug(f"{type(self).__name__} generation {generation} abandoned by caller")
            raise
        except Exception as e:
            if generation != self.generation:
                return self.snapshot
            if isinstance(e, asyncio.TimeoutError):
                message = f"Timed out after {self.timeout}s"
            else:
                message = str(e) or type(e).__name__
            logger.error(f"{type(self).__name__} generation {generation} failed: {message}")
            return self._commit(ExecutionSnapshot(
                state=ExecutionState.ERROR,
                generation=generation,
                args=self.last_args,
                error=message,
            ))

        if generation != self.generation:
            return self.snapshot

        return self._commit(ExecutionSnapshot(
            state=self.classify(result),
            generation=generation,
            args=self.last_args,
            results=result,
        ))

    def _commit(self, snapshot: ExecutionSnapshot) -> ExecutionSnapshot:
        self._task = None
        self.snapshot = snapshot
        self._settled = snapshot
        self.on_commit(snapshot)
        return snapshot

    def cancel(self) -> ExecutionSnapshot:
        """Discard the call in flight and fall back to the last settled state"""
        if self.in_flight:
            self.generation += 1
            self._cancel_task()
            logger.debug(f"{type(self).__name__} cancelled in-flight call")
        self.snapshot = self._settled
        return self.snapshot

    async def retry(self) -> ExecutionSnapshot:
        """Re-run the last call with identical arguments"""
        if self.last_args is None:
            return self.snapshot
        return await self.execute(**self.last_args)

    async def reset(self) -> ExecutionSnapshot:
        """Re-run with default arguments"""
        return await self.execute(**self.default_args(self.last_args or {}))


class SearchExecutor(SingleFlightExecutor):
    """Execution contract around the search engine"""

    def __init__(
        self,
        engine: SearchEngine,
        history_store: Optional[SearchHistoryStore] = None,
        latency: float = SearchConfig.SIMULATED_LATENCY,
        timeout: float = SearchConfig.EXECUTION_TIMEOUT,
    ):
        super().__init__(timeout=timeout)
        self.engine = engine
        self.history_store = history_store
        self.latency = latency

    async def search(
        self,
        query: str,
        filters: Optional[SearchFilters] = None,
        sort: SortMode = SortMode.RELEVANCE,
    ) -> ExecutionSnapshot:
        return await self.execute(query=query, filters=filters or SearchFilters(), sort=sort)

    async def operation(self, query: str = "", filters: Optional[SearchFilters] = None, sort: SortMode = SortMode.RELEVANCE):
        if self.latency > 0:
            await asyncio.sleep(self.latency)
        return await asyncio.to_thread(self.engine.run_search, query, filters, sort)

    def classify(self, result) -> ExecutionState:
        return ExecutionState.READY if result.total > 0 else ExecutionState.EMPTY

    def default_args(self, args: Dict[str, Any]) -> Dict[str, Any]:
        return {"query": args.get("query", ""), "filters": SearchFilters(), "sort": SortMode.RELEVANCE}

    def on_commit(self, snapshot: ExecutionSnapshot) -> None:
        if self.history_store is None or snapshot.state == ExecutionState.ERROR:
            return
        query = (snapshot.args.get("query") or "").strip()
        if not query:
            return
        self.history_store.record_execution(
            query,
            snapshot.args.get("filters"),
            snapshot.args.get("sort", SortMode.RELEVANCE),
            snapshot.results.counts(),
        )


class LeaderboardExecutor(SingleFlightExecutor):
    """Execution contract around leaderboard loads"""

    def __init__(self, service: LeaderboardService, timeout: float = SearchConfig.EXECUTION_TIMEOUT):
        super().__init__(timeout=timeout)
        self.service = service

    async def load(self, selector: LeaderboardSelector) -> ExecutionSnapshot:
        return await self.execute(selector=selector)

    async def operation(self, selector: Optional[LeaderboardSelector] = None):
        return await asyncio.to_thread(self.service.get_leaderboard, selector or LeaderboardSelector())

    def classify(self, result) -> ExecutionState:
        return ExecutionState.READY if result else ExecutionState.EMPTY

    def default_args(self, args: Dict[str, Any]) -> Dict[str, Any]:
        # Same category; default metric, top sort, 24h window and no filters
        current = args.get("selector") or LeaderboardSelector()
        return {"selector": LeaderboardSelector(category=current.category)}
