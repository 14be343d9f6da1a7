"""Query orchestration: debounced dispatch and the search status state machine.

QueryOrchestrator owns one SearchState and drives it through
loading -> idle / error as catalog searches start and complete:

- dispatch(term): status becomes LOADING immediately, the search runs as an
  asyncio task, and its outcome moves the state to IDLE (results replaced) or
  ERROR (message set, results kept).
- set_query(text): every change re-arms a single debounce timer; only the last
  text is dispatched once the window elapses.
- refresh() / retry(): immediate re-dispatch of the current text.

Each dispatch carries a generation number. With discard_stale enabled, a
completion is applied only if no newer dispatch was issued in the meantime;
with it disabled the last completion to arrive wins.

Must be constructed from inside a running event loop. Not thread-safe.
"""

import asyncio
from typing import Callable, Optional

from src.catalog.gateway import CatalogGateway
from src.models.models import (
    ErrorKind,
    Recipe,
    SearchFailure,
    SearchState,
    SearchStatus,
    SearchSuccess,
)
from src.utils.config import config
from src.utils.logger import logger

StateListener = Callable[[SearchState], None]

UNEXPECTED_ERROR_MESSAGE = "Unexpected error while fetching recipes."


class QueryOrchestrator:
    """Debounce query input and publish search results as SearchState."""

    def __init__(
        self,
        gateway: CatalogGateway,
        debounce_seconds: Optional[float] = None,
        discard_stale: Optional[bool] = None,
    ) -> None:
        """Initialize the orchestrator and fire the initial search for "".

        Args:
            gateway: Catalog gateway used for every dispatch.
            debounce_seconds: Delay after the last query change before dispatching.
                Defaults to SEARCH_DEBOUNCE_MS from configuration.
            discard_stale: Drop completions of superseded dispatches.
                Defaults to DISCARD_STALE_RESPONSES from configuration.

        Raises:
            RuntimeError: If no event loop is running.
        """
        self.gateway = gateway
        self.debounce_seconds = (
            config.search_debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self.discard_stale = config.DISCARD_STALE_RESPONSES if discard_stale is None else discard_stale
        self.state = SearchState()

        self._loop = asyncio.get_running_loop()
        self._timer: Optional[asyncio.TimerHandle] = None
        self._tasks: set[asyncio.Task] = set()
        self._generation = 0
        self._refreshes_in_flight = 0
        self._selected: Optional[Recipe] = None
        self._listeners: list[StateListener] = []

        self.dispatch("")

    # ------------------------------------------------------------------
    # Caller operations
    # ------------------------------------------------------------------

    def set_query(self, text: str) -> None:
        """Record new query text and (re-)arm the debounce timer.

        Setting the text it already has is not a change and arms nothing.
        """
        if text == self.state.query:
            return
        self.state.query = text
        self._arm_debounce()
        self._publish()

    def refresh(self) -> asyncio.Task:
        """Re-dispatch the current query now, flagging the state as refreshing."""
        self._refreshes_in_flight += 1
        self.state.refreshing = True
        task = self.dispatch(self.state.query.strip())
        task.add_done_callback(self._finish_refresh)
        return task

    def retry(self) -> asyncio.Task:
        """Re-dispatch the current query now, e.g. after an error."""
        return self.dispatch(self.state.query.strip())

    def select_record(self, record_id: Optional[str]) -> None:
        """Select one recipe from the current results, or clear the selection with None.

        Raises:
            KeyError: If no recipe in the current results has this id.
        """
        if record_id is None:
            self._selected = None
            return
        for recipe in self.state.results:
            if recipe.id == record_id:
                self._selected = recipe
                return
        raise KeyError(f"No recipe with id {record_id!r} in current results")

    @property
    def selected_record(self) -> Optional[Recipe]:
        return self._selected

    @property
    def preparation_steps(self) -> list[str]:
        """Steps of the selected recipe; empty when nothing is selected."""
        if self._selected is None:
            return []
        return self._selected.steps

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call `listener` with the state after every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Cancel the pending debounce timer. In-flight searches are left to finish."""
        self._cancel_debounce()

    async def join(self) -> None:
        """Wait until every in-flight dispatch has completed."""
        while self._tasks:
            await asyncio.gather(*self._tasks)

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def dispatch(self, term: str) -> asyncio.Task:
        """Start one search for `term`.

        The state moves to LOADING before this returns; the returned task
        completes once the outcome has been applied (or discarded as stale).
        """
        self._generation += 1
        generation = self._generation

        self.state.status = SearchStatus.LOADING
        self.state.last_error = None
        logger.debug(f"Dispatching search for {term!r}", extra={"generation": generation, "query": term})
        self._publish()

        task = self._loop.create_task(self._complete(term, generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _complete(self, term: str, generation: int) -> None:
        try:
            outcome = await self.gateway.search_outcome(term)
        except Exception:
            logger.exception(
                f"Unexpected error while searching for {term!r}",
                extra={"generation": generation, "query": term},
            )
            outcome = SearchFailure(kind=ErrorKind.UNEXPECTED, message=UNEXPECTED_ERROR_MESSAGE)

        if self.discard_stale and generation != self._generation:
            logger.debug(
                f"Discarding stale response for {term!r} (latest is #{self._generation})",
                extra={"generation": generation, "query": term},
            )
            return

        match outcome:
            case SearchSuccess(recipes=recipes):
                self.state.results = recipes
                self.state.last_error = None
                self.state.status = SearchStatus.IDLE
                logger.debug(
                    f"Search for {term!r} returned {len(recipes)} recipes",
                    extra={"generation": generation, "query": term},
                )
            case SearchFailure(kind=kind, message=message):
                self.state.last_error = message
                self.state.status = SearchStatus.ERROR
                logger.warning(
                    f"Search for {term!r} failed ({kind.value}): {message}",
                    extra={"generation": generation, "query": term},
                )

        self._publish()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _arm_debounce(self) -> None:
        self._cancel_debounce()
        self._timer = self._loop.call_later(self.debounce_seconds, self._on_debounce_elapsed)

    def _cancel_debounce(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_debounce_elapsed(self) -> None:
        self._timer = None
        self.dispatch(self.state.query.strip())

    def _finish_refresh(self, _task: asyncio.Task) -> None:
        self._refreshes_in_flight -= 1
        if self._refreshes_in_flight == 0:
            self.state.refreshing = False
            self._publish()

    def _publish(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.state)
            except Exception as e:
                # Listeners belong to the presentation layer and must not break dispatching
                logger.warning(f"Search state listener failed: {e}")
