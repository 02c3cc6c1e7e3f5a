"""Search orchestration: input debouncing, index loading and rendering.

The controller turns page events (open, close, typing, keys) into navigation
events, carries out the effects the state machine asks for, and hands
rendered results to a `Renderer`. It holds no algorithmic logic of its own.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Dict, List, Optional, Protocol, Sequence

from sitesearch.navigation import (
    Activate,
    ArrowDown,
    ArrowUp,
    CloseSearch,
    Effect,
    EffectItem,
    Escape,
    Event,
    NavigationState,
    OpenSearch,
    QueryChanged,
    ResultChosen,
    ToggleShortcut,
)
from sitesearch.search.base_search import RenderedResult
from sitesearch.session import SearchSession

logger = logging.getLogger(__name__)

TOGGLE_SHORTCUT = "Mod+K"


class ViewState(str, Enum):
    EMPTY = "empty"  # no query yet, or query too short
    LOADING = "loading"
    NO_RESULTS = "no_results"
    RESULTS = "results"


class Renderer(Protocol):
    """Page-side collaborator that owns the markup."""

    def set_open(self, is_open: bool) -> None: ...

    def focus_input(self) -> None: ...

    def clear_input(self) -> None: ...

    def show_state(self, view: ViewState) -> None: ...

    def render_results(
        self, results: Sequence[RenderedResult], navigation: NavigationState
    ) -> None: ...

    def update_selection(self, navigation: NavigationState) -> None: ...

    def navigate(self, url: str) -> None: ...


class SearchController:
    """Drives one search session from page events."""

    def __init__(
        self,
        session: SearchSession,
        renderer: Renderer,
        *,
        debounce_ms: Optional[int] = None,
    ) -> None:
        self.session = session
        self.renderer = renderer
        ms = session.config.debounce_ms if debounce_ms is None else debounce_ms
        self.debounce_seconds = max(0, ms) / 1000.0
        self._query = ""
        self._view = ViewState.EMPTY
        self._results: List[RenderedResult] = []
        self._pending: Optional[asyncio.Task[None]] = None
        self._loading: Optional[asyncio.Task[None]] = None

    @property
    def state(self) -> NavigationState:
        return self.session.state

    @property
    def results(self) -> List[RenderedResult]:
        return list(self._results)

    @property
    def view(self) -> ViewState:
        return self._view

    # ----- Page events -----

    def open(self) -> None:
        self._dispatch(OpenSearch())

    def close(self) -> None:
        self._dispatch(CloseSearch())

    def toggle(self) -> None:
        self._dispatch(ToggleShortcut())

    def key(self, name: str) -> bool:
        """Handle a key press; return True when the key was consumed."""
        events: Dict[str, Event] = {
            TOGGLE_SHORTCUT: ToggleShortcut(),
            "ArrowDown": ArrowDown(),
            "ArrowUp": ArrowUp(),
            "Enter": Activate(),
            "Escape": Escape(),
        }
        event = events.get(name)
        if event is None:
            return False
        if name == TOGGLE_SHORTCUT:
            self._dispatch(event)
            return True
        if not self.state.is_open:
            return False
        if name == "Enter" and not self.state.has_selection:
            return False
        self._dispatch(event)
        return True

    def input(self, text: str) -> None:
        """Schedule a search for `text`, replacing any search still waiting."""
        self._cancel_pending()
        self._pending = asyncio.create_task(self._debounced_search(text))

    def choose(self, position: int) -> None:
        """A rendered result was clicked: follow it and close the search."""
        if 0 <= position < len(self._results):
            self.renderer.navigate(self._results[position].url)
        self.close()

    async def flush(self) -> None:
        """Wait for the pending debounced search, if any, to run."""
        if self._pending is not None:
            await self._pending

    async def wait_for_index(self) -> None:
        """Wait until the index load started by `open()` has been handled."""
        if self._loading is not None:
            await self._loading

    def dispose(self) -> None:
        """Drop the pending search. An in-flight index load is left running."""
        self._cancel_pending()

    # ----- Search -----

    def perform_search(self, query: str) -> None:
        # Results only exist while the search is open
        if not self.state.is_open:
            return
        self._query = query
        if not self.session.is_searchable(query):
            self._results = []
            self._view = ViewState.EMPTY
        elif self.session.index is None:
            self._view = ViewState.LOADING
            self.renderer.show_state(ViewState.LOADING)
            return
        else:
            scored = self.session.score(query)
            self._results = self.session.render(scored, query)
            self._view = ViewState.RESULTS if self._results else ViewState.NO_RESULTS
        self._dispatch(QueryChanged(len(self._results)))

    async def _debounced_search(self, text: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        self._pending = None
        self.perform_search(text)

    def _cancel_pending(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _load_index(self) -> None:
        self.renderer.show_state(ViewState.LOADING)
        await self.session.ensure_index()
        if not self.state.is_open:
            return
        if self.session.is_searchable(self._query):
            self.perform_search(self._query)
        else:
            self._view = ViewState.EMPTY
            self.renderer.show_state(ViewState.EMPTY)

    # ----- Effects -----

    def _dispatch(self, event: Event) -> None:
        was_open = self.state.is_open
        effects = self.session.navigation.dispatch(event)
        if self.state.is_open != was_open:
            self.renderer.set_open(self.state.is_open)
        for effect in effects:
            self._apply(effect)

    def _apply(self, effect: EffectItem) -> None:
        state = self.state
        if isinstance(effect, ResultChosen):
            self.renderer.navigate(self._results[effect.index].url)
        elif effect is Effect.LOAD_INDEX:
            if self.session.loader.is_loaded:
                self.renderer.show_state(ViewState.EMPTY)
            elif self._loading is None or self._loading.done():
                self._loading = asyncio.create_task(self._load_index())
        elif effect is Effect.FOCUS_INPUT:
            self.renderer.focus_input()
        elif effect is Effect.CLEAR_INPUT:
            self._cancel_pending()
            self._query = ""
            self.renderer.clear_input()
        elif effect is Effect.CLEAR_RESULTS:
            self._results = []
            self._view = ViewState.EMPTY
            self.renderer.render_results([], state)
        elif effect is Effect.RENDER_RESULTS:
            self.renderer.render_results(list(self._results), state)
            self.renderer.show_state(self._view)
        elif effect is Effect.UPDATE_SELECTION:
            self.renderer.update_selection(state)
        else:
            logger.debug("Ignoring unknown effect %r", effect)
