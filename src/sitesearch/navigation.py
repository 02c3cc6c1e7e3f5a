"""Keyboard navigation state machine for the search modal.

Transitions are pure: `transition(state, event)` returns the next state and
the list of effects the caller must carry out (loading the index, clearing
the input, rendering, following a chosen result). Nothing here touches I/O,
so every path can be exercised without a page.

Selection moves down to the last result and up to the first one. Once a
result is selected, ArrowUp never returns to the "nothing selected" value
of -1; only a new query, open or close resets it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Tuple, Union

NO_SELECTION = -1


@dataclass(frozen=True, slots=True)
class NavigationState:
    is_open: bool = False
    selected_index: int = NO_SELECTION
    result_count: int = 0

    @property
    def has_selection(self) -> bool:
        return 0 <= self.selected_index < self.result_count


CLOSED = NavigationState()


# ----- Events -----

@dataclass(frozen=True, slots=True)
class OpenSearch:
    pass


@dataclass(frozen=True, slots=True)
class CloseSearch:
    pass


@dataclass(frozen=True, slots=True)
class ToggleShortcut:
    pass


@dataclass(frozen=True, slots=True)
class QueryChanged:
    result_count: int


@dataclass(frozen=True, slots=True)
class ArrowDown:
    pass


@dataclass(frozen=True, slots=True)
class ArrowUp:
    pass


@dataclass(frozen=True, slots=True)
class Activate:
    pass


@dataclass(frozen=True, slots=True)
class Escape:
    pass


Event = Union[
    OpenSearch, CloseSearch, ToggleShortcut, QueryChanged, ArrowDown, ArrowUp, Activate, Escape
]


# ----- Effects -----

class Effect(str, Enum):
    LOAD_INDEX = "load_index"
    FOCUS_INPUT = "focus_input"
    CLEAR_INPUT = "clear_input"
    CLEAR_RESULTS = "clear_results"
    RENDER_RESULTS = "render_results"
    UPDATE_SELECTION = "update_selection"


@dataclass(frozen=True, slots=True)
class ResultChosen:
    """The result at `index` was activated and should be followed."""

    index: int


EffectItem = Union[Effect, ResultChosen]


@dataclass(frozen=True, slots=True)
class Transition:
    state: NavigationState
    effects: Tuple[EffectItem, ...] = field(default_factory=tuple)


# ----- Transitions -----

def open_search(state: NavigationState) -> Transition:
    if state.is_open:
        return Transition(state)
    return Transition(
        NavigationState(is_open=True, selected_index=NO_SELECTION, result_count=0),
        (Effect.LOAD_INDEX, Effect.FOCUS_INPUT),
    )


def close_search(state: NavigationState) -> Transition:
    if not state.is_open:
        return Transition(state)
    return Transition(CLOSED, (Effect.CLEAR_INPUT, Effect.CLEAR_RESULTS))


def query_changed(state: NavigationState, result_count: int) -> Transition:
    if not state.is_open:
        return Transition(state)
    new_state = replace(state, selected_index=NO_SELECTION, result_count=max(0, result_count))
    return Transition(new_state, (Effect.RENDER_RESULTS,))


def arrow_down(state: NavigationState) -> Transition:
    if not state.is_open:
        return Transition(state)
    selected = min(state.selected_index + 1, state.result_count - 1)
    return Transition(replace(state, selected_index=selected), (Effect.UPDATE_SELECTION,))


def arrow_up(state: NavigationState) -> Transition:
    if not state.is_open:
        return Transition(state)
    selected = max(state.selected_index - 1, 0)
    return Transition(replace(state, selected_index=selected), (Effect.UPDATE_SELECTION,))


def activate(state: NavigationState) -> Transition:
    if not state.is_open or not state.has_selection:
        return Transition(state)
    closed = close_search(state)
    return Transition(closed.state, (ResultChosen(state.selected_index), *closed.effects))


def transition(state: NavigationState, event: Event) -> Transition:
    """Apply one event to the navigation state."""
    if isinstance(event, OpenSearch):
        return open_search(state)
    if isinstance(event, (CloseSearch, Escape)):
        return close_search(state)
    if isinstance(event, ToggleShortcut):
        return close_search(state) if state.is_open else open_search(state)
    if isinstance(event, QueryChanged):
        return query_changed(state, event.result_count)
    if isinstance(event, ArrowDown):
        return arrow_down(state)
    if isinstance(event, ArrowUp):
        return arrow_up(state)
    if isinstance(event, Activate):
        return activate(state)
    raise TypeError(f"Unknown navigation event: {event!r}")


class NavigationController:
    """Holds the current navigation state and applies events to it."""

    def __init__(self, state: NavigationState = CLOSED) -> None:
        self._state = state

    @property
    def state(self) -> NavigationState:
        return self._state

    def dispatch(self, event: Event) -> List[EffectItem]:
        result = transition(self._state, event)
        self._state = result.state
        return list(result.effects)

    def reset(self) -> None:
        self._state = CLOSED
