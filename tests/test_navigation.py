import pytest

from sitesearch.navigation import (
    CLOSED,
    Activate,
    ArrowDown,
    ArrowUp,
    CloseSearch,
    Effect,
    Escape,
    NavigationController,
    NavigationState,
    OpenSearch,
    QueryChanged,
    ResultChosen,
    ToggleShortcut,
    transition,
)


def open_with(result_count: int, selected: int = -1) -> NavigationState:
    return NavigationState(is_open=True, selected_index=selected, result_count=result_count)


# ---------- Open / close ----------


def test_open_from_closed_requests_index_and_focus() -> None:
    result = transition(CLOSED, OpenSearch())
    assert result.state == open_with(0)
    assert result.effects == (Effect.LOAD_INDEX, Effect.FOCUS_INPUT)


def test_close_clears_input_and_results() -> None:
    result = transition(open_with(3, selected=2), CloseSearch())
    assert result.state == CLOSED
    assert result.effects == (Effect.CLEAR_INPUT, Effect.CLEAR_RESULTS)


def test_escape_closes_unconditionally() -> None:
    result = transition(open_with(0), Escape())
    assert result.state == CLOSED
    assert Effect.CLEAR_INPUT in result.effects


def test_escape_when_closed_is_noop() -> None:
    result = transition(CLOSED, Escape())
    assert result.state == CLOSED
    assert result.effects == ()


def test_toggle_shortcut_opens_then_closes() -> None:
    opened = transition(CLOSED, ToggleShortcut())
    assert opened.state.is_open
    closed = transition(opened.state, ToggleShortcut())
    assert closed.state == CLOSED


# ---------- Queries ----------


def test_query_changed_resets_selection() -> None:
    result = transition(open_with(5, selected=3), QueryChanged(result_count=2))
    assert result.state == open_with(2)
    assert result.effects == (Effect.RENDER_RESULTS,)


def test_query_changed_while_closed_is_noop() -> None:
    assert transition(CLOSED, QueryChanged(result_count=4)).state == CLOSED


# ---------- Arrow keys ----------


def test_arrow_down_clamps_to_last_result() -> None:
    state = open_with(3)
    for expected in (0, 1, 2, 2):
        state = transition(state, ArrowDown()).state
        assert state.selected_index == expected


def test_arrow_up_floors_at_first_result() -> None:
    state = open_with(3)
    state = transition(state, ArrowUp()).state
    state = transition(state, ArrowUp()).state
    assert state.selected_index == 0


def test_arrow_up_never_returns_to_no_selection() -> None:
    state = open_with(3, selected=2)
    for expected in (1, 0, 0):
        state = transition(state, ArrowUp()).state
        assert state.selected_index == expected


@pytest.mark.parametrize(
    "event, expected",
    [(ArrowDown(), -1), (ArrowUp(), 0)],
)
def test_arrows_with_no_results(event: object, expected: int) -> None:
    result = transition(open_with(0), event)  # type: ignore[arg-type]
    assert result.state.selected_index == expected
    assert result.effects == (Effect.UPDATE_SELECTION,)


def test_arrows_ignored_while_closed() -> None:
    assert transition(CLOSED, ArrowDown()).state == CLOSED
    assert transition(CLOSED, ArrowUp()).state == CLOSED


# ---------- Activation ----------


def test_activate_chooses_selection_and_closes() -> None:
    result = transition(open_with(3, selected=1), Activate())
    assert result.state == CLOSED
    assert result.effects == (ResultChosen(1), Effect.CLEAR_INPUT, Effect.CLEAR_RESULTS)


def test_activate_without_selection_is_noop() -> None:
    state = open_with(3)
    result = transition(state, Activate())
    assert result.state == state
    assert result.effects == ()


def test_activate_out_of_range_is_noop() -> None:
    # Arrow-up on an empty list selects 0, which is not a valid result
    state = transition(open_with(0), ArrowUp()).state
    assert transition(state, Activate()).effects == ()


# ---------- Controller wrapper ----------


def test_controller_tracks_state() -> None:
    nav = NavigationController()
    assert nav.dispatch(OpenSearch()) == [Effect.LOAD_INDEX, Effect.FOCUS_INPUT]
    nav.dispatch(QueryChanged(result_count=2))
    nav.dispatch(ArrowDown())
    assert nav.state.selected_index == 0
    assert nav.state.has_selection
    effects = nav.dispatch(Activate())
    assert effects[0] == ResultChosen(0)
    assert nav.state == CLOSED


def test_unknown_event_raises() -> None:
    with pytest.raises(TypeError):
        transition(CLOSED, object())  # type: ignore[arg-type]
