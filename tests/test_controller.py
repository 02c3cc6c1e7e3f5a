import asyncio
from typing import Any, List, Optional, Sequence, Tuple

import httpx
import pytest

from sitesearch.config import SearchConfig
from sitesearch.controller import SearchController, ViewState
from sitesearch.index.loader import IndexLoader
from sitesearch.index.snapshot import StaticNavigationSnapshot
from sitesearch.navigation import NavigationState
from sitesearch.search.base_search import RenderedResult
from sitesearch.session import SearchSession

INDEX_PAYLOAD = [
    {"title": "Getting Started", "url": "/start", "content": "install the cli tool"},
    {"title": "API Reference", "url": "/api", "content": "configuration options"},
    {"title": "CLI Usage", "url": "/cli", "content": "run the api server from the cli"},
]

# ---------- Helpers ----------


class FakeRenderer:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []
        self.rendered: List[List[RenderedResult]] = []
        self.views: List[ViewState] = []
        self.navigated: List[str] = []
        self.selection: Optional[int] = None
        self.is_open = False

    def set_open(self, is_open: bool) -> None:
        self.is_open = is_open
        self.calls.append(("set_open", is_open))

    def focus_input(self) -> None:
        self.calls.append(("focus_input", None))

    def clear_input(self) -> None:
        self.calls.append(("clear_input", None))

    def show_state(self, view: ViewState) -> None:
        self.views.append(view)

    def render_results(
        self, results: Sequence[RenderedResult], navigation: NavigationState
    ) -> None:
        self.rendered.append(list(results))

    def update_selection(self, navigation: NavigationState) -> None:
        self.selection = navigation.selected_index

    def navigate(self, url: str) -> None:
        self.navigated.append(url)


def make_controller(
    responder: Any, *, debounce_ms: int = 0
) -> Tuple[SearchController, FakeRenderer, IndexLoader]:
    loader = IndexLoader(base_url="https://docs.example.com", snapshot=StaticNavigationSnapshot([]))

    def _client() -> httpx.AsyncClient:  # type: ignore[override]
        return httpx.AsyncClient(
            transport=httpx.MockTransport(responder), base_url="https://docs.example.com"
        )

    setattr(loader, "_client", _client)
    renderer = FakeRenderer()
    session = SearchSession(loader, search_config=SearchConfig())
    return SearchController(session, renderer, debounce_ms=debounce_ms), renderer, loader


def serve_index(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=INDEX_PAYLOAD)


async def open_and_load(controller: SearchController) -> None:
    controller.open()
    await controller.wait_for_index()


# ---------- Tests ----------


@pytest.mark.asyncio
async def test_open_loads_index_and_shows_empty_state() -> None:
    controller, renderer, loader = make_controller(serve_index)

    await open_and_load(controller)

    assert controller.state.is_open
    assert renderer.is_open
    assert ("focus_input", None) in renderer.calls
    assert loader.is_loaded
    assert renderer.views == [ViewState.LOADING, ViewState.EMPTY]


@pytest.mark.asyncio
async def test_search_renders_ranked_highlighted_results() -> None:
    controller, renderer, _ = make_controller(serve_index)
    await open_and_load(controller)

    controller.input("api")
    await controller.flush()

    assert controller.view is ViewState.RESULTS
    results = renderer.rendered[-1]
    assert [r.url for r in results] == ["/api", "/cli"]
    assert results[0].highlighted_title == "<mark>API</mark> Reference"
    assert results[0].highlighted_excerpt == "configuration options"
    assert results[1].highlighted_excerpt == "run the <mark>api</mark> server from the cli"
    assert controller.state.selected_index == -1
    assert controller.state.result_count == 2
    assert renderer.views[-1] is ViewState.RESULTS


@pytest.mark.asyncio
async def test_short_query_shows_empty_state() -> None:
    controller, renderer, _ = make_controller(serve_index)
    await open_and_load(controller)

    controller.input("a")
    await controller.flush()

    assert controller.view is ViewState.EMPTY
    assert renderer.rendered[-1] == []
    assert renderer.views[-1] is ViewState.EMPTY


@pytest.mark.asyncio
async def test_no_matches_shows_no_results_state() -> None:
    controller, renderer, _ = make_controller(serve_index)
    await open_and_load(controller)

    controller.input("zzz")
    await controller.flush()

    assert controller.view is ViewState.NO_RESULTS
    assert renderer.rendered[-1] == []
    assert renderer.views[-1] is ViewState.NO_RESULTS


@pytest.mark.asyncio
async def test_rapid_input_is_debounced() -> None:
    controller, renderer, _ = make_controller(serve_index, debounce_ms=20)
    await open_and_load(controller)

    controller.input("c")
    controller.input("cl")
    controller.input("cli")
    await controller.flush()

    assert len(renderer.rendered) == 1
    assert [r.url for r in renderer.rendered[0]] == ["/cli", "/start"]


@pytest.mark.asyncio
async def test_keyboard_navigation_and_activation() -> None:
    controller, renderer, _ = make_controller(serve_index)
    await open_and_load(controller)
    controller.input("cli")
    await controller.flush()

    assert controller.key("Enter") is False
    assert controller.key("ArrowDown") is True
    assert controller.key("ArrowDown") is True
    assert controller.key("ArrowDown") is True
    assert renderer.selection == 1
    assert controller.key("ArrowUp") is True
    assert controller.key("ArrowUp") is True
    assert renderer.selection == 0

    assert controller.key("Enter") is True

    assert renderer.navigated == ["/cli"]
    assert not controller.state.is_open
    assert not renderer.is_open
    assert ("clear_input", None) in renderer.calls
    assert controller.results == []


@pytest.mark.asyncio
async def test_shortcut_toggles_and_escape_closes() -> None:
    controller, renderer, _ = make_controller(serve_index)

    assert controller.key("Mod+K") is True
    await controller.wait_for_index()
    assert controller.state.is_open

    assert controller.key("Escape") is True
    assert not controller.state.is_open
    assert controller.key("Escape") is False
    assert controller.key("ArrowDown") is False

    assert controller.key("Mod+K") is True
    assert controller.state.is_open
    assert controller.key("Mod+K") is True
    assert not controller.state.is_open
    assert controller.key("Tab") is False


@pytest.mark.asyncio
async def test_choose_follows_clicked_result() -> None:
    controller, renderer, _ = make_controller(serve_index)
    await open_and_load(controller)
    controller.input("api")
    await controller.flush()

    controller.choose(1)

    assert renderer.navigated == ["/cli"]
    assert not controller.state.is_open


@pytest.mark.asyncio
async def test_query_typed_while_loading_runs_once_index_arrives() -> None:
    release = asyncio.Event()

    async def responder(request: httpx.Request) -> httpx.Response:
        await release.wait()
        return httpx.Response(200, json=INDEX_PAYLOAD)

    controller, renderer, _ = make_controller(responder)
    controller.open()
    controller.input("reference")
    await controller.flush()
    assert controller.view is ViewState.LOADING

    release.set()
    await controller.wait_for_index()

    assert controller.view is ViewState.RESULTS
    assert [r.url for r in renderer.rendered[-1]] == ["/api"]


@pytest.mark.asyncio
async def test_close_during_load_still_populates_cache() -> None:
    release = asyncio.Event()

    async def responder(request: httpx.Request) -> httpx.Response:
        await release.wait()
        return httpx.Response(200, json=INDEX_PAYLOAD)

    controller, renderer, loader = make_controller(responder)
    controller.open()
    controller.close()
    release.set()
    await controller.wait_for_index()

    assert loader.is_loaded
    assert not controller.state.is_open
    assert all(results == [] for results in renderer.rendered)


@pytest.mark.asyncio
async def test_close_drops_pending_search() -> None:
    controller, renderer, _ = make_controller(serve_index, debounce_ms=50)
    await open_and_load(controller)

    controller.input("api")
    controller.close()
    await asyncio.sleep(0.08)

    assert all(results == [] for results in renderer.rendered)
    assert controller.view is ViewState.EMPTY


@pytest.mark.asyncio
async def test_search_typed_while_closed_is_ignored() -> None:
    controller, renderer, _ = make_controller(serve_index)
    await open_and_load(controller)
    controller.close()

    controller.input("api")
    await controller.flush()

    assert controller.results == []
    assert controller.view is ViewState.EMPTY

    controller.open()
    controller.choose(0)

    assert renderer.navigated == []
