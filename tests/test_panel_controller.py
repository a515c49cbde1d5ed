import io
import pathlib
import sys
from typing import List

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from recipe_book.config import RecipeBookSettings
from recipe_book.models import Ingredient, RecipeEntry
from recipe_book.panel import (
    PanelController,
    PanelState,
    PanelView,
    RenderSurfaceUnavailable,
    TextRenderer,
)

STEEL_BAR = RecipeEntry(
    "steelbar", "Steel Bar", (Ingredient("Iron Ore", 2), Ingredient("Carbon", 1)), "Fabricator"
)
WELDING_TOOL = RecipeEntry("weldingtool", "Welding Tool", (Ingredient("Steel Bar", 1),), "Fabricator")


class FakeRenderer:
    def __init__(self, *, surface: bool = True) -> None:
        self.surface = surface
        self.fail_show = False
        self.calls: List[str] = []
        self.views: List[PanelView] = []
        self.on_query_changed = None

    def build(self, on_query_changed) -> None:
        self.calls.append("build")
        if not self.surface:
            raise RenderSurfaceUnavailable("no canvas")
        self.on_query_changed = on_query_changed

    def show(self, view: PanelView) -> None:
        self.calls.append("show")
        if self.fail_show:
            raise RuntimeError("widget tree broken")
        self.views.append(view)

    def hide(self) -> None:
        self.calls.append("hide")

    def attach(self) -> None:
        self.calls.append("attach")

    def destroy(self) -> None:
        self.calls.append("destroy")

    @property
    def last_rows(self) -> List[str]:
        return [row.result_label for row in self.views[-1].rows]


class CountingSource:
    def __init__(self, entries) -> None:
        self.entries = list(entries)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.entries


@pytest.fixture()
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture()
def panel(renderer: FakeRenderer) -> PanelController:
    controller = PanelController(renderer)
    controller.initialize([STEEL_BAR, WELDING_TOOL])
    return controller


def test_initialize_builds_closed_panel_without_rendering(panel: PanelController, renderer: FakeRenderer) -> None:
    assert panel.state is PanelState.CLOSED
    assert renderer.calls == ["build"]


def test_initialize_is_idempotent(renderer: FakeRenderer) -> None:
    controller = PanelController(renderer)

    assert controller.initialize([STEEL_BAR])
    assert controller.initialize([WELDING_TOOL])

    assert controller.entries == (STEEL_BAR,)
    assert renderer.calls.count("build") == 1


def test_toggle_opens_and_closes(panel: PanelController, renderer: FakeRenderer) -> None:
    assert panel.toggle()
    assert panel.state is PanelState.OPEN
    assert renderer.last_rows == ["Steel Bar", "Welding Tool"]

    assert panel.toggle()
    assert panel.state is PanelState.CLOSED
    assert renderer.calls[-1] == "hide"


def test_toggle_from_uninitialized_collects_fresh_entries(renderer: FakeRenderer) -> None:
    source = CountingSource([WELDING_TOOL, STEEL_BAR])
    controller = PanelController(renderer, collect=source)

    assert controller.toggle()

    assert source.calls == 1
    assert controller.state is PanelState.OPEN
    assert renderer.calls == ["build", "show"]
    assert renderer.last_rows == ["Steel Bar", "Welding Tool"]


def test_toggle_without_surface_stays_uninitialized_and_retries() -> None:
    renderer = FakeRenderer(surface=False)
    source = CountingSource([STEEL_BAR])
    controller = PanelController(renderer, collect=source)

    assert not controller.toggle()
    assert controller.state is PanelState.UNINITIALIZED

    renderer.surface = True
    assert controller.toggle()
    assert controller.state is PanelState.OPEN
    assert source.calls == 2


def test_close_on_closed_panel_is_noop(panel: PanelController, renderer: FakeRenderer) -> None:
    assert not panel.close()
    assert "hide" not in renderer.calls


def test_open_always_refreshes(panel: PanelController, renderer: FakeRenderer) -> None:
    panel.open()
    panel.open()

    assert renderer.calls.count("show") == 2
    assert panel.state is PanelState.OPEN


def test_query_changes_rerender_only_while_open(panel: PanelController, renderer: FakeRenderer) -> None:
    assert not panel.on_query_changed("carbon")
    assert "show" not in renderer.calls

    panel.open()
    assert panel.on_query_changed("carbon")

    assert renderer.last_rows == ["Steel Bar"]
    assert renderer.views[-1].query == "carbon"
    assert panel.visible_entries == (STEEL_BAR,)


def test_query_survives_close_and_reopen(panel: PanelController, renderer: FakeRenderer) -> None:
    panel.open()
    panel.on_query_changed("welding")
    panel.close()
    panel.open()

    assert renderer.last_rows == ["Welding Tool"]


def test_renderer_callback_filters(panel: PanelController, renderer: FakeRenderer) -> None:
    panel.open()
    renderer.on_query_changed("iron")

    assert renderer.last_rows == ["Steel Bar"]


def test_toggle_key_toggles(panel: PanelController) -> None:
    assert panel.on_key_event("F6")
    assert panel.state is PanelState.OPEN
    assert panel.on_key_event("f6")
    assert panel.state is PanelState.CLOSED


def test_any_other_key_closes_open_panel(panel: PanelController) -> None:
    panel.open()

    assert panel.on_key_event("Escape")
    assert panel.state is PanelState.CLOSED


def test_other_keys_ignored_while_closed(panel: PanelController, renderer: FakeRenderer) -> None:
    assert not panel.on_key_event("A")
    assert panel.state is PanelState.CLOSED
    assert renderer.calls == ["build"]


def test_focused_text_input_blocks_every_key(panel: PanelController) -> None:
    assert not panel.on_key_event("F6", text_input_focused=True)
    assert panel.state is PanelState.CLOSED

    panel.open()
    assert not panel.on_key_event("Q", text_input_focused=True)
    assert not panel.on_key_event("F6", text_input_focused=True)
    assert panel.state is PanelState.OPEN


def test_custom_toggle_key(renderer: FakeRenderer) -> None:
    controller = PanelController(renderer, settings=RecipeBookSettings(toggle_key="F9"))
    controller.initialize([STEEL_BAR])

    assert not controller.on_key_event("F6")
    assert controller.on_key_event("F9")
    assert controller.is_open


def test_render_failure_does_not_raise_or_open(panel: PanelController, renderer: FakeRenderer) -> None:
    renderer.fail_show = True

    assert not panel.toggle()
    assert panel.state is PanelState.CLOSED


def test_failed_query_render_keeps_previous_query(panel: PanelController, renderer: FakeRenderer) -> None:
    panel.open()
    panel.on_query_changed("welding")
    renderer.fail_show = True

    assert not panel.on_query_changed("carbon")
    assert panel.query == "welding"
    assert panel.visible_entries == (WELDING_TOOL,)

    renderer.fail_show = False
    panel.close()
    panel.open()
    assert renderer.last_rows == ["Welding Tool"]


def test_failing_source_yields_empty_panel(renderer: FakeRenderer) -> None:
    def explode():
        raise RuntimeError("no catalog")

    controller = PanelController(renderer, collect=explode)

    assert controller.toggle()
    assert controller.entries == ()
    assert renderer.last_rows == []


def test_dispose_returns_to_uninitialized(panel: PanelController, renderer: FakeRenderer) -> None:
    panel.open()
    panel.on_query_changed("steel")
    panel.dispose()

    assert panel.state is PanelState.UNINITIALIZED
    assert panel.entries == ()
    assert panel.query == ""
    assert renderer.calls[-1] == "destroy"

    assert panel.initialize([WELDING_TOOL])
    assert panel.entries == (WELDING_TOOL,)


def test_add_to_update_list_only_when_initialized(renderer: FakeRenderer) -> None:
    controller = PanelController(renderer)
    controller.add_to_update_list()
    assert "attach" not in renderer.calls

    controller.initialize([])
    controller.add_to_update_list()
    assert renderer.calls[-1] == "attach"


def test_text_renderer_round_trip() -> None:
    stream = io.StringIO()
    renderer = TextRenderer(stream)
    controller = PanelController(renderer)
    controller.initialize([STEEL_BAR, WELDING_TOOL])

    controller.open()
    output = stream.getvalue()
    assert "== Recipe Book ==" in output
    assert "Iron Ore ×2, Carbon ×1" in output

    assert renderer.click_result(1)
    assert controller.query == "Welding Tool"
    assert [entry.result_id for entry in controller.visible_entries] == ["weldingtool"]

    assert renderer.click_device(0)
    assert controller.query == "Fabricator"
    assert len(controller.visible_entries) == 2

    assert renderer.choose_ingredient(0, "Carbon")
    assert controller.visible_entries == (STEEL_BAR,)

    # single-ingredient rows offer no menu
    controller.on_query_changed("")
    assert not renderer.choose_ingredient(1, "Steel Bar")


def test_text_renderer_without_stream_is_not_ready() -> None:
    controller = PanelController(TextRenderer(None))

    assert not controller.initialize([STEEL_BAR])
    assert controller.state is PanelState.UNINITIALIZED


def test_text_renderer_reports_empty_result() -> None:
    stream = io.StringIO()
    controller = PanelController(TextRenderer(stream))
    controller.initialize([STEEL_BAR])
    controller.open()
    controller.on_query_changed("plasma cutter")

    assert "(no matching recipes)" in stream.getvalue()
