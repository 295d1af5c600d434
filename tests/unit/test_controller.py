"""Unit tests for the view controller."""

from __future__ import annotations

import pytest

from tests.fixtures.generate_fixtures import make_hotspot
from thermal_hotspots.models.records import RecordStore
from thermal_hotspots.models.state import (
    Basemap,
    FilterState,
    HotspotSelected,
    PilotsCleared,
    PilotToggled,
)
from thermal_hotspots.services.controller import ViewController
from thermal_hotspots.views.map import MapPresenter


@pytest.mark.ai_generated
class TestViewController:
    """Tests for ViewController."""

    def test_initial_view(self, sample_store: RecordStore) -> None:
        view = ViewController(sample_store).view()

        assert [h.id for h in view.hotspots] == ["hs-field", "hs-ridge", "hs-lake", "hs-quarry", "hs-tower"]
        assert view.pilots == ["Kim", "Sam", "Lee"]
        assert view.selected is None
        assert view.thermal_count == 8
        assert view.summary == "Showing 5 of 5 hotspots · 8 thermals"

    def test_filter_by_pilot(self, sample_store: RecordStore) -> None:
        controller = ViewController(sample_store)

        controller.dispatch(PilotToggled("Sam"))
        view = controller.view()

        assert [h.id for h in view.hotspots] == ["hs-ridge", "hs-lake"]
        # Tags always come from the unfiltered baseline
        assert view.pilots == ["Kim", "Sam", "Lee"]
        assert view.summary == "Showing 2 of 5 hotspots · 8 thermals"

    def test_select_hotspot(self, sample_store: RecordStore) -> None:
        controller = ViewController(sample_store)

        controller.dispatch(HotspotSelected("hs-quarry"))

        assert controller.view().selected.name == "Quarry"

    def test_selecting_unknown_hotspot_resolves_to_none(self, sample_store: RecordStore) -> None:
        controller = ViewController(sample_store)

        state = controller.dispatch(HotspotSelected("does-not-exist"))

        assert state.selected_hotspot_id is None

    def test_selecting_filtered_out_hotspot(self, sample_store: RecordStore) -> None:
        controller = ViewController(sample_store, FilterState(selected_pilots=frozenset({"Kim"})))

        # hs-spike exceeds the ceiling, hs-lake belongs to Sam
        assert controller.dispatch(HotspotSelected("hs-spike")).selected_hotspot_id is None
        assert controller.dispatch(HotspotSelected("hs-lake")).selected_hotspot_id is None

    def test_initial_state_is_reconciled(self, sample_store: RecordStore) -> None:
        state = FilterState(selected_pilots=frozenset({"Lee"}), selected_hotspot_id="hs-ridge")

        controller = ViewController(sample_store, state)

        assert controller.state.selected_hotspot_id is None
        assert controller.state.selected_pilots == {"Lee"}

    def test_toggle_clears_selection(self, sample_store: RecordStore) -> None:
        controller = ViewController(sample_store)
        controller.dispatch(HotspotSelected("hs-ridge"))

        controller.dispatch(PilotToggled("Sam"))

        # hs-ridge is still visible, but the toggle always drops the selection
        assert controller.state.selected_hotspot_id is None

    def test_clear_pilots(self, sample_store: RecordStore) -> None:
        controller = ViewController(sample_store)
        controller.dispatch(PilotToggled("Kim"))
        controller.dispatch(PilotToggled("Lee"))

        controller.dispatch(PilotsCleared())

        assert len(controller.view().hotspots) == 5

    def test_replace_records_drops_missing_selection(self, sample_store: RecordStore) -> None:
        controller = ViewController(sample_store)
        controller.dispatch(HotspotSelected("hs-ridge"))

        controller.replace_records(
            RecordStore(hotspots=(make_hotspot(id="hs-new", name="New"),))
        )

        assert controller.state.selected_hotspot_id is None
        assert [h.id for h in controller.view().hotspots] == ["hs-new"]

    def test_replace_records_keeps_existing_selection(self, sample_store: RecordStore) -> None:
        controller = ViewController(sample_store)
        controller.dispatch(HotspotSelected("hs-ridge"))

        controller.replace_records(sample_store)

        assert controller.state.selected_hotspot_id == "hs-ridge"

    def test_center_follows_filter(self, sample_store: RecordStore) -> None:
        controller = ViewController(sample_store)
        controller.dispatch(PilotToggled("Lee"))

        center = controller.view().center

        assert (center.lat, center.lon, center.zoom) == (30.55, -97.85, 9)

    def test_initial_view_override(self, sample_store: RecordStore) -> None:
        controller = ViewController(sample_store, initial_view=(46.0, 7.0, 11))

        assert controller.view().center.to_list() == [46.0, 7.0, 11]

    def test_presenter_events_route_to_controller(self, sample_store: RecordStore) -> None:
        controller = ViewController(sample_store)
        presenter = MapPresenter()
        controller.attach(presenter)

        presenter.click("hs-tower")
        assert controller.state.selected_hotspot_id == "hs-tower"

        presenter.close_popup()
        assert controller.state.selected_hotspot_id is None

        presenter.switch_basemap(Basemap.SATELLITE)
        assert controller.state.basemap is Basemap.SATELLITE

    def test_empty_store(self) -> None:
        view = ViewController(RecordStore()).view()

        assert view.hotspots == []
        assert view.pilots == []
        assert view.center.to_list() == [30.495, -97.996, 8]
        assert view.summary == "Showing 0 of 0 hotspots · 0 thermals"
