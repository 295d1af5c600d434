"""Unit tests for the view state reducer."""

from __future__ import annotations

import pytest

from thermal_hotspots.models.state import (
    Basemap,
    BasemapChanged,
    FilterState,
    HotspotSelected,
    ListToggled,
    PilotsCleared,
    PilotToggled,
    reduce,
)


@pytest.mark.ai_generated
class TestReduce:
    """Tests for reduce()."""

    def test_defaults(self) -> None:
        state = FilterState()

        assert state.selected_pilots == frozenset()
        assert state.selected_hotspot_id is None
        assert state.list_visible is False
        assert state.basemap is Basemap.STREET

    def test_toggle_pilot_clears_selection(self) -> None:
        state = FilterState(selected_hotspot_id="hs-ridge")

        new = reduce(state, PilotToggled("Sam"))

        assert new.selected_pilots == {"Sam"}
        assert new.selected_hotspot_id is None
        # Snapshots are never mutated
        assert state.selected_hotspot_id == "hs-ridge"

    def test_toggle_pilot_twice(self) -> None:
        state = FilterState(selected_pilots=frozenset({"Kim"}))

        new = reduce(reduce(state, PilotToggled("Sam")), PilotToggled("Sam"))

        assert new.selected_pilots == state.selected_pilots

    def test_clear_pilots(self) -> None:
        state = FilterState(selected_pilots=frozenset({"Kim", "Sam"}), selected_hotspot_id="hs-ridge")

        new = reduce(state, PilotsCleared())

        assert new.selected_pilots == frozenset()
        assert new.selected_hotspot_id is None

    def test_clear_pilots_noop_keeps_selection(self) -> None:
        state = FilterState(selected_hotspot_id="hs-ridge")

        assert reduce(state, PilotsCleared()) is state

    def test_select_and_deselect(self) -> None:
        state = reduce(FilterState(), HotspotSelected("hs-ridge"))
        assert state.selected_hotspot_id == "hs-ridge"

        state = reduce(state, HotspotSelected(None))
        assert state.selected_hotspot_id is None

    def test_list_toggle(self) -> None:
        state = reduce(FilterState(), ListToggled())
        assert state.list_visible is True

        assert reduce(state, ListToggled()).list_visible is False

    def test_basemap_change(self) -> None:
        state = reduce(FilterState(selected_hotspot_id="hs-ridge"), BasemapChanged(Basemap.DARK))

        assert state.basemap is Basemap.DARK
        assert state.selected_hotspot_id == "hs-ridge"

    def test_unknown_event(self) -> None:
        with pytest.raises(TypeError):
            reduce(FilterState(), object())  # type: ignore[arg-type]

    def test_to_dict(self) -> None:
        state = FilterState(selected_pilots=frozenset({"Sam", "Kim"}), basemap=Basemap.TOPO)

        assert state.to_dict() == {
            "selectedPilots": ["Kim", "Sam"],
            "selectedHotspotId": None,
            "listVisible": False,
            "basemap": "topo",
        }
