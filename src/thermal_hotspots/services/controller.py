"""View controller for the hotspot map.

Holds the loaded records and the current FilterState, routes events through
the reducer and keeps the hotspot selection consistent with what is visible.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from thermal_hotspots.models.records import Hotspot, RecordStore
from thermal_hotspots.models.state import (
    BasemapChanged,
    Event,
    FilterState,
    HotspotSelected,
    reduce,
)
from thermal_hotspots.services.selection import (
    apply_filter,
    baseline,
    find_hotspot,
    pilot_tags,
    reconcile_selection,
)
from thermal_hotspots.views.presentation import MapView, center_of, format_summary

if TYPE_CHECKING:
    from thermal_hotspots.views.map import MapPresenter

logger = logging.getLogger("thermal_hotspots.controller")


@dataclass(frozen=True)
class HotspotView:
    """Everything the list and map need to render the current state."""

    state: FilterState
    baseline: list[Hotspot]
    hotspots: list[Hotspot]
    pilots: list[str]
    selected: Hotspot | None
    thermal_count: int
    center: MapView

    @property
    def summary(self) -> str:
        return format_summary(len(self.hotspots), len(self.baseline), self.thermal_count)


class ViewController:
    """Owns the UI state and derives views from it."""

    def __init__(
        self,
        store: RecordStore,
        state: FilterState | None = None,
        initial_view: tuple[float, float, int] | None = None,
    ) -> None:
        self._store = store
        self._baseline = baseline(store.hotspots)
        self._initial_view = initial_view
        self._state = self._reconciled(state or FilterState())

    @property
    def state(self) -> FilterState:
        return self._state

    @property
    def store(self) -> RecordStore:
        return self._store

    def filtered(self) -> list[Hotspot]:
        """Baseline hotspots restricted to the selected pilots."""
        return apply_filter(self._baseline, self._state.selected_pilots)

    def _reconciled(self, state: FilterState) -> FilterState:
        visible = apply_filter(self._baseline, state.selected_pilots)
        selected_id = reconcile_selection(visible, state.selected_hotspot_id)
        if selected_id != state.selected_hotspot_id:
            logger.debug("Dropping selection %s: not visible", state.selected_hotspot_id)
            return replace(state, selected_hotspot_id=selected_id)
        return state

    def dispatch(self, event: Event) -> FilterState:
        """Apply an event and return the new state."""
        self._state = self._reconciled(reduce(self._state, event))
        logger.debug("%s -> %s", event, self._state)
        return self._state

    def replace_records(self, store: RecordStore) -> FilterState:
        """Swap in new records, dropping a selection that no longer exists."""
        self._store = store
        self._baseline = baseline(store.hotspots)
        self._state = self._reconciled(self._state)
        return self._state

    def attach(self, presenter: MapPresenter) -> None:
        """Route map clicks and basemap switches back into this controller."""
        presenter.on_select = lambda hotspot_id: self.dispatch(HotspotSelected(hotspot_id))
        presenter.on_basemap_change = lambda basemap: self.dispatch(BasemapChanged(basemap))

    def view(self) -> HotspotView:
        """Derive the current view."""
        hotspots = self.filtered()
        return HotspotView(
            state=self._state,
            baseline=list(self._baseline),
            hotspots=hotspots,
            pilots=pilot_tags(self._baseline),
            selected=find_hotspot(hotspots, self._state.selected_hotspot_id),
            thermal_count=len(self._store.thermals),
            center=center_of(hotspots, self._initial_view),
        )
