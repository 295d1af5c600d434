"""View state for the hotspot map.

The UI state is an immutable snapshot. Every user interaction is an event,
and ``reduce`` maps (state, event) to the next state.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union

from thermal_hotspots.services.selection import toggle_pilot


class Basemap(str, Enum):
    """Background tile style."""

    STREET = "street"
    SATELLITE = "satellite"
    TOPO = "topo"
    DARK = "dark"


@dataclass(frozen=True)
class FilterState:
    """Current pilot filter, selection, list visibility and basemap."""

    selected_pilots: frozenset[str] = field(default_factory=frozenset)
    selected_hotspot_id: str | None = None
    list_visible: bool = False
    basemap: Basemap = Basemap.STREET

    def to_dict(self) -> dict[str, object]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "selectedPilots": sorted(self.selected_pilots),
            "selectedHotspotId": self.selected_hotspot_id,
            "listVisible": self.list_visible,
            "basemap": self.basemap.value,
        }


@dataclass(frozen=True)
class PilotToggled:
    pilot: str


@dataclass(frozen=True)
class PilotsCleared:
    pass


@dataclass(frozen=True)
class HotspotSelected:
    """A hotspot was clicked (id) or its popup was closed (None)."""

    hotspot_id: str | None


@dataclass(frozen=True)
class ListToggled:
    pass


@dataclass(frozen=True)
class BasemapChanged:
    basemap: Basemap


Event = Union[PilotToggled, PilotsCleared, HotspotSelected, ListToggled, BasemapChanged]


def reduce(state: FilterState, event: Event) -> FilterState:
    """Compute the next state for an event.

    Changing the pilot filter always drops the selected hotspot, since it may
    no longer be visible. Selections against the filtered hotspots are
    reconciled by the caller, which knows the data.

    Args:
        state: Current state.
        event: Interaction event.

    Returns:
        New state (``state`` itself when nothing changes).

    Raises:
        TypeError: If the event type is unknown.
    """
    if isinstance(event, PilotToggled):
        return replace(
            state,
            selected_pilots=toggle_pilot(state.selected_pilots, event.pilot),
            selected_hotspot_id=None,
        )
    if isinstance(event, PilotsCleared):
        if not state.selected_pilots:
            return state
        return replace(state, selected_pilots=frozenset(), selected_hotspot_id=None)
    if isinstance(event, HotspotSelected):
        if event.hotspot_id == state.selected_hotspot_id:
            return state
        return replace(state, selected_hotspot_id=event.hotspot_id)
    if isinstance(event, ListToggled):
        return replace(state, list_visible=not state.list_visible)
    if isinstance(event, BasemapChanged):
        if event.basemap == state.basemap:
            return state
        return replace(state, basemap=event.basemap)
    raise TypeError(f"Unknown event: {event!r}")
