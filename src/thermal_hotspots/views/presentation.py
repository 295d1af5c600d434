"""Derived display values for hotspots: colors, circle sizes, map center
and the text used on cards and popups.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from thermal_hotspots.models.records import Hotspot

RADIUS_FLOOR_M = 180.0
RADIUS_SCALE_M = 160.0

# Austin, TX area; used when there is nothing to center on
DEFAULT_VIEW = (30.495, -97.996, 8)
FIT_ZOOM = 9


@dataclass(frozen=True)
class MapView:
    """Map center and zoom level."""

    lat: float
    lon: float
    zoom: int

    def to_list(self) -> list[float]:
        return [self.lat, self.lon, self.zoom]


def pilot_hue(pilot: str) -> int:
    """Hue in [0, 360) derived from the pilot's code points."""
    hue = 0
    for char in pilot:
        hue = (hue + ord(char)) % 360
    return hue


def color_for_pilot(pilot: str) -> str:
    """Stable CSS color for a pilot.

    Different pilots may share a color; this is a display aid only.
    """
    return f"hsl({pilot_hue(pilot)} 90% 45%)"


def radius_for(
    avg_climb_kts: float,
    floor: float = RADIUS_FLOOR_M,
    scale: float = RADIUS_SCALE_M,
) -> float:
    """Circle radius in metres, growing linearly with climb rate."""
    return max(floor, scale * avg_climb_kts)


def center_of(
    hotspots: Sequence[Hotspot],
    initial_view: tuple[float, float, int] | None = None,
) -> MapView:
    """Where the map opens.

    An explicit ``initial_view`` wins. Otherwise the map centers on the mean
    position of ``hotspots``, or on DEFAULT_VIEW when there are none.
    """
    if initial_view is not None:
        lat, lon, zoom = initial_view
        return MapView(lat, lon, zoom)
    if hotspots:
        lat = sum(h.lat for h in hotspots) / len(hotspots)
        lon = sum(h.lon for h in hotspots) / len(hotspots)
        return MapView(lat, lon, FIT_ZOOM)
    return MapView(*DEFAULT_VIEW)


def format_climb(avg_climb_kts: float) -> str:
    return f"{avg_climb_kts:.2f} kt"


def format_coords(lat: float, lon: float) -> str:
    return f"{lat:.5f}, {lon:.5f}"


def format_flights(flights: Sequence[str] | None) -> str | None:
    """Comma-joined flight ids, or None when there are none."""
    if not flights:
        return None
    return ", ".join(flights)


def format_summary(shown: int, total: int, thermals: int) -> str:
    return f"Showing {shown} of {total} hotspots · {thermals} thermals"
