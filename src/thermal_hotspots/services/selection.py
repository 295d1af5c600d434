"""Hotspot selection: baseline ordering, pilot tags and pilot filtering.

All functions are pure and total over their inputs.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence, Set
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from thermal_hotspots.models.records import Hotspot

# Climb rates above this are aggregation noise and never shown
MAX_CLIMB_KTS = 15.0


def baseline(hotspots: Iterable[Hotspot]) -> list[Hotspot]:
    """Hotspots eligible for display, strongest first.

    Drops hotspots above MAX_CLIMB_KTS, then orders by average climb
    (descending) and count (descending). The sort is stable, so hotspots
    equal on both keys keep their input order.

    Args:
        hotspots: Raw hotspot collection (may be empty).

    Returns:
        Ordered list of displayable hotspots.
    """
    eligible = [h for h in hotspots if h.avg_climb_kts <= MAX_CLIMB_KTS]
    return sorted(eligible, key=lambda h: (-h.avg_climb_kts, -h.count))


def pilot_tags(hotspots: Iterable[Hotspot]) -> list[str]:
    """Distinct pilots in first-seen order."""
    return list(dict.fromkeys(h.pilot for h in hotspots))


def pilot_counts(hotspots: Iterable[Hotspot]) -> dict[str, int]:
    """Number of hotspots attributed to each pilot, in first-seen order."""
    return dict(Counter(h.pilot for h in hotspots))


def apply_filter(hotspots: Sequence[Hotspot], selected_pilots: Set[str]) -> list[Hotspot]:
    """Restrict hotspots to the selected pilots.

    An empty selection means "all pilots" and returns the input unchanged.
    Otherwise the relative order of the input is preserved.
    """
    if not selected_pilots:
        return list(hotspots)
    return [h for h in hotspots if h.pilot in selected_pilots]


def toggle_pilot(selected_pilots: Set[str], pilot: str) -> frozenset[str]:
    """Add ``pilot`` to the selection, or remove it if already present."""
    if pilot in selected_pilots:
        return frozenset(selected_pilots) - {pilot}
    return frozenset(selected_pilots) | {pilot}


def find_hotspot(hotspots: Iterable[Hotspot], hotspot_id: str | None) -> Hotspot | None:
    """Look up a hotspot by id."""
    if hotspot_id is None:
        return None
    for hotspot in hotspots:
        if hotspot.id == hotspot_id:
            return hotspot
    return None


def reconcile_selection(hotspots: Iterable[Hotspot], selected_id: str | None) -> str | None:
    """Keep ``selected_id`` only if it refers to one of ``hotspots``."""
    if find_hotspot(hotspots, selected_id) is None:
        return None
    return selected_id
