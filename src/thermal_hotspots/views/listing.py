"""Text rendering of hotspot cards and pilot tags for the terminal."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from thermal_hotspots.models.records import Hotspot
from thermal_hotspots.services.controller import HotspotView
from thermal_hotspots.services.selection import pilot_counts
from thermal_hotspots.views.presentation import color_for_pilot, format_climb, format_flights

EMPTY_FILTER_MESSAGE = "No hotspots match the current pilot filter."


def format_card(hotspot: Hotspot) -> str:
    """Render one hotspot as a card.

    Example::

        Ridge Line  [Sam]
          Avg climb: 4.20 kt   Occurrences: 7
          Flights: f1, f2
    """
    lines = [
        f"{hotspot.name}  [{hotspot.pilot}]",
        f"  Avg climb: {format_climb(hotspot.avg_climb_kts)}   Occurrences: {hotspot.count}",
    ]
    flights = format_flights(hotspot.flights)
    if flights:
        lines.append(f"  Flights: {flights}")
    return "\n".join(lines)


def format_listing(view: HotspotView, limit: int | None = None) -> str:
    """Render the visible hotspots as cards followed by the summary line."""
    hotspots = view.hotspots if limit is None else view.hotspots[:limit]
    if not hotspots:
        return f"{EMPTY_FILTER_MESSAGE}\n\n{view.summary}"

    cards = "\n\n".join(format_card(h) for h in hotspots)
    return f"{cards}\n\n{view.summary}"


def listing_to_dict(view: HotspotView, limit: int | None = None) -> dict[str, Any]:
    """JSON-friendly form of the listing."""
    hotspots = view.hotspots if limit is None else view.hotspots[:limit]
    return {
        "hotspots": [h.to_dict() for h in hotspots],
        "shown": len(view.hotspots),
        "total": len(view.baseline),
        "thermals": view.thermal_count,
        "selectedPilots": sorted(view.state.selected_pilots),
    }


def pilot_table(hotspots: Iterable[Hotspot]) -> list[dict[str, Any]]:
    """Pilot tags with their color and number of hotspots, in first-seen order."""
    return [
        {"pilot": pilot, "color": color_for_pilot(pilot), "hotspots": count}
        for pilot, count in pilot_counts(hotspots).items()
    ]


def format_pilot_table(rows: list[dict[str, Any]]) -> str:
    if not rows:
        return "No pilots."
    width = max(len(row["pilot"]) for row in rows)
    lines = [f"{'Pilot'.ljust(width)}  Hotspots  Color"]
    for row in rows:
        lines.append(f"{row['pilot'].ljust(width)}  {row['hotspots']:>8}  {row['color']}")
    return "\n".join(lines)
