"""Map visualization for thermal-hotspots.

Generates a standalone interactive HTML page using Leaflet.js: one circle per
hotspot colored by pilot and sized by climb rate, a pilot tag bar, an optional
card list and a basemap switcher. Filtering and selection run client-side with
the same rules as ``thermal_hotspots.services.selection``.
"""

from __future__ import annotations

import html
import http.server
import json
import logging
import socketserver
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from thermal_hotspots.config import DisplayConfig
from thermal_hotspots.models.records import Hotspot, RecordStore
from thermal_hotspots.models.state import Basemap, FilterState
from thermal_hotspots.services.controller import HotspotView, ViewController
from thermal_hotspots.services.selection import find_hotspot
from thermal_hotspots.views.presentation import (
    MapView,
    center_of,
    color_for_pilot,
    format_climb,
    format_coords,
    format_flights,
    radius_for,
)

logger = logging.getLogger("thermal_hotspots.map")

LEAFLET_VERSION = "1.9.4"


@dataclass(frozen=True)
class TileLayer:
    """Tile source for a basemap."""

    label: str
    url: str
    attribution: str
    max_zoom: int = 19
    subdomains: str = "abc"

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "url": self.url,
            "attribution": self.attribution,
            "maxZoom": self.max_zoom,
            "subdomains": self.subdomains,
        }


BASEMAPS: dict[Basemap, TileLayer] = {
    Basemap.STREET: TileLayer(
        label="Street",
        url="https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
        attribution='&copy; <a href="https://www.openstreetmap.org/copyright">OSM</a>',
    ),
    Basemap.SATELLITE: TileLayer(
        label="Satellite",
        url="https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
        attribution="Tiles &copy; Esri &mdash; Source: Esri, Maxar, Earthstar Geographics",
        max_zoom=18,
    ),
    Basemap.TOPO: TileLayer(
        label="Topo",
        url="https://{s}.tile.opentopomap.org/{z}/{x}/{y}.png",
        attribution='&copy; <a href="https://www.openstreetmap.org/copyright">OSM</a>, '
        '&copy; <a href="https://opentopomap.org">OpenTopoMap</a> (CC-BY-SA)',
        max_zoom=17,
    ),
    Basemap.DARK: TileLayer(
        label="Dark",
        url="https://{s}.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}{r}.png",
        attribution='&copy; <a href="https://www.openstreetmap.org/copyright">OSM</a> '
        '&copy; <a href="https://carto.com/attributions">CARTO</a>',
        max_zoom=20,
        subdomains="abcd",
    ),
}


@dataclass(frozen=True)
class CircleMarker:
    """A hotspot drawn as a circle."""

    hotspot_id: str
    lat: float
    lon: float
    radius: float
    color: str
    weight: int = 2
    fill_opacity: float = 0.25


@dataclass(frozen=True)
class Popup:
    """Details shown for the selected hotspot."""

    hotspot_id: str
    lat: float
    lon: float
    title: str
    lines: tuple[str, ...]


@dataclass(frozen=True)
class MapScene:
    """What the map shows for one state."""

    center: MapView
    tiles: TileLayer
    circles: list[CircleMarker] = field(default_factory=list)
    popup: Popup | None = None


def popup_lines(hotspot: Hotspot) -> tuple[str, ...]:
    """Text lines of a hotspot popup, below its name."""
    lines = [
        f"Avg climb: {format_climb(hotspot.avg_climb_kts)}",
        f"Occurrences: {hotspot.count}",
        f"Pilot: {hotspot.pilot}",
    ]
    flights = format_flights(hotspot.flights)
    if flights:
        lines.append(f"Flights: {flights}")
    lines.append(format_coords(hotspot.lat, hotspot.lon))
    return tuple(lines)


class MapPresenter:
    """Turns a hotspot list into a map scene and reports map interactions.

    ``on_select`` receives a hotspot id when a circle is clicked and None when
    the popup is closed; ``on_basemap_change`` receives the new Basemap.
    """

    def __init__(
        self,
        display: DisplayConfig | None = None,
        on_select: Callable[[str | None], Any] | None = None,
        on_basemap_change: Callable[[Basemap], Any] | None = None,
    ) -> None:
        self.display = display or DisplayConfig()
        self.on_select = on_select
        self.on_basemap_change = on_basemap_change

    def radius(self, hotspot: Hotspot) -> float:
        return radius_for(hotspot.avg_climb_kts, self.display.radius_floor, self.display.radius_scale)

    def present(
        self,
        hotspots: Sequence[Hotspot],
        selected_id: str | None,
        basemap: Basemap,
        initial_view: tuple[float, float, int] | None = None,
    ) -> MapScene:
        """Build the scene for the given hotspots.

        A ``selected_id`` that is not among ``hotspots`` shows no popup.
        """
        circles = [
            CircleMarker(
                hotspot_id=h.id,
                lat=h.lat,
                lon=h.lon,
                radius=self.radius(h),
                color=color_for_pilot(h.pilot),
            )
            for h in hotspots
        ]

        popup = None
        selected = find_hotspot(hotspots, selected_id)
        if selected is not None:
            popup = Popup(
                hotspot_id=selected.id,
                lat=selected.lat,
                lon=selected.lon,
                title=selected.name,
                lines=popup_lines(selected),
            )

        return MapScene(
            center=center_of(hotspots, initial_view),
            tiles=BASEMAPS[basemap],
            circles=circles,
            popup=popup,
        )

    def click(self, hotspot_id: str) -> None:
        """A hotspot circle was clicked."""
        if self.on_select is not None:
            self.on_select(hotspot_id)

    def close_popup(self) -> None:
        """The popup of the selected hotspot was closed."""
        if self.on_select is not None:
            self.on_select(None)

    def switch_basemap(self, basemap: Basemap) -> None:
        """The user picked another base layer."""
        if self.on_basemap_change is not None:
            self.on_basemap_change(basemap)

    def render_html(self, view: HotspotView) -> str:
        """Render the interactive page for a controller view."""
        scene = self.present(
            view.hotspots,
            view.state.selected_hotspot_id,
            view.state.basemap,
            self.display.initial_view,
        )
        return _generate_page_html(view, scene, self)


def generate_map(
    store: RecordStore,
    state: FilterState | None = None,
    display: DisplayConfig | None = None,
) -> str:
    """Generate the HTML hotspot map.

    Args:
        store: Loaded thermals and hotspots.
        state: Initial pilot filter, selection, list visibility and basemap.
        display: Display parameters (circle sizing, initial view).

    Returns:
        HTML content as string.
    """
    display = display or DisplayConfig()
    if state is None:
        state = FilterState(list_visible=display.show_list, basemap=display.basemap)

    controller = ViewController(store, state, display.initial_view)
    presenter = MapPresenter(display)
    controller.attach(presenter)

    view = controller.view()
    logger.info(view.summary)
    return presenter.render_html(view)


def _js(value: Any) -> str:
    """Serialize a value for inline <script> use."""
    return json.dumps(value).replace("</", "<\\/")


def _hotspot_payload(hotspot: Hotspot, presenter: MapPresenter) -> dict[str, Any]:
    data = hotspot.to_dict()
    data["color"] = color_for_pilot(hotspot.pilot)
    data["radius"] = presenter.radius(hotspot)
    return data


def _generate_page_html(view: HotspotView, scene: MapScene, presenter: MapPresenter) -> str:
    """Generate the page with map, tag bar and card list.

    Args:
        view: Controller view for the initial state.
        scene: Map scene for the initial state.
        presenter: Presenter holding display parameters.

    Returns:
        HTML content.
    """
    hotspots_json = [_hotspot_payload(h, presenter) for h in view.baseline]
    pilots_json = [{"name": p, "color": color_for_pilot(p)} for p in view.pilots]
    basemaps_json = {b.value: tiles.to_dict() for b, tiles in BASEMAPS.items()}
    initial_state = view.state.to_dict()
    center = scene.center.to_list()
    title = "Thermal Hotspots Explorer"

    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(title)}</title>
    <link rel="stylesheet" href="https://unpkg.com/leaflet@{LEAFLET_VERSION}/dist/leaflet.css">
    <style>
        * {{ box-sizing: border-box; }}
        body {{ margin: 0; padding: 0; font: 14px/1.4 Arial, Helvetica, sans-serif; }}
        header {{
            position: fixed;
            top: 0;
            left: 0;
            right: 0;
            z-index: 1000;
            background: rgba(255,255,255,0.85);
            border-bottom: 1px solid #ddd;
            padding: 10px 16px;
        }}
        .header-row {{ display: flex; align-items: center; justify-content: space-between; }}
        .header-row h1 {{ font-size: 22px; margin: 0 16px 0 0; display: inline-block; }}
        .subtitle {{ font-size: 13px; opacity: 0.7; }}
        button {{
            border: 1px solid #ccc;
            background: white;
            border-radius: 6px;
            padding: 5px 12px;
            cursor: pointer;
        }}
        button:hover {{ box-shadow: 0 1px 4px rgba(0,0,0,0.2); }}
        button:disabled {{ opacity: 0.5; cursor: default; box-shadow: none; }}
        #tag-bar {{ display: flex; flex-wrap: wrap; align-items: center; gap: 6px; margin-top: 8px; }}
        .tag {{ border-radius: 999px; }}
        .tag.active {{ background: black; color: white; }}
        #summary {{ margin-left: 8px; font-size: 12px; opacity: 0.6; }}
        #content {{ position: fixed; top: 104px; left: 0; right: 0; bottom: 0; display: flex; }}
        #list {{ display: none; width: 33%; min-width: 280px; overflow-y: auto; padding: 12px; }}
        #content.split #list {{ display: block; }}
        #content.split #map {{ margin: 12px; border: 1px solid #ddd; border-radius: 16px; }}
        #map {{ flex: 1; }}
        .card {{ border: 1px solid #ddd; border-radius: 16px; padding: 12px 16px; margin-bottom: 10px; cursor: pointer; }}
        .card.selected {{ border-color: #333; box-shadow: 0 1px 6px rgba(0,0,0,0.25); }}
        .card-head {{ display: flex; align-items: flex-start; justify-content: space-between; }}
        .card-head h3 {{ margin: 0; font-size: 15px; }}
        .pilot-badge {{ border-radius: 999px; padding: 1px 8px; font-size: 12px; color: white; margin-left: 12px; }}
        .card-stats {{ display: grid; grid-template-columns: 1fr 1fr; gap: 8px; margin-top: 8px; }}
        .stat-label {{ opacity: 0.6; }}
        .stat-value {{ font-weight: bold; }}
        .card-flights {{ margin-top: 6px; font-size: 12px; opacity: 0.7; white-space: nowrap; overflow: hidden; text-overflow: ellipsis; }}
        .empty {{ border: 1px solid #ddd; border-radius: 12px; padding: 12px; opacity: 0.7; }}
        .popup-title {{ font-weight: bold; }}
        .popup-meta {{ margin-top: 4px; font-size: 12px; opacity: 0.6; }}
    </style>
</head>
<body>
    <header>
        <div class="header-row">
            <div><h1>Hotspots</h1><span class="subtitle">{html.escape(title)}</span></div>
            <button id="list-toggle" type="button"></button>
        </div>
        <div id="tag-bar"></div>
    </header>
    <div id="content">
        <div id="list"></div>
        <div id="map"></div>
    </div>
    <script src="https://unpkg.com/leaflet@{LEAFLET_VERSION}/dist/leaflet.js"></script>
    <script>
        var hotspots = {_js(hotspots_json)};
        var pilots = {_js(pilots_json)};
        var basemaps = {_js(basemaps_json)};
        var thermalCount = {view.thermal_count};
        var state = {_js(initial_state)};

        var map = L.map('map').setView([{center[0]}, {center[1]}], {center[2]});

        // Base layers
        var baseLayers = {{}};
        var layersByLabel = {{}};
        Object.keys(basemaps).forEach(function(key) {{
            var b = basemaps[key];
            var layer = L.tileLayer(b.url, {{
                maxZoom: b.maxZoom,
                subdomains: b.subdomains,
                attribution: b.attribution
            }});
            layer._basemapKey = key;
            baseLayers[b.label] = layer;
            layersByLabel[key] = layer;
        }});
        layersByLabel[state.basemap].addTo(map);
        L.control.layers(baseLayers, null, {{ position: 'topright' }}).addTo(map);
        map.on('baselayerchange', function(e) {{
            state.basemap = e.layer._basemapKey;
        }});

        var circlesLayer = L.layerGroup().addTo(map);
        var rendering = false;

        function escapeHtml(text) {{
            return String(text)
                .replace(/&/g, '&amp;')
                .replace(/</g, '&lt;')
                .replace(/>/g, '&gt;')
                .replace(/"/g, '&quot;');
        }}

        function filtered() {{
            if (state.selectedPilots.length === 0) return hotspots;
            return hotspots.filter(function(h) {{
                return state.selectedPilots.indexOf(h.pilot) !== -1;
            }});
        }}

        function findHotspot(list, id) {{
            for (var i = 0; i < list.length; i++) {{
                if (list[i].id === id) return list[i];
            }}
            return null;
        }}

        function togglePilot(pilot) {{
            var idx = state.selectedPilots.indexOf(pilot);
            if (idx === -1) {{
                state.selectedPilots.push(pilot);
            }} else {{
                state.selectedPilots.splice(idx, 1);
            }}
            state.selectedHotspotId = null;
            render();
        }}

        function clearPilots() {{
            state.selectedPilots = [];
            state.selectedHotspotId = null;
            render();
        }}

        function selectHotspot(id) {{
            state.selectedHotspotId = id;
            render();
        }}

        function toggleList() {{
            state.listVisible = !state.listVisible;
            render();
            map.invalidateSize();
        }}

        function popupHtml(h) {{
            var html = '<div class="popup-title">' + escapeHtml(h.name) + '</div>' +
                '<div>Avg climb: ' + h.avgClimbKts.toFixed(2) + ' kt</div>' +
                '<div>Occurrences: ' + h.count + '</div>' +
                '<div>Pilot: ' + escapeHtml(h.pilot) + '</div>';
            if (h.flights && h.flights.length) {{
                html += '<div class="popup-meta">Flights: ' + escapeHtml(h.flights.join(', ')) + '</div>';
            }}
            html += '<div class="popup-meta">' + h.lat.toFixed(5) + ', ' + h.lon.toFixed(5) + '</div>';
            return html;
        }}

        function renderTagBar(list) {{
            var bar = document.getElementById('tag-bar');
            bar.innerHTML = '<span><b>Pilots:</b></span>';
            pilots.forEach(function(p) {{
                var active = state.selectedPilots.indexOf(p.name) !== -1;
                var btn = document.createElement('button');
                btn.type = 'button';
                btn.className = 'tag' + (active ? ' active' : '');
                btn.textContent = p.name;
                btn.title = active ? 'Click to unselect' : 'Click to select';
                btn.setAttribute('aria-pressed', active ? 'true' : 'false');
                btn.addEventListener('click', function() {{ togglePilot(p.name); }});
                bar.appendChild(btn);
            }});
            var all = document.createElement('button');
            all.type = 'button';
            all.id = 'clear-pilots';
            all.className = 'tag';
            all.textContent = 'All';
            all.title = 'Clear all filters';
            all.disabled = state.selectedPilots.length === 0;
            all.addEventListener('click', clearPilots);
            bar.appendChild(all);
            var summary = document.createElement('span');
            summary.id = 'summary';
            summary.textContent = 'Showing ' + list.length + ' of ' + hotspots.length +
                ' hotspots \\u00b7 ' + thermalCount + ' thermals';
            bar.appendChild(summary);
        }}

        function renderCards(list) {{
            var panel = document.getElementById('list');
            panel.innerHTML = '';
            if (list.length === 0) {{
                panel.innerHTML = '<div class="empty">No hotspots match the current pilot filter.</div>';
                return;
            }}
            list.forEach(function(h) {{
                var card = document.createElement('article');
                card.className = 'card' + (h.id === state.selectedHotspotId ? ' selected' : '');
                card.setAttribute('data-id', h.id);
                var html = '<div class="card-head"><h3>' + escapeHtml(h.name) + '</h3>' +
                    '<span class="pilot-badge" style="background-color:' + h.color + '" title="Pilot: ' +
                    escapeHtml(h.pilot) + '">' + escapeHtml(h.pilot) + '</span></div>' +
                    '<div class="card-stats">' +
                    '<div><div class="stat-label">Avg climb</div><div class="stat-value">' +
                    h.avgClimbKts.toFixed(2) + ' kt</div></div>' +
                    '<div><div class="stat-label">Occurrences</div><div class="stat-value">' +
                    h.count + '</div></div></div>';
                if (h.flights && h.flights.length) {{
                    html += '<div class="card-flights">Flights: ' + escapeHtml(h.flights.join(', ')) + '</div>';
                }}
                card.innerHTML = html;
                card.addEventListener('click', function() {{ selectHotspot(h.id); }});
                panel.appendChild(card);
            }});
        }}

        function renderMap(list) {{
            circlesLayer.clearLayers();
            list.forEach(function(h) {{
                var circle = L.circle([h.lat, h.lon], {{
                    radius: h.radius,
                    color: h.color,
                    weight: 2,
                    fillColor: h.color,
                    fillOpacity: 0.25
                }});
                circle.on('click', function(e) {{
                    L.DomEvent.stopPropagation(e);
                    selectHotspot(h.id);
                }});
                circlesLayer.addLayer(circle);
            }});

            map.closePopup();
            var selected = findHotspot(list, state.selectedHotspotId);
            if (selected) {{
                L.popup()
                    .setLatLng([selected.lat, selected.lon])
                    .setContent(popupHtml(selected))
                    .openOn(map);
            }}
        }}

        map.on('popupclose', function() {{
            if (!rendering && state.selectedHotspotId !== null) {{
                selectHotspot(null);
            }}
        }});

        function render() {{
            rendering = true;
            var list = filtered();
            if (state.selectedHotspotId !== null && !findHotspot(list, state.selectedHotspotId)) {{
                state.selectedHotspotId = null;
            }}
            document.getElementById('content').className = state.listVisible ? 'split' : '';
            var toggle = document.getElementById('list-toggle');
            toggle.textContent = state.listVisible ? 'Hide List' : 'Show List';
            toggle.title = state.listVisible ? 'Hide list' : 'Show list';
            renderTagBar(list);
            renderCards(list);
            renderMap(list);
            rendering = false;
        }}

        document.getElementById('list-toggle').addEventListener('click', toggleList);
        render();
    </script>
</body>
</html>"""


def serve_map(
    html_path: Path,
    port: int = 8080,
    host: str = "127.0.0.1",
) -> None:
    """Start a local HTTP server to serve the map.

    Args:
        html_path: Path to the HTML file.
        port: Server port.
        host: Server host.
    """
    directory = html_path.parent

    class Handler(http.server.SimpleHTTPRequestHandler):
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            super().__init__(*args, directory=str(directory), **kwargs)

        def log_message(self, format: str, *args: object) -> None:
            logger.debug(format, *args)

    # Allow port reuse to avoid "Address already in use" errors
    socketserver.TCPServer.allow_reuse_address = True

    with socketserver.TCPServer((host, port), Handler) as httpd:
        url = f"http://{host}:{port}/{html_path.name}"
        print(f"Serving at {url}")
        print("Press Ctrl+C to stop")

        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped")
