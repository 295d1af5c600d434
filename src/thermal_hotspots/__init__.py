"""Thermal Hotspots map viewer.

A command-line tool that renders precomputed thermal hotspots (places where
glider and paraglider pilots repeatedly found lift) as an interactive Leaflet
map with a card list, pilot filtering and basemap switching.
"""

__version__ = "0.1.0"

__author__ = "thermal_hotspots contributors"
__license__ = "Apache-2.0"

__all__ = ["__version__"]
