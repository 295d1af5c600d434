"""Entry point for running thermal-hotspots as a module.

Usage:
    python -m thermal_hotspots [command] [options]
"""

from thermal_hotspots.cli import main

if __name__ == "__main__":
    main()
