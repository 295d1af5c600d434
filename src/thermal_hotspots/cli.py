"""Command-line interface for thermal-hotspots.

Provides CLI commands for generating the interactive hotspot map and for
listing hotspots and pilots in the terminal.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from thermal_hotspots import __version__
from thermal_hotspots.config import DEFAULT_CONFIG_PATH, ConfigError, load_config
from thermal_hotspots.lib.logging import setup_logging, verbosity_to_level
from thermal_hotspots.models.state import Basemap, FilterState

if TYPE_CHECKING:
    from thermal_hotspots.config import Config
    from thermal_hotspots.models.records import RecordStore

DEFAULT_MAP_FILENAME = Path("hotspots.html")


class JSONOutput:
    """Helper for JSON output formatting."""

    def __init__(self, enabled: bool = False) -> None:
        self.enabled = enabled
        self._data: dict[str, Any] = {}

    def set(self, key: str, value: Any) -> None:
        """Set a value in the output."""
        self._data[key] = value

    def update(self, data: dict[str, Any]) -> None:
        """Update with multiple values."""
        self._data.update(data)

    def output(self) -> None:
        """Print JSON output if enabled."""
        if self.enabled:
            click.echo(json.dumps(self._data, indent=2, default=str, ensure_ascii=False))


class Context:
    """CLI context holding shared configuration and state."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.verbose: int = 0
        self.quiet: bool = False
        self.json_output: bool = False
        self.output: JSONOutput = JSONOutput()

    def log(self, message: str, level: int = 0) -> None:
        """Log a message if verbosity allows.

        Args:
            message: Message to log.
            level: Required verbosity level (0=normal, 1=-v, 2=-vv).
        """
        if self.json_output:
            return
        if self.quiet and level == 0:
            return
        if level <= self.verbose or level == 0:
            click.echo(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        if self.json_output:
            self.output.set("error", message)
            self.output.set("status", "error")
        else:
            click.echo(f"Error: {message}", err=True)

    def fail(self, message: str, code: int = 1) -> None:
        """Report an error and exit."""
        self.error(message)
        if self.json_output:
            self.output.output()
        sys.exit(code)


pass_context = click.make_pass_decorator(Context, ensure=True)


def _require_config(ctx: Context) -> Config:
    if ctx.config is None:
        ctx.fail("Configuration not loaded")
    assert ctx.config is not None
    return ctx.config


def _load_store(config: Config) -> RecordStore:
    from thermal_hotspots.models.records import load_records

    return load_records(
        config.data.directory,
        hotspots_file=config.data.hotspots_file,
        thermals_file=config.data.thermals_file,
    )


pilot_option = click.option(
    "--pilot",
    "-p",
    "pilots",
    multiple=True,
    help="Only show hotspots of this pilot (can be repeated)",
)


@click.group()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help=f"Configuration file path (default: {DEFAULT_CONFIG_PATH})",
)
@click.option(
    "--data-dir",
    "-d",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Directory with hotspots.json and thermals.json (default: ./data)",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-error output",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output in JSON format",
)
@click.option(
    "--log-file",
    is_flag=True,
    help="Also write a debug log to <data-dir>/logs/",
)
@click.version_option(version=__version__, prog_name="thermal-hotspots")
@pass_context
def main(
    ctx: Context,
    config_path: Path | None,
    data_dir: Path | None,
    verbose: int,
    quiet: bool,
    json_output: bool,
    log_file: bool,
) -> None:
    """Thermal Hotspots map viewer.

    Render precomputed thermal hotspots on an interactive map, filter them
    by pilot and list them in the terminal.
    """
    ctx.verbose = verbose
    ctx.quiet = quiet
    ctx.json_output = json_output
    ctx.output = JSONOutput(json_output)

    try:
        ctx.config = load_config(config_path)
    except (ConfigError, OSError) as e:
        ctx.fail(f"Invalid configuration: {e}")

    if data_dir is not None:
        ctx.config.data.directory = data_dir

    setup_logging(
        config=ctx.config,
        console_level=verbosity_to_level(verbose, quiet),
        log_to_file=log_file,
    )


@main.command(name="map")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output HTML file (default: stdout, or ./hotspots.html with --serve or --json)",
)
@pilot_option
@click.option(
    "--basemap",
    type=click.Choice([b.value for b in Basemap]),
    default=None,
    help="Initial base layer (default: from config, street)",
)
@click.option(
    "--show-list",
    is_flag=True,
    help="Open with the hotspot list visible",
)
@click.option(
    "--select",
    "selected_id",
    help="Open with this hotspot selected",
)
@click.option(
    "--serve",
    is_flag=True,
    help="Start local HTTP server to view map",
)
@click.option(
    "--host",
    default=None,
    help="Server host (default: 127.0.0.1)",
)
@click.option(
    "--port",
    type=int,
    default=None,
    help="Server port (default: 8080)",
)
@pass_context
def map_cmd(
    ctx: Context,
    output: Path | None,
    pilots: tuple[str, ...],
    basemap: str | None,
    show_list: bool,
    selected_id: str | None,
    serve: bool,
    host: str | None,
    port: int | None,
) -> None:
    """Generate the interactive hotspot map."""
    from thermal_hotspots.views.map import generate_map, serve_map

    config = _require_config(ctx)

    state = FilterState(
        selected_pilots=frozenset(pilots),
        selected_hotspot_id=selected_id,
        list_visible=show_list or config.display.show_list,
        basemap=Basemap(basemap) if basemap else config.display.basemap,
    )

    try:
        store = _load_store(config)
        html = generate_map(store, state, config.display)
    except Exception as e:
        ctx.fail(f"Map generation failed: {e}")

    if serve:
        output_path = output or DEFAULT_MAP_FILENAME
        output_path.write_text(html, encoding="utf-8")
        ctx.log(f"Map saved to {output_path}")
        serve_map(
            output_path,
            port=port or config.server.port,
            host=host or config.server.host,
        )
    elif output or ctx.json_output:
        # stdout carries the JSON report, so the page always goes to a file
        output_path = output or DEFAULT_MAP_FILENAME
        output_path.write_text(html, encoding="utf-8")
        if ctx.json_output:
            ctx.output.update({"status": "success", "output": str(output_path)})
            ctx.output.output()
        else:
            ctx.log(f"Map saved to {output_path}")
    else:
        click.echo(html)


@main.command(name="list")
@pilot_option
@click.option(
    "--limit",
    type=click.IntRange(min=0),
    default=None,
    help="Show at most this many hotspots",
)
@pass_context
def list_cmd(ctx: Context, pilots: tuple[str, ...], limit: int | None) -> None:
    """List hotspots, strongest climb first."""
    from thermal_hotspots.services.controller import ViewController
    from thermal_hotspots.views.listing import format_listing, listing_to_dict

    config = _require_config(ctx)

    try:
        store = _load_store(config)
    except Exception as e:
        ctx.fail(f"Loading hotspots failed: {e}")

    view = ViewController(store, FilterState(selected_pilots=frozenset(pilots))).view()

    if ctx.json_output:
        ctx.output.update({"status": "success", **listing_to_dict(view, limit)})
        ctx.output.output()
    else:
        click.echo(format_listing(view, limit))


@main.command(name="pilots")
@pass_context
def pilots_cmd(ctx: Context) -> None:
    """List pilot tags with their map color and hotspot count."""
    from thermal_hotspots.services.selection import baseline
    from thermal_hotspots.views.listing import format_pilot_table, pilot_table

    config = _require_config(ctx)

    try:
        store = _load_store(config)
    except Exception as e:
        ctx.fail(f"Loading hotspots failed: {e}")

    rows = pilot_table(baseline(store.hotspots))

    if ctx.json_output:
        ctx.output.update({"status": "success", "pilots": rows})
        ctx.output.output()
    else:
        click.echo(format_pilot_table(rows))


if __name__ == "__main__":
    main()
