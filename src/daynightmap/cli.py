"""Command-line entry point: render the day/night map to PNG, SVG, or HTML.

Examples:
    daynightmap --projection equirectangular --output map.png
    daynightmap --profile grayscale --timestamp 1704888000 --format svg
    daynightmap --live --interval 60 --locate
"""

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from daynightmap.compute import render
from daynightmap.config import (
    ConfigError,
    RenderConfig,
    load_config,
    load_observer,
    parse_profile,
    parse_projection,
    parse_timestamp,
)
from daynightmap.location import GeocodingError, geocode, locate
from daynightmap.models import Frame, GeoPoint
from daynightmap.renderers.common import default_output_path
from daynightmap.renderers.static import save_static_map
from daynightmap.renderers.svg_2d import render_svg, render_svg_html
from daynightmap.scheduler import DEFAULT_INTERVAL, LiveMap

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="daynightmap",
        description="Render a day/night world map with sun and moon positions.",
    )
    parser.add_argument("--projection", help="equirectangular or mercator")
    parser.add_argument("--profile", help="color or grayscale")
    parser.add_argument("--stride", type=int, help="sampling stride in pixels")
    parser.add_argument("--width", type=int, help="canvas width in pixels")
    parser.add_argument("--height", type=int, help="canvas height in pixels")
    parser.add_argument("--timestamp", help="fixed Unix time (seconds or milliseconds)")
    parser.add_argument("--terminator", action="store_true", help="draw the day/night line")
    parser.add_argument("--lat", type=float, help="observer latitude")
    parser.add_argument("--lng", type=float, help="observer longitude")
    parser.add_argument("--locate", action="store_true", help="look up the observer from the public IP")
    parser.add_argument("--place", help="observer place name, geocoded with OpenStreetMap")
    parser.add_argument("--format", choices=("png", "svg", "html"), default="png")
    parser.add_argument("--output", type=Path, help="output file (default: results/...)")
    parser.add_argument("--base-map", type=Path, help="background image for PNG output")
    parser.add_argument("--lang", default="en", help="legend language for HTML output (en/ko)")
    parser.add_argument("--minimal", action="store_true", help="HTML map only: no legend, fills its container")
    parser.add_argument("--live", action="store_true", help="keep re-rendering on a timer")
    parser.add_argument("--interval", type=float, default=DEFAULT_INTERVAL, help="seconds between live frames")
    parser.add_argument("--json", action="store_true", help="print the derived info as JSON")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def config_from_args(args: argparse.Namespace, base: RenderConfig) -> RenderConfig:
    """Overlay explicit CLI flags on an environment-derived config."""
    changes: dict[str, object] = {}
    if args.projection:
        changes["projection"] = parse_projection(args.projection)
    if args.profile:
        changes["profile"] = parse_profile(args.profile)
    for name in ("stride", "width", "height"):
        value = getattr(args, name)
        if value is not None:
            changes[name] = value
    if args.timestamp:
        changes["fixed_instant"] = parse_timestamp(args.timestamp)
    if args.terminator:
        changes["draw_terminator"] = True
    return dataclasses.replace(base, **changes)


def observer_from_args(args: argparse.Namespace) -> GeoPoint | None:
    if args.place:
        if args.lat is not None or args.lng is not None:
            raise ConfigError("--place cannot be combined with --lat/--lng")
        try:
            point = asyncio.run(geocode(args.place))
        except GeocodingError as e:
            raise ConfigError(str(e)) from e
        if point is None:
            raise ConfigError(f"no match for place {args.place!r}")
        return point
    if args.lat is None and args.lng is None:
        return load_observer()
    if args.lat is None or args.lng is None:
        raise ConfigError("--lat and --lng must be given together")
    try:
        return GeoPoint(lat=args.lat, lng=args.lng)
    except ValueError as e:
        raise ConfigError(str(e)) from e


def write_frame(frame: Frame, args: argparse.Namespace) -> Path:
    """Write one frame in the requested format and return its path."""
    if args.format == "png":
        return save_static_map(frame, args.output, base_map=args.base_map)

    output = args.output or default_output_path(frame, args.format)
    output.parent.mkdir(parents=True, exist_ok=True)
    if args.format == "svg":
        output.write_text(render_svg(frame), encoding="utf-8")
    else:
        output.write_text(render_svg_html(frame, lang=args.lang, minimal=args.minimal), encoding="utf-8")
    return output


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        config = config_from_args(args, load_config())
        observer = observer_from_args(args)
    except ConfigError as e:
        parser.error(str(e))

    def sink(frame: Frame) -> None:
        path = write_frame(frame, args)
        if args.json:
            print(json.dumps(frame.summary(), ensure_ascii=False))
        print(f"Saved: {path}")

    if not args.live:
        if observer is None and args.locate:
            observer = asyncio.run(locate())
        sink(render(None, observer, config))
        return 0

    live = LiveMap(
        config,
        sink,
        interval=args.interval,
        observer=observer,
        locator=locate if args.locate else None,
    )
    try:
        asyncio.run(live.run())
    except KeyboardInterrupt:
        live.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
