"""Print the busiest stations for a time-of-day window."""

from __future__ import annotations

import argparse
import logging
import sys

from bikeflow.datasets import DATASETS, load_config
from bikeflow.loaders import FeedLoadError, load_feeds
from bikeflow.pipeline import TrafficPipeline
from bikeflow.temporal import NO_FILTER, time_label, validate_time_filter
from bikeflow.traffic import top_stations
from bikeflow.viewport import MapViewport

logger = logging.getLogger(__name__)


def _time_arg(value: str) -> int:
    """Accept a minute of day, ``HH:MM`` or ``any``."""
    if value.lower() == "any":
        return NO_FILTER
    try:
        if ":" in value:
            hours, minutes = value.split(":", 1)
            return validate_time_filter(int(hours) * 60 + int(minutes))
        return validate_time_filter(int(value))
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="BikeFlow station traffic report")
    parser.add_argument("--system", default=None, choices=DATASETS.keys())
    parser.add_argument(
        "--time",
        type=_time_arg,
        default=NO_FILTER,
        help="Window anchor as minute of day, HH:MM, or 'any' (default).",
    )
    parser.add_argument("--top", type=int, default=10, help="Number of stations to list.")
    parser.add_argument("--csv", default=None, help="Write every station's markers to this CSV file.")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cfg = load_config(args.system)

    try:
        stations, trips = load_feeds(cfg)
    except FeedLoadError:
        return 1

    pipeline = TrafficPipeline(MapViewport(cfg.center, zoom=cfg.zoom))
    pipeline.load(stations, trips)
    snapshot = pipeline.set_time_filter(args.time)

    print(f"{cfg.display_name}, {time_label(args.time)}: {snapshot.trip_count:,} trips")
    for row in top_stations(snapshot.stations, n=args.top).itertuples(index=False):
        print(f"  {row.short_name:<10} {row.total_traffic:>7,}  ({row.departures:,} departures, {row.arrivals:,} arrivals)")

    if args.csv:
        pipeline.marker_frame().to_csv(args.csv, index=False)
        logger.info("Wrote %d markers to %s", len(pipeline.markers), args.csv)
    return 0


if __name__ == "__main__":
    sys.exit(main())
