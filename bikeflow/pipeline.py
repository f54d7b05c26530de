"""Keeps station markers in sync with the time filter and the map viewport.

Two triggers drive the pipeline:

* a time-filter change re-filters the full trip log, re-aggregates it against
  the original station list and re-styles every marker (radius, flow level,
  tooltip) by station id;
* a viewport change re-projects every marker and touches nothing else.

Each aggregation pass produces a new :class:`TrafficSnapshot`; the pipeline
only ever swaps the reference it holds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Dict, List, Optional

import pandas as pd

from bikeflow.events import Subscription
from bikeflow.scales import SqrtScale, flow_level, radius_scale_for
from bikeflow.temporal import NO_FILTER, add_minute_columns, filter_trips_by_time, validate_time_filter
from bikeflow.traffic import compute_station_traffic
from bikeflow.viewport import VIEWPORT_EVENTS

logger = logging.getLogger(__name__)


class PipelineNotReady(RuntimeError):
    """Raised when markers are requested before station and trip data are loaded."""


@dataclass(frozen=True, eq=False)
class TrafficSnapshot:
    time_filter: int
    stations: pd.DataFrame
    trip_count: int
    radius_scale: SqrtScale


@dataclass
class Marker:
    station_id: str
    lon: float
    lat: float
    x: float = 0.0
    y: float = 0.0
    radius: float = 0.0
    departure_ratio: float = 0.0
    tooltip: str = ""


def station_tooltip(total: int, departures: int, arrivals: int) -> str:
    return f"{total} trips ({departures} departures, {arrivals} arrivals)"


class TrafficPipeline:
    def __init__(self, viewport):
        self.viewport = viewport
        self.stations: Optional[pd.DataFrame] = None
        self.trips: Optional[pd.DataFrame] = None
        self.snapshot: Optional[TrafficSnapshot] = None
        self.markers: Dict[str, Marker] = {}
        self._subscriptions: List[Subscription] = []

    @property
    def ready(self) -> bool:
        return self.snapshot is not None

    @property
    def time_filter(self) -> int:
        return self.snapshot.time_filter if self.snapshot else NO_FILTER

    def load(self, stations: pd.DataFrame, trips: pd.DataFrame) -> TrafficSnapshot:
        """Aggregate all trips, build one marker per station and place them on the map."""
        trips = add_minute_columns(trips)
        snapshot = self._aggregate(stations, trips, NO_FILTER)

        markers = {
            row.short_name: Marker(station_id=row.short_name, lon=float(row.lon), lat=float(row.lat))
            for row in snapshot.stations.itertuples(index=False)
        }

        # Only commit once everything above succeeded.
        self.stations = stations
        self.trips = trips
        self.markers = markers
        self.snapshot = snapshot
        self._restyle()
        self.update_positions()
        logger.info("Pipeline loaded %d stations and %d trips", len(stations), len(trips))
        return snapshot

    def _aggregate(self, stations: pd.DataFrame, trips: pd.DataFrame, time_filter: int) -> TrafficSnapshot:
        subset = filter_trips_by_time(trips, time_filter)
        aggregated = compute_station_traffic(stations, subset)
        return TrafficSnapshot(
            time_filter=time_filter,
            stations=aggregated,
            trip_count=len(subset),
            radius_scale=radius_scale_for(aggregated, time_filter),
        )

    def _require_ready(self) -> None:
        if not self.ready:
            raise PipelineNotReady("Station and trip data have not been loaded")

    def set_time_filter(self, time_filter: int) -> TrafficSnapshot:
        """Recompute traffic for the window around ``time_filter`` (or all trips for NO_FILTER)."""
        self._require_ready()
        time_filter = validate_time_filter(time_filter)
        # Always start from the full trip log and the original stations.
        self.snapshot = self._aggregate(self.stations, self.trips, time_filter)
        self._restyle()
        logger.info(
            "Time filter %d matched %d of %d trips",
            time_filter,
            self.snapshot.trip_count,
            len(self.trips),
        )
        return self.snapshot

    def _restyle(self) -> None:
        stations = self.snapshot.stations
        radii = self.snapshot.radius_scale.apply(stations["total_traffic"])
        levels = flow_level(stations["departures"], stations["total_traffic"])
        rows = zip(
            stations["short_name"],
            radii,
            levels,
            stations["total_traffic"],
            stations["departures"],
            stations["arrivals"],
        )
        # Every aggregate carries the same station ids the markers were built from.
        for station_id, radius, level, total, departures, arrivals in rows:
            marker = self.markers[station_id]
            marker.radius = radius
            marker.departure_ratio = level
            marker.tooltip = station_tooltip(total, departures, arrivals)

    def _place(self, marker: Marker) -> None:
        marker.x, marker.y = self.viewport.project(marker.lon, marker.lat)

    def update_positions(self) -> None:
        """Re-project every marker with the viewport's current projection."""
        self._require_ready()
        for marker in self.markers.values():
            self._place(marker)
        logger.debug("Re-projected %d markers", len(self.markers))

    def _on_viewport_change(self, *_args) -> None:
        # Nothing to place until data has loaded.
        if self.ready:
            self.update_positions()

    def attach(self) -> None:
        """Follow viewport changes until :meth:`detach` is called."""
        if self._subscriptions:
            return
        self._subscriptions = [self.viewport.on(event, self._on_viewport_change) for event in VIEWPORT_EVENTS]

    def detach(self) -> None:
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []

    def __enter__(self):
        self.attach()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.detach()
        return False

    def marker_frame(self) -> pd.DataFrame:
        """Markers joined with their station's traffic, one row per station."""
        self._require_ready()
        columns = [f.name for f in fields(Marker)]
        markers = pd.DataFrame([vars(m) for m in self.markers.values()], columns=columns)
        traffic = self.snapshot.stations.drop(columns=["lon", "lat"], errors="ignore")
        return markers.merge(traffic, left_on="station_id", right_on="short_name", how="left")
