"""Per-station arrival and departure counts."""

from __future__ import annotations

import logging

import pandas as pd

logger = logging.getLogger(__name__)

TRAFFIC_COLUMNS = ["arrivals", "departures", "total_traffic"]


def compute_station_traffic(stations: pd.DataFrame, trips: pd.DataFrame) -> pd.DataFrame:
    """Count arrivals and departures for every station over ``trips``.

    Returns a new frame; ``stations`` is left untouched and any traffic columns
    it already carries are overwritten in the copy. Trips pointing at station
    ids that are not in ``stations`` are counted but never read back, and
    stations without trips get zeros.
    """
    departures = trips["start_station_id"].value_counts()
    arrivals = trips["end_station_id"].value_counts()

    result = stations.drop(columns=TRAFFIC_COLUMNS, errors="ignore").copy()
    ids = result["short_name"]
    result["arrivals"] = ids.map(arrivals).fillna(0).astype(int)
    result["departures"] = ids.map(departures).fillna(0).astype(int)
    result["total_traffic"] = result["arrivals"] + result["departures"]

    logger.debug(
        "Aggregated %d trips over %d stations (%d arrivals, %d departures matched)",
        len(trips),
        len(result),
        result["arrivals"].sum(),
        result["departures"].sum(),
    )
    return result


def top_stations(stations: pd.DataFrame, n: int = 10) -> pd.DataFrame:
    """The ``n`` busiest stations of an aggregated frame."""
    if stations.empty:
        return stations
    return stations.sort_values(["total_traffic", "short_name"], ascending=[False, True]).head(n)


def hourly_traffic(trips: pd.DataFrame) -> pd.DataFrame:
    """Trip counts per start hour, one row per hour 0-23."""
    if trips.empty:
        counts = pd.Series(dtype=int)
    else:
        counts = trips["started_at"].dt.hour.dropna().astype(int).value_counts()
    counts = counts.reindex(range(24), fill_value=0)
    return counts.rename_axis("hour").reset_index(name="trips")
