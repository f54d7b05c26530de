"""Load the station feed (GBFS-style JSON) and the monthly trip log (CSV)."""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path
from typing import Optional, Tuple

import pandas as pd
import requests

from bikeflow.datasets import DEFAULT_TIMEOUT, DatasetConfig

logger = logging.getLogger(__name__)

STATION_COLUMNS = ["short_name", "lat", "lon"]
TRIP_COLUMNS = ["start_station_id", "end_station_id", "started_at", "ended_at"]
# Trailing ``Z`` or a ``+HH:MM`` / ``-HHMM`` UTC offset.
UTC_OFFSET = r"(?:Z|[+-]\d{2}:?\d{2})$"


class FeedLoadError(Exception):
    """A station or trip feed could not be fetched or parsed."""


def _fetch_text(source: str, timeout: float) -> str:
    """Read ``source`` from disk if it is an existing path, otherwise over HTTP."""
    path = Path(source)
    try:
        if path.exists():
            return path.read_text(encoding="utf-8")
    except OSError:
        # Long URLs can make ``exists`` itself fail on some platforms.
        pass
    try:
        response = requests.get(source, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise FeedLoadError(f"Could not download {source}: {e}") from e
    return response.text


def _require_columns(df: pd.DataFrame, required, source: str) -> None:
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise FeedLoadError(f"Missing required columns in {source}: {', '.join(missing)}")


def load_stations(source: str, timeout: float = DEFAULT_TIMEOUT) -> pd.DataFrame:
    """Load stations as a frame with string ``short_name`` and float ``lat``/``lon``."""
    text = _fetch_text(source, timeout)
    try:
        payload = json.loads(text)
        records = payload["data"]["stations"]
    except (ValueError, KeyError, TypeError) as e:
        raise FeedLoadError(f"Malformed station feed {source}: {e}") from e

    stations = pd.DataFrame(records)
    _require_columns(stations, STATION_COLUMNS, source)

    stations["short_name"] = stations["short_name"].astype(str)
    stations["lat"] = pd.to_numeric(stations["lat"], errors="coerce")
    stations["lon"] = pd.to_numeric(stations["lon"], errors="coerce")

    duplicates = stations["short_name"].duplicated()
    if duplicates.any():
        logger.warning("Dropping %d stations with duplicate short_name", int(duplicates.sum()))
        stations = stations[~duplicates].reset_index(drop=True)

    logger.info("Loaded %d stations from %s", len(stations), source)
    return stations


def _parse_datetime(series: pd.Series, timezone: Optional[str]) -> pd.Series:
    """Parse timestamps to naive local wall-clock time in ``timezone``.

    Offset-qualified values are normalized through UTC so a log whose offset
    changes mid-file (daylight saving) still parses; naive values are taken as
    local time already.
    """
    aware = series.astype(str).str.strip().str.contains(UTC_OFFSET, na=False)
    if aware.any():
        dt_series = pd.to_datetime(series, errors="coerce", utc=True, format="ISO8601")
        return dt_series.dt.tz_convert(timezone or "UTC").dt.tz_localize(None)
    return pd.to_datetime(series, errors="coerce", format="ISO8601")


def load_trips(source: str, timezone: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT) -> pd.DataFrame:
    """Load trips with string station ids and parsed ``started_at``/``ended_at``."""
    text = _fetch_text(source, timeout)
    try:
        trips = pd.read_csv(
            io.StringIO(text),
            dtype={"start_station_id": str, "end_station_id": str},
            low_memory=False,
        )
    except (ValueError, pd.errors.ParserError) as e:
        raise FeedLoadError(f"Malformed trip log {source}: {e}") from e

    _require_columns(trips, TRIP_COLUMNS, source)

    try:
        trips["started_at"] = _parse_datetime(trips["started_at"], timezone)
        trips["ended_at"] = _parse_datetime(trips["ended_at"], timezone)
    except (ValueError, TypeError) as e:
        raise FeedLoadError(f"Unreadable timestamps in {source}: {e}") from e

    unparsed = trips["started_at"].isna() | trips["ended_at"].isna()
    if unparsed.any():
        logger.warning("%d trips have unparseable timestamps and will only match the unfiltered view", int(unparsed.sum()))

    logger.info("Loaded %d trips from %s", len(trips), source)
    return trips


def load_feeds(cfg: DatasetConfig) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Load both feeds for ``cfg``; either both succeed or FeedLoadError is raised."""
    try:
        stations = load_stations(cfg.stations_url, timeout=cfg.timeout)
        trips = load_trips(cfg.trips_url, timezone=cfg.timezone, timeout=cfg.timeout)
    except FeedLoadError as e:
        logger.error(f"Error loading {cfg.system_name} feeds: {e}")
        raise
    return stations, trips


def load_bike_lanes(url: str, timeout: float = DEFAULT_TIMEOUT) -> Optional[dict]:
    """Fetch a bike-lane GeoJSON overlay; returns None when it is unavailable."""
    try:
        return json.loads(_fetch_text(url, timeout))
    except (FeedLoadError, ValueError) as e:
        logger.warning(f"Could not load bike lanes from {url}: {e}")
        return None
