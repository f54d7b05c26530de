"""Dataset metadata shared by the loaders, the dashboard and the CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SYSTEM = "bluebikes"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class DatasetConfig:
    system_name: str
    display_name: str
    stations_url: str
    trips_url: str
    timezone: str
    center: tuple[float, float]
    zoom: float
    bike_lane_urls: tuple[str, ...] = ()
    timeout: float = DEFAULT_TIMEOUT


DATASETS: dict[str, DatasetConfig] = {
    "bluebikes": DatasetConfig(
        system_name="bluebikes",
        display_name="Bluebikes",
        stations_url="https://dsc106.com/labs/lab07/data/bluebikes-stations.json",
        trips_url="https://dsc106.com/labs/lab07/data/bluebikes-traffic-2024-03.csv",
        timezone="America/New_York",
        center=(-71.09415, 42.36027),
        zoom=12,
        bike_lane_urls=(
            "https://bostonopendata-boston.opendata.arcgis.com/datasets/boston::existing-bike-network-2022.geojson",
            "https://raw.githubusercontent.com/cambridgegis/cambridgegis_data/main/Recreation/Bike_Facilities/RECREATION_BikeFacilities.geojson",
        ),
    ),
}


def get_dataset(system_name: str) -> DatasetConfig:
    try:
        return DATASETS[system_name]
    except KeyError as exc:
        raise ValueError(f"Unsupported system: {system_name}") from exc


def load_config(system_name: str | None = None) -> DatasetConfig:
    """Resolve the dataset for ``system_name`` with environment overrides applied.

    ``BIKEFLOW_SYSTEM`` picks the system when no name is given;
    ``BIKEFLOW_STATIONS_URL``, ``BIKEFLOW_TRIPS_URL`` and ``BIKEFLOW_TIMEOUT``
    replace the matching fields of the registered dataset.
    """
    cfg = get_dataset(system_name or os.getenv("BIKEFLOW_SYSTEM", DEFAULT_SYSTEM))

    overrides = {}
    if os.getenv("BIKEFLOW_STATIONS_URL"):
        overrides["stations_url"] = os.environ["BIKEFLOW_STATIONS_URL"]
    if os.getenv("BIKEFLOW_TRIPS_URL"):
        overrides["trips_url"] = os.environ["BIKEFLOW_TRIPS_URL"]
    timeout = os.getenv("BIKEFLOW_TIMEOUT")
    if timeout:
        try:
            overrides["timeout"] = float(timeout)
        except ValueError as exc:
            raise ValueError(f"BIKEFLOW_TIMEOUT must be a number, got {timeout!r}") from exc

    return replace(cfg, **overrides) if overrides else cfg
