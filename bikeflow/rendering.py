"""Pydeck layers for the station traffic map."""

from __future__ import annotations

from typing import Iterable, List, Optional

import pandas as pd
import pydeck as pdk

from bikeflow.datasets import DatasetConfig

DEPARTURE_COLOR = (70, 130, 180)   # steelblue
ARRIVAL_COLOR = (255, 140, 0)      # darkorange
BIKE_LANE_COLOR = [50, 160, 60, 160]


def flow_color(departure_ratio: float, alpha: int = 153) -> List[int]:
    """Blend the departure and arrival colors; 1 is all departures, 0 all arrivals."""
    r, g, b = (
        int(round(dep * departure_ratio + arr * (1 - departure_ratio)))
        for dep, arr in zip(DEPARTURE_COLOR, ARRIVAL_COLOR)
    )
    return [r, g, b, alpha]


def station_layer(markers: pd.DataFrame) -> pdk.Layer:
    """Scatterplot of stations sized by ``radius`` (pixels) and colored by ``departure_ratio``."""
    valid = markers[markers["lat"].notna() & markers["lon"].notna()].copy()
    valid["color"] = valid["departure_ratio"].apply(flow_color)
    return pdk.Layer(
        "ScatterplotLayer",
        data=valid[["station_id", "lon", "lat", "radius", "color", "tooltip"]],
        id="stations",
        get_position=["lon", "lat"],
        get_radius="radius",
        radius_units="pixels",
        get_fill_color="color",
        stroked=True,
        get_line_color=[255, 255, 255],
        line_width_min_pixels=1,
        pickable=True,
        auto_highlight=True,
    )


def bike_lane_layers(geojson_docs: Iterable[Optional[dict]]) -> List[pdk.Layer]:
    layers = []
    for i, doc in enumerate(geojson_docs):
        if not doc:
            continue
        layers.append(
            pdk.Layer(
                "GeoJsonLayer",
                data=doc,
                id=f"bike-lanes-{i}",
                stroked=True,
                filled=False,
                get_line_color=BIKE_LANE_COLOR,
                line_width_min_pixels=3,
            )
        )
    return layers


def build_station_deck(cfg: DatasetConfig, markers: pd.DataFrame, bike_lanes: Iterable[Optional[dict]] = ()) -> pdk.Deck:
    lon, lat = cfg.center
    view_state = pdk.ViewState(longitude=lon, latitude=lat, zoom=cfg.zoom, min_zoom=5, max_zoom=18, pitch=0, bearing=0)
    tooltip = {
        "html": "<b>{station_id}</b><br/>{tooltip}",
        "style": {"color": "white"},
    }
    return pdk.Deck(
        layers=[*bike_lane_layers(bike_lanes), station_layer(markers)],
        initial_view_state=view_state,
        tooltip=tooltip,
        map_style="light",
    )
