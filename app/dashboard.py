"""Streamlit dashboard for BikeFlow."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from app.visualization import hourly_histogram
from bikeflow.datasets import DATASETS, load_config
from bikeflow.loaders import FeedLoadError, load_bike_lanes, load_feeds
from bikeflow.pipeline import TrafficPipeline
from bikeflow.rendering import build_station_deck
from bikeflow.temporal import MINUTES_PER_DAY, NO_FILTER, filter_trips_by_time, time_label
from bikeflow.traffic import hourly_traffic, top_stations
from bikeflow.viewport import MapViewport

st.set_page_config(page_title="BikeFlow", layout="wide")


@st.cache_data(show_spinner=False)
def fetch_feeds(system: str) -> tuple[pd.DataFrame, pd.DataFrame]:
    return load_feeds(load_config(system))


@st.cache_data(show_spinner=False)
def fetch_bike_lanes(system: str) -> list:
    cfg = load_config(system)
    return [load_bike_lanes(url, timeout=cfg.timeout) for url in cfg.bike_lane_urls]


def get_pipeline(system: str, stations: pd.DataFrame, trips: pd.DataFrame) -> TrafficPipeline:
    """One pipeline per browser session and system."""
    key = f"pipeline:{system}"
    pipeline = st.session_state.get(key)
    if pipeline is None:
        cfg = load_config(system)
        pipeline = TrafficPipeline(MapViewport(cfg.center, zoom=cfg.zoom))
        pipeline.load(stations, trips)
        pipeline.attach()
        st.session_state[key] = pipeline
    return pipeline


def sidebar_controls() -> tuple[str, int]:
    st.sidebar.header("Filters")
    system = st.sidebar.selectbox(
        "System", options=list(DATASETS.keys()), format_func=lambda key: DATASETS[key].display_name
    )
    time_filter = st.sidebar.slider("Filter by time", min_value=NO_FILTER, max_value=MINUTES_PER_DAY - 1, value=NO_FILTER)
    st.sidebar.markdown(f"**{time_label(time_filter)}**")
    return system, time_filter


def main() -> None:
    st.title("BikeFlow: station traffic by time of day")
    system, time_filter = sidebar_controls()
    cfg = load_config(system)

    with st.spinner(f"Loading {cfg.display_name} stations and trips..."):
        try:
            stations, trips = fetch_feeds(system)
        except FeedLoadError as e:
            st.error(f"Error loading {cfg.display_name} data: {e}")
            st.stop()

    pipeline = get_pipeline(system, stations, trips)
    if time_filter != pipeline.time_filter:
        pipeline.set_time_filter(time_filter)
    snapshot = pipeline.snapshot

    cols = st.columns(3)
    cols[0].metric("Trips in window", f"{snapshot.trip_count:,}")
    cols[1].metric("Active stations", f"{int((snapshot.stations['total_traffic'] > 0).sum()):,}")
    cols[2].metric("Window", time_label(time_filter))

    bike_lanes = fetch_bike_lanes(system)
    st.pydeck_chart(build_station_deck(cfg, pipeline.marker_frame(), bike_lanes))
    st.caption("Blue markers lean toward departures, orange toward arrivals.")

    chart_cols = st.columns(2)
    hourly = hourly_traffic(trips)
    chart_cols[0].altair_chart(
        hourly_histogram(hourly, "Trips by start hour", time_filter), use_container_width=True
    )
    busiest = top_stations(snapshot.stations, n=10)
    chart_cols[1].dataframe(
        busiest[["short_name", "total_traffic", "departures", "arrivals"]], hide_index=True
    )

    with st.expander("Trips in window"):
        st.dataframe(filter_trips_by_time(pipeline.trips, time_filter).head(100))


if __name__ == "__main__":
    main()
