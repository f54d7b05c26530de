"""BikeFlow - bike-share station traffic by time of day."""

__version__ = "0.1.0"

from .pipeline import Marker, PipelineNotReady, TrafficPipeline, TrafficSnapshot
from .temporal import NO_FILTER, filter_trips_by_time
from .traffic import compute_station_traffic
from .viewport import MapViewport

__all__ = [
    "TrafficPipeline",
    "TrafficSnapshot",
    "Marker",
    "PipelineNotReady",
    "MapViewport",
    "NO_FILTER",
    "compute_station_traffic",
    "filter_trips_by_time",
]
