"""Scales that turn station traffic into marker radius and flow styling."""

from __future__ import annotations

import math
from bisect import bisect_right
from typing import Sequence, Tuple

import numpy as np
import pandas as pd

from bikeflow.temporal import NO_FILTER

UNFILTERED_RADIUS = (0.0, 25.0)
FILTERED_RADIUS = (3.0, 50.0)
FLOW_LEVELS = (0.0, 0.5, 1.0)


class SqrtScale:
    """Square-root scale: marker area grows linearly with the input value.

    Inputs are not clamped. A degenerate domain (both ends equal) maps every
    input to the start of the range.
    """

    def __init__(self, domain: Tuple[float, float], output_range: Tuple[float, float]):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(output_range[0]), float(output_range[1]))

    @staticmethod
    def _sqrt(value: float) -> float:
        return math.copysign(math.sqrt(abs(value)), value)

    def __call__(self, value: float) -> float:
        d0, d1 = (self._sqrt(d) for d in self.domain)
        r0, r1 = self.range
        if d1 == d0:
            return r0
        t = (self._sqrt(float(value)) - d0) / (d1 - d0)
        return r0 + t * (r1 - r0)

    def apply(self, values: pd.Series) -> pd.Series:
        return values.map(self)

    def __repr__(self):
        return f"SqrtScale(domain={self.domain}, range={self.range})"


class QuantizeScale:
    """Split a continuous domain into equal buckets, one per output level.

    Values below or above the domain fall into the first or last bucket.
    NaN falls into the first bucket.
    """

    def __init__(self, domain: Tuple[float, float] = (0.0, 1.0), levels: Sequence[float] = FLOW_LEVELS):
        if not levels:
            raise ValueError("QuantizeScale needs at least one output level")
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = tuple(levels)
        lo, hi = self.domain
        n = len(self.range)
        self.thresholds = [lo + (hi - lo) * i / n for i in range(1, n)]

    def __call__(self, value: float) -> float:
        if value is None or math.isnan(value):
            return self.range[0]
        return self.range[bisect_right(self.thresholds, value)]

    def __repr__(self):
        return f"QuantizeScale(domain={self.domain}, range={self.range})"


def radius_range(time_filter: int) -> Tuple[float, float]:
    """Pixel radius range: wider and floored while a time window is active."""
    return UNFILTERED_RADIUS if time_filter == NO_FILTER else FILTERED_RADIUS


def radius_scale_for(stations: pd.DataFrame, time_filter: int) -> SqrtScale:
    max_traffic = int(stations["total_traffic"].max()) if not stations.empty else 0
    return SqrtScale((0, max_traffic), radius_range(time_filter))


def departure_ratio(departures: pd.Series, total: pd.Series) -> pd.Series:
    """Share of each station's traffic that departs; NaN where there is no traffic."""
    return departures / total.replace(0, np.nan)


flow_scale = QuantizeScale()


def flow_level(departures: pd.Series, total: pd.Series) -> pd.Series:
    return departure_ratio(departures, total).map(flow_scale)
