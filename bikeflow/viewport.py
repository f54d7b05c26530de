"""Web-Mercator viewport that projects station coordinates to screen pixels.

This models the map widget the station markers sit on: it owns the camera
(center, zoom, size) and notifies subscribers through ``move``, ``zoom``,
``resize`` and ``moveend`` events whenever the projection changes.
"""

from __future__ import annotations

import math
from typing import Tuple

from pyproj import Transformer

from bikeflow.events import EventEmitter

TILE_SIZE = 512
MAX_LATITUDE = 85.051129
# Half the width of the EPSG:3857 world, in meters.
MERCATOR_ORIGIN = math.pi * 6378137.0

VIEWPORT_EVENTS = ("move", "zoom", "resize", "moveend")

_TO_MERCATOR = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)
_TO_LONLAT = Transformer.from_crs("EPSG:3857", "EPSG:4326", always_xy=True)


class MapViewport(EventEmitter):
    def __init__(
        self,
        center: Tuple[float, float],
        zoom: float = 12,
        width: int = 800,
        height: int = 600,
        min_zoom: float = 5,
        max_zoom: float = 18,
    ):
        super().__init__()
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.center = (float(center[0]), float(center[1]))
        self.zoom = self._clamp_zoom(zoom)
        self.width = width
        self.height = height

    def _clamp_zoom(self, zoom: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, float(zoom)))

    @property
    def world_size(self) -> float:
        return TILE_SIZE * 2 ** self.zoom

    def _world(self, lon: float, lat: float) -> Tuple[float, float]:
        """World pixel of ``(lon, lat)``, origin at the north-west corner."""
        lat = max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))
        mx, my = _TO_MERCATOR.transform(lon, lat)
        scale = self.world_size / (2 * MERCATOR_ORIGIN)
        return (mx + MERCATOR_ORIGIN) * scale, (MERCATOR_ORIGIN - my) * scale

    def _unworld(self, x: float, y: float) -> Tuple[float, float]:
        scale = (2 * MERCATOR_ORIGIN) / self.world_size
        return _TO_LONLAT.transform(x * scale - MERCATOR_ORIGIN, MERCATOR_ORIGIN - y * scale)

    def project(self, lon: float, lat: float) -> Tuple[float, float]:
        """Pixel position of ``(lon, lat)`` relative to the top-left of the viewport."""
        lon, lat = float(lon), float(lat)
        if math.isnan(lon) or math.isnan(lat):
            return math.nan, math.nan
        x, y = self._world(lon, lat)
        cx, cy = self._world(*self.center)
        return x - cx + self.width / 2, y - cy + self.height / 2

    def pan_to(self, lon: float, lat: float) -> None:
        self.center = (float(lon), float(lat))
        self.emit("move")
        self.emit("moveend")

    def pan_by(self, dx: float, dy: float) -> None:
        """Shift the camera by a pixel offset."""
        cx, cy = self._world(*self.center)
        self.pan_to(*self._unworld(cx + dx, cy + dy))

    def zoom_to(self, zoom: float) -> None:
        self.zoom = self._clamp_zoom(zoom)
        self.emit("zoom")
        self.emit("move")
        self.emit("moveend")

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.emit("resize")
