"""Tests for the map viewport and its event subscriptions."""

import math
import unittest

from bikeflow.events import EventEmitter
from bikeflow.viewport import MapViewport

CENTER = (-71.09415, 42.36027)


class TestEventEmitter(unittest.TestCase):
    def test_emit_runs_handlers_in_order(self):
        emitter = EventEmitter()
        calls = []
        emitter.on("move", lambda: calls.append(1))
        emitter.on("move", lambda: calls.append(2))

        self.assertEqual(emitter.emit("move"), 2)
        self.assertEqual(calls, [1, 2])

    def test_unsubscribe(self):
        emitter = EventEmitter()
        calls = []
        subscription = emitter.on("move", lambda: calls.append(1))

        subscription.unsubscribe()
        subscription.unsubscribe()
        emitter.emit("move")

        self.assertEqual(calls, [])
        self.assertFalse(subscription.active)
        self.assertEqual(emitter.listener_count("move"), 0)

    def test_handler_can_unsubscribe_during_emit(self):
        emitter = EventEmitter()
        calls = []
        holder = {}

        def once():
            calls.append("once")
            holder["sub"].unsubscribe()

        holder["sub"] = emitter.on("move", once)
        emitter.on("move", lambda: calls.append("always"))

        emitter.emit("move")
        emitter.emit("move")
        self.assertEqual(calls, ["once", "always", "always"])

    def test_emit_without_handlers(self):
        self.assertEqual(EventEmitter().emit("resize"), 0)


class TestMapViewport(unittest.TestCase):
    def setUp(self):
        self.viewport = MapViewport(CENTER, zoom=12, width=800, height=600)

    def test_center_projects_to_middle(self):
        x, y = self.viewport.project(*CENTER)
        self.assertAlmostEqual(x, 400)
        self.assertAlmostEqual(y, 300)

    def test_orientation(self):
        x_east, _ = self.viewport.project(CENTER[0] + 0.01, CENTER[1])
        _, y_north = self.viewport.project(CENTER[0], CENTER[1] + 0.01)
        self.assertGreater(x_east, 400)
        self.assertLess(y_north, 300)

    def test_zoom_doubles_offsets(self):
        point = (CENTER[0] + 0.01, CENTER[1] - 0.01)
        x1, y1 = self.viewport.project(*point)
        self.viewport.zoom_to(13)
        x2, y2 = self.viewport.project(*point)
        self.assertAlmostEqual(x2 - 400, 2 * (x1 - 400))
        self.assertAlmostEqual(y2 - 300, 2 * (y1 - 300))

    def test_zoom_is_clamped(self):
        self.viewport.zoom_to(30)
        self.assertEqual(self.viewport.zoom, 18)
        self.viewport.zoom_to(1)
        self.assertEqual(self.viewport.zoom, 5)

    def test_pan_by_shifts_points(self):
        self.viewport.pan_by(100, 0)
        x, y = self.viewport.project(*CENTER)
        self.assertAlmostEqual(x, 300, places=4)
        self.assertAlmostEqual(y, 300, places=4)

    def test_known_web_mercator_positions(self):
        viewport = MapViewport((0, 0), zoom=5, width=800, height=600)
        world = 512 * 2 ** 5

        x, y = viewport.project(90, 0)
        self.assertAlmostEqual(x, world / 4 + 400, places=4)
        self.assertAlmostEqual(y, 300, places=4)

        # The Web-Mercator latitude limit sits on the top edge of the world.
        _, y_top = viewport.project(0, 85.051129)
        self.assertAlmostEqual(y_top, 300 - world / 2, places=2)

        # Latitudes beyond the limit are pinned to it.
        _, y_pole = viewport.project(0, 89.9)
        self.assertAlmostEqual(y_pole, y_top)

    def test_pan_by_round_trip(self):
        self.viewport.pan_by(250, -120)
        self.viewport.pan_by(-250, 120)
        self.assertAlmostEqual(self.viewport.center[0], CENTER[0], places=6)
        self.assertAlmostEqual(self.viewport.center[1], CENTER[1], places=6)

    def test_resize_keeps_center_in_middle(self):
        self.viewport.resize(1000, 400)
        x, y = self.viewport.project(*CENTER)
        self.assertAlmostEqual(x, 500)
        self.assertAlmostEqual(y, 200)

    def test_nan_coordinates(self):
        x, y = self.viewport.project(float("nan"), 42.0)
        self.assertTrue(math.isnan(x))
        self.assertTrue(math.isnan(y))

    def test_events(self):
        seen = []
        for event in ("move", "zoom", "resize", "moveend"):
            self.viewport.on(event, lambda event=event: seen.append(event))

        self.viewport.pan_to(-71.1, 42.37)
        self.viewport.zoom_to(14)
        self.viewport.resize(640, 480)

        self.assertEqual(seen, ["move", "moveend", "zoom", "move", "moveend", "resize"])


if __name__ == "__main__":
    unittest.main()
