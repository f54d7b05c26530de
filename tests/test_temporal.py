"""Tests for the time-of-day filter."""

import unittest
from datetime import datetime

from support import make_trips, sample_trips

from bikeflow.temporal import (
    NO_FILTER,
    add_minute_columns,
    filter_trips_by_time,
    format_time,
    in_time_window,
    minutes_since_midnight,
    time_label,
    validate_time_filter,
)


class TestMinutesSinceMidnight(unittest.TestCase):
    def test_scalar(self):
        self.assertEqual(minutes_since_midnight(datetime(2024, 3, 1, 10, 30)), 630)
        self.assertEqual(minutes_since_midnight(datetime(2024, 3, 1, 0, 0)), 0)
        self.assertEqual(minutes_since_midnight(datetime(2024, 3, 1, 23, 59, 59)), 1439)

    def test_series(self):
        trips = sample_trips()
        self.assertEqual(list(minutes_since_midnight(trips["started_at"])), [480, 600, 1430, 720, 30])


class TestInTimeWindow(unittest.TestCase):
    def test_no_filter_includes_everything(self):
        self.assertTrue(in_time_window(0, 1439, NO_FILTER))

    def test_window_boundaries(self):
        self.assertTrue(in_time_window(540, 540, 600))
        self.assertTrue(in_time_window(660, 660, 600))
        self.assertFalse(in_time_window(539, 539, 600))
        self.assertFalse(in_time_window(661, 661, 600))

    def test_end_time_alone_matches(self):
        self.assertTrue(in_time_window(0, 650, 600))

    def test_no_wraparound_at_midnight(self):
        """A trip at 00:30 is 1400 minutes from 23:50, not 40."""
        self.assertFalse(in_time_window(30, 30, 1430))
        self.assertFalse(in_time_window(1430, 1430, 10))


class TestFilterTripsByTime(unittest.TestCase):
    def test_no_filter_returns_input(self):
        trips = sample_trips()
        self.assertIs(filter_trips_by_time(trips, NO_FILTER), trips)

    def test_matches_scalar_predicate(self):
        trips = sample_trips()
        started = minutes_since_midnight(trips["started_at"])
        ended = minutes_since_midnight(trips["ended_at"])
        for anchor in range(0, 1440, 30):
            expected = [
                i for i in range(len(trips)) if in_time_window(started.iloc[i], ended.iloc[i], anchor)
            ]
            result = filter_trips_by_time(trips, anchor)
            self.assertEqual(list(result.index), expected, f"anchor {anchor}")

    def test_precomputed_minutes_give_same_rows(self):
        trips = sample_trips()
        enriched = add_minute_columns(trips)
        for anchor in (30, 600, 1430):
            self.assertEqual(
                list(filter_trips_by_time(enriched, anchor).index),
                list(filter_trips_by_time(trips, anchor).index),
            )

    def test_add_minute_columns_copies(self):
        trips = sample_trips()
        add_minute_columns(trips)
        self.assertNotIn("started_minutes", trips.columns)

    def test_late_night_trip_excluded_from_early_anchor(self):
        trips = make_trips([("A", "B", "2024-03-01 23:50", "2024-03-01 23:59")])
        self.assertTrue(filter_trips_by_time(trips, 10).empty)


class TestValidateTimeFilter(unittest.TestCase):
    def test_accepts_valid_values(self):
        for value in (NO_FILTER, 0, 600, 1439, 600.0):
            self.assertEqual(validate_time_filter(value), int(value))

    def test_rejects_out_of_range(self):
        for value in (-2, 1440, 10.5, "abc", None):
            with self.assertRaises(ValueError):
                validate_time_filter(value)

    def test_rejects_booleans(self):
        for value in (True, False):
            with self.assertRaises(ValueError):
                validate_time_filter(value)


class TestLabels(unittest.TestCase):
    def test_format_time(self):
        self.assertEqual(format_time(0), "12:00 AM")
        self.assertEqual(format_time(600), "10:00 AM")
        self.assertEqual(format_time(765), "12:45 PM")
        self.assertEqual(format_time(1439), "11:59 PM")

    def test_time_label(self):
        self.assertEqual(time_label(NO_FILTER), "(any time)")
        self.assertEqual(time_label(600), "10:00 AM")


if __name__ == "__main__":
    unittest.main()
