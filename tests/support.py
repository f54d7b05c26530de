"""Small station and trip frames shared by the test modules."""

import pandas as pd


def make_stations(ids=("A", "B", "C")):
    coords = {
        "A": (-71.0941, 42.3601),
        "B": (-71.1040, 42.3656),
        "C": (-71.0589, 42.3601),
    }
    return pd.DataFrame(
        {
            "short_name": list(ids),
            "lon": [coords.get(i, (-71.08, 42.35))[0] for i in ids],
            "lat": [coords.get(i, (-71.08, 42.35))[1] for i in ids],
        }
    )


def make_trips(rows):
    """Build trips from ``(start, end, started_at, ended_at)`` tuples."""
    df = pd.DataFrame(rows, columns=["start_station_id", "end_station_id", "started_at", "ended_at"])
    df["started_at"] = pd.to_datetime(df["started_at"])
    df["ended_at"] = pd.to_datetime(df["ended_at"])
    return df


def sample_trips():
    # Z is not a known station.
    return make_trips(
        [
            ("A", "B", "2024-03-01 08:00", "2024-03-01 08:20"),
            ("A", "A", "2024-03-01 10:00", "2024-03-01 10:30"),
            ("B", "C", "2024-03-01 23:50", "2024-03-02 00:10"),
            ("C", "Z", "2024-03-02 12:00", "2024-03-02 12:15"),
            ("Z", "A", "2024-03-02 00:30", "2024-03-02 00:45"),
        ]
    )
