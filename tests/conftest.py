import pathlib
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Ensure project root is in sys.path
repo_root = pathlib.Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from geospread.ingest import GpsReader  # noqa: E402
from geospread.errors import GpsReadError  # noqa: E402
from geospread.models import GeoPoint, Marker  # noqa: E402
from geospread.render import Renderer  # noqa: E402

BASE_TIME = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
INGEST_TIME = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeGpsReader(GpsReader):
    """Looks up GPS positions by payload; raises for payloads mapped to an exception."""

    def __init__(self, positions):
        self.positions = positions
        self.calls = []

    def read_gps(self, data):
        self.calls.append(data)
        value = self.positions.get(data)
        if isinstance(value, Exception):
            raise value
        return value


class RecordingRenderer(Renderer):
    def __init__(self):
        self.calls = []
        self.markers = []
        self.ray = None
        self.viewport = None

    def draw_markers(self, markers):
        self.calls.append("draw_markers")
        self.markers = list(markers)

    def draw_ray(self, ray):
        self.calls.append("draw_ray")
        self.ray = ray

    def clear_ray(self):
        self.calls.append("clear_ray")
        self.ray = None

    def set_viewport(self, viewport):
        self.calls.append("set_viewport")
        self.viewport = viewport


@pytest.fixture
def clock():
    return lambda: INGEST_TIME


@pytest.fixture
def make_marker():
    """
    Factory for markers; ``minutes`` offsets the time from a fixed base.
    """

    def _make(lat=37.5, lng=127.0, minutes=0, color="red", name=None, time=None):
        return Marker(
            lat=lat,
            lng=lng,
            name=name or f"m{minutes}",
            time=time or BASE_TIME + timedelta(minutes=minutes),
            color=color,
        )

    return _make


@pytest.fixture
def fake_reader():
    return FakeGpsReader(
        {
            b"one": GeoPoint(37.5, 127.0),
            b"none": None,
            b"broken": GpsReadError("cannot identify image file"),
            b"three": GeoPoint(35.1, 129.0),
            b"far": GeoPoint(123.0, 10.0),
        }
    )


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def ingest_time():
    return INGEST_TIME
