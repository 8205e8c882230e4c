from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

from .errors import InvalidCoordinate


def validate_coordinate(lat: float, lng: float) -> None:
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidCoordinate(lat, lng, "coordinates must be finite numbers")
    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinate(lat, lng, "latitude must be within [-90, 90]")
    if not -180.0 <= lng <= 180.0:
        raise InvalidCoordinate(lat, lng, "longitude must be within [-180, 180]")


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    @property
    def as_latlon(self) -> Tuple[float, float]:
        return (self.lat, self.lng)

    @property
    def as_lonlat(self) -> Tuple[float, float]:
        return (self.lng, self.lat)


@dataclass(frozen=True)
class Marker:
    lat: float
    lng: float
    name: str
    time: datetime
    color: str

    def __post_init__(self) -> None:
        validate_coordinate(self.lat, self.lng)

    @property
    def as_latlon(self) -> Tuple[float, float]:
        return (self.lat, self.lng)

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)

    @property
    def iso_time(self) -> str:
        return self.time.isoformat()

    @property
    def utc_date(self) -> str:
        return self.time.astimezone(timezone.utc).strftime("%Y-%m-%d")


@dataclass(frozen=True)
class PredictionRay:
    start: GeoPoint
    end: GeoPoint
    angle_degrees: float
    early: GeoPoint
    late: GeoPoint
    arrow_factor: float

    @property
    def is_degenerate(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True)
class Viewport:
    center: GeoPoint
    zoom: int
    bounds: Optional[Tuple[GeoPoint, GeoPoint]] = None
