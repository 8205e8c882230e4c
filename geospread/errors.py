from __future__ import annotations

from typing import Any, Optional


class GeoSpreadError(Exception):
    """Base class for recoverable geospread errors."""


class MissingGeoData(GeoSpreadError):
    def __init__(self, resource_name: str, reason: Optional[str] = None) -> None:
        self.resource_name = resource_name
        self.reason = reason
        message = f"{resource_name} has no GPS data"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class MalformedTabularResource(GeoSpreadError, ValueError):
    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Could not parse tabular data from {source}: {reason}")


class InvalidCoordinate(GeoSpreadError, ValueError):
    def __init__(self, lat: Any, lng: Any, reason: str, record: Optional[str] = None) -> None:
        self.lat = lat
        self.lng = lng
        self.reason = reason
        self.record = record
        prefix = f"{record}: " if record else ""
        super().__init__(f"{prefix}invalid coordinate ({lat!r}, {lng!r}): {reason}")

    def for_record(self, record: str) -> "InvalidCoordinate":
        return InvalidCoordinate(self.lat, self.lng, self.reason, record=record)


class EmptyCentroidInput(AssertionError):
    """Raised when a centroid is requested for zero markers."""


class GpsReadError(GeoSpreadError):
    """The image bytes could not be decoded for EXIF GPS data."""
