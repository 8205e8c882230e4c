"""
Ingestion adapters.

Turns external records into :class:`~geospread.models.Marker` objects. Photos
go through a :class:`GpsReader` (EXIF GPS extraction) and delimited text goes
through a :class:`TableParser`; both are narrow capabilities so the adapters
never depend on how the bytes are decoded.

Per-record problems (no GPS block, bad coordinates) are collected as notices
and never abort a batch. A structurally broken table raises
:class:`~geospread.errors.MalformedTabularResource` before any marker exists.
"""

from __future__ import annotations

import io
import logging
import struct
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd
from PIL import ExifTags, Image, UnidentifiedImageError

from .errors import GeoSpreadError, GpsReadError, InvalidCoordinate, MalformedTabularResource, MissingGeoData
from .models import GeoPoint, Marker, validate_coordinate
from .time_utils import parse_timestamp_or_default, utc_now

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
TableSource = Union[str, Path, IO[str], IO[bytes]]


@dataclass(frozen=True)
class PhotoResource:
    name: str
    data: Optional[bytes] = None
    path: Optional[Path] = None

    @classmethod
    def from_path(cls, path: Path) -> "PhotoResource":
        return cls(name=path.name, path=path)

    def read(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path is None:
            raise OSError(f"{self.name} has neither data nor a path")
        return self.path.read_bytes()


@dataclass
class PhotoImportResult:
    markers: List[Marker] = field(default_factory=list)
    notices: List[GeoSpreadError] = field(default_factory=list)


@dataclass
class TableImportResult:
    markers: List[Marker] = field(default_factory=list)
    rejected: List[InvalidCoordinate] = field(default_factory=list)


class GpsReader(ABC):
    @abstractmethod
    def read_gps(self, data: bytes) -> Optional[GeoPoint]:
        """
        Return the GPS position embedded in an image.

        Returns None when the image carries no GPS latitude/longitude.

        Raises:
            GpsReadError: If the bytes cannot be decoded as an image.
        """


def _dms_to_degrees(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, (tuple, list)):
        if not value:
            return None
        parts = [float(part) for part in value] + [0.0, 0.0]
        degrees, minutes, seconds = parts[:3]
        return degrees + minutes / 60.0 + seconds / 3600.0
    return float(value)


def _ref(value: Any) -> str:
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    return str(value or "").strip("\x00 ").upper()


def gps_ifd_to_point(gps_info: Mapping[Any, Any]) -> Optional[GeoPoint]:
    """Convert a raw GPS IFD (numeric or named keys) to signed decimal degrees."""
    named: Dict[str, Any] = {}
    for tag, value in gps_info.items():
        named[ExifTags.GPSTAGS.get(tag, tag) if isinstance(tag, int) else tag] = value

    lat = _dms_to_degrees(named.get("GPSLatitude"))
    lng = _dms_to_degrees(named.get("GPSLongitude"))
    if lat is None or lng is None:
        return None
    if _ref(named.get("GPSLatitudeRef")) == "S":
        lat = -lat
    if _ref(named.get("GPSLongitudeRef")) == "W":
        lng = -lng
    return GeoPoint(lat, lng)


class PillowGpsReader(GpsReader):
    def read_gps(self, data: bytes) -> Optional[GeoPoint]:
        try:
            with Image.open(io.BytesIO(data)) as image:
                gps_info = image.getexif().get_ifd(ExifTags.IFD.GPSInfo)
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            EOFError,
            SyntaxError,
            ValueError,
            struct.error,
        ) as exc:
            raise GpsReadError(str(exc)) from exc
        if not gps_info:
            return None
        try:
            return gps_ifd_to_point(gps_info)
        except (TypeError, ValueError, ZeroDivisionError, struct.error) as exc:
            raise GpsReadError(f"unreadable GPS block: {exc}") from exc


class TableParser(ABC):
    @abstractmethod
    def parse(self, source: TableSource) -> List[Dict[str, Any]]:
        """
        Split a delimited-text resource into one mapping per data row.

        The first row names the fields, scalar types are inferred and blank
        lines are skipped.

        Raises:
            MalformedTabularResource: If the resource cannot be parsed.
        """


def describe_source(source: TableSource) -> str:
    if isinstance(source, (str, Path)):
        return str(source)
    return getattr(source, "name", None) or type(source).__name__


class PandasTableParser(TableParser):
    def __init__(self, delimiter: str = ",") -> None:
        self.delimiter = delimiter

    def parse(self, source: TableSource) -> List[Dict[str, Any]]:
        label = describe_source(source)
        try:
            frame = pd.read_csv(
                source, sep=self.delimiter, header=0, index_col=False, skip_blank_lines=True
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError) as exc:
            raise MalformedTabularResource(label, str(exc)) from exc
        frame = frame.astype(object).where(frame.notna(), None)
        logger.debug("Parsed %d row(s) with columns %s from %s", len(frame), list(frame.columns), label)
        return frame.to_dict(orient="records")


def ingest_photos(
    resources: Iterable[PhotoResource],
    reader: GpsReader,
    category: str,
    clock: Clock = utc_now,
) -> PhotoImportResult:
    result = PhotoImportResult()
    for resource in resources:
        try:
            point = reader.read_gps(resource.read())
        except (GpsReadError, OSError) as exc:
            notice = MissingGeoData(resource.name, str(exc))
            logger.warning("%s", notice)
            result.notices.append(notice)
            continue
        if point is None:
            notice = MissingGeoData(resource.name)
            logger.warning("%s", notice)
            result.notices.append(notice)
            continue
        try:
            marker = Marker(lat=point.lat, lng=point.lng, name=resource.name, time=clock(), color=category)
        except InvalidCoordinate as exc:
            notice = exc.for_record(resource.name)
            logger.warning("%s", notice)
            result.notices.append(notice)
            continue
        result.markers.append(marker)
    logger.debug(
        "Photo batch: %d marker(s), %d notice(s)", len(result.markers), len(result.notices)
    )
    return result


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return bool(pd.api.types.is_scalar(value) and pd.isna(value))


def _text(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def row_coordinate(row: Mapping[str, Any]) -> GeoPoint:
    raw_lat, raw_lng = row.get("lat"), row.get("lng")
    if _is_missing(raw_lat) or _is_missing(raw_lng):
        raise InvalidCoordinate(raw_lat, raw_lng, "lat and lng are required")
    if isinstance(raw_lat, bool) or isinstance(raw_lng, bool):
        raise InvalidCoordinate(raw_lat, raw_lng, "lat and lng must be numeric")
    try:
        lat, lng = float(raw_lat), float(raw_lng)
    except (TypeError, ValueError):
        raise InvalidCoordinate(raw_lat, raw_lng, "lat and lng must be numeric") from None
    validate_coordinate(lat, lng)
    return GeoPoint(lat, lng)


def ingest_table(
    rows: Sequence[Mapping[str, Any]],
    category: str,
    clock: Clock = utc_now,
) -> TableImportResult:
    result = TableImportResult()
    ingested_at = clock()
    for index, row in enumerate(rows):
        record = f"row {index}"
        try:
            point = row_coordinate(row)
        except InvalidCoordinate as exc:
            notice = exc.for_record(record)
            logger.warning("%s", notice)
            result.rejected.append(notice)
            continue

        raw_time = row.get("timestamp")
        timestamp = (
            ingested_at if _is_missing(raw_time) else parse_timestamp_or_default(raw_time, ingested_at, record)
        )
        result.markers.append(
            Marker(
                lat=point.lat,
                lng=point.lng,
                name=_text(row.get("name")) or f"csv_{index}",
                time=timestamp,
                color=_text(row.get("color")) or category,
            )
        )
    logger.debug("Table batch: %d marker(s), %d rejected", len(result.markers), len(result.rejected))
    return result
