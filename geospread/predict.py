"""
Spread prediction.

Splits a display subset into an early and a late half by time, takes the
centroid of each half and extends the early→late shift into a ray.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .constants import ARROW_FACTOR, MIN_FOR_PREDICT
from .errors import EmptyCentroidInput
from .models import GeoPoint, Marker, PredictionRay

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


def centroid(markers: Sequence[Marker]) -> GeoPoint:
    if not markers:
        raise EmptyCentroidInput("centroid of an empty marker set is undefined")
    latitudes = [marker.lat for marker in markers]
    longitudes = [marker.lng for marker in markers]
    return GeoPoint(float(np.mean(latitudes)), float(np.mean(longitudes)))


def split_halves(markers: Sequence[Marker]) -> Tuple[List[Marker], List[Marker]]:
    """Sort by time and split at ``n // 2``; the late half takes the odd one."""
    ordered = sorted(markers, key=lambda marker: marker.time)
    mid = len(ordered) // 2
    return ordered[:mid], ordered[mid:]


def bearing_degrees(start: GeoPoint, end: GeoPoint) -> float:
    # atan2(0, 0) is 0, so a zero-length ray points east.
    return float(np.degrees(np.arctan2(end.lat - start.lat, end.lng - start.lng)))


def predict_spread(
    markers: Sequence[Marker],
    min_for_predict: int = MIN_FOR_PREDICT,
    arrow_factor: float = ARROW_FACTOR,
) -> Optional[PredictionRay]:
    if len(markers) < max(min_for_predict, 2):
        logger.debug("Skipping prediction: %d marker(s) below threshold %d", len(markers), min_for_predict)
        return None

    early_half, late_half = split_halves(markers)
    early = centroid(early_half)
    late = centroid(late_half)

    d_lat = late.lat - early.lat
    d_lng = late.lng - early.lng
    end = GeoPoint(late.lat + d_lat * (arrow_factor - 1), late.lng + d_lng * (arrow_factor - 1))

    ray = PredictionRay(
        start=early,
        end=end,
        angle_degrees=bearing_degrees(early, end),
        early=early,
        late=late,
        arrow_factor=arrow_factor,
    )
    logger.debug(
        "Predicted spread from %s to %s (%.1f deg) over %d marker(s)",
        ray.start.as_latlon,
        ray.end.as_latlon,
        ray.angle_degrees,
        len(markers),
    )
    return ray


def haversine_km(start: GeoPoint, end: GeoPoint) -> float:
    lat1, lon1 = np.radians(start.lat), np.radians(start.lng)
    lat2, lon2 = np.radians(end.lat), np.radians(end.lng)

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) ** 2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return float(EARTH_RADIUS_KM * c)


def shift_distance_km(ray: PredictionRay) -> float:
    return haversine_km(ray.early, ray.late)
