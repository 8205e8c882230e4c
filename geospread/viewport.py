from __future__ import annotations

from shapely.geometry import LineString

from .constants import DEFAULT_CENTER, DEFAULT_ZOOM
from .models import GeoPoint, PredictionRay, Viewport


def compute_initial_viewport() -> Viewport:
    return Viewport(center=GeoPoint(*DEFAULT_CENTER), zoom=DEFAULT_ZOOM)


def centered_on(point: GeoPoint, zoom: int) -> Viewport:
    return Viewport(center=point, zoom=int(zoom))


def fit_ray(ray: PredictionRay, current: Viewport) -> Viewport:
    min_lng, min_lat, max_lng, max_lat = LineString([ray.start.as_lonlat, ray.end.as_lonlat]).bounds
    return Viewport(
        center=GeoPoint((min_lat + max_lat) / 2, (min_lng + max_lng) / 2),
        zoom=current.zoom,
        bounds=(GeoPoint(min_lat, min_lng), GeoPoint(max_lat, max_lng)),
    )
