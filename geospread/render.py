"""
Folium render boundary.

The session only talks to :class:`Renderer`; :class:`FoliumRenderer` keeps the
latest marker layer, ray and viewport and composes a Leaflet map on demand.
"""

from __future__ import annotations

import html
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

import folium

from .constants import MAX_ZOOM
from .models import Marker, PredictionRay, Viewport
from .time_utils import isoformat_local
from .viewport import compute_initial_viewport


class Renderer(ABC):
    @abstractmethod
    def draw_markers(self, markers: Sequence[Marker]) -> None:
        """Replace the point layer with one point per marker."""

    @abstractmethod
    def draw_ray(self, ray: PredictionRay) -> None:
        """Draw the prediction ray, replacing any ray already drawn."""

    @abstractmethod
    def clear_ray(self) -> None:
        """Remove the prediction ray, if one is drawn."""

    @abstractmethod
    def set_viewport(self, viewport: Viewport) -> None:
        """Recenter the map or fit it to ``viewport.bounds``."""


def format_marker_popup(marker: Marker) -> str:
    return (
        f"<b>{html.escape(marker.name)}</b><br/>"
        f"{html.escape(marker.iso_time)}<br/>"
        f"color: {html.escape(marker.color)}<br/>"
        f"({marker.lat:.5f}, {marker.lng:.5f})"
    )


def format_ray_label(ray: PredictionRay) -> str:
    factor = f"{ray.arrow_factor:g}"
    return f"Centroid shift prediction (x{factor} extension)"


def arrow_head_html(angle_degrees: float) -> str:
    # CSS rotates clockwise; map bearings grow counter-clockwise from east.
    return (
        f'<div style="transform: rotate({-angle_degrees:.2f}deg); '
        'font-size:28px; line-height:28px; color:black;">&#10148;</div>'
    )


class FoliumRenderer(Renderer):
    def __init__(self, viewport: Optional[Viewport] = None) -> None:
        self.markers: List[Marker] = []
        self.ray: Optional[PredictionRay] = None
        self.viewport: Viewport = viewport or compute_initial_viewport()

    def draw_markers(self, markers: Sequence[Marker]) -> None:
        self.markers = list(markers)

    def draw_ray(self, ray: PredictionRay) -> None:
        self.ray = ray

    def clear_ray(self) -> None:
        self.ray = None

    def set_viewport(self, viewport: Viewport) -> None:
        self.viewport = viewport

    def build_marker_layer(self) -> folium.FeatureGroup:
        layer = folium.FeatureGroup(name="Markers")
        for marker in self.markers:
            folium.CircleMarker(
                location=list(marker.as_latlon),
                radius=6,
                color=marker.color,
                fill=True,
                fill_color=marker.color,
                fill_opacity=0.9,
                popup=folium.Popup(format_marker_popup(marker), max_width=300),
                tooltip=f"{marker.name} · {isoformat_local(marker.time)}",
            ).add_to(layer)
        return layer

    def build_ray_layer(self, ray: PredictionRay) -> folium.FeatureGroup:
        label = format_ray_label(ray)
        layer = folium.FeatureGroup(name="Spread prediction")
        folium.PolyLine(
            locations=[list(ray.start.as_latlon), list(ray.end.as_latlon)],
            color="black",
            weight=4,
            dash_array="8 6",
            popup=label,
        ).add_to(layer)
        folium.Marker(
            location=list(ray.end.as_latlon),
            icon=folium.DivIcon(
                html=arrow_head_html(ray.angle_degrees),
                icon_size=(28, 28),
                icon_anchor=(14, 14),
            ),
            popup=label,
        ).add_to(layer)
        return layer

    def build_map(self) -> folium.Map:
        viewport = self.viewport
        fmap = folium.Map(
            location=list(viewport.center.as_latlon),
            zoom_start=viewport.zoom,
            tiles="OpenStreetMap",
            max_zoom=MAX_ZOOM,
        )
        self.build_marker_layer().add_to(fmap)
        if self.ray is not None:
            self.build_ray_layer(self.ray).add_to(fmap)
        if viewport.bounds is not None:
            south_west, north_east = viewport.bounds
            fmap.fit_bounds([list(south_west.as_latlon), list(north_east.as_latlon)])
        return fmap

    def save(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        self.build_map().save(str(path))
        return path
