"""
Marker session.

Owns the application state and runs the recompute pipeline after every
mutation: store or selector change → filter → renderer. Prediction is only
computed when :meth:`MarkerSession.predict_spread` is called.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .config import Settings
from .constants import PHOTO_ZOOM, TABLE_ZOOM
from .filtering import filter_markers
from .ingest import (
    Clock,
    GpsReader,
    PandasTableParser,
    PhotoImportResult,
    PhotoResource,
    PillowGpsReader,
    TableImportResult,
    TableParser,
    TableSource,
    ingest_photos,
    ingest_table,
)
from .models import Marker, PredictionRay, Viewport
from .predict import predict_spread
from .render import FoliumRenderer, Renderer
from .store import MarkerStore
from .time_utils import parse_date_string, utc_now
from .viewport import centered_on, compute_initial_viewport, fit_ray

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    store: MarkerStore
    upload_category: str
    selected_categories: List[str]
    viewport: Viewport
    selected_date: Optional[str] = None
    display: List[Marker] = field(default_factory=list)
    ray: Optional[PredictionRay] = None


class MarkerSession:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        renderer: Optional[Renderer] = None,
        gps_reader: Optional[GpsReader] = None,
        table_parser: Optional[TableParser] = None,
        clock: Clock = utc_now,
    ) -> None:
        self.settings = settings or Settings()
        self.renderer = renderer if renderer is not None else FoliumRenderer()
        self.gps_reader = gps_reader or PillowGpsReader()
        self.table_parser = table_parser or PandasTableParser()
        self.clock = clock
        self.state = AppState(
            store=MarkerStore(),
            upload_category=self.settings.default_upload_color,
            selected_categories=list(self.settings.palette),
            viewport=compute_initial_viewport(),
        )
        self.renderer.set_viewport(self.state.viewport)
        self._recompute()

    @property
    def markers(self) -> List[Marker]:
        return list(self.state.store.snapshot())

    @property
    def display_markers(self) -> List[Marker]:
        return list(self.state.display)

    @property
    def display_count(self) -> int:
        return len(self.state.display)

    @property
    def can_predict(self) -> bool:
        return self.display_count >= self.settings.min_for_predict

    def _recompute(self) -> None:
        self.state.display = filter_markers(
            self.state.store.snapshot(), self.state.selected_date, self.state.selected_categories
        )
        self.renderer.draw_markers(self.state.display)

    def _move_viewport(self, viewport: Viewport) -> None:
        self.state.viewport = viewport
        self.renderer.set_viewport(viewport)

    def import_photos(self, resources: Iterable[PhotoResource]) -> PhotoImportResult:
        result = ingest_photos(resources, self.gps_reader, self.state.upload_category, self.clock)
        if result.markers:
            self.state.store.extend(result.markers)
            last = result.markers[-1]
            self._move_viewport(centered_on(last.point, PHOTO_ZOOM))
            self._recompute()
        return result

    def import_table(self, source: TableSource) -> TableImportResult:
        rows = self.table_parser.parse(source)
        result = ingest_table(rows, self.state.upload_category, self.clock)
        if result.markers:
            self.state.store.extend(result.markers)
            self._move_viewport(centered_on(result.markers[0].point, TABLE_ZOOM))
            self._recompute()
        return result

    def _require_category(self, category: str) -> None:
        if category not in self.settings.palette:
            raise ValueError(f"Unknown category '{category}'. Choose from {list(self.settings.palette)}.")

    def set_upload_category(self, category: str) -> None:
        self._require_category(category)
        self.state.upload_category = category

    def select_date(self, date_str: Optional[str]) -> None:
        self.state.selected_date = parse_date_string(date_str) if date_str else None
        self._recompute()

    def clear_date(self) -> None:
        self.select_date(None)

    def toggle_category(self, category: str) -> None:
        self._require_category(category)
        selected = self.state.selected_categories
        if category in selected:
            self.state.selected_categories = [c for c in selected if c != category]
        else:
            self.state.selected_categories = selected + [category]
        self._recompute()

    def set_categories(self, categories: Iterable[str]) -> None:
        chosen = list(dict.fromkeys(categories))
        for category in chosen:
            self._require_category(category)
        self.state.selected_categories = chosen
        self._recompute()

    def predict_spread(self) -> Optional[PredictionRay]:
        if self.state.ray is not None:
            self.renderer.clear_ray()
            self.state.ray = None

        ray = predict_spread(
            self.state.display,
            min_for_predict=self.settings.min_for_predict,
            arrow_factor=self.settings.arrow_factor,
        )
        if ray is None:
            logger.info(
                "Prediction needs at least %d displayed markers (have %d)",
                self.settings.min_for_predict,
                self.display_count,
            )
            return None

        self.state.ray = ray
        self.renderer.draw_ray(ray)
        self._move_viewport(fit_ray(ray, self.state.viewport))
        return ray
