from __future__ import annotations

from typing import Iterable, List, Optional

from .models import Marker


def date_matches(marker: Marker, selected_date: Optional[str]) -> bool:
    if not selected_date:
        return True
    return marker.utc_date == selected_date


def filter_markers(
    markers: Iterable[Marker],
    selected_date: Optional[str],
    selected_categories: Iterable[str],
) -> List[Marker]:
    """Return the markers on ``selected_date`` whose color is selected.

    ``selected_date`` is a ``YYYY-MM-DD`` string compared against the UTC
    calendar date of each marker; ``None`` or ``""`` disables the date test.
    Input order is preserved.
    """
    categories = frozenset(selected_categories)
    return [
        marker
        for marker in markers
        if marker.color in categories and date_matches(marker, selected_date)
    ]
