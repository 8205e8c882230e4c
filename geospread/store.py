from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Tuple

from .models import Marker

logger = logging.getLogger(__name__)


class MarkerStore:
    """Insertion-ordered, append-only collection of markers.

    Markers are immutable and the store never drops or rewrites an entry, so
    ``len(store)`` never decreases.
    """

    def __init__(self, markers: Iterable[Marker] = ()) -> None:
        self._markers: List[Marker] = []
        self.extend(markers)

    def __len__(self) -> int:
        return len(self._markers)

    def __iter__(self) -> Iterator[Marker]:
        return iter(tuple(self._markers))

    def append(self, marker: Marker) -> None:
        if not isinstance(marker, Marker):
            raise TypeError(f"Expected a Marker, got {type(marker).__name__}")
        self._markers.append(marker)

    def extend(self, markers: Iterable[Marker]) -> int:
        batch = list(markers)
        for marker in batch:
            if not isinstance(marker, Marker):
                raise TypeError(f"Expected a Marker, got {type(marker).__name__}")
        self._markers.extend(batch)
        if batch:
            logger.debug("Stored %d marker(s); store now holds %d", len(batch), len(self._markers))
        return len(batch)

    def snapshot(self) -> Tuple[Marker, ...]:
        return tuple(self._markers)
