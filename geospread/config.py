from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

from .constants import ARROW_FACTOR, COLORS, DEFAULT_UPLOAD_COLOR, MIN_FOR_PREDICT


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, fixed once the session starts.

    The palette feeds the upload selector, the filter toggles and the
    renderer, so all three always agree on the set of categories.
    """

    palette: Sequence[str] = field(default_factory=lambda: tuple(COLORS))
    default_upload_color: str = DEFAULT_UPLOAD_COLOR
    min_for_predict: int = MIN_FOR_PREDICT
    arrow_factor: float = ARROW_FACTOR

    def __post_init__(self) -> None:
        object.__setattr__(self, "palette", tuple(self.palette))
        if not self.palette:
            raise ValueError("The color palette must contain at least one category.")
        if self.default_upload_color not in self.palette:
            raise ValueError(
                f"Default upload color '{self.default_upload_color}' is not in the palette {list(self.palette)}."
            )
        # Each half of the split needs at least one marker.
        if self.min_for_predict < 2:
            raise ValueError("min_for_predict must be at least 2.")
        if self.arrow_factor < 1:
            raise ValueError("arrow_factor must be at least 1.")

    def with_overrides(
        self,
        min_for_predict: Optional[int] = None,
        arrow_factor: Optional[float] = None,
    ) -> "Settings":
        changes = {}
        if min_for_predict is not None:
            changes["min_for_predict"] = min_for_predict
        if arrow_factor is not None:
            changes["arrow_factor"] = arrow_factor
        return replace(self, **changes) if changes else self
