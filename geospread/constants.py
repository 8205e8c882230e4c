from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Sequence, Tuple

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_OUTPUT_PATH = (BASE_DIR / "geospread_map.html").resolve()

COLORS: Sequence[str] = ("red", "blue", "green", "orange", "purple")
DEFAULT_UPLOAD_COLOR = "red"

# Smallest display subset the spread predictor will work on.
MIN_FOR_PREDICT = 30
# 2 draws the ray twice as long as the centroid shift.
ARROW_FACTOR = 2

DEFAULT_CENTER: Tuple[float, float] = (37.5665, 126.9780)
DEFAULT_ZOOM = 12
PHOTO_ZOOM = 14
TABLE_ZOOM = 12
MAX_ZOOM = 19

LOCAL_TZ = datetime.now().astimezone().tzinfo
