"""
Geotagged marker explorer.

Imports points from photo EXIF GPS data and CSV files, filters them by date
and category, predicts the direction their centroid is drifting and renders
everything as a folium map. The public entrypoint for CLI usage is
``geospread.cli.main``.
"""

from .cli import main  # noqa: F401
